class FlowmailError(Exception):
    """Base error for flowmail."""


class ValidationError(FlowmailError):
    """Input validation failure."""


class PermanentError(FlowmailError):
    """Indicates the operation should not be retried."""
