from __future__ import annotations

from typing import Iterable, Sequence

from flowmail_core.config import DEFAULT_HTML_MIME_TYPE
from flowmail_core.errors import ValidationError
from flowmail_core.executions.types import ExecutableFlow, Executor
from flowmail_core.logging import get_logger
from flowmail_core.mail.fragments import (
    Fragment,
    Heading,
    Paragraph,
    affected_flows_list,
    error_trace,
    execution_link,
    failed_jobs_list,
    flow_heading,
    past_executions_list,
    policy_paragraph,
    reasons_list,
    render_html,
    render_text,
    timing_table,
)
from flowmail_core.mail.links import ServerContext
from flowmail_core.mail.message import EmailMessage
from flowmail_core.timeutils import DefaultTimeFormatter, TimeFormatter

logger = get_logger(__name__)

PLAIN_TEXT_MIME_TYPE = "text/plain;charset=utf-8"


class DefaultMailCreator:
    """HTML alerts for flow failures, successes and executor update errors."""

    name = "default"
    renderer = staticmethod(render_html)

    def __init__(
        self,
        formatter: TimeFormatter | None = None,
        mime_type: str = DEFAULT_HTML_MIME_TYPE,
    ) -> None:
        self.formatter = formatter or DefaultTimeFormatter()
        self.mime_type = mime_type

    def create_first_error_message(
        self,
        flow: ExecutableFlow,
        message: EmailMessage,
        server: ServerContext | None = None,
    ) -> bool:
        recipients = _recipients(flow.options.failure_emails)
        if not recipients:
            self._log_skipped("first_error", flow)
            return False

        fragments = (
            *flow_heading(flow, "failed", alarm=True),
            *policy_paragraph(flow.options.failure_action),
            *timing_table(flow, self.formatter),
            *execution_link(flow, server),
        )
        self._populate(
            message,
            recipients,
            _subject(f"Flow '{flow.flow_id}' has failed", server),
            fragments,
        )
        self._log_composed("first_error", flow, recipients)
        return True

    def create_error_message(
        self,
        flow: ExecutableFlow,
        past_executions: Sequence[ExecutableFlow] | None,
        message: EmailMessage,
        *reasons: str,
        server: ServerContext | None = None,
    ) -> bool:
        recipients = _recipients(flow.options.failure_emails)
        if not recipients:
            self._log_skipped("error", flow)
            return False

        fragments = (
            *flow_heading(flow, "failed", alarm=True),
            *timing_table(flow, self.formatter),
            *execution_link(flow, server),
            *failed_jobs_list(flow),
            *reasons_list(reasons),
            *past_executions_list(past_executions, self.formatter),
        )
        self._populate(
            message,
            recipients,
            _subject(f"Flow '{flow.flow_id}' has failed", server),
            fragments,
        )
        self._log_composed("error", flow, recipients)
        return True

    def create_success_message(
        self,
        flow: ExecutableFlow,
        message: EmailMessage,
        server: ServerContext | None = None,
    ) -> bool:
        recipients = _recipients(flow.options.success_emails)
        if not recipients:
            self._log_skipped("success", flow)
            return False

        fragments = (
            *flow_heading(flow, "succeeded", alarm=False),
            *timing_table(flow, self.formatter),
            *execution_link(flow, server),
        )
        self._populate(
            message,
            recipients,
            _subject(f"Flow '{flow.flow_id}' has succeeded", server),
            fragments,
        )
        self._log_composed("success", flow, recipients)
        return True

    def create_failed_update_message(
        self,
        flows: Sequence[ExecutableFlow],
        executor: Executor,
        error: BaseException,
        message: EmailMessage,
        server: ServerContext | None = None,
    ) -> bool:
        if not flows:
            raise ValidationError("Failed update alert requires at least one flow")

        recipients = _recipients(flows[0].options.failure_emails)
        if not recipients:
            logger.debug(
                "Failed update alert skipped",
                extra={
                    "composer": self.name,
                    "alert_kind": "failed_update",
                    "executor_host": executor.host,
                    "flow_count": len(flows),
                },
            )
            return False

        title = f"Flow status could not be updated from {executor.address}"
        fragments = (
            Heading(title, alarm=True),
            Paragraph(
                "The actual status of executions running on this executor is "
                "unknown because at least one status update failed."
            ),
            *error_trace(error),
            *affected_flows_list(flows),
        )
        self._populate(message, recipients, _subject(title, server), fragments)
        logger.info(
            "Failed update alert composed",
            extra={
                "composer": self.name,
                "alert_kind": "failed_update",
                "executor_host": executor.host,
                "flow_count": len(flows),
                "recipient_count": len(recipients),
            },
        )
        return True

    def _populate(
        self,
        message: EmailMessage,
        recipients: list[str],
        subject: str,
        fragments: Iterable[Fragment],
    ) -> None:
        message.add_all_to_address(recipients)
        message.set_mime_type(self.mime_type)
        message.set_subject(subject)
        for fragment in fragments:
            message.println(self.renderer(fragment))

    def _log_composed(
        self,
        kind: str,
        flow: ExecutableFlow,
        recipients: list[str],
    ) -> None:
        logger.info(
            "Alert composed",
            extra={
                "composer": self.name,
                "alert_kind": kind,
                "execution_id": flow.execution_id,
                "flow_id": flow.flow_id,
                "project_name": flow.project_name,
                "recipient_count": len(recipients),
            },
        )

    def _log_skipped(self, kind: str, flow: ExecutableFlow) -> None:
        logger.debug(
            "Alert skipped, no recipients",
            extra={
                "composer": self.name,
                "alert_kind": kind,
                "execution_id": flow.execution_id,
                "flow_id": flow.flow_id,
            },
        )


class PlainTextMailCreator(DefaultMailCreator):
    """Same content as :class:`DefaultMailCreator` rendered as plain text."""

    name = "text"
    renderer = staticmethod(render_text)

    def __init__(
        self,
        formatter: TimeFormatter | None = None,
        mime_type: str = PLAIN_TEXT_MIME_TYPE,
    ) -> None:
        super().__init__(formatter=formatter, mime_type=mime_type)


def _recipients(addresses: Iterable[str] | None) -> list[str]:
    if not addresses:
        return []
    return list(addresses)


def _subject(text: str, server: ServerContext | None) -> str:
    if server is None:
        return text
    return f"{text} on {server.name}"
