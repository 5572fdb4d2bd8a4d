"""Alert content composition for workflow executions."""

__version__ = "0.1.0"
