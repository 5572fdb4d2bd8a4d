from flowmail_core.executions.types import (
    UNSET_TIME,
    ExecutableFlow,
    ExecutableNode,
    ExecutionOptions,
    Executor,
    FailureAction,
    Status,
    find_failed_jobs,
)

__all__ = [
    "ExecutableFlow",
    "ExecutableNode",
    "ExecutionOptions",
    "Executor",
    "FailureAction",
    "Status",
    "UNSET_TIME",
    "find_failed_jobs",
]
