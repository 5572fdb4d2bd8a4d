from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Sequence


class Status(str, Enum):
    READY = "READY"
    PREPARING = "PREPARING"
    RUNNING = "RUNNING"
    PAUSED = "PAUSED"
    SUCCEEDED = "SUCCEEDED"
    KILLING = "KILLING"
    KILLED = "KILLED"
    FAILED = "FAILED"
    FAILED_FINISHING = "FAILED_FINISHING"
    SKIPPED = "SKIPPED"
    DISABLED = "DISABLED"
    QUEUED = "QUEUED"
    FAILED_SUCCEEDED = "FAILED_SUCCEEDED"
    CANCELLED = "CANCELLED"

    def __str__(self) -> str:
        return self.value


class FailureAction(str, Enum):
    FINISH_CURRENTLY_RUNNING = "FINISH_CURRENTLY_RUNNING"
    CANCEL_ALL = "CANCEL_ALL"
    FINISH_ALL_POSSIBLE = "FINISH_ALL_POSSIBLE"

    def __str__(self) -> str:
        return self.value


UNSET_TIME = -1


@dataclass(frozen=True)
class ExecutionOptions:
    failure_emails: Sequence[str] | None = None
    success_emails: Sequence[str] | None = None
    failure_action: FailureAction = FailureAction.FINISH_CURRENTLY_RUNNING
    mail_creator: str = "default"


@dataclass(frozen=True)
class ExecutableNode:
    id: str
    status: Status = Status.READY


@dataclass(frozen=True)
class ExecutableFlow:
    execution_id: int
    flow_id: str
    project_name: str
    status: Status
    start_time: int = UNSET_TIME
    end_time: int = UNSET_TIME
    nodes: tuple[ExecutableNode, ...] = ()
    options: ExecutionOptions = field(default_factory=ExecutionOptions)


@dataclass(frozen=True)
class Executor:
    host: str
    port: int | None = None

    @property
    def address(self) -> str:
        if self.port is None:
            return self.host
        return f"{self.host}:{self.port}"


def find_failed_jobs(flow: ExecutableFlow) -> list[str]:
    return [node.id for node in flow.nodes if node.status == Status.FAILED]
