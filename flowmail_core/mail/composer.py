from __future__ import annotations

from typing import Protocol, Sequence, runtime_checkable

from flowmail_core.executions.types import ExecutableFlow, Executor
from flowmail_core.mail.links import ServerContext
from flowmail_core.mail.message import EmailMessage


@runtime_checkable
class MailCreator(Protocol):
    """Turns execution state into alert content.

    Each operation returns ``False`` and leaves ``message`` untouched when the
    relevant recipient list is empty, otherwise fills ``message`` and returns
    ``True``.
    """

    def create_first_error_message(
        self,
        flow: ExecutableFlow,
        message: EmailMessage,
        server: ServerContext | None = None,
    ) -> bool: ...

    def create_error_message(
        self,
        flow: ExecutableFlow,
        past_executions: Sequence[ExecutableFlow] | None,
        message: EmailMessage,
        *reasons: str,
        server: ServerContext | None = None,
    ) -> bool: ...

    def create_success_message(
        self,
        flow: ExecutableFlow,
        message: EmailMessage,
        server: ServerContext | None = None,
    ) -> bool: ...

    def create_failed_update_message(
        self,
        flows: Sequence[ExecutableFlow],
        executor: Executor,
        error: BaseException,
        message: EmailMessage,
        server: ServerContext | None = None,
    ) -> bool: ...
