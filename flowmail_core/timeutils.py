from __future__ import annotations

import time
import traceback
from datetime import datetime, timezone as dt_timezone, tzinfo
from typing import Callable, Protocol, runtime_checkable

from flowmail_core.config import DEFAULT_DATETIME_FORMAT, MailConfig

NOT_AVAILABLE = "-"


@runtime_checkable
class TimeFormatter(Protocol):
    def format_datetime(self, timestamp_ms: int | None) -> str: ...

    def format_duration(self, start_ms: int | None, end_ms: int | None) -> str: ...


def _now_ms() -> int:
    return int(time.time() * 1000)


def _is_unset(value: int | None) -> bool:
    return value is None or value < 0


class DefaultTimeFormatter:
    """Renders epoch-millisecond timestamps and elapsed intervals.

    ``clock`` is only consulted for intervals whose end is unset, which is the
    case for executions that are still running.
    """

    def __init__(
        self,
        tz: tzinfo | None = None,
        datetime_format: str = DEFAULT_DATETIME_FORMAT,
        clock: Callable[[], int] = _now_ms,
    ) -> None:
        self.tz = tz or dt_timezone.utc
        self.datetime_format = datetime_format
        self.clock = clock

    @classmethod
    def from_config(cls, config: MailConfig) -> "DefaultTimeFormatter":
        return cls(tz=config.tzinfo(), datetime_format=config.datetime_format)

    def format_datetime(self, timestamp_ms: int | None) -> str:
        if _is_unset(timestamp_ms):
            return NOT_AVAILABLE
        moment = datetime.fromtimestamp(timestamp_ms / 1000, tz=self.tz)
        return moment.strftime(self.datetime_format)

    def format_duration(self, start_ms: int | None, end_ms: int | None) -> str:
        if _is_unset(start_ms):
            return NOT_AVAILABLE
        end = self.clock() if _is_unset(end_ms) else end_ms
        return format_elapsed(max(0, end - start_ms))


def format_elapsed(duration_ms: int) -> str:
    seconds = duration_ms // 1000
    if seconds < 60:
        return f"{seconds} sec"
    minutes, seconds = divmod(seconds, 60)
    if minutes < 60:
        return f"{minutes}m {seconds}s"
    hours, minutes = divmod(minutes, 60)
    if hours < 24:
        return f"{hours}h {minutes}m {seconds}s"
    days, hours = divmod(hours, 24)
    return f"{days}d {hours}h {minutes}m"


def format_stack_trace(error: BaseException) -> str:
    return "".join(
        traceback.format_exception(type(error), error, error.__traceback__)
    )
