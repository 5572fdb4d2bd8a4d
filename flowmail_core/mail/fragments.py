"""Structured alert body fragments.

Builders take typed execution views and return tuples of fragments. Renderers
turn a single fragment into one opaque string for the message sink, so the
same content can be serialized as HTML or plain text.
"""

from __future__ import annotations

import html
from dataclasses import dataclass
from typing import Callable, Iterable, Sequence, Union

from flowmail_core.errors import ValidationError
from flowmail_core.executions.types import (
    ExecutableFlow,
    FailureAction,
    find_failed_jobs,
)
from flowmail_core.mail.links import ServerContext
from flowmail_core.timeutils import TimeFormatter, format_stack_trace

ALARM_COLOR = "#FF0000"

POLICY_TEXT: dict[FailureAction, str] = {
    FailureAction.CANCEL_ALL: "This flow is set to cancel all currently running jobs.",
    FailureAction.FINISH_ALL_POSSIBLE: (
        "This flow is set to complete all jobs that aren't blocked by the failure."
    ),
    FailureAction.FINISH_CURRENTLY_RUNNING: (
        "This flow is set to complete all currently running jobs before stopping."
    ),
}


@dataclass(frozen=True)
class Heading:
    text: str
    level: int = 2
    alarm: bool = False


@dataclass(frozen=True)
class Paragraph:
    text: str


@dataclass(frozen=True)
class Table:
    rows: tuple[tuple[str, str], ...]


@dataclass(frozen=True)
class Preformatted:
    text: str


@dataclass(frozen=True)
class BulletList:
    items: tuple[str, ...]


@dataclass(frozen=True)
class Link:
    label: str
    url: str


@dataclass(frozen=True)
class Blank:
    pass


Fragment = Union[Heading, Paragraph, Table, Preformatted, BulletList, Link, Blank]
Renderer = Callable[[Fragment], str]


def describe_execution(flow: ExecutableFlow) -> str:
    return (
        f"Execution '{flow.execution_id}' of flow '{flow.flow_id}' "
        f"of project '{flow.project_name}'"
    )


def flow_heading(flow: ExecutableFlow, outcome: str, *, alarm: bool) -> tuple[Fragment, ...]:
    return (Heading(f"{describe_execution(flow)} has {outcome}", alarm=alarm),)


def policy_paragraph(action: FailureAction) -> tuple[Fragment, ...]:
    try:
        text = POLICY_TEXT[action]
    except (KeyError, TypeError) as exc:
        raise ValidationError(f"Unknown failure action: {action!r}") from exc
    return (Paragraph(text),)


def timing_table(flow: ExecutableFlow, formatter: TimeFormatter) -> tuple[Fragment, ...]:
    rows = (
        ("Start Time", formatter.format_datetime(flow.start_time)),
        ("End Time", formatter.format_datetime(flow.end_time)),
        ("Duration", formatter.format_duration(flow.start_time, flow.end_time)),
        ("Status", str(flow.status)),
    )
    return (Table(rows), Blank())


def execution_link(
    flow: ExecutableFlow,
    server: ServerContext | None,
) -> tuple[Fragment, ...]:
    if server is None:
        return ()
    return (Link("Execution URL", server.execution_url(flow.execution_id)),)


def failed_jobs_list(flow: ExecutableFlow) -> tuple[Fragment, ...]:
    failed = find_failed_jobs(flow)
    if not failed:
        return ()
    return (Heading("Failed jobs", level=3), BulletList(tuple(failed)))


def reasons_list(reasons: Iterable[str]) -> tuple[Fragment, ...]:
    cleaned = tuple(str(item).strip() for item in reasons if str(item).strip())
    if not cleaned:
        return ()
    return (Heading("Reasons", level=3), BulletList(cleaned))


def past_executions_list(
    past_executions: Sequence[ExecutableFlow] | None,
    formatter: TimeFormatter,
) -> tuple[Fragment, ...]:
    if not past_executions:
        return ()
    items = tuple(
        f"Execution '{past.execution_id}' {past.status} "
        f"at {formatter.format_datetime(past.start_time)}"
        for past in past_executions
    )
    return (Heading("Recent executions", level=3), BulletList(items))


def error_trace(error: BaseException) -> tuple[Fragment, ...]:
    return (
        Blank(),
        Heading("Error detail", level=3),
        Preformatted(format_stack_trace(error)),
    )


def affected_flows_list(flows: Sequence[ExecutableFlow]) -> tuple[Fragment, ...]:
    return (
        Blank(),
        Heading("Affected executions", level=3),
        BulletList(tuple(describe_execution(flow) for flow in flows)),
    )


def render_html(fragment: Fragment) -> str:
    if isinstance(fragment, Heading):
        style = f' style="color:{ALARM_COLOR}"' if fragment.alarm else ""
        return f"<h{fragment.level}{style}>{_text(fragment.text)}</h{fragment.level}>"
    if isinstance(fragment, Paragraph):
        return f"<p>{_text(fragment.text)}</p>"
    if isinstance(fragment, Table):
        lines = ["<table>"]
        for label, value in fragment.rows:
            lines.append(f"<tr><td>{_text(label)}</td><td>{_text(value)}</td></tr>")
        lines.append("</table>")
        return "\n".join(lines)
    if isinstance(fragment, Preformatted):
        return f"<pre>{_text(fragment.text)}</pre>"
    if isinstance(fragment, BulletList):
        items = [f"<li>{_text(item)}</li>" for item in fragment.items]
        return "\n".join(["<ul>", *items, "</ul>"])
    if isinstance(fragment, Link):
        href = html.escape(fragment.url, quote=True)
        return f'<a href="{href}">{_text(fragment.label)}</a>'
    if isinstance(fragment, Blank):
        return ""
    raise TypeError(f"Unsupported fragment: {type(fragment).__name__}")


def render_text(fragment: Fragment) -> str:
    if isinstance(fragment, Heading):
        return fragment.text
    if isinstance(fragment, Paragraph):
        return fragment.text
    if isinstance(fragment, Table):
        return "\n".join(f"{label}: {value}" for label, value in fragment.rows)
    if isinstance(fragment, Preformatted):
        return fragment.text.rstrip("\n")
    if isinstance(fragment, BulletList):
        return "\n".join(f"- {item}" for item in fragment.items)
    if isinstance(fragment, Link):
        return f"{fragment.label}: {fragment.url}"
    if isinstance(fragment, Blank):
        return ""
    raise TypeError(f"Unsupported fragment: {type(fragment).__name__}")


def _text(value: str) -> str:
    return html.escape(value, quote=False)
