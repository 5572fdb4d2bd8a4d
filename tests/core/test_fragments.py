from __future__ import annotations

import pytest

from flowmail_core.errors import ValidationError
from flowmail_core.executions import ExecutableNode, FailureAction, Status
from flowmail_core.mail.fragments import (
    POLICY_TEXT,
    Blank,
    BulletList,
    Heading,
    Link,
    Paragraph,
    Preformatted,
    Table,
    affected_flows_list,
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


@pytest.mark.core
def test_policy_paragraph_has_one_sentence_per_action():
    sentences = {policy_paragraph(action)[0].text for action in FailureAction}
    assert len(sentences) == 3
    assert sentences == set(POLICY_TEXT.values())


@pytest.mark.core
def test_policy_paragraph_rejects_unknown_action():
    with pytest.raises(ValidationError):
        policy_paragraph("RETRY_FOREVER")


@pytest.mark.core
def test_timing_table_rows(flow_factory, formatter):
    flow = flow_factory(start_time=1000, end_time=62_000)
    table, blank = timing_table(flow, formatter)
    assert isinstance(blank, Blank)
    assert table.rows == (
        ("Start Time", "1970/01/01 00:00:01 UTC"),
        ("End Time", "1970/01/01 00:01:02 UTC"),
        ("Duration", "1m 1s"),
        ("Status", "FAILED"),
    )


@pytest.mark.core
def test_flow_heading_marks_alarm(flow_factory):
    (heading,) = flow_heading(flow_factory(), "failed", alarm=True)
    assert heading.alarm
    assert heading.text == (
        "Execution '42' of flow 'nightly_etl' of project 'warehouse' has failed"
    )


@pytest.mark.core
def test_optional_sections_are_empty_without_input(flow_factory, formatter):
    flow = flow_factory(nodes=(ExecutableNode("only", Status.SUCCEEDED),))
    assert failed_jobs_list(flow) == ()
    assert reasons_list([" ", ""]) == ()
    assert past_executions_list(None, formatter) == ()
    assert execution_link(flow, None) == ()


@pytest.mark.core
def test_failed_jobs_and_past_executions(flow_factory, formatter):
    flow = flow_factory()
    assert failed_jobs_list(flow)[1] == BulletList(("load",))

    past = [flow_factory(execution_id=7, status=Status.SUCCEEDED, start_time=0)]
    _, items = past_executions_list(past, formatter)
    assert items.items == ("Execution '7' SUCCEEDED at 1970/01/01 00:00:00 UTC",)


@pytest.mark.core
def test_affected_flows_preserve_order(flow_factory):
    flows = [flow_factory(execution_id=i, flow_id=f"f{i}") for i in (3, 1, 2)]
    bullets = affected_flows_list(flows)[-1]
    assert [item.split("'")[1] for item in bullets.items] == ["3", "1", "2"]


@pytest.mark.core
def test_execution_link_uses_server(flow_factory):
    server = ServerContext(name="prod", scheme="https", host="flows.example.com")
    (link,) = execution_link(flow_factory(), server)
    assert link.url == "https://flows.example.com/executor?execid=42"


@pytest.mark.core
def test_render_html_escapes_text():
    assert render_html(Heading("a<b", alarm=True)) == (
        '<h2 style="color:#FF0000">a&lt;b</h2>'
    )
    assert render_html(Heading("plain", level=3)) == "<h3>plain</h3>"
    assert render_html(Paragraph("x & y")) == "<p>x &amp; y</p>"
    assert render_html(Preformatted('say "hi"')) == '<pre>say "hi"</pre>'
    assert render_html(BulletList(("a", "b"))) == "<ul>\n<li>a</li>\n<li>b</li>\n</ul>"
    assert render_html(Table((("k", "v"),))) == (
        "<table>\n<tr><td>k</td><td>v</td></tr>\n</table>"
    )
    assert render_html(Link("go", "http://h/?a=1&b=2")) == (
        '<a href="http://h/?a=1&amp;b=2">go</a>'
    )
    assert render_html(Blank()) == ""


@pytest.mark.core
def test_render_text():
    assert render_text(Table((("k", "v"), ("x", "y")))) == "k: v\nx: y"
    assert render_text(BulletList(("a",))) == "- a"
    assert render_text(Preformatted("trace\n")) == "trace"
    assert render_text(Link("go", "http://h")) == "go: http://h"
