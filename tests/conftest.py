from __future__ import annotations

import pytest

from flowmail_core.config import get_config
from flowmail_core.executions import (
    ExecutableFlow,
    ExecutableNode,
    ExecutionOptions,
    FailureAction,
    Status,
)
from flowmail_core.timeutils import DefaultTimeFormatter

FIXED_NOW_MS = 1_700_000_000_000


@pytest.fixture(autouse=True)
def _mail_env(monkeypatch: pytest.MonkeyPatch):
    for name in (
        "MAIL_TIMEZONE",
        "MAIL_DATETIME_FORMAT",
        "MAIL_MIME_TYPE",
        "MAIL_COMPOSER_MANIFEST",
        "MAIL_SERVER_NAME",
        "MAIL_SERVER_SCHEME",
        "MAIL_SERVER_HOST",
        "MAIL_SERVER_PORT",
    ):
        monkeypatch.delenv(name, raising=False)
    monkeypatch.setenv("ENV", "test")
    monkeypatch.setenv("LOG_LEVEL", "INFO")
    get_config.cache_clear()
    yield
    get_config.cache_clear()


@pytest.fixture
def formatter() -> DefaultTimeFormatter:
    return DefaultTimeFormatter(clock=lambda: FIXED_NOW_MS)


@pytest.fixture
def flow_factory():
    def _factory(**kwargs) -> ExecutableFlow:
        options = ExecutionOptions(
            failure_emails=kwargs.pop("failure_emails", ("ops@example.com",)),
            success_emails=kwargs.pop("success_emails", ("team@example.com",)),
            failure_action=kwargs.pop(
                "failure_action", FailureAction.FINISH_CURRENTLY_RUNNING
            ),
        )
        return ExecutableFlow(
            execution_id=kwargs.pop("execution_id", 42),
            flow_id=kwargs.pop("flow_id", "nightly_etl"),
            project_name=kwargs.pop("project_name", "warehouse"),
            status=kwargs.pop("status", Status.FAILED),
            start_time=kwargs.pop("start_time", 1000),
            end_time=kwargs.pop("end_time", 1050),
            nodes=kwargs.pop(
                "nodes",
                (
                    ExecutableNode("extract", Status.SUCCEEDED),
                    ExecutableNode("load", Status.FAILED),
                ),
            ),
            options=kwargs.pop("options", options),
        )

    return _factory
