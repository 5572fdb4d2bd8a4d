from __future__ import annotations

import pytest

from flowmail_core.config import MailConfig, get_config
from flowmail_core.mail import server_context_from_config
from flowmail_core.timeutils import DefaultTimeFormatter


@pytest.mark.core
def test_mail_config_defaults():
    cfg = MailConfig.from_env()
    assert cfg.env == "test"
    assert cfg.timezone == "UTC"
    assert cfg.datetime_format == "%Y/%m/%d %H:%M:%S %Z"
    assert cfg.mime_type == "text/html;charset=utf-8"
    assert cfg.composer_manifest_uri is None
    assert server_context_from_config(cfg) is None


@pytest.mark.core
def test_mail_config_overrides(monkeypatch):
    monkeypatch.setenv("MAIL_TIMEZONE", "Europe/Berlin")
    monkeypatch.setenv("MAIL_DATETIME_FORMAT", "%d.%m.%Y %H:%M")
    monkeypatch.setenv("MAIL_COMPOSER_MANIFEST", "/etc/flowmail/composers.yml")
    monkeypatch.setenv("MAIL_SERVER_HOST", "flows.example.com")
    monkeypatch.setenv("MAIL_SERVER_SCHEME", "HTTP")
    monkeypatch.setenv("MAIL_SERVER_PORT", "8081")

    cfg = MailConfig.from_env()
    assert cfg.composer_manifest_uri == "/etc/flowmail/composers.yml"

    server = server_context_from_config(cfg)
    assert server is not None
    assert server.name == "flows.example.com"
    assert server.execution_url(3) == "http://flows.example.com:8081/executor?execid=3"

    formatter = DefaultTimeFormatter.from_config(cfg)
    assert formatter.format_datetime(0) == "01.01.1970 01:00"


@pytest.mark.core
@pytest.mark.parametrize(
    ("name", "value"),
    [
        ("MAIL_TIMEZONE", "Mars/Olympus"),
        ("MAIL_SERVER_SCHEME", "ftp"),
        ("MAIL_SERVER_PORT", "eighty"),
        ("MAIL_SERVER_PORT", "70000"),
    ],
)
def test_mail_config_rejects_invalid_values(monkeypatch, name, value):
    monkeypatch.setenv(name, value)
    with pytest.raises(ValueError):
        MailConfig.from_env()


@pytest.mark.core
def test_get_config_is_cached():
    assert get_config() is get_config()
