import os
from dataclasses import dataclass
from functools import lru_cache
from zoneinfo import ZoneInfo, ZoneInfoNotFoundError

DEFAULT_DATETIME_FORMAT = "%Y/%m/%d %H:%M:%S %Z"
DEFAULT_HTML_MIME_TYPE = "text/html;charset=utf-8"


@dataclass(frozen=True)
class MailConfig:
    env: str
    log_level: str
    timezone: str
    datetime_format: str
    mime_type: str
    composer_manifest_uri: str | None
    server_name: str | None
    server_scheme: str
    server_host: str | None
    server_port: int | None

    def tzinfo(self) -> ZoneInfo:
        return ZoneInfo(self.timezone)

    @classmethod
    def from_env(cls) -> "MailConfig":
        env = os.getenv("ENV", "dev").strip() or "dev"
        log_level = os.getenv("LOG_LEVEL", "INFO").strip().upper() or "INFO"

        timezone = os.getenv("MAIL_TIMEZONE", "UTC").strip() or "UTC"
        try:
            ZoneInfo(timezone)
        except (ZoneInfoNotFoundError, ValueError) as exc:
            raise ValueError(f"MAIL_TIMEZONE is not a known zone: {timezone}") from exc

        datetime_format = os.getenv("MAIL_DATETIME_FORMAT") or DEFAULT_DATETIME_FORMAT
        mime_type = os.getenv("MAIL_MIME_TYPE", "").strip() or DEFAULT_HTML_MIME_TYPE
        composer_manifest_uri = _optional(os.getenv("MAIL_COMPOSER_MANIFEST"))

        server_scheme = os.getenv("MAIL_SERVER_SCHEME", "https").strip().lower()
        if server_scheme not in {"http", "https"}:
            raise ValueError("MAIL_SERVER_SCHEME must be one of: http, https")

        return cls(
            env=env,
            log_level=log_level,
            timezone=timezone,
            datetime_format=datetime_format,
            mime_type=mime_type,
            composer_manifest_uri=composer_manifest_uri,
            server_name=_optional(os.getenv("MAIL_SERVER_NAME")),
            server_scheme=server_scheme,
            server_host=_optional(os.getenv("MAIL_SERVER_HOST")),
            server_port=_parse_port(os.getenv("MAIL_SERVER_PORT")),
        )


def _optional(value: str | None) -> str | None:
    if value is None:
        return None
    text = value.strip()
    return text or None


def _parse_port(value: str | None) -> int | None:
    if value is None or value.strip() == "":
        return None
    try:
        port = int(value)
    except ValueError as exc:
        raise ValueError("MAIL_SERVER_PORT must be an integer") from exc
    if not 0 < port < 65536:
        raise ValueError("MAIL_SERVER_PORT must be between 1 and 65535")
    return port


@lru_cache(maxsize=1)
def get_config() -> MailConfig:
    return MailConfig.from_env()
