from __future__ import annotations

from dataclasses import dataclass
from urllib.parse import urlencode

from flowmail_core.config import MailConfig


@dataclass(frozen=True)
class ServerContext:
    name: str
    scheme: str
    host: str
    port: int | None = None

    def base_url(self) -> str:
        if self.port is None:
            return f"{self.scheme}://{self.host}"
        return f"{self.scheme}://{self.host}:{self.port}"

    def execution_url(self, execution_id: int) -> str:
        query = urlencode({"execid": execution_id})
        return f"{self.base_url()}/executor?{query}"


def server_context_from_config(config: MailConfig) -> ServerContext | None:
    if not config.server_host:
        return None
    return ServerContext(
        name=config.server_name or config.server_host,
        scheme=config.server_scheme,
        host=config.server_host,
        port=config.server_port,
    )
