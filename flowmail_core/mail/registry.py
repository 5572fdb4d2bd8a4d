from __future__ import annotations

import threading

from flowmail_core.logging import get_logger
from flowmail_core.mail.composer import MailCreator
from flowmail_core.mail.default import DefaultMailCreator

logger = get_logger(__name__)

DEFAULT_MAIL_CREATOR = "default"


class MailCreatorRegistry:
    """Name to composer bindings with a guaranteed default.

    Lookups for unknown names resolve to the composer the registry was built
    with, even if the ``default`` name is later rebound.
    """

    def __init__(self, default: MailCreator | None = None) -> None:
        self._default: MailCreator = default or DefaultMailCreator()
        self._lock = threading.Lock()
        self._creators: dict[str, MailCreator] = {DEFAULT_MAIL_CREATOR: self._default}

    @property
    def default(self) -> MailCreator:
        return self._default

    def register(self, name: str, creator: MailCreator) -> None:
        with self._lock:
            replaced = name in self._creators
            self._creators[name] = creator
        logger.info(
            "Mail creator registered",
            extra={
                "composer": name,
                "target": type(creator).__name__,
                "status": "replaced" if replaced else "added",
            },
        )

    def lookup(self, name: str | None) -> MailCreator:
        with self._lock:
            creator = self._creators.get(name) if name is not None else None
        if creator is None:
            logger.debug(
                "Mail creator not registered, using default",
                extra={"composer": name},
            )
            return self._default
        return creator

    get_creator = lookup

    def names(self) -> list[str]:
        with self._lock:
            return sorted(self._creators)

    def __contains__(self, name: object) -> bool:
        with self._lock:
            return name in self._creators
