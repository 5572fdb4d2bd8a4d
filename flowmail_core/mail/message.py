from __future__ import annotations

from dataclasses import dataclass, field
from typing import Iterable


@dataclass
class EmailMessage:
    """Mutable alert being assembled for the delivery layer.

    Body fragments are opaque markup joined with newlines in insertion order.
    """

    to_addresses: list[str] = field(default_factory=list)
    mime_type: str | None = None
    subject: str | None = None
    fragments: list[str] = field(default_factory=list)

    def add_to_address(self, address: str) -> None:
        if address not in self.to_addresses:
            self.to_addresses.append(address)

    def add_all_to_address(self, addresses: Iterable[str]) -> None:
        for address in addresses:
            self.add_to_address(address)

    def set_mime_type(self, mime_type: str) -> None:
        self.mime_type = mime_type

    def set_subject(self, subject: str) -> None:
        self.subject = subject

    def println(self, fragment: str = "") -> None:
        self.fragments.append(fragment)

    @property
    def recipients(self) -> set[str]:
        return set(self.to_addresses)

    @property
    def body(self) -> str:
        return "\n".join(self.fragments)

    def is_empty(self) -> bool:
        return (
            not self.to_addresses
            and self.mime_type is None
            and self.subject is None
            and not self.fragments
        )
