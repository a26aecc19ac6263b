"""Typed containers describing an outgoing message."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Optional, Union

# address -> optional display name, in insertion order
Contacts = dict[str, Optional[str]]


@dataclass
class MimePart:
    """A leaf body part such as ``text/plain`` or ``text/html``."""

    content_type: str
    body: str = ""


@dataclass
class Attachment(MimePart):
    """A leaf part carrying binary content."""

    filename: str = ""
    body: bytes = b""
    disposition: str = "attachment"
    content_id: Optional[str] = None

    @property
    def is_inline(self) -> bool:
        return self.disposition != "attachment"


@dataclass
class Multipart:
    """A container part whose children are walked in order."""

    content_type: str
    children: list[BodyPart] = field(default_factory=list)


BodyPart = Union[MimePart, Attachment, Multipart]


@dataclass
class Message:
    """An email as handed to a transport."""

    from_: Contacts = field(default_factory=dict)
    to: Contacts = field(default_factory=dict)
    cc: Contacts = field(default_factory=dict)
    bcc: Contacts = field(default_factory=dict)
    reply_to: Contacts = field(default_factory=dict)
    subject: Optional[str] = None
    content_type: str = "text/plain"
    body: Optional[str] = None
    children: list[BodyPart] = field(default_factory=list)
    headers: list[tuple[str, str]] = field(default_factory=list)

    def add_header(self, name: str, value: str) -> None:
        self.headers.append((name, value))

    def get_all(self, name: str) -> list[str]:
        """Return every value of a header, oldest first; names are case-insensitive."""
        wanted = name.lower()
        return [value for header, value in self.headers if header.lower() == wanted]

    def get_header(self, name: str, default: Optional[str] = None) -> Optional[str]:
        values = self.get_all(name)
        return values[-1] if values else default

    def walk(self):
        """Yield every body part depth-first, containers before their children."""
        stack = list(reversed(self.children))
        while stack:
            part = stack.pop()
            yield part
            if isinstance(part, Multipart):
                stack.extend(reversed(part.children))
