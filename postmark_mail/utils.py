"""Utility helpers shared across modules."""

from __future__ import annotations

import mimetypes
from email.utils import parseaddr
from pathlib import Path
from typing import Any, Iterable

from .models import Attachment, Contacts
from .payload import TOKEN_HEADER


def parse_contacts(values: Iterable[str] | None) -> Contacts:
    """Turn ``Name <addr>`` or bare address strings into an address -> name mapping."""
    contacts: Contacts = {}
    for value in values or []:
        name, address = parseaddr(value)
        if not address:
            continue
        contacts[address] = name or None
    return contacts


def attachment_from_path(path: Path) -> Attachment:
    """Read a file into an Attachment, guessing its content type from the name."""
    content_type, _ = mimetypes.guess_type(path.name)
    return Attachment(
        content_type=content_type or "application/octet-stream",
        filename=path.name,
        body=path.read_bytes(),
    )


def redact_payload(payload: dict[str, Any]) -> dict[str, Any]:
    """Copy of a built payload with the server token masked, safe for printing."""
    headers = dict(payload["headers"])
    if TOKEN_HEADER in headers:
        headers[TOKEN_HEADER] = "[REDACTED]"
    return {"headers": headers, "json": dict(payload["json"])}
