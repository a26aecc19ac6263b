"""Translate a Message into the JSON document Postmark's email API expects."""

from __future__ import annotations

import base64
import logging
from typing import Any, Mapping, Optional

from .models import Attachment, Message, MimePart

logger = logging.getLogger(__name__)

TOKEN_HEADER = "X-Postmark-Server-Token"

# root content types whose body is treated as HTML when no dedicated part exists
HTML_ROOT_TYPES = ("text/html", "multipart/")

# keys dropped from the payload when their formatted value is empty
OPTIONAL_FIELDS = ("Cc", "Bcc", "Tag", "ReplyTo", "Attachments")


def format_display_name(name: str) -> str:
    """Quote display names containing a comma so they don't split the contact list."""
    if "," in name:
        return f'"{name}"'
    return name


def format_contacts(contacts: Mapping[str, Optional[str]] | None) -> str:
    """Render an address -> name mapping as Postmark's comma-separated contact string."""
    entries = []
    for address, name in (contacts or {}).items():
        if name:
            entries.append(f"{format_display_name(name)} <{address}>")
        else:
            entries.append(address)
    return ",".join(entries)


def select_tag(message: Message) -> str:
    """Return the last ``tag`` header value, or an empty string."""
    tag = message.get_header("tag")
    if tag is None:
        return ""
    return tag


def find_mime_part(message: Message, mime_type: str) -> MimePart | None:
    """First body leaf whose content type starts with ``mime_type``; attachments never match."""
    for part in message.walk():
        match part:
            case Attachment():
                continue
            case MimePart(content_type=content_type) if content_type.startswith(mime_type):
                return part
    return None


def classify_body(message: Message) -> dict[str, str]:
    data: dict[str, str] = {}
    body = message.body or ""

    if message.content_type.startswith(HTML_ROOT_TYPES):
        data["HtmlBody"] = body
    else:
        data["TextBody"] = body

    text = find_mime_part(message, "text/plain")
    if text is not None:
        data["TextBody"] = text.body

    html = find_mime_part(message, "text/html")
    if html is not None:
        data["HtmlBody"] = html.body

    return data


def encode_attachment(attachment: Attachment) -> dict[str, str]:
    content = attachment.body
    if isinstance(content, str):
        content = content.encode("utf-8")
    entry = {
        "Name": attachment.filename,
        "Content": base64.b64encode(content).decode("ascii"),
        "ContentType": attachment.content_type,
    }
    if attachment.is_inline and attachment.content_id:
        entry["ContentID"] = f"cid:{attachment.content_id}"
    return entry


def collect_attachments(message: Message) -> list[dict[str, str]]:
    """Encode every attachment in part-tree order."""
    attachments = []
    for part in message.walk():
        match part:
            case Attachment():
                attachments.append(encode_attachment(part))
    return attachments


def build_headers(api_key: str) -> dict[str, str]:
    return {
        "Accept": "application/json",
        "Content-Type": "application/json",
        TOKEN_HEADER: api_key,
    }


def build_payload(message: Message, api_key: str) -> dict[str, Any]:
    """Return the ``headers`` and ``json`` for a single Postmark send."""
    data: dict[str, Any] = {
        "Cc": format_contacts(message.cc),
        "Bcc": format_contacts(message.bcc),
        "Tag": select_tag(message),
        "Subject": message.subject or "",
        "ReplyTo": format_contacts(message.reply_to),
        "Attachments": collect_attachments(message),
    }
    for key in OPTIONAL_FIELDS:
        if not data[key]:
            del data[key]

    data["From"] = format_contacts(message.from_)
    data["To"] = format_contacts(message.to)
    data.update(classify_body(message))

    logger.debug(
        "Built Postmark payload with fields %s and %d attachment(s)",
        sorted(data),
        len(data.get("Attachments", [])),
    )
    return {"headers": build_headers(api_key), "json": data}
