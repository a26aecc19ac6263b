"""Entry point that sends a single message through Postmark."""

from __future__ import annotations

import argparse
import json
import logging
from pathlib import Path
import sys

from dotenv import load_dotenv

# Ensure project root is on sys.path when running as a script
PROJECT_ROOT = Path(__file__).resolve().parents[1]
if str(PROJECT_ROOT) not in sys.path:
    sys.path.insert(0, str(PROJECT_ROOT))

from postmark_mail.config import Settings
from postmark_mail.models import Message, MimePart
from postmark_mail.payload import build_payload
from postmark_mail.postmark import MESSAGE_ID_HEADER, PostmarkTransport
from postmark_mail.utils import attachment_from_path, parse_contacts, redact_payload

load_dotenv()


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="Send an email through the Postmark API.")
    parser.add_argument("--from", dest="sender", help="Sender, 'Name <addr>' or bare address")
    parser.add_argument("--to", action="append", required=True, help="Recipient (repeatable)")
    parser.add_argument("--cc", action="append", help="Carbon-copy recipient (repeatable)")
    parser.add_argument("--bcc", action="append", help="Blind carbon-copy recipient (repeatable)")
    parser.add_argument("--reply-to", action="append", help="Reply-To address (repeatable)")
    parser.add_argument("--subject", default="", help="Subject line")
    parser.add_argument("--text", help="Plain-text body")
    parser.add_argument("--html", help="HTML body")
    parser.add_argument("--attach", action="append", type=Path, help="File to attach (repeatable)")
    parser.add_argument("--tag", help="Postmark tag for the message")
    parser.add_argument("--dry-run", action="store_true", help="Print the request payload instead of sending")
    return parser


def build_message(args: argparse.Namespace, default_from: str | None = None) -> Message:
    sender = args.sender or default_from
    if not sender:
        raise SystemExit("A sender is required: pass --from or set POSTMARK_DEFAULT_FROM.")

    message = Message(
        from_=parse_contacts([sender]),
        to=parse_contacts(args.to),
        cc=parse_contacts(args.cc),
        bcc=parse_contacts(args.bcc),
        reply_to=parse_contacts(args.reply_to),
        subject=args.subject,
    )

    if args.text is not None and args.html is not None:
        message.content_type = "multipart/alternative"
        message.children.extend(
            [MimePart("text/plain", args.text), MimePart("text/html", args.html)]
        )
    elif args.html is not None:
        message.content_type = "text/html"
        message.body = args.html
    else:
        message.content_type = "text/plain"
        message.body = args.text or ""

    for path in args.attach or []:
        message.children.append(attachment_from_path(path))

    if args.tag:
        message.add_header("tag", args.tag)
    return message


def configure_logging(level: str) -> None:
    logging.basicConfig(
        level=getattr(logging, level.upper(), logging.INFO),
        format="%(asctime)s %(levelname)s %(name)s %(message)s",
    )


def main() -> None:
    parser = build_parser()
    args = parser.parse_args()

    settings = Settings()
    configure_logging(settings.log_level)
    message = build_message(args, settings.postmark_default_from)

    if args.dry_run:
        payload = build_payload(message, settings.postmark_server_token)
        print(json.dumps(redact_payload(payload), indent=2))
        return

    transport = PostmarkTransport.from_settings(settings)
    recipients = transport.send(message)

    logging.info(
        "Send complete: message_id=%s recipients=%s",
        message.get_header(MESSAGE_ID_HEADER) or "<unknown>",
        recipients,
    )


if __name__ == "__main__":
    main()
