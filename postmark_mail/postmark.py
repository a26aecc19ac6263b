"""Postmark HTTP transport."""

from __future__ import annotations

import logging

import requests
from requests import Response

from .config import Settings
from .models import Message
from .payload import build_payload
from .transport import Transport

logger = logging.getLogger(__name__)

MESSAGE_ID_HEADER = "X-PM-Message-Id"


class PostmarkTransport(Transport):
    """Send one message per call through Postmark's ``/email`` endpoint."""

    API_URL = "https://api.postmarkapp.com/email"

    def __init__(
        self,
        session: requests.Session,
        key: str,
        url: str | None = None,
        timeout: float | None = None,
    ) -> None:
        super().__init__()
        self.session = session
        self.key = key
        self.url = url or self.API_URL
        self.timeout = timeout

    @classmethod
    def from_settings(cls, settings: Settings) -> "PostmarkTransport":
        return cls(
            requests.Session(),
            settings.postmark_server_token,
            url=str(settings.postmark_api_url),
            timeout=settings.postmark_timeout,
        )

    def send(self, message: Message) -> int:
        """Deliver ``message`` and return how many recipients it was addressed to."""
        self.before_send_performed(message)

        payload = build_payload(message, self.key)
        logger.info("Sending '%s' via Postmark", payload["json"]["Subject"])
        response = self.session.post(
            self.url,
            headers=payload["headers"],
            json=payload["json"],
            timeout=self.timeout,
        )

        if response.status_code >= 400:
            logger.error("Postmark send failed (%s): %s", response.status_code, response.text)
            response.raise_for_status()

        message.add_header(MESSAGE_ID_HEADER, self.get_message_id(response))

        self.send_performed(message)

        return self.number_of_recipients(message)

    def get_message_id(self, response: Response) -> str:
        """Pull ``MessageID`` out of the response; empty string when it can't be found."""
        payload = self._parse_response_body(response)
        message_id = payload.get("MessageID") if isinstance(payload, dict) else None
        if message_id is None:
            logger.warning("Postmark response did not include a MessageID; response=%s", payload)
            return ""
        return str(message_id)

    @staticmethod
    def _parse_response_body(response: Response) -> dict | str:
        try:
            return response.json()
        except ValueError:
            return response.text
