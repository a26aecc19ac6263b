"""Shared plumbing for mail transports: plugins and recipient counting."""

from __future__ import annotations

import logging
from typing import Any

from .models import Message

logger = logging.getLogger(__name__)


class Transport:
    """Base transport; subclasses implement ``send`` and call the hooks around it."""

    def __init__(self) -> None:
        self.plugins: list[Any] = []

    def register_plugin(self, plugin: Any) -> None:
        """Register an observer with optional ``before_send_performed``/``send_performed`` methods."""
        self.plugins.append(plugin)

    def before_send_performed(self, message: Message) -> None:
        self._dispatch("before_send_performed", message)

    def send_performed(self, message: Message) -> None:
        self._dispatch("send_performed", message)

    def _dispatch(self, hook: str, message: Message) -> None:
        for plugin in self.plugins:
            callback = getattr(plugin, hook, None)
            if callback is None:
                continue
            logger.debug("Running %s on %s", hook, type(plugin).__name__)
            callback(message)

    @staticmethod
    def number_of_recipients(message: Message) -> int:
        return len(message.to) + len(message.cc) + len(message.bcc)

    def send(self, message: Message) -> int:
        """Deliver ``message``; subclasses must override this and return the recipient count."""
        raise NotImplementedError
