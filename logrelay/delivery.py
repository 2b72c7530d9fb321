"""Delivery of digests to a Telegram chat through the Bot API."""

from __future__ import annotations

import logging
import threading
from dataclasses import dataclass
from typing import Optional

import requests

DEFAULT_API_BASE = "https://api.telegram.org"


class DeliveryError(Exception):
    """Raised when the chat API did not accept a message."""

    def __init__(
        self,
        message: str,
        status_code: Optional[int] = None,
        body: str = "",
    ) -> None:
        super().__init__(message)
        self.status_code = status_code
        self.body = body


@dataclass
class TelegramConfig:
    """Configuration for the Telegram Bot API sink."""

    bot_token: str
    chat_id: str
    api_base: str = DEFAULT_API_BASE
    parse_mode: str = "Markdown"
    timeout: float = 10.0


class TelegramSink:
    """Send Markdown text to one chat via ``sendMessage``.

    Process flow:
    1. Build the bot-scoped sendMessage URL
    2. POST chat_id, text and parse_mode as JSON
    3. Treat exactly HTTP 200 as success
    4. Raise DeliveryError carrying status and body otherwise
    """

    def __init__(self, cfg: TelegramConfig) -> None:
        self.cfg = cfg
        self._local = threading.local()

    @property
    def _session(self) -> requests.Session:
        # requests.Session is not thread-safe; keep one per calling thread
        session = getattr(self._local, "session", None)
        if session is None:
            session = self._local.session = requests.Session()
        return session

    @property
    def url(self) -> str:
        return f"{self.cfg.api_base.rstrip('/')}/bot{self.cfg.bot_token}/sendMessage"

    def deliver(self, text: str) -> None:
        """Send ``text`` to the configured chat.

        Raises:
            DeliveryError: On transport errors or any status other than 200.
        """
        payload = {
            "chat_id": self.cfg.chat_id,
            "text": text,
            "parse_mode": self.cfg.parse_mode,
        }
        try:
            resp = self._session.post(self.url, json=payload, timeout=self.cfg.timeout)
        except requests.RequestException as e:
            raise DeliveryError(str(e)) from e

        if resp.status_code != 200:
            body = resp.text
            raise DeliveryError(
                f"non-OK response: {resp.status_code}, body: {body}",
                status_code=resp.status_code,
                body=body,
            )
        logging.debug("Telegram accepted message (%d chars)", len(text))
