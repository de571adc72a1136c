"""Outbound message channels.

The core only needs ``send(recipient, text) -> bool``; delivery is best
effort and failures are logged here, never raised into the caller.
"""

from __future__ import annotations

import logging
from typing import List, Optional, Protocol, Tuple

import httpx

from ..core.constants import TELEGRAM_API_BASE

logger = logging.getLogger(__name__)


class MessageSender(Protocol):
    def send(self, recipient: int, text: str, *, reply_markup: Optional[dict] = None) -> bool:
        raise NotImplementedError

    def answer_callback(self, query_id: str, text: Optional[str] = None, *, show_alert: bool = False) -> bool:
        """Acknowledge a button press so the client stops its loading state."""
        raise NotImplementedError


class LoggingMessageSender:
    """Dry-run channel used when no bot token is configured."""

    def __init__(self):
        self.sent: List[Tuple[int, str]] = []
        self.answered: List[Tuple[str, Optional[str], bool]] = []

    def send(self, recipient: int, text: str, *, reply_markup: Optional[dict] = None) -> bool:
        self.sent.append((int(recipient), text))
        logger.info("DRY RUN: message to %s: %s", recipient, text.replace("\n", " | "))
        return True

    def answer_callback(self, query_id: str, text: Optional[str] = None, *, show_alert: bool = False) -> bool:
        self.answered.append((str(query_id), text, show_alert))
        logger.info("DRY RUN: answered callback %s: %s", query_id, text or "-")
        return True


class TelegramMessageSender:
    """Delivers messages through the Telegram Bot API."""

    def __init__(self, bot_token: str, *, timeout: float = 10.0, api_base: str = TELEGRAM_API_BASE):
        self._base_url = f"{api_base}/bot{bot_token}"
        self._timeout = timeout

    def _call(self, method: str, payload: dict, target) -> bool:
        try:
            response = httpx.post(f"{self._base_url}/{method}", json=payload, timeout=self._timeout)
            response.raise_for_status()
        except httpx.HTTPStatusError as e:
            logger.error("Telegram %s HTTP error for %s: %s", method, target, e.response.status_code)
            return False
        except httpx.RequestError as e:
            logger.error("Telegram %s request error for %s: %s", method, target, e)
            return False

        return bool(response.json().get("ok", False))

    def send(self, recipient: int, text: str, *, reply_markup: Optional[dict] = None) -> bool:
        payload: dict = {"chat_id": int(recipient), "text": text}
        if reply_markup:
            payload["reply_markup"] = reply_markup
        return self._call("sendMessage", payload, f"chat {recipient}")

    def answer_callback(self, query_id: str, text: Optional[str] = None, *, show_alert: bool = False) -> bool:
        payload: dict = {"callback_query_id": str(query_id)}
        if text:
            payload["text"] = text
        if show_alert:
            payload["show_alert"] = True
        return self._call("answerCallbackQuery", payload, f"callback {query_id}")
