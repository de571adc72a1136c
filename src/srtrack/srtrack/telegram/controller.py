from __future__ import annotations

import hmac
import logging

from flask import Flask, jsonify, request

from ..container import Container
from ..core.exceptions import StoreError
from .handlers import TelegramUpdateHandler

logger = logging.getLogger(__name__)

SECRET_HEADER = "X-Telegram-Bot-Api-Secret-Token"


def register(app: Flask, container: Container) -> None:
    handler = TelegramUpdateHandler(container)

    @app.route("/api/telegram/webhook", methods=["POST"], endpoint="telegram_webhook")
    def telegram_webhook():
        if container.telegram_webhook_secret:
            if not hmac.compare_digest(request.headers.get(SECRET_HEADER, ""), container.telegram_webhook_secret):
                return jsonify({"error": "Unauthorized"}), 401

        update = request.get_json(silent=True)
        if not isinstance(update, dict) or not isinstance(update.get("update_id"), int):
            return jsonify({"error": "Invalid update format"}), 400

        try:
            handler.handle(update)
        except StoreError as e:
            # Non-2xx makes Telegram redeliver; the update_id guards against doubles.
            logger.warning("update %s failed on the store, asking for redelivery: %s", update.get("update_id"), e)
            return jsonify({"ok": False, "retry": True}), 503
        except Exception:
            logger.exception("webhook failed for update %s", update.get("update_id"))
            return jsonify({"error": "Internal server error"}), 500

        return jsonify({"ok": True})
