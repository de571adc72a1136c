from __future__ import annotations

import logging

from flask import jsonify

from ..core.exceptions import BadRequest, Deactivated, DuplicateReplay, NotRegistered, StoreError, ValidationError

logger = logging.getLogger(__name__)

RETRY_MESSAGE = "Please try again in a moment."
GENERIC_MESSAGE = "An error occurred. Please try again later."


def user_message(exc: Exception) -> str:
    """Short text for the end user; store details never leak."""

    if isinstance(exc, DuplicateReplay):
        return "✅ Already done: this action has already been processed."
    if isinstance(exc, ValidationError):
        return f"❌ {exc}"
    if isinstance(exc, StoreError):
        return f"⚠️ {RETRY_MESSAGE}"
    return GENERIC_MESSAGE


def error_response(exc: Exception):
    """Map core errors onto JSON API responses."""

    if isinstance(exc, DuplicateReplay):
        return jsonify({"ok": True, "duplicate": True, "message": str(exc)}), 200
    if isinstance(exc, BadRequest):
        return jsonify({"ok": False, "error": str(exc)}), 400
    if isinstance(exc, Deactivated):
        return jsonify({"ok": False, "error": str(exc)}), 403
    if isinstance(exc, NotRegistered):
        return jsonify({"ok": False, "error": str(exc)}), 404
    if isinstance(exc, ValidationError):
        return jsonify({"ok": False, "error": str(exc)}), 409
    if isinstance(exc, StoreError):
        logger.warning("store failure surfaced as retryable: %s", exc)
        return jsonify({"ok": False, "error": RETRY_MESSAGE, "retryable": True}), 503

    logger.exception("unhandled error", exc_info=exc)
    return jsonify({"ok": False, "error": "Internal server error"}), 500
