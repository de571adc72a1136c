from __future__ import annotations

import re

from ..core.enums import Company
from ..core.exceptions import ValidationError

_UNSAFE_CHARS = re.compile(r"[<>]")


def sanitize_input(value: str) -> str:
    """Trim and drop angle brackets from free text typed into the bot."""
    return _UNSAFE_CHARS.sub("", (value or "").strip())


def require_non_empty(value: str, field_name: str) -> str:
    if not value or not value.strip():
        raise ValidationError(f"Invalid {field_name}")
    return value.strip()


def require_max_length(value: str, field_name: str, max_len: int) -> str:
    if value is None or len(value) > max_len:
        raise ValidationError(f"{field_name} must be at most {max_len} characters")
    return value


def parse_company(value: str) -> Company:
    try:
        return Company((value or "").strip())
    except ValueError:
        raise ValidationError("Invalid company selected")
