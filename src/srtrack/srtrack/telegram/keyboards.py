from __future__ import annotations

from ..core.enums import Company

CLOCK_IN_BUTTON = {"text": "🟢 Clock In", "callback_data": "clock_in"}
CLOCK_OUT_BUTTON = {"text": "🔴 Clock Out", "callback_data": "clock_out"}
STATUS_BUTTON = {"text": "📊 Status", "callback_data": "status"}
MAIN_MENU_BUTTON = {"text": "🏠 Main Menu", "callback_data": "main_menu"}

COMPANY_CALLBACK_PREFIX = "reg_company_"


def inline(*rows: list) -> dict:
    return {"inline_keyboard": [list(r) for r in rows]}


def main_menu() -> dict:
    return inline([CLOCK_IN_BUTTON], [CLOCK_OUT_BUTTON], [STATUS_BUTTON])


def clock_in_only() -> dict:
    return inline([CLOCK_IN_BUTTON], [MAIN_MENU_BUTTON])


def clock_out_only() -> dict:
    return inline([CLOCK_OUT_BUTTON], [MAIN_MENU_BUTTON])


def company_picker() -> dict:
    return inline(*[[{"text": c.value, "callback_data": f"{COMPANY_CALLBACK_PREFIX}{c.value}"}] for c in Company])
