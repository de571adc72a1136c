from __future__ import annotations

from ..core.enums import NotificationKind
from ..trainees.model import Trainee

_HEADERS = {
    NotificationKind.CLOCK_IN: "🟢 Clock In",
    NotificationKind.CLOCK_OUT: "🔴 Clock Out",
    NotificationKind.OVERDUE: "⚠️ OVERDUE: Trainee has not clocked out",
}


def compose_message(
    kind: NotificationKind,
    trainee: Trainee,
    *,
    time_str: str,
    tz_label: str,
    cutoff_hour: int,
) -> str:
    """Plain-text commander notification for one trainee event."""

    lines = [
        _HEADERS[kind],
        "",
        f"Rank: {trainee.rank}",
        f"Name: {trainee.full_name}",
        f"Number: {trainee.identification_number}",
        f"Company: {trainee.company.value}",
    ]
    if kind == NotificationKind.OVERDUE:
        lines.append(f"Cutoff time: {cutoff_hour:02d}:00 {tz_label}")
    else:
        lines.append(f"Time: {time_str} {tz_label}")
    return "\n".join(lines)
