from __future__ import annotations

from dataclasses import asdict, dataclass, field
from datetime import date, datetime
from typing import List, Optional

from ..core.enums import NotificationKind


@dataclass(frozen=True)
class NotificationRecord:
    """Dedup ledger entry: at most one per (commander, trainee, kind, date)."""

    notification_id: int
    commander_id: int
    trainee_id: int
    kind: NotificationKind
    notification_date: date
    message_text: str
    delivered: bool
    created_at: Optional[datetime] = None


@dataclass(frozen=True)
class DispatchError:
    commander_id: Optional[int]
    error: str


@dataclass
class DispatchReport:
    """Outcome of one fan-out: ``recorded`` ledger rows written, of which ``delivered`` reached the sender."""

    kind: NotificationKind
    trainee_id: int
    recorded: int = 0
    delivered: int = 0
    skipped: int = 0
    errors: List[DispatchError] = field(default_factory=list)

    @property
    def ok(self) -> bool:
        return not self.errors

    def to_dict(self) -> dict:
        data = asdict(self)
        data["kind"] = self.kind.value
        return data
