from __future__ import annotations

from dataclasses import asdict, dataclass, field
from datetime import date
from typing import List, Optional


@dataclass(frozen=True)
class SweepError:
    session_id: int
    trainee_id: int
    error: str


@dataclass
class SweepReport:
    """Result of one overdue sweep run.

    ``processed`` counts candidate rows attempted; ``marked`` those this run
    flagged; ``skipped`` those already flagged or closed by the time we got to them.
    """

    session_date: date
    skipped_run: bool = False
    processed: int = 0
    marked: int = 0
    skipped: int = 0
    notifications_recorded: int = 0
    errors: List[SweepError] = field(default_factory=list)
    message: Optional[str] = None

    def to_dict(self) -> dict:
        data = asdict(self)
        data["session_date"] = self.session_date.isoformat()
        return data
