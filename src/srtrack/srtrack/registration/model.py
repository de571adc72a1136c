from __future__ import annotations

from dataclasses import dataclass, replace
from datetime import datetime
from typing import Optional

from ..core.enums import RegistrationStep


@dataclass(frozen=True)
class RegistrationState:
    """Persisted progress of the multi-step /register conversation."""

    telegram_user_id: int
    step: RegistrationStep
    expires_at: datetime
    rank: Optional[str] = None
    full_name: Optional[str] = None
    identification_number: Optional[str] = None

    def is_expired(self, now: datetime) -> bool:
        return now >= self.expires_at

    def advance(self, step: RegistrationStep, *, expires_at: datetime, **fields) -> "RegistrationState":
        return replace(self, step=step, expires_at=expires_at, **fields)
