from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from typing import Optional

from ..core.enums import Company


@dataclass(frozen=True)
class Trainee:
    """Domain entity: a registered trainee.

    Note: Plain data object, no DB access. ``telegram_user_id`` and
    ``identification_number`` never change after registration.
    """

    trainee_id: int
    telegram_user_id: int
    rank: str
    full_name: str
    identification_number: str
    company: Company
    is_active: bool = True
    created_at: Optional[datetime] = None
