from __future__ import annotations

from dataclasses import dataclass
from typing import Optional

from ..core.enums import CommanderRole, Company


@dataclass(frozen=True)
class Commander:
    """Notification recipient scoped to a company (admins see every company)."""

    commander_id: int
    rank: str
    full_name: str
    company: Company
    role: CommanderRole = CommanderRole.COMMANDER
    is_active: bool = True
    telegram_user_id: Optional[int] = None
    contact_number: Optional[str] = None

    @property
    def is_admin(self) -> bool:
        return self.role == CommanderRole.ADMIN
