from __future__ import annotations

from typing import Protocol, Sequence

from ..core.enums import Company
from .model import Commander


class CommanderRepository(Protocol):
    """Read-only directory of commanders; rows are provisioned by database/seed.sql."""

    def list_active_by_company(self, company: Company) -> Sequence[Commander]:
        raise NotImplementedError

    def list_active_admins(self) -> Sequence[Commander]:
        raise NotImplementedError
