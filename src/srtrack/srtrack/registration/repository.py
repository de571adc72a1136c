from __future__ import annotations

from datetime import datetime
from typing import Optional, Protocol

from ..core.enums import RegistrationStep
from .model import RegistrationState


class RegistrationStateRepository(Protocol):
    def get(self, telegram_user_id: int) -> Optional[RegistrationState]:
        raise NotImplementedError

    def save(self, state: RegistrationState) -> None:
        """Insert or replace the state for its user."""

        raise NotImplementedError

    def transition(self, telegram_user_id: int, *, from_step: RegistrationStep, to_step: RegistrationStep) -> bool:
        """Move to ``to_step`` only if the stored step is still ``from_step``."""

        raise NotImplementedError

    def delete(self, telegram_user_id: int) -> bool:
        raise NotImplementedError

    def purge_expired(self, now: datetime) -> int:
        raise NotImplementedError
