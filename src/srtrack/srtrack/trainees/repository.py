from __future__ import annotations

from typing import Optional, Protocol

from ..core.enums import Company
from .model import Trainee


class TraineeRepository(Protocol):
    """Repository interface for trainees.

    Note (DIP): services depend on this interface, not on a concrete DB.
    """

    def get_by_id(self, trainee_id: int) -> Optional[Trainee]:
        raise NotImplementedError

    def get_by_telegram_user_id(self, telegram_user_id: int) -> Optional[Trainee]:
        raise NotImplementedError

    def get_by_identification_number(self, identification_number: str) -> Optional[Trainee]:
        raise NotImplementedError

    def create_trainee(
        self,
        *,
        telegram_user_id: int,
        rank: str,
        full_name: str,
        identification_number: str,
        company: Company,
    ) -> int:
        raise NotImplementedError

    def set_active(self, trainee_id: int, *, is_active: bool) -> bool:
        raise NotImplementedError
