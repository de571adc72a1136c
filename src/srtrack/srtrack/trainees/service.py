from __future__ import annotations

import logging
from typing import Optional

from ..common.validators import require_max_length, require_non_empty, sanitize_input
from ..core.constants import MAX_NAME_LENGTH, MAX_NUMBER_LENGTH, MAX_RANK_LENGTH
from ..core.enums import Company
from ..core.exceptions import AlreadyRegistered, Deactivated, NotRegistered, UniqueViolation, ValidationError
from .model import Trainee
from .repository import TraineeRepository

logger = logging.getLogger(__name__)


class TraineeService:
    """Use case: look up and register trainees."""

    def __init__(self, trainees: TraineeRepository):
        self._trainees = trainees

    def get_active(self, telegram_user_id: int) -> Trainee:
        """Resolve the active trainee behind a messaging account.

        Raises NotRegistered for unknown accounts and Deactivated for accounts
        that were switched off.
        """

        trainee = self._trainees.get_by_telegram_user_id(int(telegram_user_id))
        if not trainee:
            raise NotRegistered()
        if not trainee.is_active:
            raise Deactivated()
        return trainee

    def find(self, telegram_user_id: int) -> Optional[Trainee]:
        """Any trainee behind the account, active or not."""

        return self._trainees.get_by_telegram_user_id(int(telegram_user_id))

    def is_registered(self, telegram_user_id: int) -> bool:
        return self.find(telegram_user_id) is not None

    def register(
        self,
        *,
        telegram_user_id: int,
        rank: str,
        full_name: str,
        identification_number: str,
        company: Company,
    ) -> Trainee:
        if int(telegram_user_id) <= 0:
            raise ValidationError("Could not identify your Telegram user ID")

        rank = require_max_length(require_non_empty(sanitize_input(rank), "rank"), "Rank", MAX_RANK_LENGTH)
        full_name = require_max_length(require_non_empty(sanitize_input(full_name), "name"), "Name", MAX_NAME_LENGTH)
        identification_number = require_max_length(
            require_non_empty(sanitize_input(identification_number), "number"), "Number", MAX_NUMBER_LENGTH
        )

        if self._trainees.get_by_telegram_user_id(int(telegram_user_id)):
            raise AlreadyRegistered()
        if self._trainees.get_by_identification_number(identification_number):
            raise AlreadyRegistered("This identification number is already registered")

        try:
            trainee_id = self._trainees.create_trainee(
                telegram_user_id=int(telegram_user_id),
                rank=rank,
                full_name=full_name,
                identification_number=identification_number,
                company=company,
            )
        except UniqueViolation as exc:
            # Lost a race against a concurrent registration.
            if exc.constraint == "uq_trainee_identification":
                raise AlreadyRegistered("This identification number is already registered") from exc
            raise AlreadyRegistered() from exc

        logger.info("registered trainee %s (company %s)", trainee_id, company.value)
        return Trainee(
            trainee_id=trainee_id,
            telegram_user_id=int(telegram_user_id),
            rank=rank,
            full_name=full_name,
            identification_number=identification_number,
            company=company,
            is_active=True,
        )

    def deactivate(self, trainee_id: int) -> None:
        """Soft delete: the attendance history stays."""

        if not self._trainees.set_active(int(trainee_id), is_active=False):
            raise ValidationError("Trainee not found")
        logger.info("deactivated trainee %s", trainee_id)
