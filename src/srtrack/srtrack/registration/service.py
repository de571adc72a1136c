from __future__ import annotations

import logging
from datetime import timedelta
from typing import Optional

from ..common.datetime_utils import TimeAuthority
from ..common.validators import parse_company, require_max_length, require_non_empty, sanitize_input
from ..core.constants import DEFAULT_REGISTRATION_TTL_MINUTES, MAX_NAME_LENGTH, MAX_NUMBER_LENGTH, MAX_RANK_LENGTH
from ..core.enums import RegistrationStep
from ..core.exceptions import AlreadyRegistered, Deactivated, ValidationError
from ..trainees.model import Trainee
from ..trainees.service import TraineeService
from .model import RegistrationState
from .repository import RegistrationStateRepository

logger = logging.getLogger(__name__)

PROMPTS = {
    RegistrationStep.COLLECTING_RANK: "📝 Registration\n\nPlease provide your details:\n\n1. Rank (e.g., PVT, CPL, SGT):",
    RegistrationStep.COLLECTING_NAME: "2. Full Name:",
    RegistrationStep.COLLECTING_NUMBER: "3. Identification Number:",
    RegistrationStep.COLLECTING_COMPANY: "4. Company:\n\nPlease select your company:",
}


class RegistrationService:
    """Use case: the step-by-step /register conversation.

    State lives in the store with an expiry, so any process instance can pick
    up the next message of a conversation.
    """

    def __init__(
        self,
        states: RegistrationStateRepository,
        trainees: TraineeService,
        time: TimeAuthority,
        *,
        ttl_minutes: int = DEFAULT_REGISTRATION_TTL_MINUTES,
    ):
        self._states = states
        self._trainees = trainees
        self._time = time
        self._ttl = timedelta(minutes=int(ttl_minutes))

    def _expires_at(self):
        return self._time.now() + self._ttl

    def _active_state(self, telegram_user_id: int) -> Optional[RegistrationState]:
        state = self._states.get(int(telegram_user_id))
        if state is None:
            return None
        if state.is_expired(self._time.now()):
            self._states.delete(int(telegram_user_id))
            logger.debug("registration state for %s expired", telegram_user_id)
            return None
        return state

    def start(self, telegram_user_id: int) -> RegistrationState:
        trainee = self._trainees.find(telegram_user_id)
        if trainee and not trainee.is_active:
            raise Deactivated()
        if trainee:
            raise AlreadyRegistered("You are already registered!")

        state = RegistrationState(
            telegram_user_id=int(telegram_user_id),
            step=RegistrationStep.COLLECTING_RANK,
            expires_at=self._expires_at(),
        )
        self._states.save(state)
        return state

    def is_in_registration(self, telegram_user_id: int) -> bool:
        state = self._active_state(telegram_user_id)
        return state is not None and state.step != RegistrationStep.COMPLETE

    def current_step(self, telegram_user_id: int) -> Optional[RegistrationStep]:
        state = self._active_state(telegram_user_id)
        return state.step if state else None

    def handle_text(self, telegram_user_id: int, text: str) -> Optional[RegistrationState]:
        """Feed one free-text answer. Returns the new state, or None if no wizard is running.

        The company step is answered with a button (select_company); text is
        accepted there too and completes the registration.
        """

        state = self._active_state(telegram_user_id)
        if state is None or state.step == RegistrationStep.COMPLETE:
            return None

        value = sanitize_input(text)

        if state.step == RegistrationStep.COLLECTING_RANK:
            rank = require_max_length(require_non_empty(value, "rank"), "Rank", MAX_RANK_LENGTH)
            state = state.advance(RegistrationStep.COLLECTING_NAME, expires_at=self._expires_at(), rank=rank)
        elif state.step == RegistrationStep.COLLECTING_NAME:
            name = require_max_length(require_non_empty(value, "name"), "Name", MAX_NAME_LENGTH)
            state = state.advance(RegistrationStep.COLLECTING_NUMBER, expires_at=self._expires_at(), full_name=name)
        elif state.step == RegistrationStep.COLLECTING_NUMBER:
            number = require_max_length(require_non_empty(value, "number"), "Number", MAX_NUMBER_LENGTH)
            state = state.advance(
                RegistrationStep.COLLECTING_COMPANY, expires_at=self._expires_at(), identification_number=number
            )
        else:
            self.select_company(telegram_user_id, value)
            return state.advance(RegistrationStep.COMPLETE, expires_at=state.expires_at)

        self._states.save(state)
        return state

    def select_company(self, telegram_user_id: int, company: str) -> Trainee:
        state = self._active_state(telegram_user_id)
        if state is None or state.step != RegistrationStep.COLLECTING_COMPANY:
            raise ValidationError("No registration in progress. Please start with /register")

        # Invalid choice keeps the wizard at this step so the user can pick again.
        selected = parse_company(company)

        if not self._states.transition(
            int(telegram_user_id),
            from_step=RegistrationStep.COLLECTING_COMPANY,
            to_step=RegistrationStep.COMPLETE,
        ):
            raise ValidationError("Registration is already being completed")

        try:
            trainee = self._trainees.register(
                telegram_user_id=int(telegram_user_id),
                rank=state.rank or "",
                full_name=state.full_name or "",
                identification_number=state.identification_number or "",
                company=selected,
            )
        finally:
            self._states.delete(int(telegram_user_id))

        return trainee

    def cancel(self, telegram_user_id: int) -> bool:
        return self._states.delete(int(telegram_user_id))

    def purge_expired(self) -> int:
        return self._states.purge_expired(self._time.now())
