"""Routes Telegram updates to the core services.

Only glue lives here: pull identities out of the update, call the service,
reply with a short message. Store failures propagate so the webhook answers
non-2xx and Telegram redelivers; the update_id replay token makes that safe.
"""

from __future__ import annotations

import logging
from typing import Optional

from ..common.responses import user_message
from ..container import Container
from ..core.enums import RegistrationStep, SessionStatus
from ..core.exceptions import Deactivated, DomainError, NotRegistered
from ..registration.service import PROMPTS
from . import keyboards

logger = logging.getLogger(__name__)

WELCOME = "Welcome to SRTrack! You need to register first.\n\nPlease use /register to start registration."
CALLBACK_ERROR = "An error occurred"


class TelegramUpdateHandler:
    def __init__(self, container: Container):
        self._c = container

    def _reply(self, chat_id: int, text: str, reply_markup: Optional[dict] = None) -> None:
        self._c.sender.send(chat_id, text, reply_markup=reply_markup)

    def handle(self, update: dict) -> None:
        update_id = int(update["update_id"])

        if "callback_query" in update:
            query = update["callback_query"]
            user_id = int(query["from"]["id"])
            chat_id = int((query.get("message") or {}).get("chat", {}).get("id", user_id))
            try:
                self._handle_callback(chat_id, user_id, update_id, query.get("data") or "")
            except Exception:
                self._c.sender.answer_callback(query["id"], CALLBACK_ERROR, show_alert=True)
                raise
            self._c.sender.answer_callback(query["id"])
            return

        message = update.get("message")
        if not message or "from" not in message:
            logger.debug("ignoring update %s without a message", update_id)
            return

        self._handle_message(int(message["chat"]["id"]), int(message["from"]["id"]), message.get("text") or "")

    def _handle_message(self, chat_id: int, user_id: int, text: str) -> None:
        command = text.strip().split()[0].split("@")[0] if text.strip() else ""

        try:
            if command == "/start":
                self._start(chat_id, user_id)
            elif command == "/register":
                self._c.registration_service.start(user_id)
                self._reply(chat_id, PROMPTS[RegistrationStep.COLLECTING_RANK])
            elif command == "/cancel":
                self._c.registration_service.cancel(user_id)
                self._reply(chat_id, "Registration cancelled.")
            elif command == "/status":
                self._status(chat_id, user_id)
            elif self._c.registration_service.is_in_registration(user_id):
                self._registration_step(chat_id, user_id, text)
        except DomainError as e:
            self._reply(chat_id, user_message(e))

    def _handle_callback(self, chat_id: int, user_id: int, update_id: int, data: str) -> None:
        try:
            if data == "clock_in":
                result = self._c.attendance_service.clock_in(user_id, update_id=update_id)
                self._reply(
                    chat_id,
                    f"✅ Clocked in successfully!\n\nTime: {self._local(result.session.clock_in_time)}",
                    keyboards.clock_out_only(),
                )
            elif data == "clock_out":
                result = self._c.attendance_service.clock_out(user_id, update_id=update_id)
                session = result.session
                self._reply(
                    chat_id,
                    "✅ Clocked out successfully!\n\n"
                    f"Clock In: {self._local(session.clock_in_time)}\n"
                    f"Clock Out: {self._local(session.clock_out_time)}",
                    keyboards.clock_in_only(),
                )
            elif data == "status":
                self._status(chat_id, user_id)
            elif data == "main_menu":
                self._c.trainee_service.get_active(user_id)
                self._reply(chat_id, "Choose an action:", keyboards.main_menu())
            elif data.startswith(keyboards.COMPANY_CALLBACK_PREFIX):
                company = data[len(keyboards.COMPANY_CALLBACK_PREFIX):]
                trainee = self._c.registration_service.select_company(user_id, company)
                self._reply(
                    chat_id,
                    "✅ Registration successful!\n\n"
                    f"Rank: {trainee.rank}\n"
                    f"Name: {trainee.full_name}\n"
                    f"Number: {trainee.identification_number}\n"
                    f"Company: {trainee.company.value}\n\n"
                    "You can now use the clock in/out buttons.",
                    keyboards.main_menu(),
                )
            else:
                logger.debug("unknown callback data %r", data)
        except DomainError as e:
            self._reply(chat_id, user_message(e))

    def _local(self, value) -> str:
        return f"{self._c.time.format_time(value)} {self._c.time.tz_label}"

    def _start(self, chat_id: int, user_id: int) -> None:
        try:
            self._c.trainee_service.get_active(user_id)
        except Deactivated as e:
            self._reply(chat_id, user_message(e))
        except NotRegistered:
            self._reply(chat_id, WELCOME)
        else:
            self._reply(chat_id, "Welcome back! Choose an action:", keyboards.main_menu())

    def _status(self, chat_id: int, user_id: int) -> None:
        view = self._c.attendance_service.get_status(user_id)
        if view.status == SessionStatus.IN and view.session:
            self._reply(
                chat_id,
                f"📊 Current Status: IN\n\nClock In: {self._local(view.session.clock_in_time)}",
                keyboards.clock_out_only(),
            )
        else:
            self._reply(chat_id, "📊 Current Status: OUT\n\nYou are not currently clocked in.", keyboards.clock_in_only())

    def _registration_step(self, chat_id: int, user_id: int, text: str) -> None:
        state = self._c.registration_service.handle_text(user_id, text)
        if state is None:
            return
        if state.step == RegistrationStep.COLLECTING_COMPANY:
            self._reply(chat_id, PROMPTS[state.step], keyboards.company_picker())
        elif state.step in PROMPTS:
            self._reply(chat_id, PROMPTS[state.step])
        elif state.step == RegistrationStep.COMPLETE:
            self._reply(chat_id, "✅ Registration successful! You can now use the clock in/out buttons.", keyboards.main_menu())
