from __future__ import annotations

import pytest

from src.srtrack.srtrack.core.enums import Company, RegistrationStep
from src.srtrack.srtrack.core.exceptions import AlreadyRegistered, Deactivated, ValidationError

TG = 5005


def answer_up_to_company(svc, tg=TG, *, number="S7654321B"):
    svc.start(tg)
    svc.handle_text(tg, "PTE")
    svc.handle_text(tg, "  Muhammad Ali<>  ")
    return svc.handle_text(tg, number)


def test_full_wizard_registers_trainee(world):
    svc = world.container.registration_service

    state = svc.start(TG)
    assert state.step == RegistrationStep.COLLECTING_RANK
    assert svc.is_in_registration(TG)

    assert svc.handle_text(TG, "PTE").step == RegistrationStep.COLLECTING_NAME
    assert svc.handle_text(TG, "Muhammad Ali").step == RegistrationStep.COLLECTING_NUMBER
    state = svc.handle_text(TG, "S7654321B")
    assert state.step == RegistrationStep.COLLECTING_COMPANY
    assert (state.rank, state.full_name, state.identification_number) == ("PTE", "Muhammad Ali", "S7654321B")

    trainee = svc.select_company(TG, "Support")

    assert trainee.company == Company.SUPPORT
    assert world.trainees.get_by_telegram_user_id(TG).full_name == "Muhammad Ali"
    assert world.registration.get(TG) is None
    assert not svc.is_in_registration(TG)


def test_answers_are_trimmed_and_brackets_dropped(world):
    state = answer_up_to_company(world.container.registration_service)

    assert state.full_name == "Muhammad Ali"


def test_company_can_be_typed(world):
    svc = world.container.registration_service
    answer_up_to_company(svc)

    state = svc.handle_text(TG, "MSC")

    assert state.step == RegistrationStep.COMPLETE
    assert world.trainees.get_by_telegram_user_id(TG).company == Company.MSC


def test_invalid_company_keeps_the_wizard_open(world):
    svc = world.container.registration_service
    answer_up_to_company(svc)

    with pytest.raises(ValidationError, match="Invalid company selected"):
        svc.select_company(TG, "Z")

    assert svc.current_step(TG) == RegistrationStep.COLLECTING_COMPANY
    assert svc.select_company(TG, "A").company == Company.A


def test_empty_answer_is_rejected_and_step_kept(world):
    svc = world.container.registration_service
    svc.start(TG)

    with pytest.raises(ValidationError):
        svc.handle_text(TG, "   ")

    assert svc.current_step(TG) == RegistrationStep.COLLECTING_RANK


def test_registered_user_cannot_start_again(world):
    world.trainees.add(TG)

    with pytest.raises(AlreadyRegistered, match="already registered"):
        world.container.registration_service.start(TG)


def test_deactivated_user_cannot_register_again(world):
    world.trainees.add(TG, is_active=False)

    with pytest.raises(Deactivated):
        world.container.registration_service.start(TG)

    assert world.registration.get(TG) is None


def test_duplicate_identification_number_is_rejected(world):
    world.trainees.add(1, identification_number="S7654321B")
    svc = world.container.registration_service
    answer_up_to_company(svc)

    with pytest.raises(AlreadyRegistered, match="identification number"):
        svc.select_company(TG, "A")

    assert world.registration.get(TG) is None


def test_company_without_wizard_is_rejected(world):
    with pytest.raises(ValidationError, match="/register"):
        world.container.registration_service.select_company(TG, "A")


def test_wizard_expires(world):
    svc = world.container.registration_service
    svc.start(TG)

    world.clock.advance(minutes=16)

    assert svc.handle_text(TG, "PTE") is None
    assert not svc.is_in_registration(TG)
    assert world.registration.get(TG) is None


def test_each_answer_extends_the_expiry(world):
    svc = world.container.registration_service
    svc.start(TG)

    world.clock.advance(minutes=10)
    svc.handle_text(TG, "PTE")
    world.clock.advance(minutes=10)

    assert svc.current_step(TG) == RegistrationStep.COLLECTING_NAME


def test_cancel_and_purge(world):
    svc = world.container.registration_service
    svc.start(TG)
    svc.start(TG + 1)

    assert svc.cancel(TG) is True
    assert svc.cancel(TG) is False

    world.clock.advance(minutes=20)
    assert svc.purge_expired() == 1
    assert world.registration.rows == {}
