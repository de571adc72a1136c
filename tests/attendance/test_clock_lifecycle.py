from __future__ import annotations

from datetime import timedelta

import pytest

from src.srtrack.srtrack.attendance.model import AttendanceSession
from src.srtrack.srtrack.attendance.service import AttendanceService
from src.srtrack.srtrack.core.enums import Company, NotificationKind, SessionStatus
from src.srtrack.srtrack.core.exceptions import (
    AlreadyClockedIn,
    DataIntegrityError,
    DuplicateReplay,
    InvalidDuration,
    NotClockedIn,
    NotRegistered,
    PastCutoff,
)
from tests.fakes import InMemoryAttendance, build_world, sgt

TRAINEE_TG = 1001
COMMANDER_TG = 9001


@pytest.fixture
def trainee(world):
    return world.trainees.add(TRAINEE_TG, company=Company.A, rank="PTE", full_name="Tan Ah Kow")


@pytest.fixture
def commander(world):
    return world.commanders.add(1, company=Company.A, telegram_user_id=COMMANDER_TG)


def open_sessions(world, trainee_id):
    return [s for s in world.attendance.sessions.values() if s.trainee_id == trainee_id and s.is_open]


def test_clock_in_opens_one_session_dated_today(world, trainee):
    result = world.container.attendance_service.clock_in(TRAINEE_TG, update_id=1)

    assert result.trainee.trainee_id == trainee.trainee_id
    assert result.session.status == SessionStatus.IN
    assert result.session.session_date.isoformat() == "2026-03-02"
    assert len(open_sessions(world, trainee.trainee_id)) == 1


def test_second_clock_in_with_new_update_is_rejected(world, trainee):
    svc = world.container.attendance_service
    svc.clock_in(TRAINEE_TG, update_id=1)

    world.clock.advance(minutes=1)
    with pytest.raises(AlreadyClockedIn):
        svc.clock_in(TRAINEE_TG, update_id=2)

    assert len(open_sessions(world, trainee.trainee_id)) == 1


def test_replayed_update_is_reported_as_duplicate(world, trainee):
    svc = world.container.attendance_service
    svc.clock_in(TRAINEE_TG, update_id=1)

    with pytest.raises(DuplicateReplay) as exc:
        svc.clock_in(TRAINEE_TG, update_id=1)

    assert exc.value.update_id == 1
    assert len(world.attendance.sessions) == 1


def test_replayed_clock_out_is_reported_as_duplicate(world, trainee):
    svc = world.container.attendance_service
    svc.clock_in(TRAINEE_TG, update_id=1)
    world.clock.advance(minutes=30)
    svc.clock_out(TRAINEE_TG, update_id=2)

    with pytest.raises(DuplicateReplay):
        svc.clock_out(TRAINEE_TG, update_id=2)


def test_clock_in_after_cutoff_is_rejected(world, trainee):
    world.clock.set(sgt(2026, 3, 2, 22, 30))

    with pytest.raises(PastCutoff) as exc:
        world.container.attendance_service.clock_in(TRAINEE_TG, update_id=1)

    assert "22:00" in str(exc.value)
    assert world.attendance.sessions == {}
    assert world.attendance.tokens == set()


def test_clock_in_just_before_cutoff_is_accepted(world, trainee):
    world.clock.set(sgt(2026, 3, 2, 21, 59, 59))

    result = world.container.attendance_service.clock_in(TRAINEE_TG, update_id=1)

    assert result.session.is_open


def test_unknown_or_inactive_user_is_not_registered(world):
    world.trainees.add(2002, is_active=False)
    svc = world.container.attendance_service

    with pytest.raises(NotRegistered):
        svc.clock_in(4242, update_id=1)
    with pytest.raises(NotRegistered):
        svc.clock_in(2002, update_id=2)
    with pytest.raises(NotRegistered):
        svc.clock_out(4242, update_id=3)


def test_clock_out_without_open_session(world, trainee):
    with pytest.raises(NotClockedIn):
        world.container.attendance_service.clock_out(TRAINEE_TG, update_id=1)


def test_clock_out_at_clock_in_instant_leaves_store_unchanged(world, trainee):
    svc = world.container.attendance_service
    svc.clock_in(TRAINEE_TG, update_id=1)
    before = dict(world.attendance.sessions)

    with pytest.raises(InvalidDuration):
        svc.clock_out(TRAINEE_TG, update_id=2)

    assert world.attendance.sessions == before
    assert 2 not in world.attendance.tokens

    # The rejected update did not burn its token.
    world.clock.advance(seconds=1)
    assert svc.clock_out(TRAINEE_TG, update_id=2).session.status == SessionStatus.OUT


def test_full_day_then_sweep_leaves_closed_session_alone(world, trainee, commander):
    svc = world.container.attendance_service

    svc.clock_in(TRAINEE_TG, update_id=1)
    world.clock.set(sgt(2026, 3, 2, 9, 5))
    result = svc.clock_out(TRAINEE_TG, update_id=2)

    assert result.session.duration == timedelta(minutes=5)
    assert result.session.clock_out_update_id == 2

    world.clock.set(sgt(2026, 3, 2, 22, 5))
    report = world.container.overdue_sweep.check_and_mark_overdue()

    assert report.marked == 0
    assert not any(r.kind == NotificationKind.OVERDUE for r in world.notifications.records)
    assert world.attendance.sessions[result.session.session_id].is_overdue is False


def test_clock_in_and_out_notify_the_company_commander(world, trainee, commander):
    svc = world.container.attendance_service
    world.commanders.add(2, company=Company.B, telegram_user_id=9002)

    svc.clock_in(TRAINEE_TG, update_id=1)
    world.clock.advance(hours=8)
    svc.clock_out(TRAINEE_TG, update_id=2)

    texts = world.sender.texts_to(COMMANDER_TG)
    assert len(texts) == 2
    assert texts[0].startswith("🟢 Clock In")
    assert "Time: 09:00:00 SGT" in texts[0]
    assert texts[1].startswith("🔴 Clock Out")
    assert "Time: 17:00:00 SGT" in texts[1]
    assert world.sender.texts_to(9002) == []


def test_notification_failure_does_not_fail_clock_in(world, trainee, commander):
    world.sender.explode.add(COMMANDER_TG)

    result = world.container.attendance_service.clock_in(TRAINEE_TG, update_id=1)

    assert result.session.is_open
    assert [r.delivered for r in world.notifications.records] == [False]


def test_status_reflects_the_session_lifecycle(world, trainee):
    svc = world.container.attendance_service

    assert svc.get_status(TRAINEE_TG).status == SessionStatus.OUT
    assert svc.get_status(TRAINEE_TG).session is None

    svc.clock_in(TRAINEE_TG, update_id=1)
    view = svc.get_status(TRAINEE_TG)
    assert view.status == SessionStatus.IN
    assert view.session.update_id == 1

    world.clock.advance(hours=1)
    svc.clock_out(TRAINEE_TG, update_id=2)
    view = svc.get_status(TRAINEE_TG)
    assert view.status == SessionStatus.OUT
    assert view.session.clock_out_update_id == 2


def test_two_open_sessions_are_reported_not_guessed(world, trainee):
    for session_id, hour in ((1, 8), (2, 9)):
        world.attendance.insert_session(
            AttendanceSession(
                session_id=session_id,
                trainee_id=trainee.trainee_id,
                clock_in_time=sgt(2026, 3, 2, hour),
                clock_out_time=None,
                status=SessionStatus.IN,
                session_date=sgt(2026, 3, 2, hour).date(),
                is_overdue=False,
                update_id=100 + session_id,
            )
        )

    with pytest.raises(DataIntegrityError):
        world.container.attendance_service.clock_out(TRAINEE_TG, update_id=5)
    with pytest.raises(DataIntegrityError):
        world.container.attendance_service.get_status(TRAINEE_TG)


class RacingAttendance(InMemoryAttendance):
    """Pre-checks see a stale store; the writes still hit the unique keys."""

    def replay_token_exists(self, update_id):
        return False

    def get_open_sessions(self, trainee_id):
        return []


def test_lost_clock_in_race_maps_to_already_clocked_in(clock):
    world = build_world(clock)
    world.trainees.add(TRAINEE_TG)
    racing = RacingAttendance(world.trainees)
    racing.create_clock_in(trainee_id=1, update_id=1, clock_in_time=clock(), session_date=clock().date())

    svc = AttendanceService(racing, world.container.trainee_service, world.container.time)

    with pytest.raises(AlreadyClockedIn):
        svc.clock_in(TRAINEE_TG, update_id=2)
    with pytest.raises(DuplicateReplay):
        svc.clock_in(TRAINEE_TG, update_id=1)
    assert len(racing.sessions) == 1


class ClosedUnderneath(InMemoryAttendance):
    def close_session(self, **kwargs):
        return False


def test_lost_clock_out_race_maps_to_not_clocked_in(clock):
    world = build_world(clock)
    world.trainees.add(TRAINEE_TG)
    attendance = ClosedUnderneath(world.trainees)
    attendance.create_clock_in(trainee_id=1, update_id=1, clock_in_time=clock(), session_date=clock().date())
    clock.advance(hours=1)

    svc = AttendanceService(attendance, world.container.trainee_service, world.container.time)

    with pytest.raises(NotClockedIn):
        svc.clock_out(TRAINEE_TG, update_id=2)


def test_day_listing_flags_open_sessions_after_cutoff(world, trainee):
    other = world.trainees.add(1002, company=Company.B)
    svc = world.container.attendance_service
    svc.clock_in(TRAINEE_TG, update_id=1)
    svc.clock_in(other.telegram_user_id, update_id=2)

    rows = svc.get_day()
    assert {r["company"] for r in rows} == {"A", "B"}
    assert all(r["is_overdue"] is False for r in rows)
    assert rows[0]["clock_in_time"] == "09:00:00"

    world.clock.set(sgt(2026, 3, 2, 22, 1))
    rows = svc.get_day(company=Company.A)
    assert len(rows) == 1
    assert rows[0]["name"] == "Tan Ah Kow"
    assert rows[0]["is_overdue"] is True
