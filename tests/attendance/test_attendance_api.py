from __future__ import annotations

from src.srtrack.srtrack.core.enums import Company
from tests.fakes import sgt

TG = 1001


def clock_in(client, update_id, tg=TG):
    return client.post("/api/attendance/clock-in", json={"telegram_user_id": tg, "update_id": update_id})


def clock_out(client, update_id, tg=TG):
    return client.post("/api/attendance/clock-out", json={"telegram_user_id": tg, "update_id": update_id})


def test_clock_in_then_out(world, client):
    world.trainees.add(TG, company=Company.C)

    res = clock_in(client, 10)
    assert res.status_code == 201
    body = res.get_json()
    assert body["ok"] is True
    assert body["duplicate"] is False
    assert body["session"]["status"] == "IN"
    assert body["session"]["clock_in_local"] == "09:00:00"

    world.clock.advance(hours=2, minutes=30)
    res = clock_out(client, 11)
    assert res.status_code == 200
    session = res.get_json()["session"]
    assert session["status"] == "OUT"
    assert session["duration_minutes"] == 150


def test_replayed_request_reports_duplicate_success(world, client):
    world.trainees.add(TG)
    clock_in(client, 10)

    res = clock_in(client, 10)

    assert res.status_code == 200
    assert res.get_json()["duplicate"] is True
    assert len(world.attendance.sessions) == 1


def test_business_rule_rejections_are_conflicts(world, client):
    world.trainees.add(TG)
    clock_in(client, 10)

    res = clock_in(client, 11)
    assert res.status_code == 409
    assert res.get_json()["error"] == "You are already clocked in"

    world.trainees.add(1002)
    world.clock.set(sgt(2026, 3, 2, 22, 30))
    res = clock_in(client, 12, tg=1002)
    assert res.status_code == 409
    assert res.get_json()["error"] == "Cannot clock in after 22:00"


def test_unregistered_user_is_not_found(client):
    res = clock_in(client, 10, tg=4242)

    assert res.status_code == 404
    assert "/register" in res.get_json()["error"]


def test_missing_update_id_is_rejected(world, client):
    world.trainees.add(TG)

    res = client.post("/api/attendance/clock-in", json={"telegram_user_id": TG})

    assert res.status_code == 400
    assert res.get_json()["error"] == "update_id is required"
    assert world.attendance.sessions == {}


def test_store_outage_is_retryable(world, client, monkeypatch):
    from src.srtrack.srtrack.core.exceptions import StoreUnavailable

    world.trainees.add(TG)

    def down(update_id):
        raise StoreUnavailable("connection refused")

    monkeypatch.setattr(world.attendance, "replay_token_exists", down)
    res = clock_in(client, 10)

    assert res.status_code == 503
    assert res.get_json()["retryable"] is True
    assert "refused" not in res.get_json()["error"]


def test_status_endpoint(world, client):
    world.trainees.add(TG)

    assert client.get(f"/api/attendance/status/{TG}").get_json() == {"status": "OUT", "session": None}

    clock_in(client, 10)
    body = client.get(f"/api/attendance/status/{TG}").get_json()
    assert body["status"] == "IN"
    assert body["session"]["is_overdue"] is False


def test_day_listing_filters(world, client):
    world.trainees.add(TG, company=Company.A)
    world.trainees.add(1002, company=Company.B)
    clock_in(client, 10)
    clock_in(client, 11, tg=1002)

    body = client.get("/api/attendance?date=2026-03-02&company=B").get_json()
    assert body["total"] == 1
    assert body["data"][0]["company"] == "B"

    assert client.get("/api/attendance?date=2026-03-01").get_json()["total"] == 0
    assert client.get("/api/attendance?date=02-03-2026").status_code == 400
    assert client.get("/api/attendance?company=Z").status_code == 400


def test_history_is_newest_first(world, client):
    world.trainees.add(TG)
    clock_in(client, 10)
    world.clock.advance(hours=1)
    clock_out(client, 11)
    world.clock.set(sgt(2026, 3, 3, 8, 0))
    clock_in(client, 12)

    body = client.get(f"/api/attendance/history/{TG}?limit=5").get_json()

    assert body["total"] == 2
    assert [s["date"] for s in body["data"]] == ["2026-03-03", "2026-03-02"]
    assert body["data"][1]["duration_minutes"] == 60
    assert client.get("/api/attendance/history/4242").status_code == 404


def test_history_limit_is_clamped(world, client):
    world.trainees.add(TG)
    clock_in(client, 10)
    world.clock.advance(hours=1)
    clock_out(client, 11)
    world.clock.set(sgt(2026, 3, 3, 8, 0))
    clock_in(client, 12)

    res = client.get(f"/api/attendance/history/{TG}?limit=-5")

    assert res.status_code == 200
    assert [s["date"] for s in res.get_json()["data"]] == ["2026-03-03"]
    assert client.get(f"/api/attendance/history/{TG}?limit=500").get_json()["total"] == 2


def test_deactivated_user_is_forbidden(world, client):
    world.trainees.add(TG, is_active=False)

    res = clock_in(client, 10)

    assert res.status_code == 403
    assert "deactivated" in res.get_json()["error"]


def test_notification_ledger_listing(world, client):
    trainee = world.trainees.add(TG, company=Company.A)
    world.commanders.add(1, company=Company.A, telegram_user_id=9001)
    world.commanders.add(2, company=Company.A)
    clock_in(client, 10)

    body = client.get(f"/api/notifications?trainee_id={trainee.trainee_id}").get_json()

    assert body["total"] == 2
    assert [(n["commander_id"], n["kind"], n["delivered"]) for n in body["data"]] == [
        (1, "clock_in", True),
        (2, "clock_in", False),
    ]
    assert client.get(f"/api/notifications?trainee_id={trainee.trainee_id}&date=2026-03-01").get_json()["total"] == 0
    assert client.get("/api/notifications").status_code == 400
