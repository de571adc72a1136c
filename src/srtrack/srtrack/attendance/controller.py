from __future__ import annotations

from flask import Flask, jsonify, request

from ..common.datetime_utils import parse_iso_date
from ..common.responses import error_response
from ..common.validators import parse_company
from ..container import Container
from ..core.constants import DEFAULT_HISTORY_LIMIT
from ..core.exceptions import BadRequest, ValidationError
from .model import AttendanceSession, ClockResult, SessionStatusView


def _session_to_dict(container: Container, s: AttendanceSession | None) -> dict | None:
    if s is None:
        return None
    duration = s.duration
    return {
        "session_id": s.session_id,
        "date": s.session_date.isoformat(),
        "status": s.status.value,
        "clock_in_time": s.clock_in_time.isoformat(),
        "clock_out_time": s.clock_out_time.isoformat() if s.clock_out_time else None,
        "clock_in_local": container.time.format_time(s.clock_in_time),
        "clock_out_local": container.time.format_time(s.clock_out_time) if s.clock_out_time else None,
        "duration_minutes": int(duration.total_seconds() // 60) if duration is not None else None,
        "is_overdue": s.is_overdue,
    }


def _require_int(payload: dict, key: str) -> int:
    try:
        value = int(payload.get(key))
    except (TypeError, ValueError):
        raise BadRequest(f"{key} is required")
    if value <= 0:
        raise BadRequest(f"{key} must be positive")
    return value


def register(app: Flask, container: Container) -> None:
    svc = container.attendance_service

    def _clock_result(result: ClockResult):
        return jsonify({"ok": True, "duplicate": False, "session": _session_to_dict(container, result.session)})

    @app.route("/api/attendance/clock-in", methods=["POST"], endpoint="api_clock_in")
    def api_clock_in():
        try:
            payload = request.get_json(silent=True) or {}
            result = svc.clock_in(_require_int(payload, "telegram_user_id"), update_id=_require_int(payload, "update_id"))
            return _clock_result(result), 201
        except Exception as e:
            return error_response(e)

    @app.route("/api/attendance/clock-out", methods=["POST"], endpoint="api_clock_out")
    def api_clock_out():
        try:
            payload = request.get_json(silent=True) or {}
            result = svc.clock_out(_require_int(payload, "telegram_user_id"), update_id=_require_int(payload, "update_id"))
            return _clock_result(result), 200
        except Exception as e:
            return error_response(e)

    @app.route("/api/attendance/status/<int:telegram_user_id>", methods=["GET"], endpoint="api_status")
    def api_status(telegram_user_id: int):
        try:
            view: SessionStatusView = svc.get_status(telegram_user_id)
            return jsonify({"status": view.status.value, "session": _session_to_dict(container, view.session)})
        except Exception as e:
            return error_response(e)

    @app.route("/api/attendance", methods=["GET"], endpoint="api_attendance_day")
    def api_attendance_day():
        try:
            raw_date = request.args.get("date")
            raw_company = request.args.get("company")
            try:
                day = parse_iso_date(raw_date) if raw_date else None
            except ValueError:
                raise BadRequest("date must be YYYY-MM-DD")
            try:
                company = parse_company(raw_company) if raw_company else None
            except ValidationError as e:
                raise BadRequest(str(e)) from e

            rows = svc.get_day(day, company=company)
            return jsonify({"data": rows, "total": len(rows)})
        except Exception as e:
            return error_response(e)

    @app.route("/api/attendance/history/<int:telegram_user_id>", methods=["GET"], endpoint="api_history")
    def api_history(telegram_user_id: int):
        try:
            limit = request.args.get("limit", type=int) or DEFAULT_HISTORY_LIMIT
            trainee = container.trainee_service.get_active(telegram_user_id)
            sessions = svc.get_history(trainee.trainee_id, limit=max(1, min(limit, DEFAULT_HISTORY_LIMIT)))
            return jsonify({"data": [_session_to_dict(container, s) for s in sessions], "total": len(sessions)})
        except Exception as e:
            return error_response(e)
