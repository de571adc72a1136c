from __future__ import annotations

from flask import Flask, jsonify, request

from ..common.datetime_utils import parse_iso_date
from ..common.responses import error_response
from ..container import Container
from ..core.exceptions import BadRequest


def register(app: Flask, container: Container) -> None:
    @app.route("/api/notifications", methods=["GET"], endpoint="api_notifications")
    def api_notifications():
        try:
            try:
                trainee_id = int(request.args.get("trainee_id", ""))
            except ValueError:
                raise BadRequest("trainee_id is required")
            raw_date = request.args.get("date")
            try:
                day = parse_iso_date(raw_date) if raw_date else None
            except ValueError:
                raise BadRequest("date must be YYYY-MM-DD")

            records = container.dispatcher.list_sent(trainee_id, day)
            data = [
                {
                    "notification_id": r.notification_id,
                    "commander_id": r.commander_id,
                    "kind": r.kind.value,
                    "date": r.notification_date.isoformat(),
                    "delivered": r.delivered,
                    "message": r.message_text,
                }
                for r in records
            ]
            return jsonify({"data": data, "total": len(data)})
        except Exception as e:
            return error_response(e)
