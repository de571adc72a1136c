from __future__ import annotations

import hmac

from flask import Flask, jsonify, request

from ..common.responses import error_response
from ..container import Container


def register(app: Flask, container: Container) -> None:
    @app.route("/api/cron/compliance-check", methods=["GET", "POST"], endpoint="cron_compliance_check")
    def cron_compliance_check():
        if container.cron_secret:
            expected = f"Bearer {container.cron_secret}"
            if not hmac.compare_digest(request.headers.get("Authorization", ""), expected):
                return jsonify({"error": "Unauthorized"}), 401

        try:
            report = container.overdue_sweep.check_and_mark_overdue()
        except Exception as e:
            return error_response(e)

        return jsonify(report.to_dict())
