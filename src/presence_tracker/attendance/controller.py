from __future__ import annotations

from datetime import timedelta

from flask import Flask, g, jsonify

from ..common.http import auth_required, query_date, to_json_value
from ..core.constants import DEFAULT_HISTORY_DAYS
from ..core.enums import Role
from .model import AttendanceRecord


def record_to_dict(r: AttendanceRecord) -> dict:
    return {
        "record_id": r.record_id,
        "employee_id": r.employee_id,
        "date": to_json_value(r.work_date),
        "punch_in": to_json_value(r.punch_in),
        "punch_out": to_json_value(r.punch_out),
        "status": r.status.value,
        "total_hours": to_json_value(r.total_hours),
    }


def register(app: Flask, container) -> None:
    @app.route("/api/attendance/punch-in", methods=["POST"], endpoint="punch_in")
    @auth_required(container)
    def punch_in():
        record = container.attendance_service.punch_in(g.identity.employee_id)
        return jsonify(record_to_dict(record)), 201

    @app.route("/api/attendance/punch-out", methods=["POST"], endpoint="punch_out")
    @auth_required(container)
    def punch_out():
        record = container.attendance_service.punch_out(g.identity.employee_id)
        return jsonify(record_to_dict(record))

    @app.route("/api/attendance/me", methods=["GET"], endpoint="my_attendance")
    @auth_required(container)
    def my_attendance():
        today = container.clock.now().date()
        end = query_date("to", today)
        start = query_date("from", end - timedelta(days=DEFAULT_HISTORY_DAYS - 1))
        rows = container.attendance_service.history(g.identity.employee_id, start=start, end=end)
        return jsonify(
            {
                "state": container.attendance_service.state_of(g.identity.employee_id, today).value,
                "records": [record_to_dict(r) for r in rows],
            }
        )

    @app.route("/api/attendance", methods=["GET"], endpoint="attendance_for_date")
    @auth_required(container, Role.ADMIN)
    def attendance_for_date():
        day = query_date("date", container.clock.now().date())
        rows = container.attendance_service.records_for_date(day)
        return jsonify([record_to_dict(r) for r in rows])
