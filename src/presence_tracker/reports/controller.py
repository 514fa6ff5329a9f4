from __future__ import annotations

from datetime import timedelta

from flask import Flask, g, jsonify, request

from ..common.http import auth_required, query_date
from ..core.constants import DEFAULT_HISTORY_DAYS
from ..core.enums import Role


def register(app: Flask, container) -> None:
    def _range():
        end = query_date("to", container.clock.now().date())
        start = query_date("from", end - timedelta(days=DEFAULT_HISTORY_DAYS - 1))
        return start, end

    def _scope():
        if g.identity.is_admin:
            return request.args.get("employee_id") or None
        return g.identity.employee_id

    @app.route("/api/reports/summary", methods=["GET"], endpoint="report_summary")
    @auth_required(container)
    def report_summary():
        start, end = _range()
        summary = container.aggregation.aggregate(start, end, employee_id=_scope())
        return jsonify(summary.as_dict())

    @app.route("/api/reports/daily", methods=["GET"], endpoint="report_daily")
    @auth_required(container)
    def report_daily():
        start, end = _range()
        rows = container.aggregation.daily_breakdown(start, end, employee_id=_scope())
        return jsonify([r.as_dict() for r in rows])

    @app.route("/api/reports/dashboard", methods=["GET"], endpoint="report_dashboard")
    @auth_required(container, Role.ADMIN)
    def report_dashboard():
        today = query_date("date", container.clock.now().date())
        snapshot = container.aggregation.dashboard_snapshot(today)
        weekly = container.aggregation.weekly_presence(today)
        return jsonify({**snapshot.as_dict(), "weekly": [r.as_dict() for r in weekly]})

    @app.route("/api/reports/departments", methods=["GET"], endpoint="report_departments")
    @auth_required(container, Role.ADMIN)
    def report_departments():
        return jsonify(container.aggregation.department_headcount())
