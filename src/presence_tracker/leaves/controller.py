from __future__ import annotations

from flask import Flask, g, jsonify, request

from ..common.datetime_utils import parse_hhmm, parse_iso_date
from ..common.http import auth_required, json_body, to_json_value
from ..core.enums import LeaveStatus, LeaveType, Role
from ..core.exceptions import ValidationError
from .model import LeaveRequest


def leave_to_dict(r: LeaveRequest) -> dict:
    return {
        "request_id": r.request_id,
        "employee_id": r.employee_id,
        "type": r.leave_type.value,
        "from_date": to_json_value(r.from_date),
        "to_date": to_json_value(r.to_date),
        "start_time": to_json_value(r.start_time),
        "end_time": to_json_value(r.end_time),
        "reason": r.reason,
        "status": r.status.value,
        "admin_remarks": r.admin_remarks,
        "decided_by": r.decided_by,
        "decided_at": to_json_value(r.decided_at),
        "created_at": to_json_value(r.created_at),
    }


def _enum(cls, raw, field_name: str):
    try:
        return cls(raw)
    except ValueError:
        allowed = ", ".join(m.value for m in cls)
        raise ValidationError(f"{field_name} must be one of: {allowed}")


def register(app: Flask, container) -> None:
    @app.route("/api/leaves", methods=["POST"], endpoint="submit_leave")
    @auth_required(container)
    def submit_leave():
        data = json_body()
        from_date = parse_iso_date(data.get("from_date") or data.get("date") or "")
        to_raw = data.get("to_date")
        req = container.leave_workflow.submit(
            employee_id=g.identity.employee_id,
            leave_type=_enum(LeaveType, data.get("type", LeaveType.FULL.value), "type"),
            from_date=from_date,
            to_date=parse_iso_date(to_raw) if to_raw else from_date,
            reason=data.get("reason", ""),
            start_time=parse_hhmm(data.get("start_time")),
            end_time=parse_hhmm(data.get("end_time")),
        )
        return jsonify(leave_to_dict(req)), 201

    @app.route("/api/leaves", methods=["GET"], endpoint="list_leaves")
    @auth_required(container)
    def list_leaves():
        raw_status = request.args.get("status")
        status = None if raw_status in (None, "", "all") else _enum(LeaveStatus, raw_status, "status")

        # Employees only ever see their own requests.
        employee_id = request.args.get("employee_id") if g.identity.is_admin else g.identity.employee_id
        rows = container.leave_workflow.list_leaves(status=status, employee_id=employee_id or None)
        return jsonify([leave_to_dict(r) for r in rows])

    @app.route("/api/leaves/<int:request_id>/decision", methods=["POST"], endpoint="decide_leave")
    @auth_required(container, Role.ADMIN)
    def decide_leave(request_id: int):
        data = json_body()
        req = container.leave_workflow.decide(
            request_id=request_id,
            actor=g.identity,
            outcome=_enum(LeaveStatus, data.get("outcome"), "outcome"),
            remarks=data.get("remarks"),
        )
        return jsonify(leave_to_dict(req))
