from __future__ import annotations

from flask import Flask, g, jsonify, request

from ..common.datetime_utils import parse_iso_date
from ..common.http import auth_required, json_body, to_json_value
from ..core.enums import Role
from ..core.exceptions import ValidationError
from .model import Employee


def employee_to_dict(e: Employee) -> dict:
    return {
        "employee_id": e.employee_id,
        "first_name": e.first_name,
        "last_name": e.last_name,
        "name": e.display_name,
        "department": e.department,
        "designation": e.designation,
        "employee_code": e.employee_code,
        "joining_date": to_json_value(e.joining_date),
        "role": e.role.value,
    }


def _role(raw, default=None):
    if raw in (None, ""):
        return default
    try:
        return Role(raw)
    except ValueError:
        raise ValidationError("role must be 'admin' or 'employee'")


def register(app: Flask, container) -> None:
    @app.route("/api/employees", methods=["GET"], endpoint="list_employees")
    @auth_required(container, Role.ADMIN)
    def list_employees():
        rows = container.employee_service.list_employees(search=request.args.get("search"))
        return jsonify([employee_to_dict(e) for e in rows])

    @app.route("/api/employees", methods=["POST"], endpoint="create_employee")
    @auth_required(container, Role.ADMIN)
    def create_employee():
        data = json_body()
        joining = data.get("joining_date")
        employee = container.employee_service.create_employee(
            actor=g.identity,
            first_name=data.get("first_name", ""),
            last_name=data.get("last_name", ""),
            department=data.get("department"),
            designation=data.get("designation"),
            employee_code=data.get("employee_code"),
            joining_date=parse_iso_date(joining) if joining else None,
            role=_role(data.get("role"), Role.EMPLOYEE),
        )
        return jsonify(employee_to_dict(employee)), 201

    @app.route("/api/employees/<employee_id>", methods=["PUT"], endpoint="update_employee")
    @auth_required(container, Role.ADMIN)
    def update_employee(employee_id: str):
        data = json_body()
        employee = container.employee_service.update_employee(
            actor=g.identity,
            employee_id=employee_id,
            first_name=data.get("first_name", ""),
            last_name=data.get("last_name", ""),
            department=data.get("department"),
            designation=data.get("designation"),
            employee_code=data.get("employee_code"),
            role=_role(data.get("role")),
        )
        return jsonify(employee_to_dict(employee))
