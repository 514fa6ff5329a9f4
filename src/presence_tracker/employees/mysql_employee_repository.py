from __future__ import annotations

from datetime import date
from typing import Dict, Optional, Sequence

import mysql.connector

from ..core.enums import Role
from ..core.exceptions import StoreError, ValidationError
from ..database.connection import DatabaseConnection
from ..database.mysql_base import db_cursor, fetchall, fetchone, is_duplicate_key
from .model import Employee
from .repository import EmployeeRepository

_SELECT = """
    SELECT e.employee_id, e.first_name, e.last_name, e.department, e.designation,
           e.employee_code, e.joining_date, r.role
    FROM employees e
    LEFT JOIN user_roles r ON r.employee_id = e.employee_id
"""


def _to_employee(r: dict) -> Employee:
    return Employee(
        employee_id=str(r["employee_id"]),
        first_name=r["first_name"],
        last_name=r["last_name"],
        department=r.get("department"),
        designation=r.get("designation"),
        employee_code=r.get("employee_code"),
        joining_date=r["joining_date"],
        role=Role(r["role"]) if r.get("role") else Role.EMPLOYEE,
    )


class MySQLEmployeeRepository(EmployeeRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def get_by_id(self, employee_id: str) -> Optional[Employee]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(_SELECT + " WHERE e.employee_id=%s", (employee_id,))
            r = fetchone(cur)
            return _to_employee(r) if r else None

    def get_by_code(self, employee_code: str) -> Optional[Employee]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(_SELECT + " WHERE e.employee_code=%s", (employee_code,))
            r = fetchone(cur)
            return _to_employee(r) if r else None

    def create(
        self,
        *,
        employee_id: str,
        first_name: str,
        last_name: str,
        department: Optional[str],
        designation: Optional[str],
        employee_code: Optional[str],
        joining_date: date,
        role: Role = Role.EMPLOYEE,
    ) -> str:
        """Insert the employee and its role mapping in one transaction."""

        try:
            with db_cursor(self._conn_factory) as (_, cur):
                cur.execute(
                    """
                    INSERT INTO employees(employee_id, first_name, last_name, department,
                                          designation, employee_code, joining_date)
                    VALUES(%s,%s,%s,%s,%s,%s,%s)
                    """,
                    (employee_id, first_name, last_name, department, designation, employee_code, joining_date),
                )
                cur.execute(
                    "INSERT INTO user_roles(employee_id, role) VALUES(%s,%s)",
                    (employee_id, role.value),
                )
                return employee_id
        except mysql.connector.IntegrityError as exc:
            if is_duplicate_key(exc):
                if employee_code:
                    raise ValidationError(f"Employee code {employee_code} is already in use") from exc
                raise ValidationError(f"Employee {employee_id} already exists") from exc
            raise StoreError(f"Employee insert rejected: {exc}") from exc

    def update(
        self,
        *,
        employee_id: str,
        first_name: str,
        last_name: str,
        department: Optional[str],
        designation: Optional[str],
        employee_code: Optional[str],
    ) -> bool:
        try:
            with db_cursor(self._conn_factory) as (_, cur):
                cur.execute(
                    """
                    UPDATE employees
                    SET first_name=%s, last_name=%s, department=%s, designation=%s, employee_code=%s
                    WHERE employee_id=%s
                    """,
                    (first_name, last_name, department, designation, employee_code, employee_id),
                )
                return cur.rowcount > 0
        except mysql.connector.IntegrityError as exc:
            if is_duplicate_key(exc):
                raise ValidationError(f"Employee code {employee_code} is already in use") from exc
            raise StoreError(f"Employee update rejected: {exc}") from exc

    def list_all(self, *, search: Optional[str] = None) -> Sequence[Employee]:
        clauses = ["1=1"]
        params: list[object] = []
        if search:
            like = f"%{search}%"
            clauses.append("(e.first_name LIKE %s OR e.last_name LIKE %s OR e.employee_code LIKE %s)")
            params.extend([like, like, like])

        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                _SELECT + f" WHERE {' AND '.join(clauses)} ORDER BY e.created_at DESC",
                tuple(params),
            )
            return [_to_employee(r) for r in fetchall(cur)]

    def count(self) -> int:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute("SELECT COUNT(*) AS n FROM employees")
            r = fetchone(cur)
            return int(r["n"]) if r else 0

    def department_counts(self) -> Dict[Optional[str], int]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute("SELECT department, COUNT(*) AS n FROM employees GROUP BY department")
            return {r.get("department"): int(r["n"]) for r in fetchall(cur)}
