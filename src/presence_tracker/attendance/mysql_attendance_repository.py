from __future__ import annotations

from datetime import date, datetime
from decimal import Decimal
from typing import Optional, Sequence

import mysql.connector

from ..core.enums import AttendanceStatus
from ..core.exceptions import DuplicatePunchError, NotFoundError, StoreError
from ..database.connection import DatabaseConnection
from ..database.mysql_base import db_cursor, fetchall, fetchone, is_duplicate_key, is_missing_reference
from .model import AttendanceRecord
from .repository import AttendanceRepository

_COLUMNS = "record_id, employee_id, work_date, punch_in, punch_out, status, total_hours"


def _to_record(r: dict) -> AttendanceRecord:
    total = r.get("total_hours")
    return AttendanceRecord(
        record_id=int(r["record_id"]),
        employee_id=str(r["employee_id"]),
        work_date=r["work_date"],
        punch_in=r.get("punch_in"),
        punch_out=r.get("punch_out"),
        status=AttendanceStatus(r["status"]),
        total_hours=Decimal(str(total)) if total is not None else None,
    )


class MySQLAttendanceRepository(AttendanceRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def get_for_employee_and_date(self, employee_id: str, work_date: date) -> Optional[AttendanceRecord]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"SELECT {_COLUMNS} FROM attendance WHERE employee_id=%s AND work_date=%s",
                (employee_id, work_date),
            )
            r = fetchone(cur)
            return _to_record(r) if r else None

    def create_punch_in(
        self,
        *,
        employee_id: str,
        work_date: date,
        punch_in: datetime,
        status: AttendanceStatus,
    ) -> int:
        try:
            with db_cursor(self._conn_factory) as (_, cur):
                cur.execute(
                    """
                    INSERT INTO attendance(employee_id, work_date, punch_in, status)
                    VALUES(%s,%s,%s,%s)
                    """,
                    (employee_id, work_date, punch_in, status.value),
                )
                return int(cur.lastrowid)
        except mysql.connector.IntegrityError as exc:
            if is_duplicate_key(exc):
                # uq_attendance_employee_date: a concurrent punch-in won the race.
                raise DuplicatePunchError(f"Already punched in on {work_date.isoformat()}") from exc
            if is_missing_reference(exc):
                raise NotFoundError(f"Employee {employee_id} not found") from exc
            raise StoreError(f"Attendance insert rejected: {exc}") from exc

    def update_punch_out(
        self,
        *,
        record_id: int,
        punch_out: datetime,
        status: AttendanceStatus,
        total_hours: Decimal,
    ) -> bool:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                UPDATE attendance
                SET punch_out=%s, status=%s, total_hours=%s
                WHERE record_id=%s AND punch_out IS NULL
                """,
                (punch_out, status.value, total_hours, int(record_id)),
            )
            return cur.rowcount > 0

    def list_for_range(
        self,
        *,
        start_date: date,
        end_date: date,
        employee_id: Optional[str] = None,
    ) -> Sequence[AttendanceRecord]:
        clauses = ["work_date BETWEEN %s AND %s"]
        params: list[object] = [start_date, end_date]
        if employee_id is not None:
            clauses.append("employee_id=%s")
            params.append(employee_id)

        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"""
                SELECT {_COLUMNS}
                FROM attendance
                WHERE {' AND '.join(clauses)}
                ORDER BY work_date DESC, punch_in ASC
                """,
                tuple(params),
            )
            return [_to_record(r) for r in fetchall(cur)]

    def count_for_date(self, work_date: date, *, statuses: Sequence[AttendanceStatus]) -> int:
        if not statuses:
            return 0
        placeholders = ",".join(["%s"] * len(statuses))
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"SELECT COUNT(*) AS n FROM attendance WHERE work_date=%s AND status IN ({placeholders})",
                (work_date, *[s.value for s in statuses]),
            )
            r = fetchone(cur)
            return int(r["n"]) if r else 0
