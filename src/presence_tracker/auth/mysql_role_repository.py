from __future__ import annotations

from typing import Optional

import mysql.connector

from ..core.enums import Role
from ..core.exceptions import NotFoundError, StoreError
from ..database.connection import DatabaseConnection
from ..database.mysql_base import db_cursor, fetchone, is_missing_reference
from .identity import RoleRepository


class MySQLRoleRepository(RoleRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def get_role(self, employee_id: str) -> Optional[Role]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute("SELECT role FROM user_roles WHERE employee_id=%s", (employee_id,))
            r = fetchone(cur)
            if not r:
                return None
            try:
                return Role(r["role"])
            except ValueError:
                return None

    def set_role(self, employee_id: str, role: Role) -> None:
        try:
            with db_cursor(self._conn_factory) as (_, cur):
                cur.execute(
                    """
                    INSERT INTO user_roles(employee_id, role) VALUES(%s,%s)
                    ON DUPLICATE KEY UPDATE role=VALUES(role)
                    """,
                    (employee_id, role.value),
                )
        except mysql.connector.IntegrityError as exc:
            if is_missing_reference(exc):
                raise NotFoundError(f"Employee {employee_id} not found") from exc
            raise StoreError(f"Role update rejected: {exc}") from exc
