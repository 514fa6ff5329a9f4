from __future__ import annotations

from datetime import date
from typing import Dict, Optional, Protocol, Sequence

from ..core.enums import Role
from .model import Employee


class EmployeeRepository(Protocol):
    def get_by_id(self, employee_id: str) -> Optional[Employee]:
        raise NotImplementedError

    def get_by_code(self, employee_code: str) -> Optional[Employee]:
        raise NotImplementedError

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
        """Create the employee together with its role mapping, atomically."""

        raise NotImplementedError

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
        raise NotImplementedError

    def list_all(self, *, search: Optional[str] = None) -> Sequence[Employee]:
        raise NotImplementedError

    def count(self) -> int:
        raise NotImplementedError

    def department_counts(self) -> Dict[Optional[str], int]:
        """Headcount keyed by raw department value (None/'' for unassigned)."""

        raise NotImplementedError
