from __future__ import annotations

from dataclasses import dataclass
from datetime import date
from typing import Optional

from ..core.enums import Role


@dataclass(frozen=True)
class Employee:
    """Domain entity: Employee.

    Attendance and leave records refer to an employee by ``employee_id`` only.
    """

    employee_id: str
    first_name: str
    last_name: str
    department: Optional[str]
    designation: Optional[str]
    employee_code: Optional[str]
    joining_date: date
    role: Role = Role.EMPLOYEE

    @property
    def display_name(self) -> str:
        return f"{self.first_name} {self.last_name}".strip()
