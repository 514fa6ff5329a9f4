from __future__ import annotations

import logging
import uuid
from datetime import date
from typing import Optional, Sequence

from ..auth.gate import AuthorizationGate
from ..auth.identity import Identity, RoleRepository
from ..common.datetime_utils import Clock, SystemClock
from ..common.validators import optional_text, require_non_empty
from ..core.enums import Role
from ..core.exceptions import NotFoundError, ValidationError
from .model import Employee
from .repository import EmployeeRepository

logger = logging.getLogger(__name__)


class EmployeeService:
    """Use case: manage employee records (admin only for writes)."""

    def __init__(
        self,
        employees: EmployeeRepository,
        roles: RoleRepository,
        gate: AuthorizationGate,
        *,
        clock: Optional[Clock] = None,
    ):
        self._employees = employees
        self._roles = roles
        self._gate = gate
        self._clock = clock or SystemClock()

    def _check_code_free(self, employee_code: Optional[str], *, employee_id: Optional[str] = None) -> None:
        if not employee_code:
            return
        holder = self._employees.get_by_code(employee_code)
        if holder and holder.employee_id != employee_id:
            raise ValidationError(f"Employee code {employee_code} is already in use")

    def create_employee(
        self,
        *,
        actor: Identity,
        first_name: str,
        last_name: str,
        department: Optional[str] = None,
        designation: Optional[str] = None,
        employee_code: Optional[str] = None,
        joining_date: Optional[date] = None,
        role: Role = Role.EMPLOYEE,
        employee_id: Optional[str] = None,
    ) -> Employee:
        self._gate.ensure_role(actor, Role.ADMIN)

        first_name = require_non_empty(first_name, "First name")
        last_name = require_non_empty(last_name, "Last name")
        employee_code = optional_text(employee_code, "Employee code")
        self._check_code_free(employee_code)

        new_id = employee_id or str(uuid.uuid4())
        self._employees.create(
            employee_id=new_id,
            first_name=first_name,
            last_name=last_name,
            department=optional_text(department, "Department"),
            designation=optional_text(designation, "Designation"),
            employee_code=employee_code,
            joining_date=joining_date or self._clock.now().date(),
            role=role,
        )
        logger.info("Employee %s created by %s (role=%s)", new_id, actor.employee_id, role.value)

        created = self._employees.get_by_id(new_id)
        if not created:
            raise NotFoundError(f"Employee {new_id} not found after create")
        return created

    def update_employee(
        self,
        *,
        actor: Identity,
        employee_id: str,
        first_name: str,
        last_name: str,
        department: Optional[str] = None,
        designation: Optional[str] = None,
        employee_code: Optional[str] = None,
        role: Optional[Role] = None,
    ) -> Employee:
        self._gate.ensure_role(actor, Role.ADMIN)

        if not self._employees.get_by_id(employee_id):
            raise NotFoundError(f"Employee {employee_id} not found")

        employee_code = optional_text(employee_code, "Employee code")
        self._check_code_free(employee_code, employee_id=employee_id)
        self._employees.update(
            employee_id=employee_id,
            first_name=require_non_empty(first_name, "First name"),
            last_name=require_non_empty(last_name, "Last name"),
            department=optional_text(department, "Department"),
            designation=optional_text(designation, "Designation"),
            employee_code=employee_code,
        )
        if role is not None:
            self._roles.set_role(employee_id, role)
        logger.info("Employee %s updated by %s", employee_id, actor.employee_id)

        return self._employees.get_by_id(employee_id)

    def list_employees(self, *, search: Optional[str] = None) -> Sequence[Employee]:
        return self._employees.list_all(search=optional_text(search, "Search"))
