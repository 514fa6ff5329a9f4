from __future__ import annotations

from datetime import date

import pytest

from presence_tracker.auth.gate import AuthorizationGate
from presence_tracker.core.enums import Role
from presence_tracker.core.exceptions import ForbiddenError, NotFoundError, ValidationError
from presence_tracker.employees.service import EmployeeService


@pytest.fixture
def svc(employees_repo, roles_repo, identity, clock):
    return EmployeeService(employees_repo, roles_repo, AuthorizationGate(identity), clock=clock)


def test_admin_creates_employee_with_role(svc, admin, roles_repo):
    emp = svc.create_employee(
        actor=admin,
        first_name=" Carol ",
        last_name="Smith",
        department="Sales",
        employee_code="E-100",
        joining_date=date(2024, 1, 2),
    )

    assert emp.display_name == "Carol Smith"
    assert emp.department == "Sales"
    assert emp.role == Role.EMPLOYEE
    assert roles_repo.get_role(emp.employee_id) == Role.EMPLOYEE


def test_employee_cannot_create(svc, alice):
    with pytest.raises(ForbiddenError):
        svc.create_employee(actor=alice, first_name="X", last_name="Y")


def test_employee_code_must_be_unique(svc, admin, employees_repo):
    employees_repo.add("carol", code="E-1")
    with pytest.raises(ValidationError):
        svc.create_employee(actor=admin, first_name="Dan", last_name="Lee", employee_code="E-1")


def test_blank_code_is_stored_as_none(svc, admin):
    emp = svc.create_employee(actor=admin, first_name="Dan", last_name="Lee", employee_code="  ")
    assert emp.employee_code is None


def test_name_required(svc, admin):
    with pytest.raises(ValidationError):
        svc.create_employee(actor=admin, first_name="", last_name="Lee")


def test_update_unknown_employee(svc, admin):
    with pytest.raises(NotFoundError):
        svc.update_employee(actor=admin, employee_id="ghost", first_name="A", last_name="B")


def test_update_keeps_own_code_and_promotes(svc, admin, employees_repo):
    employees_repo.add("carol", code="E-7")
    emp = svc.update_employee(
        actor=admin, employee_id="carol", first_name="Carol", last_name="Jones", employee_code="E-7", role=Role.ADMIN
    )
    assert emp.last_name == "Jones"
    assert emp.role == Role.ADMIN


def test_list_search(svc):
    assert [e.employee_id for e in svc.list_employees(search="ali")] == ["alice"]
    assert len(svc.list_employees()) == 3


def test_joining_date_defaults_to_clock_date(svc, admin, fixed_now):
    emp = svc.create_employee(actor=admin, first_name="Dan", last_name="Lee")
    assert emp.joining_date == fixed_now.date()


def test_admin_role_is_written_with_the_employee(employees_repo, roles_repo, identity, admin):
    calls = []

    class RecordingEmployees(type(employees_repo)):
        def create(self, **kwargs):
            calls.append(kwargs["role"])
            return super().create(**kwargs)

    class NoSeparateRoleWrites(type(roles_repo)):
        def set_role(self, employee_id, role):
            raise AssertionError("role must be stored by the employee insert")

    svc = EmployeeService(
        RecordingEmployees(roles_repo), NoSeparateRoleWrites(), AuthorizationGate(identity)
    )
    emp = svc.create_employee(actor=admin, first_name="Eve", last_name="Ng", role=Role.ADMIN)

    assert calls == [Role.ADMIN]
    assert emp.role == Role.ADMIN


@pytest.mark.parametrize("field", ["first_name", "department", "employee_code"])
def test_non_text_fields_are_rejected(svc, admin, field):
    kwargs = {"first_name": "Dan", "last_name": "Lee", field: 7}
    with pytest.raises(ValidationError):
        svc.create_employee(actor=admin, **kwargs)
