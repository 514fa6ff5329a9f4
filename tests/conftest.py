from __future__ import annotations

from dataclasses import replace
from datetime import date, datetime, time, timedelta
from decimal import Decimal
from typing import Dict, Optional, Tuple

import pytest

from presence_tracker.attendance.model import AttendanceRecord
from presence_tracker.auth.identity import Identity
from presence_tracker.container import wire
from presence_tracker.core.enums import AttendanceStatus, LeaveStatus, LeaveType, Role
from presence_tracker.core.exceptions import DuplicatePunchError, InvalidTokenError
from presence_tracker.employees.model import Employee
from presence_tracker.leaves.model import LeaveRequest


class FixedClock:
    def __init__(self, current: datetime):
        self.current = current

    def now(self) -> datetime:
        return self.current


class InMemoryRoles:
    def __init__(self):
        self.roles: Dict[str, Role] = {}

    def get_role(self, employee_id: str) -> Optional[Role]:
        return self.roles.get(employee_id)

    def set_role(self, employee_id: str, role: Role) -> None:
        self.roles[employee_id] = role


class InMemoryEmployees:
    def __init__(self, roles: InMemoryRoles):
        self._roles = roles
        self._rows: Dict[str, Employee] = {}

    def _with_role(self, e: Employee) -> Employee:
        return replace(e, role=self._roles.get_role(e.employee_id) or Role.EMPLOYEE)

    def get_by_id(self, employee_id):
        e = self._rows.get(employee_id)
        return self._with_role(e) if e else None

    def get_by_code(self, employee_code):
        for e in self._rows.values():
            if e.employee_code == employee_code:
                return self._with_role(e)
        return None

    def create(
        self,
        *,
        employee_id,
        first_name,
        last_name,
        department,
        designation,
        employee_code,
        joining_date,
        role=Role.EMPLOYEE,
    ):
        self._roles.set_role(employee_id, role)
        self._rows[employee_id] = Employee(
            employee_id=employee_id,
            first_name=first_name,
            last_name=last_name,
            department=department,
            designation=designation,
            employee_code=employee_code,
            joining_date=joining_date,
        )
        return employee_id

    def update(self, *, employee_id, first_name, last_name, department, designation, employee_code):
        e = self._rows.get(employee_id)
        if not e:
            return False
        self._rows[employee_id] = replace(
            e,
            first_name=first_name,
            last_name=last_name,
            department=department,
            designation=designation,
            employee_code=employee_code,
        )
        return True

    def list_all(self, *, search=None):
        rows = [self._with_role(e) for e in self._rows.values()]
        if search:
            s = search.lower()
            rows = [
                e
                for e in rows
                if s in e.first_name.lower() or s in e.last_name.lower() or s in (e.employee_code or "").lower()
            ]
        return rows

    def count(self):
        return len(self._rows)

    def department_counts(self):
        counts: Dict[Optional[str], int] = {}
        for e in self._rows.values():
            counts[e.department] = counts.get(e.department, 0) + 1
        return counts

    def add(self, employee_id: str, *, department: Optional[str] = "Engineering", code: Optional[str] = None):
        """Seed a row without touching the role store."""
        self._rows[employee_id] = Employee(
            employee_id=employee_id,
            first_name=employee_id.title(),
            last_name="Test",
            department=department,
            designation="Engineer",
            employee_code=code,
            joining_date=date(2023, 1, 1),
        )
        return employee_id


class InMemoryAttendance:
    def __init__(self):
        self._by_key: Dict[Tuple[str, date], AttendanceRecord] = {}
        self._id = 0

    def get_for_employee_and_date(self, employee_id, work_date):
        return self._by_key.get((employee_id, work_date))

    def create_punch_in(self, *, employee_id, work_date, punch_in, status):
        if (employee_id, work_date) in self._by_key:
            raise DuplicatePunchError("duplicate")
        self._id += 1
        self._by_key[(employee_id, work_date)] = AttendanceRecord(
            record_id=self._id,
            employee_id=employee_id,
            work_date=work_date,
            punch_in=punch_in,
            punch_out=None,
            status=status,
        )
        return self._id

    def update_punch_out(self, *, record_id, punch_out, status, total_hours):
        for key, r in self._by_key.items():
            if r.record_id == record_id and r.punch_out is None:
                self._by_key[key] = replace(r, punch_out=punch_out, status=status, total_hours=total_hours)
                return True
        return False

    def list_for_range(self, *, start_date, end_date, employee_id=None):
        return [
            r
            for r in self._by_key.values()
            if start_date <= r.work_date <= end_date and (employee_id is None or r.employee_id == employee_id)
        ]

    def count_for_date(self, work_date, *, statuses):
        return sum(1 for r in self._by_key.values() if r.work_date == work_date and r.status in statuses)

    def add(self, employee_id: str, work_date: date, status: AttendanceStatus, hours: str = "8.00"):
        """Seed a closed (or open) record directly."""
        punch_in = datetime.combine(work_date, time(9, 0))
        self.create_punch_in(employee_id=employee_id, work_date=work_date, punch_in=punch_in, status=status)
        if status != AttendanceStatus.PUNCHED_IN:
            key = (employee_id, work_date)
            total = Decimal(hours)
            self._by_key[key] = replace(
                self._by_key[key],
                punch_out=punch_in + timedelta(hours=float(total)),
                total_hours=total,
            )


class InMemoryLeaves:
    def __init__(self):
        self._rows: Dict[int, LeaveRequest] = {}
        self._id = 0

    def create(self, *, employee_id, leave_type, from_date, to_date, reason, start_time=None, end_time=None):
        self._id += 1
        self._rows[self._id] = LeaveRequest(
            request_id=self._id,
            employee_id=employee_id,
            leave_type=leave_type,
            from_date=from_date,
            to_date=to_date,
            reason=reason,
            status=LeaveStatus.PENDING,
            created_at=datetime(2024, 1, 1, 8, 0) + timedelta(minutes=self._id),
            start_time=start_time,
            end_time=end_time,
        )
        return self._id

    def get(self, request_id):
        return self._rows.get(int(request_id))

    def list_requests(self, *, status=None, employee_id=None, limit=200):
        rows = [
            r
            for r in self._rows.values()
            if (status is None or r.status == status) and (employee_id is None or r.employee_id == employee_id)
        ]
        rows.sort(key=lambda r: (r.created_at, r.request_id), reverse=True)
        return rows[:limit]

    def decide(self, *, request_id, status, decided_by, decided_at, admin_remarks=None):
        r = self._rows.get(int(request_id))
        if not r or r.status != LeaveStatus.PENDING:
            return False
        self._rows[r.request_id] = replace(
            r, status=status, decided_by=decided_by, decided_at=decided_at, admin_remarks=admin_remarks
        )
        return True

    def list_approved_overlapping(self, *, start_date, end_date, employee_id=None):
        return [
            r
            for r in self._rows.values()
            if r.status == LeaveStatus.APPROVED
            and r.from_date <= end_date
            and r.to_date >= start_date
            and (employee_id is None or r.employee_id == employee_id)
        ]

    def count_by_status(self, status):
        return sum(1 for r in self._rows.values() if r.status == status)

    def add_approved(self, employee_id: str, from_date: date, to_date: date, leave_type: LeaveType = LeaveType.FULL):
        rid = self.create(
            employee_id=employee_id, leave_type=leave_type, from_date=from_date, to_date=to_date, reason="seeded"
        )
        self.decide(request_id=rid, status=LeaveStatus.APPROVED, decided_by="admin", decided_at=datetime(2024, 1, 1))
        return rid


class FakeIdentityProvider:
    """Tokens are looked up in a dict; roles come from the shared role store."""

    def __init__(self, roles: InMemoryRoles):
        self.tokens: Dict[str, str] = {}
        self._roles = roles

    def verify(self, token):
        if token == "boom":
            raise InvalidTokenError("bad signature")
        return self.tokens.get(token)

    def role_of(self, employee_id):
        return self._roles.get_role(employee_id)


@pytest.fixture
def fixed_now() -> datetime:
    return datetime(2024, 1, 10, 9, 0, 0)


@pytest.fixture
def roles_repo() -> InMemoryRoles:
    roles = InMemoryRoles()
    roles.set_role("admin", Role.ADMIN)
    roles.set_role("alice", Role.EMPLOYEE)
    return roles


@pytest.fixture
def employees_repo(roles_repo) -> InMemoryEmployees:
    repo = InMemoryEmployees(roles_repo)
    repo.add("admin", department="HR")
    repo.add("alice")
    repo.add("bob")
    return repo


@pytest.fixture
def attendance_repo() -> InMemoryAttendance:
    return InMemoryAttendance()


@pytest.fixture
def leaves_repo() -> InMemoryLeaves:
    return InMemoryLeaves()


@pytest.fixture
def identity(roles_repo) -> FakeIdentityProvider:
    provider = FakeIdentityProvider(roles_repo)
    provider.tokens.update({"admin-token": "admin", "alice-token": "alice", "bob-token": "bob"})
    return provider


@pytest.fixture
def clock(fixed_now) -> FixedClock:
    return FixedClock(fixed_now)


@pytest.fixture
def container(employees_repo, roles_repo, attendance_repo, leaves_repo, identity, clock):
    return wire(
        employees_repo=employees_repo,
        roles_repo=roles_repo,
        attendance_repo=attendance_repo,
        leaves_repo=leaves_repo,
        identity=identity,
        clock=clock,
    )


@pytest.fixture
def admin() -> Identity:
    return Identity(employee_id="admin", role=Role.ADMIN)


@pytest.fixture
def alice() -> Identity:
    return Identity(employee_id="alice", role=Role.EMPLOYEE)
