from __future__ import annotations

from dataclasses import dataclass
from decimal import Decimal
from types import ModuleType
from typing import Optional

from .attendance.mysql_attendance_repository import MySQLAttendanceRepository
from .attendance.policy import HalfDayThresholdPolicy
from .attendance.repository import AttendanceRepository
from .attendance.service import AttendanceService
from .auth.gate import AuthorizationGate
from .auth.identity import IdentityProvider, RoleRepository
from .auth.jwt_provider import JwtIdentityProvider
from .auth.mysql_role_repository import MySQLRoleRepository
from .common.datetime_utils import Clock, SystemClock
from .core.constants import HALF_DAY_THRESHOLD_HOURS
from .database.connection import DatabaseConnection, DBConfig
from .employees.mysql_employee_repository import MySQLEmployeeRepository
from .employees.repository import EmployeeRepository
from .employees.service import EmployeeService
from .leaves.mysql_leave_repository import MySQLLeaveRepository
from .leaves.repository import LeaveRepository
from .leaves.service import LeaveWorkflow
from .reports.service import AggregationEngine


@dataclass(frozen=True)
class Container:
    employees_repo: EmployeeRepository
    roles_repo: RoleRepository
    attendance_repo: AttendanceRepository
    leaves_repo: LeaveRepository

    gate: AuthorizationGate
    employee_service: EmployeeService
    attendance_service: AttendanceService
    leave_workflow: LeaveWorkflow
    aggregation: AggregationEngine
    clock: Clock

    conn: Optional[DatabaseConnection] = None


def wire(
    *,
    employees_repo: EmployeeRepository,
    roles_repo: RoleRepository,
    attendance_repo: AttendanceRepository,
    leaves_repo: LeaveRepository,
    identity: IdentityProvider,
    half_day_threshold: Decimal = HALF_DAY_THRESHOLD_HOURS,
    clock: Optional[Clock] = None,
    conn: Optional[DatabaseConnection] = None,
) -> Container:
    """Build services on top of any set of repositories (MySQL or in-memory)."""

    clock = clock or SystemClock()
    gate = AuthorizationGate(identity)

    return Container(
        employees_repo=employees_repo,
        roles_repo=roles_repo,
        attendance_repo=attendance_repo,
        leaves_repo=leaves_repo,
        gate=gate,
        employee_service=EmployeeService(employees_repo, roles_repo, gate, clock=clock),
        attendance_service=AttendanceService(
            attendance_repo,
            employees_repo,
            policy=HalfDayThresholdPolicy(Decimal(str(half_day_threshold))),
            clock=clock,
        ),
        leave_workflow=LeaveWorkflow(leaves_repo, gate, employees_repo, clock=clock),
        aggregation=AggregationEngine(attendance_repo, leaves_repo, employees_repo),
        clock=clock,
        conn=conn,
    )


def build_container(settings: ModuleType) -> Container:
    conn = DatabaseConnection(DBConfig.from_dict(getattr(settings, "DB_CONFIG")))
    roles_repo = MySQLRoleRepository(conn)

    return wire(
        employees_repo=MySQLEmployeeRepository(conn),
        roles_repo=roles_repo,
        attendance_repo=MySQLAttendanceRepository(conn),
        leaves_repo=MySQLLeaveRepository(conn),
        identity=JwtIdentityProvider(
            roles_repo,
            secret=getattr(settings, "JWT_SECRET", ""),
            algorithm=getattr(settings, "JWT_ALGORITHM", "HS256"),
        ),
        half_day_threshold=Decimal(str(getattr(settings, "HALF_DAY_THRESHOLD_HOURS", HALF_DAY_THRESHOLD_HOURS))),
        conn=conn,
    )
