from __future__ import annotations

import logging
from datetime import date, datetime, time
from typing import Optional, Sequence

from ..auth.gate import AuthorizationGate
from ..auth.identity import Identity
from ..common.datetime_utils import Clock, SystemClock, check_range
from ..common.validators import optional_text, require_non_empty
from ..core.constants import DEFAULT_LIST_LIMIT
from ..core.enums import LeaveStatus, LeaveType, Role
from ..core.exceptions import (
    AlreadyDecidedError,
    InvalidRangeError,
    MissingTimeWindowError,
    NotFoundError,
    ValidationError,
)
from ..employees.repository import EmployeeRepository
from .model import LeaveRequest
from .repository import LeaveRepository

logger = logging.getLogger(__name__)

_OUTCOMES = {LeaveStatus.APPROVED, LeaveStatus.REJECTED}


class LeaveWorkflow:
    """Leave request lifecycle: Pending -> Approved | Rejected, decided once by an admin."""

    def __init__(
        self,
        leaves: LeaveRepository,
        gate: AuthorizationGate,
        employees: Optional[EmployeeRepository] = None,
        *,
        clock: Optional[Clock] = None,
    ):
        self._leaves = leaves
        self._gate = gate
        self._employees = employees
        self._clock = clock or SystemClock()

    def submit(
        self,
        *,
        employee_id: str,
        leave_type: LeaveType,
        from_date: date,
        to_date: date,
        reason: str,
        start_time: Optional[time] = None,
        end_time: Optional[time] = None,
    ) -> LeaveRequest:
        if self._employees is not None and not self._employees.get_by_id(employee_id):
            raise NotFoundError(f"Employee {employee_id} not found")

        check_range(from_date, to_date)

        if leave_type.needs_time_window:
            if start_time is None or end_time is None:
                raise MissingTimeWindowError(f"{leave_type.value} leave needs a start and end time")
            if from_date != to_date:
                raise InvalidRangeError(f"{leave_type.value} leave must be a single date")
            if end_time <= start_time:
                raise InvalidRangeError("End time must be after start time")
        else:
            # Full-day leave carries no time window.
            start_time = end_time = None

        reason = require_non_empty(reason, "Reason")

        request_id = self._leaves.create(
            employee_id=employee_id,
            leave_type=leave_type,
            from_date=from_date,
            to_date=to_date,
            reason=reason,
            start_time=start_time,
            end_time=end_time,
        )
        logger.info(
            "Leave %s submitted by %s: %s %s..%s", request_id, employee_id, leave_type.value, from_date, to_date
        )
        return self._leaves.get(request_id)

    def decide(
        self,
        *,
        request_id: int,
        actor: Identity,
        outcome: LeaveStatus,
        remarks: Optional[str] = None,
        now: Optional[datetime] = None,
    ) -> LeaveRequest:
        self._gate.ensure_role(actor, Role.ADMIN)

        if outcome not in _OUTCOMES:
            raise ValidationError(f"Outcome must be Approved or Rejected, got {outcome.value}")

        req = self._leaves.get(int(request_id))
        if not req:
            raise NotFoundError(f"Leave request {request_id} not found")
        if not req.is_pending:
            raise AlreadyDecidedError(f"Leave request {request_id} is already {req.status.value}")

        # Conditional on status=Pending in the store, so two racing admins cannot both win.
        if not self._leaves.decide(
            request_id=req.request_id,
            status=outcome,
            decided_by=actor.employee_id,
            decided_at=now or self._clock.now(),
            admin_remarks=optional_text(remarks, "Remarks"),
        ):
            raise AlreadyDecidedError(f"Leave request {request_id} is already decided")

        logger.info("Leave %s %s by %s", req.request_id, outcome.value, actor.employee_id)
        return self._leaves.get(req.request_id)

    def approve(self, *, request_id: int, actor: Identity, remarks: Optional[str] = None) -> LeaveRequest:
        return self.decide(request_id=request_id, actor=actor, outcome=LeaveStatus.APPROVED, remarks=remarks)

    def reject(self, *, request_id: int, actor: Identity, remarks: Optional[str] = None) -> LeaveRequest:
        return self.decide(request_id=request_id, actor=actor, outcome=LeaveStatus.REJECTED, remarks=remarks)

    def get(self, request_id: int) -> LeaveRequest:
        req = self._leaves.get(int(request_id))
        if not req:
            raise NotFoundError(f"Leave request {request_id} not found")
        return req

    def list_leaves(
        self,
        *,
        status: Optional[LeaveStatus] = None,
        employee_id: Optional[str] = None,
        limit: int = DEFAULT_LIST_LIMIT,
    ) -> Sequence[LeaveRequest]:
        return self._leaves.list_requests(status=status, employee_id=employee_id, limit=limit)
