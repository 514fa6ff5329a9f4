from __future__ import annotations

from dataclasses import dataclass
from datetime import date, datetime, time
from typing import Optional

from ..common.datetime_utils import DateInterval
from ..core.enums import LeaveStatus, LeaveType


@dataclass(frozen=True)
class LeaveRequest:
    request_id: int
    employee_id: str
    leave_type: LeaveType
    from_date: date
    to_date: date
    reason: str
    status: LeaveStatus
    created_at: datetime
    start_time: Optional[time] = None
    end_time: Optional[time] = None
    admin_remarks: Optional[str] = None
    decided_by: Optional[str] = None
    decided_at: Optional[datetime] = None

    @property
    def interval(self) -> DateInterval:
        return self.from_date, self.to_date

    @property
    def is_pending(self) -> bool:
        return self.status == LeaveStatus.PENDING
