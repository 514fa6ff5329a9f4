from __future__ import annotations

from dataclasses import dataclass
from datetime import date, datetime
from decimal import Decimal
from typing import Optional

from ..core.enums import AttendanceStatus, PunchState


@dataclass(frozen=True)
class AttendanceRecord:
    """Domain entity: one employee's punch record for one calendar date."""

    record_id: int
    employee_id: str
    work_date: date
    punch_in: Optional[datetime]
    punch_out: Optional[datetime]
    status: AttendanceStatus
    total_hours: Optional[Decimal] = None

    @property
    def state(self) -> PunchState:
        if self.punch_out is not None:
            return PunchState.CLOSED
        return PunchState.PUNCHED_IN

    @property
    def showed_up(self) -> bool:
        return self.status in {AttendanceStatus.PRESENT, AttendanceStatus.HALF_DAY}
