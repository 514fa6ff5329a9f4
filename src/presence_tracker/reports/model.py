from __future__ import annotations

from dataclasses import asdict, dataclass
from datetime import date
from typing import Optional

from ..core.enums import DayStatus


@dataclass(frozen=True)
class PresenceSummary:
    """Presence statistics of a population over an inclusive date range."""

    start: date
    end: date
    population: int
    days: int
    present_days: int
    present_only_days: int
    half_day_days: int
    punched_in_days: int
    leave_days: int
    implied_absent: int

    def as_dict(self) -> dict:
        data = asdict(self)
        data["start"] = self.start.isoformat()
        data["end"] = self.end.isoformat()
        return data


@dataclass(frozen=True)
class DailyBreakdown:
    day: date
    present: int
    half_day: int
    punched_in: int
    leave: int
    absent: int

    def as_dict(self) -> dict:
        data = asdict(self)
        data["day"] = self.day.isoformat()
        data["weekday"] = self.day.strftime("%a")
        return data


@dataclass(frozen=True)
class EmployeeDay:
    day: date
    status: DayStatus
    leave_request_id: Optional[int] = None


@dataclass(frozen=True)
class DashboardSnapshot:
    day: date
    total_employees: int
    present_today: int
    on_leave_today: int
    pending_leaves: int

    def as_dict(self) -> dict:
        data = asdict(self)
        data["day"] = self.day.isoformat()
        return data
