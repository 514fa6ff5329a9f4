from __future__ import annotations

from abc import ABC, abstractmethod
from decimal import Decimal

from ..core.constants import HALF_DAY_THRESHOLD_HOURS
from ..core.enums import AttendanceStatus


class PunchOutPolicy(ABC):
    """Strategy Pattern: decide the closing status of a punch cycle."""

    @abstractmethod
    def decide(self, total_hours: Decimal) -> AttendanceStatus:
        raise NotImplementedError


class HalfDayThresholdPolicy(PunchOutPolicy):
    """Below the threshold is a half day; the threshold itself counts as present."""

    def __init__(self, threshold_hours: Decimal = HALF_DAY_THRESHOLD_HOURS):
        self.threshold_hours = Decimal(str(threshold_hours))

    def decide(self, total_hours: Decimal) -> AttendanceStatus:
        if total_hours < self.threshold_hours:
            return AttendanceStatus.HALF_DAY
        return AttendanceStatus.PRESENT
