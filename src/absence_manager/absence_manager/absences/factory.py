from __future__ import annotations

from dataclasses import dataclass
from typing import Optional

from ..core.enums import AbsenceStatus
from .model import AbsenceRecord
from .strategies.absent_strategy import AbsentStrategy
from .strategies.base import AbsenceHoursStrategy
from .strategies.late_strategy import LateStrategy
from .strategies.present_strategy import PresentStrategy


@dataclass
class AbsenceHoursStrategyFactory:
    """Factory Pattern: choose the hours rule for an entry status."""

    def for_status(self, status: AbsenceStatus) -> AbsenceHoursStrategy:
        if status == AbsenceStatus.ABSENT:
            return AbsentStrategy()
        if status == AbsenceStatus.LATE:
            return LateStrategy()
        return PresentStrategy()

    def hours_for(self, status: AbsenceStatus, record: Optional[AbsenceRecord]) -> float:
        return self.for_status(status).hours(record=record)
