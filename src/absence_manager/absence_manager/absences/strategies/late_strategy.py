from __future__ import annotations

from typing import Optional

from ...core.constants import LATE_HOURS
from ..model import AbsenceRecord
from .base import AbsenceHoursStrategy


class LateStrategy(AbsenceHoursStrategy):
    """Late arrival: fixed cost whatever the session length."""

    def hours(self, *, record: Optional[AbsenceRecord]) -> float:
        return LATE_HOURS
