from __future__ import annotations

from typing import Optional

from ..model import AbsenceRecord
from .base import AbsenceHoursStrategy


class PresentStrategy(AbsenceHoursStrategy):
    """Present trainees never accrue hours."""

    def hours(self, *, record: Optional[AbsenceRecord]) -> float:
        return 0.0
