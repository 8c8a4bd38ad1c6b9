from __future__ import annotations

from typing import Optional

from ...common.datetime_utils import hours_between
from ...common.numbers import round_half_up
from ..model import AbsenceRecord
from .base import AbsenceHoursStrategy


class AbsentStrategy(AbsenceHoursStrategy):
    """Absent: the whole session, (end - start) in hours rounded to one decimal."""

    def hours(self, *, record: Optional[AbsenceRecord]) -> float:
        if record is None:
            return 0.0
        return round_half_up(hours_between(record.start_time, record.end_time), 1)
