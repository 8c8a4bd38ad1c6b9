from __future__ import annotations

import math

from ...common.numbers import round_half_up
from ...core.constants import ABSENCE_DEDUCTION_PER_SLOT, LATES_PER_POINT, MAX_NOTE, SLOT_HOURS
from .base import DisciplinaryStatus, DisciplineCalculator

# (minimum unjustified hours, label, color), highest threshold first.
STATUS_LADDER = (
    (40, "EXCL DEF (CD)", "#FF0000"),
    (35, "EXCL TEMP (CD)", "#FEAE00"),
    (30, "SUSP 2J (CD)", "#FFA500"),
    (25, "BLÂME (CD)", "#8B4513"),
    (20, "2ème MISE (CD)", "#8784b6"),
    (15, "1er MISE (CD)", "#a084c6"),
    (10, "2ème AVERT (SC)", "#191E46"),
    (5, "1er AVERT (SC)", "#235a8c"),
)
NORMAL_STATUS = DisciplinaryStatus(label="NORMAL", color="#9FE855")


class StandardDisciplineCalculator(DisciplineCalculator):
    """Standard rule: half a point per full 2.5h slot missed, one point per 4 lates, not below 0."""

    def note(self, *, total_absence_hours: float, late_count: int) -> float:
        absence_deduction = math.floor(total_absence_hours / SLOT_HOURS) * ABSENCE_DEDUCTION_PER_SLOT
        lateness_deduction = math.floor(late_count / LATES_PER_POINT) * 1
        note = max(0.0, MAX_NOTE - absence_deduction - lateness_deduction)
        return round_half_up(note, 1)

    def status(self, *, total_absence_hours: float) -> DisciplinaryStatus:
        for threshold, label, color in STATUS_LADDER:
            if total_absence_hours >= threshold:
                return DisciplinaryStatus(label=label, color=color)
        return NORMAL_STATUS
