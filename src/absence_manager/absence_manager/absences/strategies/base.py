from __future__ import annotations

from abc import ABC, abstractmethod
from typing import Optional

from ..model import AbsenceRecord


class AbsenceHoursStrategy(ABC):
    """Strategy Pattern: encapsulate how many hours one entry counts for."""

    @abstractmethod
    def hours(self, *, record: Optional[AbsenceRecord]) -> float:
        raise NotImplementedError
