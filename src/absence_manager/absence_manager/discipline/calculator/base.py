from __future__ import annotations

from abc import ABC, abstractmethod
from dataclasses import dataclass


@dataclass(frozen=True)
class DisciplinaryStatus:
    label: str
    color: str

    def to_dict(self) -> dict:
        return {"label": self.label, "color": self.color}


class DisciplineCalculator(ABC):
    """Calculator interface (Strategy Pattern for disciplinary rules)."""

    @abstractmethod
    def note(self, *, total_absence_hours: float, late_count: int) -> float:
        raise NotImplementedError

    @abstractmethod
    def status(self, *, total_absence_hours: float) -> DisciplinaryStatus:
        raise NotImplementedError
