from __future__ import annotations

from typing import Optional, Protocol, Sequence

from .model import Schedule


class ScheduleRepository(Protocol):
    def get_by_id(self, schedule_id: str) -> Optional[Schedule]:
        raise NotImplementedError

    def find(
        self,
        *,
        teacher_id: Optional[str] = None,
        academic_year: Optional[str] = None,
        week_number: Optional[int] = None,
        is_active: Optional[bool] = None,
    ) -> Sequence[Schedule]:
        raise NotImplementedError

    def find_active_with_slot(
        self,
        *,
        day: str,
        time_slot: str,
        exclude_schedule_id: Optional[str] = None,
    ) -> Sequence[Schedule]:
        """Active schedules holding at least one session on (day, time_slot).

        Returned schedules carry their full session list; callers filter sessions.
        """

        raise NotImplementedError

    def create(self, schedule: Schedule) -> str:
        raise NotImplementedError

    def update(self, schedule: Schedule) -> bool:
        """Replace the schedule's fields and its whole session list."""

        raise NotImplementedError

    def delete_by_id(self, schedule_id: str) -> bool:
        raise NotImplementedError
