from __future__ import annotations

from datetime import timedelta
from typing import Optional

from ..core.enums import AbsenceStatus
from ..core.exceptions import BadRequestError, NotFoundError
from ..groups.repository import GroupRepository
from ..trainees.repository import TraineeRepository
from .repository import AbsenceRecordRepository, TraineeAbsenceRepository
from .service import parse_date_field

# Monday..Saturday; Sunday (weekday 6) is not a class day.
DAY_LABELS = ("LUN", "MAR", "MERC", "JEU", "VEN", "SAM")


class WeeklyReportService:
    """Per-group grid of trainees x class days with their entries for each day."""

    def __init__(
        self,
        records: AbsenceRecordRepository,
        entries: TraineeAbsenceRepository,
        trainees: TraineeRepository,
        groups: GroupRepository,
    ):
        self._records = records
        self._entries = entries
        self._trainees = trainees
        self._groups = groups

    def build(self, group_name: str, *, start_date: Optional[str], end_date: Optional[str]) -> dict:
        group = self._groups.get_by_name(group_name)
        if not group:
            raise NotFoundError("Group not found")
        if not start_date or not end_date:
            raise BadRequestError("start_date and end_date are required")

        start = parse_date_field(start_date, "start_date")
        end = parse_date_field(end_date, "end_date")

        trainees = self._trainees.list_all(group_name=group.name)
        records = sorted(
            self._records.find(group_id=group.group_id, start_date=start, end_date=end),
            key=lambda r: (r.record_date, r.start_time),
        )
        entries = self._entries.list_for_records([r.record_id for r in records])

        days = []
        current = start
        while current <= end:
            if current.weekday() < 6:
                day_records = [r for r in records if r.record_date == current]
                days.append(
                    {
                        "name": DAY_LABELS[current.weekday()],
                        "date": current.strftime("%Y-%m-%d"),
                        "day": current.day,
                        "records": [r.to_dict() for r in day_records],
                    }
                )
            current += timedelta(days=1)

        records_by_day: dict[str, list] = {}
        for r in records:
            records_by_day.setdefault(r.record_date.strftime("%Y-%m-%d"), []).append(r)
        entry_index = {(e.record_id, e.trainee_id): e for e in entries}

        trainee_rows = []
        for t in trainees:
            week = []
            for day in days:
                day_absences = []
                for record in records_by_day.get(day["date"], []):
                    e = entry_index.get((record.record_id, t.trainee_id))
                    if not e:
                        continue
                    day_absences.append(
                        {
                            "id": e.absence_id,
                            "status": e.status.value,
                            "is_justified": e.is_justified,
                            "start_time": record.start_time,
                            "end_time": record.end_time,
                            "absence_hours": e.absence_hours,
                        }
                    )
                week.append(
                    {
                        "date": day["date"],
                        "absences": day_absences,
                        "is_absent": any(a["status"] == AbsenceStatus.ABSENT.value for a in day_absences),
                        "is_late": any(a["status"] == AbsenceStatus.LATE.value for a in day_absences),
                    }
                )
            trainee_rows.append(
                {
                    "id": t.trainee_id,
                    "cef": t.cef,
                    "name": t.name,
                    "first_name": t.first_name,
                    "week_absences": week,
                }
            )

        return {
            "group": group.to_dict(),
            "days": days,
            "trainees": trainee_rows,
            "start_date": start.strftime("%Y-%m-%d"),
            "end_date": end.strftime("%Y-%m-%d"),
            "formatted_start": start.strftime("%d/%m/%Y"),
            "formatted_end": end.strftime("%d/%m/%Y"),
        }
