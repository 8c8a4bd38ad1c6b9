from __future__ import annotations

import logging
from dataclasses import replace
from typing import IO, Any, Optional, Union

from ..absences.model import TraineeAbsence
from ..absences.repository import AbsenceRecordRepository, TraineeAbsenceRepository
from ..common.identifiers import new_id
from ..common.validators import collect, optional_phone, require_non_empty
from ..core.enums import AbsenceStatus
from ..core.exceptions import DuplicateError, NotFoundError, ValidationError
from ..discipline.service import DisciplineService
from ..groups.repository import GroupRepository
from .importer import extension_of, parse_roster
from .model import Trainee
from .repository import TraineeRepository

logger = logging.getLogger(__name__)

_STATUS_COLORS = {
    AbsenceStatus.ABSENT: "text-danger",
    AbsenceStatus.LATE: "text-warning",
    AbsenceStatus.PRESENT: "text-success",
}


class TraineeService:
    def __init__(
        self,
        trainees: TraineeRepository,
        groups: GroupRepository,
        records: AbsenceRecordRepository,
        entries: TraineeAbsenceRepository,
        discipline: DisciplineService,
    ):
        self._trainees = trainees
        self._groups = groups
        self._records = records
        self._entries = entries
        self._discipline = discipline

    def get(self, cef: str) -> Trainee:
        trainee = self._trainees.get_by_cef(cef)
        if not trainee:
            raise NotFoundError("Trainee not found")
        return trainee

    def list_trainees(self, *, group_name: Optional[str] = None) -> list[dict]:
        trainees = self._trainees.list_all(group_name=group_name)
        summaries = self._discipline.for_trainees([t.trainee_id for t in trainees])
        out = []
        for t in trainees:
            s = summaries[t.trainee_id]
            out.append({**t.to_dict(), "total_absence_hours": s.total_absence_hours, "disciplinary_note": s.note})
        return out

    def list_with_stats(self) -> list[dict]:
        trainees = self._trainees.list_all()
        entries = self._entries.list_for_trainees([t.trainee_id for t in trainees])
        records = {r.record_id: r for r in self._records.list_by_ids(sorted({e.record_id for e in entries}))}

        by_trainee: dict[str, list[TraineeAbsence]] = {t.trainee_id: [] for t in trainees}
        for e in entries:
            by_trainee.setdefault(e.trainee_id, []).append(e)

        out = []
        for t in trainees:
            rows = by_trainee[t.trainee_id]
            summary = self._discipline.summarize(rows)
            out.append(
                {
                    **t.to_dict(),
                    "total_absence_hours": summary.total_absence_hours,
                    "disciplinary_note": summary.note,
                    "disciplinary_status": summary.status.to_dict(),
                    "absences": [
                        {
                            "id": e.absence_id,
                            "status": e.status.value,
                            "is_justified": e.is_justified,
                            "absence_hours": e.absence_hours,
                            # validation is tracked on the parent record here
                            "is_validated": bool(records.get(e.record_id) and records[e.record_id].is_validated),
                        }
                        for e in rows
                    ],
                }
            )
        return out

    def create(
        self,
        *,
        cef: Optional[str],
        name: Optional[str],
        first_name: Optional[str],
        group_name: Optional[str],
        phone: Optional[str] = None,
    ) -> Trainee:
        collect(
            lambda: require_non_empty(cef, "cef"),
            lambda: require_non_empty(name, "name"),
            lambda: require_non_empty(first_name, "first_name"),
            lambda: require_non_empty(group_name, "groupe"),
            lambda: optional_phone(phone),
        )
        cef = cef.strip()
        if self._trainees.get_by_cef(cef):
            raise DuplicateError("A trainee with this CEF already exists")

        group = self._groups.get_or_create_by_name(group_name.strip())
        trainee = Trainee(
            trainee_id=new_id(),
            cef=cef,
            name=name.strip(),
            first_name=first_name.strip(),
            group_name=group.name,
            group_id=group.group_id,
            phone=optional_phone(phone),
        )
        self._trainees.create(trainee)
        return trainee

    def detail(self, cef: str) -> dict:
        trainee = self.get(cef)
        entries = self._entries.list_for_trainee(trainee.trainee_id)
        records = {r.record_id: r for r in self._records.list_by_ids(sorted({e.record_id for e in entries}))}
        summary = self._discipline.summarize(entries)

        history = []
        for e in entries:
            record = records.get(e.record_id)
            history.append(
                {
                    "id": e.absence_id,
                    "date": record.record_date.strftime("%Y-%m-%d") if record else "N/A",
                    "time": f"{record.start_time} - {record.end_time}" if record else "N/A",
                    "status": e.status.value,
                    "source": "Justifié" if e.is_justified else "Non justifié",
                    "color": _STATUS_COLORS.get(e.status, "text-success"),
                }
            )

        return {
            **trainee.to_dict(),
            "absence_stats": {
                "absent": summary.absent_count,
                "late": summary.late_count,
                "justified": summary.justified_count,
            },
            "total_absence_hours": summary.total_absence_hours,
            "disciplinary_note": summary.note,
            "disciplinary_status": summary.status.to_dict(),
            "absence_history": history,
        }

    def update(self, cef: str, data: dict[str, Any]) -> Trainee:
        trainee = self.get(cef)
        changes: dict[str, Any] = {}

        if data.get("cef"):
            new_cef = require_non_empty(data["cef"], "cef")
            other = self._trainees.get_by_cef(new_cef)
            if other and other.trainee_id != trainee.trainee_id:
                raise DuplicateError("A trainee with this CEF already exists")
            changes["cef"] = new_cef
        if data.get("name"):
            changes["name"] = require_non_empty(data["name"], "name")
        if data.get("first_name"):
            changes["first_name"] = require_non_empty(data["first_name"], "first_name")
        if data.get("groupe"):
            group = self._groups.get_or_create_by_name(require_non_empty(data["groupe"], "groupe"))
            changes["group_name"] = group.name
            changes["group_id"] = group.group_id
        if "phone" in data:
            changes["phone"] = optional_phone(data["phone"])

        updated = replace(trainee, **changes)
        self._trainees.update(updated)
        return updated

    def delete(self, cef: str) -> None:
        trainee = self.get(cef)
        removed = self._entries.delete_for_trainee(trainee.trainee_id)
        self._trainees.delete_by_id(trainee.trainee_id)
        logger.info("Trainee %s deleted with %d absence entries", trainee.cef, removed)

    def delete_all(self) -> dict:
        """Remove every trainee and every absence entry; records and groups stay."""
        entries = self._entries.delete_all()
        trainees = self._trainees.delete_all()
        logger.info("Deleted all trainees (%d) and absence entries (%d)", trainees, entries)
        return {"deleted_trainees": trainees, "deleted_absences": entries}

    def absences(self, cef: str) -> list[dict]:
        trainee = self.get(cef)
        entries = self._entries.list_for_trainee(trainee.trainee_id)
        records = {r.record_id: r for r in self._records.list_by_ids(sorted({e.record_id for e in entries}))}

        out = []
        for e in entries:
            record = records.get(e.record_id)
            out.append(
                {
                    "id": e.absence_id,
                    "status": e.status.value,
                    "is_justified": e.is_justified,
                    "absence_hours": e.absence_hours,
                    "date": record.record_date.strftime("%Y-%m-%d") if record else None,
                    "start_time": record.start_time if record else None,
                    "end_time": record.end_time if record else None,
                    "is_validated": bool(record and record.is_validated),
                    "created_at": e.created_at.strftime("%Y-%m-%d %H:%M:%S") if e.created_at else None,
                }
            )
        return out

    def statistics(self, cef: str) -> dict:
        trainee = self.get(cef)
        return self._discipline.for_trainee(trainee.trainee_id).to_dict()

    def import_file(self, source: Union[str, IO], filename: str) -> dict:
        """Create new trainees and update existing ones (matched by cef) from a roster file."""
        extension = extension_of(filename)
        roster = parse_roster(source, extension)

        imported = 0
        errors = list(roster.errors)
        for row in roster.rows:
            try:
                phone = optional_phone(row.get("phone"))
                group = self._groups.get_or_create_by_name(row["group_name"])
                existing = self._trainees.get_by_cef(row["cef"])
                if existing:
                    self._trainees.update(
                        replace(
                            existing,
                            name=row["name"],
                            first_name=row["first_name"],
                            group_name=group.name,
                            group_id=group.group_id,
                            phone=phone or existing.phone,
                        )
                    )
                else:
                    self._trainees.create(
                        Trainee(
                            trainee_id=new_id(),
                            cef=row["cef"],
                            name=row["name"],
                            first_name=row["first_name"],
                            group_name=group.name,
                            group_id=group.group_id,
                            phone=phone,
                        )
                    )
                imported += 1
            except ValidationError as e:
                errors.append({"cef": row["cef"], "error": e.message})

        logger.info("Imported %d trainees from %s (%d errors)", imported, filename, len(errors))
        return {"imported": imported, "errors": errors}
