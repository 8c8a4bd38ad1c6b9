from __future__ import annotations

import logging
from dataclasses import replace
from datetime import date
from typing import Any, Optional, Sequence

from ..common.datetime_utils import hours_between, now_local, parse_iso_date
from ..common.identifiers import new_id
from ..common.numbers import round_half_up
from ..common.validators import parse_bool, require_hhmm, require_non_empty
from ..core.enums import AbsenceStatus
from ..core.exceptions import BadRequestError, NotFoundError, ValidationError
from ..groups.repository import GroupRepository
from ..trainees.repository import TraineeRepository
from .factory import AbsenceHoursStrategyFactory
from .model import AbsenceRecord, TraineeAbsence
from .repository import AbsenceRecordRepository, TraineeAbsenceRepository

logger = logging.getLogger(__name__)

_STATUSES = tuple(s.value for s in AbsenceStatus)


def parse_date_field(value: Any, field_name: str) -> date:
    if isinstance(value, date):
        return value
    try:
        return parse_iso_date(str(value or "").strip())
    except ValueError as e:
        raise ValidationError(
            "Validation failed",
            errors=[{"field": field_name, "message": f"{field_name} must be a YYYY-MM-DD date"}],
        ) from e


def _ids_from(payload: dict, plural: str, single: str) -> list[str]:
    ids = payload.get(plural)
    if ids is None and payload.get(single):
        ids = [payload[single]]
    if not isinstance(ids, list) or not ids:
        raise BadRequestError(f"{plural} is required")
    return [str(i) for i in ids]


class AbsenceService:
    """Attendance records, per-trainee entries and their validation workflows."""

    def __init__(
        self,
        records: AbsenceRecordRepository,
        entries: TraineeAbsenceRepository,
        trainees: TraineeRepository,
        groups: GroupRepository,
        *,
        strategy_factory: Optional[AbsenceHoursStrategyFactory] = None,
    ):
        self._records = records
        self._entries = entries
        self._trainees = trainees
        self._groups = groups
        self._factory = strategy_factory or AbsenceHoursStrategyFactory()

    def hours_for(self, entry: TraineeAbsence, record: Optional[AbsenceRecord]) -> float:
        if entry.is_justified:
            return 0.0
        return self._factory.hours_for(entry.status, record)

    def _with_entries(self, records: Sequence[AbsenceRecord]) -> list[dict]:
        entries = self._entries.list_for_records([r.record_id for r in records])
        trainees = {t.trainee_id: t for t in self._trainees.list_by_ids(sorted({e.trainee_id for e in entries}))}

        grouped: dict[str, list[dict]] = {r.record_id: [] for r in records}
        for e in entries:
            trainee = trainees.get(e.trainee_id)
            grouped.setdefault(e.record_id, []).append(
                {**e.to_dict(), "trainee": trainee.to_dict() if trainee else None}
            )
        return [{**r.to_dict(), "trainee_absences": grouped[r.record_id]} for r in records]

    def _get_record(self, record_id: str) -> AbsenceRecord:
        record = self._records.get_by_id(record_id)
        if not record:
            raise NotFoundError("Absence record not found")
        return record

    def _get_entry(self, absence_id: str) -> TraineeAbsence:
        entry = self._entries.get_by_id(absence_id)
        if not entry:
            raise NotFoundError("Trainee absence not found")
        return entry

    def list_records(
        self,
        *,
        group_id: Optional[str] = None,
        on_date: Optional[str] = None,
        start_date: Optional[str] = None,
        end_date: Optional[str] = None,
    ) -> list[dict]:
        records = self._records.find(
            group_id=group_id,
            on_date=parse_date_field(on_date, "date") if on_date else None,
            start_date=parse_date_field(start_date, "start_date") if start_date and end_date else None,
            end_date=parse_date_field(end_date, "end_date") if start_date and end_date else None,
        )
        return self._with_entries(records)

    def list_for_group_name(self, group_name: str, **filters: Optional[str]) -> list[dict]:
        group = self._groups.get_by_name(group_name)
        if not group:
            raise NotFoundError("Group not found")
        return self.list_records(group_id=group.group_id, **filters)

    def get(self, record_id: str) -> dict:
        return self._with_entries([self._get_record(record_id)])[0]

    def _parse_students(self, students: Any) -> list[tuple[str, AbsenceStatus]]:
        if not isinstance(students, list):
            raise ValidationError(
                "Validation failed",
                errors=[{"field": "students", "message": "students must be a list"}],
            )

        parsed: list[tuple[str, AbsenceStatus]] = []
        errors: list[dict] = []
        for i, s in enumerate(students):
            if not isinstance(s, dict) or not s.get("trainee_id"):
                errors.append({"field": f"students[{i}].trainee_id", "message": "trainee_id is required"})
                continue
            if s.get("status") not in _STATUSES:
                errors.append(
                    {"field": f"students[{i}].status", "message": f"status must be one of: {', '.join(_STATUSES)}"}
                )
                continue
            parsed.append((str(s["trainee_id"]), AbsenceStatus(s["status"])))
        if errors:
            raise ValidationError("Validation failed", errors=errors)
        return parsed

    def _write_entries(self, record: AbsenceRecord, students: list[tuple[str, AbsenceStatus]]) -> list[TraineeAbsence]:
        created: list[TraineeAbsence] = []
        for trainee_id, status in students:
            # Present trainees get no entry.
            if status == AbsenceStatus.PRESENT:
                continue
            entry = TraineeAbsence(
                absence_id=new_id(),
                trainee_id=trainee_id,
                record_id=record.record_id,
                status=status,
                absence_hours=self._factory.hours_for(status, record),
            )
            self._entries.create(entry)
            created.append(entry)
        return created

    @staticmethod
    def _check_times(start_time: str, end_time: str) -> None:
        if hours_between(start_time, end_time) <= 0:
            raise ValidationError(
                "Validation failed",
                errors=[{"field": "end_time", "message": "end_time must be after start_time"}],
            )

    def create(
        self,
        *,
        record_date: Any,
        group_id: Optional[str],
        start_time: Optional[str],
        end_time: Optional[str],
        students: Any,
        teacher_id: Optional[str] = None,
    ) -> dict:
        day = parse_date_field(record_date, "date")
        group_id = require_non_empty(group_id, "group_id")
        start_time = require_hhmm(start_time, "start_time")
        end_time = require_hhmm(end_time, "end_time")
        self._check_times(start_time, end_time)
        parsed = self._parse_students(students)

        if not self._groups.get_by_id(group_id):
            raise NotFoundError("Group not found")

        record = AbsenceRecord(
            record_id=new_id(),
            record_date=day,
            group_id=group_id,
            teacher_id=teacher_id or None,
            start_time=start_time,
            end_time=end_time,
        )
        self._records.create(record)
        created = self._write_entries(record, parsed)
        logger.info("Absence record %s created for group %s (%d entries)", record.record_id, group_id, len(created))
        return {**record.to_dict(), "trainee_absences": [e.to_dict() for e in created]}

    def update(self, record_id: str, data: dict[str, Any]) -> dict:
        record = self._get_record(record_id)
        changes: dict[str, Any] = {}

        if data.get("date"):
            changes["record_date"] = parse_date_field(data["date"], "date")
        if data.get("group_id"):
            changes["group_id"] = str(data["group_id"])
        if "teacher_id" in data:
            changes["teacher_id"] = data["teacher_id"] or None
        if data.get("start_time"):
            changes["start_time"] = require_hhmm(data["start_time"], "start_time")
        if data.get("end_time"):
            changes["end_time"] = require_hhmm(data["end_time"], "end_time")
        if data.get("is_validated") is not None:
            changes["is_validated"] = parse_bool(data["is_validated"], "is_validated")

        updated = replace(record, **changes)
        self._check_times(updated.start_time, updated.end_time)
        students = data.get("students")
        parsed = self._parse_students(students) if students is not None else None
        self._records.update(updated)

        if parsed is not None:
            # A new student list replaces every entry of the record.
            self._entries.delete_for_record(record.record_id)
            self._write_entries(updated, parsed)
        elif "start_time" in changes or "end_time" in changes:
            for entry in self._entries.list_for_record(record.record_id):
                self._entries.update(replace(entry, absence_hours=self.hours_for(entry, updated)))

        return self.get(record.record_id)

    def delete(self, record_id: str) -> None:
        record = self._get_record(record_id)
        self._entries.delete_for_record(record.record_id)
        self._records.delete_by_id(record.record_id)

    def stats(
        self,
        *,
        group_id: Optional[str] = None,
        start_date: Optional[str] = None,
        end_date: Optional[str] = None,
    ) -> dict:
        records = self._records.find(
            group_id=group_id,
            start_date=parse_date_field(start_date, "start_date") if start_date and end_date else None,
            end_date=parse_date_field(end_date, "end_date") if start_date and end_date else None,
        )
        entries = self._entries.list_for_records([r.record_id for r in records])
        absent = [e for e in entries if e.status == AbsenceStatus.ABSENT]
        return {
            "total_records": len(records),
            "absent_count": len(absent),
            "late_count": sum(1 for e in entries if e.status == AbsenceStatus.LATE),
            "justified_count": sum(1 for e in entries if e.is_justified),
            "total_absence_hours": round_half_up(sum(e.absence_hours for e in absent if not e.is_justified), 1),
        }

    def validate(self, payload: dict, *, validated_by: Optional[str]) -> dict:
        ids = _ids_from(payload, "trainee_absence_ids", "trainee_absence_id")
        is_validated = payload.get("is_validated")
        is_validated = True if is_validated is None else parse_bool(is_validated, "is_validated")
        comment = payload.get("validation_comment") or None
        count = 0
        errors: list[dict] = []
        for absence_id in ids:
            entry = self._entries.get_by_id(absence_id)
            if not entry:
                errors.append({"id": absence_id, "error": "Trainee absence not found"})
                continue
            self._entries.update(
                replace(
                    entry,
                    is_validated=is_validated,
                    validation_comment=comment,
                    validated_at=now_local(),
                    validated_by=validated_by,
                )
            )
            count += 1
        return {"validated_count": count, "errors": errors}

    def validate_displayed(self, payload: dict, *, validated_by: Optional[str]) -> dict:
        group_name = require_non_empty(payload.get("group"), "group")
        day = parse_date_field(payload.get("date"), "date")
        ids = payload.get("absence_ids") or payload.get("absenceIds") or []

        count = 0
        now = now_local()
        for absence_id in ids:
            entry = self._entries.get_by_id(str(absence_id))
            if not entry:
                continue
            self._entries.update(replace(entry, is_validated=True, validated_at=now, validated_by=validated_by))
            count += 1

        group = self._groups.get_by_name(group_name)
        if group:
            self._records.set_validated_for_group_date(group_id=group.group_id, on_date=day)

        return {"validated_count": count, "group": group_name, "date": day.strftime("%Y-%m-%d")}

    def justify(self, payload: dict) -> dict:
        ids = _ids_from(payload, "trainee_absence_ids", "trainee_absence_id")
        justified = payload.get("is_justified") in ("justified", True)
        comment = payload.get("justification_comment") or None
        billet = payload.get("has_billet_entree")
        billet = False if billet is None else parse_bool(billet, "has_billet_entree")
        count = 0
        errors: list[dict] = []
        for absence_id in ids:
            entry = self._entries.get_by_id(absence_id)
            if not entry:
                errors.append({"id": absence_id, "error": "Trainee absence not found"})
                continue
            entry = replace(entry, is_justified=justified, justification_comment=comment, has_billet_entree=billet)
            entry = replace(entry, absence_hours=self.hours_for(entry, self._records.get_by_id(entry.record_id)))
            self._entries.update(entry)
            count += 1
        return {"justified_count": count, "errors": errors}

    def mark_billet_entree(self, absence_id: str) -> TraineeAbsence:
        entry = replace(self._get_entry(absence_id), has_billet_entree=True)
        self._entries.update(entry)
        return entry

    def update_status(self, absence_id: str, status: Optional[str]) -> TraineeAbsence:
        entry = self._get_entry(absence_id)
        if not status:
            return entry
        if status not in _STATUSES:
            raise ValidationError(
                "Validation failed",
                errors=[{"field": "status", "message": f"status must be one of: {', '.join(_STATUSES)}"}],
            )
        entry = replace(entry, status=AbsenceStatus(status))
        entry = replace(entry, absence_hours=self.hours_for(entry, self._records.get_by_id(entry.record_id)))
        self._entries.update(entry)
        return entry

    def update_column(self, absence_id: str, column: Optional[str], value: Any) -> TraineeAbsence:
        entry = self._get_entry(absence_id)
        if column in ("is_justified", "isJustified"):
            entry = replace(entry, is_justified=parse_bool(value, column))
            # hours_for gives 0 when justified and the status hours otherwise.
            entry = replace(entry, absence_hours=self.hours_for(entry, self._records.get_by_id(entry.record_id)))
        elif column in ("has_billet_entree", "hasBilletEntree"):
            entry = replace(entry, has_billet_entree=parse_bool(value, column))
        else:
            raise BadRequestError(f"Unsupported column: {column}")
        self._entries.update(entry)
        return entry
