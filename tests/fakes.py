"""In-memory repositories shared by the test suite."""

from __future__ import annotations

from dataclasses import replace
from datetime import date, datetime, timedelta
from typing import Optional, Sequence

from werkzeug.security import generate_password_hash

from src.absence_manager.absence_manager.absences.model import AbsenceRecord, TraineeAbsence
from src.absence_manager.absence_manager.common.identifiers import new_id
from src.absence_manager.absence_manager.container import Container, assemble
from src.absence_manager.absence_manager.core.enums import Role
from src.absence_manager.absence_manager.groups.model import Group
from src.absence_manager.absence_manager.schedules.model import Schedule
from src.absence_manager.absence_manager.teachers.model import Teacher
from src.absence_manager.absence_manager.trainees.model import Trainee
from src.absence_manager.absence_manager.users.model import User


class InMemoryUsers:
    def __init__(self, users: Sequence[User] = ()):
        self.items: dict[str, User] = {u.user_id: u for u in users}

    def get_by_id(self, user_id: str) -> Optional[User]:
        return self.items.get(user_id)

    def get_by_email(self, email: str) -> Optional[User]:
        return next((u for u in self.items.values() if u.email == email), None)

    def list_all(self) -> Sequence[User]:
        return list(self.items.values())

    def create(self, user: User) -> str:
        self.items[user.user_id] = user
        return user.user_id

    def update(self, user: User) -> bool:
        if user.user_id not in self.items:
            return False
        self.items[user.user_id] = user
        return True

    def delete_by_id(self, user_id: str) -> bool:
        return self.items.pop(user_id, None) is not None


class InMemoryTeachers:
    def __init__(self, teachers: Sequence[Teacher] = ()):
        self.items: dict[str, Teacher] = {t.teacher_id: t for t in teachers}

    def get_by_id(self, teacher_id: str) -> Optional[Teacher]:
        return self.items.get(teacher_id)

    def get_by_email(self, email: str) -> Optional[Teacher]:
        return next((t for t in self.items.values() if t.email == email), None)

    def get_by_matricule(self, matricule: str) -> Optional[Teacher]:
        return next((t for t in self.items.values() if t.matricule == matricule), None)

    def list_all(self) -> Sequence[Teacher]:
        return sorted(self.items.values(), key=lambda t: (t.last_name, t.first_name))

    def create(self, teacher: Teacher) -> str:
        self.items[teacher.teacher_id] = teacher
        return teacher.teacher_id

    def update(self, teacher: Teacher) -> bool:
        if teacher.teacher_id not in self.items:
            return False
        self.items[teacher.teacher_id] = teacher
        return True

    def delete_by_id(self, teacher_id: str) -> bool:
        return self.items.pop(teacher_id, None) is not None


class InMemoryGroups:
    def __init__(self, groups: Sequence[Group] = ()):
        self.items: dict[str, Group] = {g.group_id: g for g in groups}

    def get_by_id(self, group_id: str) -> Optional[Group]:
        return self.items.get(group_id)

    def get_by_name(self, name: str) -> Optional[Group]:
        return next((g for g in self.items.values() if g.name == name), None)

    def list_all(self) -> Sequence[Group]:
        return sorted(self.items.values(), key=lambda g: g.name)

    def list_by_ids(self, group_ids: Sequence[str]) -> Sequence[Group]:
        return [g for g in self.list_all() if g.group_id in set(group_ids)]

    def list_by_names(self, names: Sequence[str]) -> Sequence[Group]:
        return [g for g in self.list_all() if g.name in set(names)]

    def get_or_create_by_name(self, name: str) -> Group:
        existing = self.get_by_name(name)
        if existing:
            return existing
        group = Group(group_id=new_id(), name=name)
        self.items[group.group_id] = group
        return group

    def create(self, group: Group) -> str:
        self.items[group.group_id] = group
        return group.group_id

    def update(self, group: Group) -> bool:
        if group.group_id not in self.items:
            return False
        self.items[group.group_id] = group
        return True

    def delete_by_id(self, group_id: str) -> bool:
        return self.items.pop(group_id, None) is not None


class InMemoryTrainees:
    def __init__(self, trainees: Sequence[Trainee] = ()):
        self.items: dict[str, Trainee] = {t.trainee_id: t for t in trainees}

    def get_by_id(self, trainee_id: str) -> Optional[Trainee]:
        return self.items.get(trainee_id)

    def get_by_cef(self, cef: str) -> Optional[Trainee]:
        return next((t for t in self.items.values() if t.cef == cef), None)

    def list_all(self, *, group_name: Optional[str] = None) -> Sequence[Trainee]:
        items = [t for t in self.items.values() if not group_name or t.group_name == group_name]
        return sorted(items, key=lambda t: (t.name, t.first_name))

    def list_by_ids(self, trainee_ids: Sequence[str]) -> Sequence[Trainee]:
        return [self.items[i] for i in trainee_ids if i in self.items]

    def create(self, trainee: Trainee) -> str:
        self.items[trainee.trainee_id] = trainee
        return trainee.trainee_id

    def update(self, trainee: Trainee) -> bool:
        if trainee.trainee_id not in self.items:
            return False
        self.items[trainee.trainee_id] = trainee
        return True

    def delete_by_id(self, trainee_id: str) -> bool:
        return self.items.pop(trainee_id, None) is not None

    def delete_all(self) -> int:
        count = len(self.items)
        self.items.clear()
        return count


class InMemoryRecords:
    def __init__(self, records: Sequence[AbsenceRecord] = ()):
        self.items: dict[str, AbsenceRecord] = {r.record_id: r for r in records}

    def get_by_id(self, record_id: str) -> Optional[AbsenceRecord]:
        return self.items.get(record_id)

    def list_by_ids(self, record_ids: Sequence[str]) -> Sequence[AbsenceRecord]:
        return [self.items[i] for i in record_ids if i in self.items]

    def find(
        self,
        *,
        group_id: Optional[str] = None,
        on_date: Optional[date] = None,
        start_date: Optional[date] = None,
        end_date: Optional[date] = None,
    ) -> Sequence[AbsenceRecord]:
        out = []
        for r in self.items.values():
            if group_id and r.group_id != group_id:
                continue
            if start_date and end_date:
                if not start_date <= r.record_date <= end_date:
                    continue
            elif on_date and r.record_date != on_date:
                continue
            out.append(r)
        return sorted(out, key=lambda r: r.record_date, reverse=True)

    def create(self, record: AbsenceRecord) -> str:
        self.items[record.record_id] = record
        return record.record_id

    def update(self, record: AbsenceRecord) -> bool:
        if record.record_id not in self.items:
            return False
        self.items[record.record_id] = record
        return True

    def delete_by_id(self, record_id: str) -> bool:
        return self.items.pop(record_id, None) is not None

    def set_validated_for_group_date(self, *, group_id: str, on_date: date) -> int:
        count = 0
        for r in list(self.items.values()):
            if r.group_id == group_id and r.record_date == on_date:
                self.items[r.record_id] = replace(r, is_validated=True)
                count += 1
        return count


class InMemoryEntries:
    def __init__(self, entries: Sequence[TraineeAbsence] = ()):
        self.items: dict[str, TraineeAbsence] = {}
        self._clock = datetime(2025, 1, 1, 8, 0)
        for e in entries:
            self.create(e)

    def get_by_id(self, absence_id: str) -> Optional[TraineeAbsence]:
        return self.items.get(absence_id)

    def list_for_record(self, record_id: str) -> Sequence[TraineeAbsence]:
        return [e for e in self.items.values() if e.record_id == record_id]

    def list_for_records(self, record_ids: Sequence[str]) -> Sequence[TraineeAbsence]:
        wanted = set(record_ids)
        return [e for e in self.items.values() if e.record_id in wanted]

    def list_for_trainee(self, trainee_id: str) -> Sequence[TraineeAbsence]:
        return self.list_for_trainees([trainee_id])

    def list_for_trainees(self, trainee_ids: Sequence[str]) -> Sequence[TraineeAbsence]:
        wanted = set(trainee_ids)
        items = [e for e in self.items.values() if e.trainee_id in wanted]
        return sorted(items, key=lambda e: e.created_at, reverse=True)

    def create(self, absence: TraineeAbsence) -> str:
        self._clock += timedelta(minutes=1)
        self.items[absence.absence_id] = replace(absence, created_at=absence.created_at or self._clock)
        return absence.absence_id

    def update(self, absence: TraineeAbsence) -> bool:
        if absence.absence_id not in self.items:
            return False
        self.items[absence.absence_id] = absence
        return True

    def delete_for_record(self, record_id: str) -> int:
        return self._delete(lambda e: e.record_id == record_id)

    def delete_for_trainee(self, trainee_id: str) -> int:
        return self._delete(lambda e: e.trainee_id == trainee_id)

    def delete_all(self) -> int:
        return self._delete(lambda e: True)

    def _delete(self, predicate) -> int:
        doomed = [i for i, e in self.items.items() if predicate(e)]
        for i in doomed:
            del self.items[i]
        return len(doomed)


class InMemorySchedules:
    def __init__(self, schedules: Sequence[Schedule] = ()):
        self.items: dict[str, Schedule] = {s.schedule_id: s for s in schedules}

    def get_by_id(self, schedule_id: str) -> Optional[Schedule]:
        return self.items.get(schedule_id)

    def find(
        self,
        *,
        teacher_id: Optional[str] = None,
        academic_year: Optional[str] = None,
        week_number: Optional[int] = None,
        is_active: Optional[bool] = None,
    ) -> Sequence[Schedule]:
        out = []
        for s in self.items.values():
            if teacher_id and s.teacher_id != teacher_id:
                continue
            if academic_year and s.academic_year != academic_year:
                continue
            if week_number is not None and s.week_number != week_number:
                continue
            if is_active is not None and s.is_active != is_active:
                continue
            out.append(s)
        return out

    def find_active_with_slot(
        self,
        *,
        day: str,
        time_slot: str,
        exclude_schedule_id: Optional[str] = None,
    ) -> Sequence[Schedule]:
        return [
            s
            for s in self.items.values()
            if s.is_active
            and s.schedule_id != exclude_schedule_id
            and any(x.day == day and x.time_slot == time_slot for x in s.sessions)
        ]

    def create(self, schedule: Schedule) -> str:
        self.items[schedule.schedule_id] = schedule
        return schedule.schedule_id

    def update(self, schedule: Schedule) -> bool:
        if schedule.schedule_id not in self.items:
            return False
        self.items[schedule.schedule_id] = schedule
        return True

    def delete_by_id(self, schedule_id: str) -> bool:
        return self.items.pop(schedule_id, None) is not None


def make_user(*, email: str = "admin@example.com", password: str = "admin123", role: Role = Role.ADMIN, **kw) -> User:
    return User(
        user_id=kw.pop("user_id", new_id()),
        name=kw.pop("name", "Admin"),
        email=email,
        password_hash=generate_password_hash(password),
        role=role,
        **kw,
    )


def make_teacher(*, email: str = "prof@example.com", password: str = "prof12345", **kw) -> Teacher:
    return Teacher(
        teacher_id=kw.pop("teacher_id", new_id()),
        first_name=kw.pop("first_name", "Karim"),
        last_name=kw.pop("last_name", "Alaoui"),
        email=email,
        matricule=kw.pop("matricule", "M-001"),
        password_hash=generate_password_hash(password),
        **kw,
    )


def build_test_container(
    *,
    users: Sequence[User] = (),
    teachers: Sequence[Teacher] = (),
    groups: Sequence[Group] = (),
    trainees: Sequence[Trainee] = (),
    records: Sequence[AbsenceRecord] = (),
    entries: Sequence[TraineeAbsence] = (),
    schedules: Sequence[Schedule] = (),
    upload_folder: str = "uploads_test",
) -> Container:
    return assemble(
        users_repo=InMemoryUsers(users),
        teachers_repo=InMemoryTeachers(teachers),
        groups_repo=InMemoryGroups(groups),
        trainees_repo=InMemoryTrainees(trainees),
        records_repo=InMemoryRecords(records),
        entries_repo=InMemoryEntries(entries),
        schedules_repo=InMemorySchedules(schedules),
        jwt_secret="test-jwt-secret",
        jwt_expires_hours=1,
        upload_folder=upload_folder,
    )
