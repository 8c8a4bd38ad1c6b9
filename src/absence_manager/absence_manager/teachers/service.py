from __future__ import annotations

import logging
import os
from dataclasses import replace
from typing import Any, Optional, Sequence

from werkzeug.datastructures import FileStorage
from werkzeug.security import generate_password_hash
from werkzeug.utils import secure_filename

from ..common.identifiers import new_id
from ..common.validators import collect, parse_bool, require_email, require_min_length, require_non_empty
from ..core.constants import MIN_TEACHER_PASSWORD_LENGTH
from ..core.exceptions import BadRequestError, DuplicateError, NotFoundError
from ..groups.repository import GroupRepository
from .model import Teacher
from .repository import TeacherRepository

logger = logging.getLogger(__name__)


class TeacherService:
    def __init__(self, teachers: TeacherRepository, groups: GroupRepository, *, upload_folder: str):
        self._teachers = teachers
        self._groups = groups
        self._upload_folder = upload_folder

    def _group_names(self, teacher: Teacher) -> list[str]:
        return [g.name for g in self._groups.list_by_ids(list(teacher.group_ids))]

    def to_public(self, teacher: Teacher) -> dict:
        return teacher.to_public(group_names=self._group_names(teacher))

    def list_teachers(self) -> Sequence[Teacher]:
        return self._teachers.list_all()

    def get(self, teacher_id: str) -> Teacher:
        teacher = self._teachers.get_by_id(teacher_id)
        if not teacher:
            raise NotFoundError("Teacher not found")
        return teacher

    def _ensure_unique(self, *, email: Optional[str], matricule: Optional[str], teacher_id: Optional[str] = None):
        if email:
            other = self._teachers.get_by_email(email)
            if other and other.teacher_id != teacher_id:
                raise DuplicateError("A teacher with this email already exists")
        if matricule:
            other = self._teachers.get_by_matricule(matricule)
            if other and other.teacher_id != teacher_id:
                raise DuplicateError("A teacher with this matricule already exists")

    def create(
        self,
        *,
        first_name: Optional[str],
        last_name: Optional[str],
        email: Optional[str],
        matricule: Optional[str],
        password: Optional[str],
    ) -> Teacher:
        collect(
            lambda: require_non_empty(first_name, "first_name"),
            lambda: require_non_empty(last_name, "last_name"),
            lambda: require_email(email),
            lambda: require_non_empty(matricule, "matricule"),
            lambda: require_min_length(password, "password", MIN_TEACHER_PASSWORD_LENGTH),
        )
        email = email.strip().lower()
        matricule = matricule.strip()
        self._ensure_unique(email=email, matricule=matricule)

        teacher = Teacher(
            teacher_id=new_id(),
            first_name=first_name.strip(),
            last_name=last_name.strip(),
            email=email,
            matricule=matricule,
            password_hash=generate_password_hash(password),
            must_change_password=True,
        )
        self._teachers.create(teacher)
        logger.info("Teacher %s created", email)
        return teacher

    def update(self, teacher_id: str, data: dict[str, Any]) -> Teacher:
        teacher = self.get(teacher_id)
        changes: dict[str, Any] = {}

        if data.get("first_name"):
            changes["first_name"] = require_non_empty(data["first_name"], "first_name")
        if data.get("last_name"):
            changes["last_name"] = require_non_empty(data["last_name"], "last_name")
        if data.get("email"):
            changes["email"] = require_email(data["email"])
        if data.get("matricule"):
            changes["matricule"] = require_non_empty(data["matricule"], "matricule")
        self._ensure_unique(email=changes.get("email"), matricule=changes.get("matricule"), teacher_id=teacher_id)

        if data.get("password"):
            require_min_length(data["password"], "password", MIN_TEACHER_PASSWORD_LENGTH)
            changes["password_hash"] = generate_password_hash(data["password"])
        if data.get("is_active") is not None:
            changes["is_active"] = parse_bool(data["is_active"], "is_active")
        if isinstance(data.get("groups"), list):
            # Unknown names are ignored.
            found = self._groups.list_by_names([str(n) for n in data["groups"]])
            changes["group_ids"] = tuple(g.group_id for g in found)

        updated = replace(teacher, **changes)
        self._teachers.update(updated)
        return updated

    def delete(self, teacher_id: str) -> None:
        teacher = self.get(teacher_id)
        self._teachers.delete_by_id(teacher.teacher_id)
        logger.info("Teacher %s deleted", teacher.email)

    def upload_schedule(self, teacher_id: str, file: Optional[FileStorage]) -> Teacher:
        teacher = self.get(teacher_id)
        if file is None or not file.filename:
            raise BadRequestError("No file uploaded")

        os.makedirs(self._upload_folder, exist_ok=True)
        filename = f"{teacher.teacher_id}_{secure_filename(file.filename)}"
        path = os.path.join(self._upload_folder, filename)
        file.save(path)

        updated = replace(teacher, schedule_path=path)
        self._teachers.update(updated)
        logger.info("Schedule file stored for teacher %s at %s", teacher.email, path)
        return updated
