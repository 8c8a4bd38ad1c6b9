from __future__ import annotations

from dataclasses import replace
from typing import Any, Optional, Sequence

from ..common.identifiers import new_id
from ..common.validators import require_non_empty
from ..core.exceptions import DuplicateError, NotFoundError
from .model import Group
from .repository import GroupRepository


def _clean(value: Any) -> Optional[str]:
    if value is None:
        return None
    value = str(value).strip()
    return value or None


class GroupService:
    def __init__(self, groups: GroupRepository):
        self._groups = groups

    def list_groups(self) -> Sequence[Group]:
        return self._groups.list_all()

    def get(self, group_id: str) -> Group:
        group = self._groups.get_by_id(group_id)
        if not group:
            raise NotFoundError("Group not found")
        return group

    def get_by_name(self, name: str) -> Group:
        group = self._groups.get_by_name(name)
        if not group:
            raise NotFoundError("Group not found")
        return group

    def create(
        self,
        *,
        name: Optional[str],
        filiere: Optional[str] = None,
        annee: Optional[str] = None,
        created_by: Optional[str] = None,
    ) -> Group:
        name = require_non_empty(name, "name")
        if self._groups.get_by_name(name):
            raise DuplicateError("A group with this name already exists")

        group = Group(
            group_id=new_id(),
            name=name,
            filiere=_clean(filiere),
            annee=_clean(annee),
            created_by=created_by,
        )
        self._groups.create(group)
        return group

    def update(self, group_id: str, data: dict[str, Any]) -> Group:
        group = self.get(group_id)
        changes: dict[str, Any] = {}

        if data.get("name"):
            name = require_non_empty(data["name"], "name")
            other = self._groups.get_by_name(name)
            if other and other.group_id != group.group_id:
                raise DuplicateError("A group with this name already exists")
            changes["name"] = name
        if "filiere" in data:
            changes["filiere"] = _clean(data["filiere"])
        if "annee" in data:
            changes["annee"] = _clean(data["annee"])

        updated = replace(group, **changes)
        self._groups.update(updated)
        return updated

    def delete(self, group_id: str) -> None:
        if not self._groups.delete_by_id(group_id):
            raise NotFoundError("Group not found")
