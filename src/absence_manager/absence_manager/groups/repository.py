from __future__ import annotations

from typing import Optional, Protocol, Sequence

from .model import Group


class GroupRepository(Protocol):
    def get_by_id(self, group_id: str) -> Optional[Group]:
        raise NotImplementedError

    def get_by_name(self, name: str) -> Optional[Group]:
        raise NotImplementedError

    def list_all(self) -> Sequence[Group]:
        """All groups ordered by name."""

        raise NotImplementedError

    def list_by_ids(self, group_ids: Sequence[str]) -> Sequence[Group]:
        raise NotImplementedError

    def list_by_names(self, names: Sequence[str]) -> Sequence[Group]:
        raise NotImplementedError

    def get_or_create_by_name(self, name: str) -> Group:
        """Return the group called `name`, creating it (no filiere/annee) when missing.

        Group names are unique, so two calls with the same name yield the same group.
        """

        raise NotImplementedError

    def create(self, group: Group) -> str:
        raise NotImplementedError

    def update(self, group: Group) -> bool:
        raise NotImplementedError

    def delete_by_id(self, group_id: str) -> bool:
        raise NotImplementedError
