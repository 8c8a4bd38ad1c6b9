from __future__ import annotations

from typing import Optional, Protocol, Sequence

from .model import Trainee


class TraineeRepository(Protocol):
    def get_by_id(self, trainee_id: str) -> Optional[Trainee]:
        raise NotImplementedError

    def get_by_cef(self, cef: str) -> Optional[Trainee]:
        raise NotImplementedError

    def list_all(self, *, group_name: Optional[str] = None) -> Sequence[Trainee]:
        """Trainees ordered by name, optionally restricted to one group name."""

        raise NotImplementedError

    def list_by_ids(self, trainee_ids: Sequence[str]) -> Sequence[Trainee]:
        raise NotImplementedError

    def create(self, trainee: Trainee) -> str:
        raise NotImplementedError

    def update(self, trainee: Trainee) -> bool:
        raise NotImplementedError

    def delete_by_id(self, trainee_id: str) -> bool:
        raise NotImplementedError

    def delete_all(self) -> int:
        raise NotImplementedError
