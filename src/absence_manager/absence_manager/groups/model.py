from __future__ import annotations

from dataclasses import dataclass
from typing import Optional


@dataclass(frozen=True)
class Group:
    group_id: str
    name: str
    filiere: Optional[str] = None
    annee: Optional[str] = None
    created_by: Optional[str] = None

    def to_dict(self) -> dict:
        return {
            "id": self.group_id,
            "name": self.name,
            "filiere": self.filiere,
            "annee": self.annee,
        }
