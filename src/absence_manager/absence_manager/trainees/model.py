from __future__ import annotations

from dataclasses import dataclass
from typing import Optional


@dataclass(frozen=True)
class Trainee:
    """Enrolled trainee.

    `group_name` is kept next to `group_id` so existing callers can keep querying
    trainees by group name.
    """

    trainee_id: str
    cef: str
    name: str
    first_name: str
    group_name: str
    group_id: Optional[str] = None
    phone: Optional[str] = None

    def to_dict(self) -> dict:
        return {
            "id": self.trainee_id,
            "cef": self.cef,
            "name": self.name,
            "first_name": self.first_name,
            "groupe": self.group_name,
            "group_id": self.group_id,
            "phone": self.phone,
        }
