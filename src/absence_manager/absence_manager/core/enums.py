from __future__ import annotations

from enum import Enum


class Role(str, Enum):
    """Principal roles used by the access control gate."""

    ADMIN = "admin"
    SG = "sg"
    TEACHER = "teacher"


class AbsenceStatus(str, Enum):
    """Outcome of one trainee for one attendance-taking event."""

    ABSENT = "absent"
    LATE = "late"
    PRESENT = "present"


class SessionType(str, Enum):
    COURS = "Cours"
    TD = "TD"
    TP = "TP"


class ConflictType(str, Enum):
    TEACHER = "teacher"
    ROOM = "room"
    GROUP = "group"
