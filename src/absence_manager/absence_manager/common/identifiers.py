from __future__ import annotations

import uuid


def new_id() -> str:
    """Opaque 32-char identifier shared by every entity table.

    Users and teachers live in different tables but share one token namespace,
    so ids must be globally unique rather than per-table counters.
    """
    return uuid.uuid4().hex
