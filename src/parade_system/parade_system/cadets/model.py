from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True)
class Cadet:
    """Domain entity: a cadet on the roster.

    Owned by the roster-management side; the parade engine only reads it.
    """

    cadet_id: int
    enrollment_no: str
    rank: str
    name: str
    category: str
    division: str
    is_active: bool = True
