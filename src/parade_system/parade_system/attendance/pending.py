"""Pending slot detection.

A (category, division) slot with at least one active cadet is complete as
soon as ANY cadet of that slot has an attendance record. This is a
group-level check, not a per-cadet one.
"""

from __future__ import annotations

from typing import Iterable, Sequence

from ..cadets.model import Cadet
from .model import AttendanceRecord, PendingSlot


def detect_pending(
    roster: Sequence[Cadet],
    records: Iterable[AttendanceRecord],
    *,
    categories: Sequence[str],
) -> list[PendingSlot]:
    """Pending slots ordered by category, then division."""

    included = set(categories)
    recorded = {r.cadet_id for r in records}

    slots: dict[tuple[str, str], bool] = {}
    for cadet in roster:
        if not cadet.is_active or cadet.category not in included:
            continue
        key = (cadet.category, cadet.division)
        slots[key] = slots.get(key, False) or cadet.cadet_id in recorded

    return [PendingSlot(category=c, division=d) for (c, d), covered in sorted(slots.items()) if not covered]
