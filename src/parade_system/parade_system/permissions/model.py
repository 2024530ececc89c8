from __future__ import annotations

from dataclasses import dataclass
from datetime import date

from ..core.enums import PermissionReason


@dataclass(frozen=True)
class Permission:
    """Advance excusal for a cadet, valid through `to_date` (inclusive)."""

    parade_id: int
    cadet_id: int
    reason: PermissionReason
    to_date: date

    def to_dict(self) -> dict:
        return {
            "parade_id": self.parade_id,
            "cadet_id": self.cadet_id,
            "reason": self.reason.value,
            "to_date": self.to_date.strftime("%Y-%m-%d"),
        }
