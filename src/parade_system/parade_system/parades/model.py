from __future__ import annotations

from dataclasses import dataclass, field
from datetime import date, datetime
from typing import Mapping, Optional

from ..core.enums import OPEN_PARADE_STATUSES, ParadeSession, ParadeStatus, ParadeType


@dataclass(frozen=True)
class Parade:
    """Domain entity: one roll-call event with its own attendance cycle."""

    parade_id: int
    parade_date: date
    session: ParadeSession
    categories: tuple[str, ...]
    parade_type_map: Mapping[str, ParadeType]
    status: ParadeStatus
    created_by: int
    ano_remarks: Optional[str] = None
    created_at: Optional[datetime] = None
    closed_by: Optional[int] = None
    closed_at: Optional[datetime] = None

    @property
    def is_open(self) -> bool:
        return self.status in OPEN_PARADE_STATUSES

    def parade_type_for(self, category: str) -> Optional[ParadeType]:
        return self.parade_type_map.get(category)

    def to_dict(self) -> dict:
        return {
            "parade_id": self.parade_id,
            "parade_date": self.parade_date.strftime("%Y-%m-%d"),
            "session": self.session.value,
            "categories": list(self.categories),
            "parade_type_map": {k: v.value for k, v in self.parade_type_map.items()},
            "status": self.status.value,
            "created_by": self.created_by,
            "ano_remarks": self.ano_remarks or "",
            "closed_at": self.closed_at.strftime("%Y-%m-%d %H:%M") if self.closed_at else None,
        }


@dataclass(frozen=True)
class NewParade:
    """Validated input for parade creation."""

    parade_date: date
    session: ParadeSession
    categories: tuple[str, ...]
    parade_type_map: Mapping[str, ParadeType] = field(default_factory=dict)
    created_by: int = 0
