from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from typing import Optional

from ..core.constants import REPORT_PREVIEW_CHARS
from ..core.enums import ParadeType


@dataclass(frozen=True)
class ParadeReport:
    """Free-text report for one category of a parade."""

    parade_id: int
    category: str
    report_text: str
    parade_type: Optional[ParadeType]
    created_by: Optional[int] = None
    updated_at: Optional[datetime] = None

    def preview(self) -> str:
        text = self.report_text or ""
        if len(text) <= REPORT_PREVIEW_CHARS:
            return text
        return text[:REPORT_PREVIEW_CHARS] + "…"

    def to_dict(self) -> dict:
        return {
            "parade_id": self.parade_id,
            "category": self.category,
            "report_text": self.report_text,
            "parade_type": self.parade_type.value if self.parade_type else None,
            "updated_at": self.updated_at.strftime("%Y-%m-%d %H:%M") if self.updated_at else None,
        }
