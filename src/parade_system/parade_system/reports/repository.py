from __future__ import annotations

from typing import Optional, Protocol, Sequence

from ..core.enums import ParadeType
from .model import ParadeReport


class ReportRepository(Protocol):
    def get(self, *, parade_id: int, category: str) -> Optional[ParadeReport]:
        raise NotImplementedError

    def list_for_parade(self, *, parade_id: int) -> Sequence[ParadeReport]:
        raise NotImplementedError

    def upsert(
        self,
        *,
        parade_id: int,
        category: str,
        parade_type: Optional[ParadeType],
        report_text: str,
        created_by: int,
    ) -> None:
        """One report per (parade, category); a second save replaces the text."""

        raise NotImplementedError
