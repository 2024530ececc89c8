from __future__ import annotations

from datetime import date
from typing import Optional, Protocol, Sequence

from ..core.enums import PermissionReason
from .model import Permission


class PermissionRepository(Protocol):
    def get(self, *, parade_id: int, cadet_id: int) -> Optional[Permission]:
        raise NotImplementedError

    def list_for_parade(self, *, parade_id: int) -> Sequence[Permission]:
        raise NotImplementedError

    def list_covering(self, *, parade_id: int, parade_date: date) -> Sequence[Permission]:
        """Permissions recorded for `parade_id` OR valid through `parade_date`."""

        raise NotImplementedError

    def upsert(self, *, parade_id: int, cadet_id: int, reason: PermissionReason, to_date: date) -> None:
        raise NotImplementedError

    def delete(self, *, parade_id: int, cadet_id: int) -> bool:
        raise NotImplementedError
