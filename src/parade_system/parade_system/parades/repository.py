from __future__ import annotations

from typing import Optional, Protocol

from ..core.enums import ParadeStatus
from .model import NewParade, Parade


class ParadeRepository(Protocol):
    def create(self, new: NewParade) -> int:
        """Insert an `active` parade and return its id.

        Raises ConflictError when another parade is still open; the store
        enforces that with a unique index, not by a prior read.
        """

        raise NotImplementedError

    def get_by_id(self, parade_id: int) -> Optional[Parade]:
        raise NotImplementedError

    def get_open(self) -> Optional[Parade]:
        """The single parade in `active` or `attendance_submitted`, if any."""

        raise NotImplementedError

    def get_latest(self, *, status: Optional[ParadeStatus] = None) -> Optional[Parade]:
        """Most recently created parade, optionally restricted to one status."""

        raise NotImplementedError

    def update_remarks(self, *, parade_id: int, remarks: Optional[str]) -> bool:
        """Store ANO remarks; only applies while the parade is `attendance_submitted`."""

        raise NotImplementedError

    def close_parade(self, *, actor_id: int, parade_id: int, remarks: Optional[str] = None) -> None:
        """Atomic close transaction.

        In one transaction: require `attendance_submitted` (else
        ParadeNotReadyError), require no pending slot (else
        AttendancePendingError), persist `remarks` when given, move the
        parade to `completed`.
        """

        raise NotImplementedError
