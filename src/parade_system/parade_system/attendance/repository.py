from __future__ import annotations

from typing import Optional, Protocol, Sequence

from .model import AttendanceRecord, BatchEntry, BatchWriteResult


class AttendanceRepository(Protocol):
    def list_for_parade(
        self,
        *,
        parade_id: int,
        cadet_ids: Optional[Sequence[int]] = None,
    ) -> Sequence[AttendanceRecord]:
        raise NotImplementedError

    def write_attendance_batch(
        self,
        *,
        actor_id: int,
        parade_id: int,
        records: Sequence[BatchEntry],
    ) -> BatchWriteResult:
        """Atomic batch write.

        Upserts every record for (parade, cadet) and advances the parade from
        `active` to `attendance_submitted` in the same transaction. `expected`
        is the number of records received, `written` the number applied.
        """

        raise NotImplementedError
