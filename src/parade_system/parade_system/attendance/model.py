from __future__ import annotations

from dataclasses import dataclass
from typing import Optional

from ..core.enums import AttendanceStatus, PermissionReason


@dataclass(frozen=True)
class AttendanceRecord:
    """Domain entity: persisted attendance of one cadet for one parade."""

    parade_id: int
    cadet_id: int
    status: AttendanceStatus
    reason: Optional[PermissionReason] = None


@dataclass(frozen=True)
class BatchEntry:
    """One element of the `write_attendance_batch` payload.

    Produced by the reconciler, consumed by the store; the same shape is used
    on both sides.
    """

    cadet_id: int
    status: AttendanceStatus
    reason: Optional[PermissionReason] = None

    def to_payload(self) -> dict:
        out = {"cadet_id": self.cadet_id, "status": self.status.value}
        if self.reason is not None:
            out["reason"] = self.reason.value
        return out


@dataclass(frozen=True)
class BatchWriteResult:
    expected: int
    written: int

    @property
    def complete(self) -> bool:
        return self.expected == self.written


@dataclass(frozen=True)
class SubmissionSummary:
    total: int
    present: int
    permission: int
    absent: int

    def to_dict(self) -> dict:
        return {
            "total": self.total,
            "present": self.present,
            "permission": self.permission,
            "absent": self.absent,
        }


@dataclass(frozen=True)
class PendingSlot:
    """A (category, division) grouping with no recorded attendance yet."""

    category: str
    division: str

    def label(self) -> str:
        return f"Category {self.category} – {self.division}"

    def to_dict(self) -> dict:
        return {"category": self.category, "division": self.division}
