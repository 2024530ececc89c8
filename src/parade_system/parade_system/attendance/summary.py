from __future__ import annotations

from dataclasses import dataclass, field
from typing import Iterable, Optional, Sequence

from ..cadets.model import Cadet
from ..core.constants import RANK_ORDER
from ..core.enums import AttendanceStatus
from .model import AttendanceRecord


@dataclass(frozen=True)
class RankTally:
    total: int = 0
    present: int = 0


@dataclass(frozen=True)
class StatusSummary:
    """Category/division breakdown of one scope of cadets."""

    total: int
    present: list[Cadet] = field(default_factory=list)
    permission: list[Cadet] = field(default_factory=list)
    absent: list[Cadet] = field(default_factory=list)

    @property
    def present_count(self) -> int:
        return len(self.present)

    @property
    def permission_count(self) -> int:
        return len(self.permission)

    @property
    def absent_count(self) -> int:
        return len(self.absent)

    def percent(self, count: int) -> float:
        if self.total == 0:
            return 0.0
        return round(count / self.total * 100, 1)

    def to_dict(self, *, status: Optional[AttendanceStatus] = None) -> dict:
        def _cadets(items: list[Cadet], which: AttendanceStatus) -> list[dict]:
            if status is not None and status != which:
                return []
            return [{"cadet_id": c.cadet_id, "enrollment_no": c.enrollment_no, "name": c.name} for c in items]

        return {
            "total": self.total,
            "present": {"count": self.present_count, "percent": self.percent(self.present_count)},
            "absent_with_permission": {"count": self.permission_count, "percent": self.percent(self.permission_count)},
            "absent_without_permission": {"count": self.absent_count, "percent": self.percent(self.absent_count)},
            "cadets": {
                "present": _cadets(self.present, AttendanceStatus.PRESENT),
                "absent_with_permission": _cadets(self.permission, AttendanceStatus.ABSENT_WITH_PERMISSION),
                "absent_without_permission": _cadets(self.absent, AttendanceStatus.ABSENT_WITHOUT_PERMISSION),
            },
        }


def _status_by_cadet(records: Iterable[AttendanceRecord]) -> dict[int, AttendanceStatus]:
    return {r.cadet_id: r.status for r in records}


def scope_roster(
    roster: Sequence[Cadet],
    *,
    category: Optional[str] = None,
    division: Optional[str] = None,
) -> list[Cadet]:
    return [
        c
        for c in roster
        if (category is None or c.category == category) and (division is None or c.division == division)
    ]


def rank_summary(roster: Sequence[Cadet], records: Iterable[AttendanceRecord]) -> dict[str, RankTally]:
    """rank -> {total, present}, keyed by the rank exactly as stored."""

    statuses = _status_by_cadet(records)
    totals: dict[str, list[int]] = {}
    for cadet in roster:
        bucket = totals.setdefault(cadet.rank, [0, 0])
        bucket[0] += 1
        if statuses.get(cadet.cadet_id) == AttendanceStatus.PRESENT:
            bucket[1] += 1
    return {rank: RankTally(total=t, present=p) for rank, (t, p) in totals.items()}


def ordered_ranks(summary: dict[str, RankTally]) -> list[tuple[str, RankTally]]:
    """Canonical display order; every canonical rank appears, unknown ranks follow."""

    out = [(rank, summary.get(rank, RankTally())) for rank in RANK_ORDER]
    out.extend((rank, tally) for rank, tally in sorted(summary.items()) if rank not in RANK_ORDER)
    return out


def status_summary(
    roster: Sequence[Cadet],
    records: Iterable[AttendanceRecord],
    *,
    category: Optional[str] = None,
    division: Optional[str] = None,
) -> StatusSummary:
    """Partition the scoped cadets by their recorded status.

    A cadet without a record counts as absent without permission.
    """

    statuses = _status_by_cadet(records)
    scoped = scope_roster(roster, category=category, division=division)

    present: list[Cadet] = []
    permission: list[Cadet] = []
    absent: list[Cadet] = []
    for cadet in scoped:
        status = statuses.get(cadet.cadet_id)
        if status == AttendanceStatus.PRESENT:
            present.append(cadet)
        elif status == AttendanceStatus.ABSENT_WITH_PERMISSION:
            permission.append(cadet)
        else:
            absent.append(cadet)

    return StatusSummary(total=len(scoped), present=present, permission=permission, absent=absent)
