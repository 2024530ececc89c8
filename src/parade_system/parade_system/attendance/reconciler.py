"""Attendance reconciliation.

Merges the roster, the permission ledger and the manual present marks into
one classification per cadet. Pure: no I/O, no clock.

Precedence:
    1. covering permission     -> absent_with_permission (reason carried over)
    2. marked present          -> present
    3. otherwise               -> absent_without_permission
"""

from __future__ import annotations

from typing import Iterable, Mapping, Optional, Sequence

from ..cadets.model import Cadet
from ..core.enums import AttendanceStatus
from ..parades.model import Parade
from ..permissions.model import Permission
from .model import BatchEntry, SubmissionSummary


def permission_covers(permission: Permission, parade: Parade) -> bool:
    """A permission covers the parade when it was recorded for it OR is still
    valid on the parade date.

    The date branch ignores which parade created the permission; multi-day
    excusals carry over to later parades that way.
    """

    return permission.parade_id == parade.parade_id or permission.to_date >= parade.parade_date


def covering_permissions(permissions: Iterable[Permission], parade: Parade) -> dict[int, Permission]:
    """Index covering permissions by cadet_id.

    When several permissions cover the same cadet, the one recorded for this
    parade wins, then the one reaching furthest.
    """

    out: dict[int, Permission] = {}
    for p in permissions:
        if not permission_covers(p, parade):
            continue
        current = out.get(p.cadet_id)
        if current is None or _rank(p, parade) > _rank(current, parade):
            out[p.cadet_id] = p
    return out


def _rank(p: Permission, parade: Parade):
    return (p.parade_id == parade.parade_id, p.to_date)


def classify(
    cadet_id: int,
    *,
    permission: Optional[Permission],
    marked_present: bool,
) -> BatchEntry:
    if permission is not None:
        return BatchEntry(
            cadet_id=cadet_id,
            status=AttendanceStatus.ABSENT_WITH_PERMISSION,
            reason=permission.reason,
        )
    if marked_present:
        return BatchEntry(cadet_id=cadet_id, status=AttendanceStatus.PRESENT)
    return BatchEntry(cadet_id=cadet_id, status=AttendanceStatus.ABSENT_WITHOUT_PERMISSION)


def reconcile(
    parade: Parade,
    roster: Sequence[Cadet],
    permissions: Iterable[Permission],
    present_marks: Mapping[int, bool],
) -> list[BatchEntry]:
    """One BatchEntry per roster cadet, in roster order.

    Marks for cadets outside the roster are ignored.
    """

    covering = covering_permissions(permissions, parade)
    entries: list[BatchEntry] = []
    seen: set[int] = set()
    for cadet in roster:
        if cadet.cadet_id in seen:
            continue
        seen.add(cadet.cadet_id)
        entries.append(
            classify(
                cadet.cadet_id,
                permission=covering.get(cadet.cadet_id),
                marked_present=bool(present_marks.get(cadet.cadet_id, False)),
            )
        )
    return entries


def summarize_batch(entries: Sequence[BatchEntry]) -> SubmissionSummary:
    return SubmissionSummary(
        total=len(entries),
        present=sum(1 for e in entries if e.status == AttendanceStatus.PRESENT),
        permission=sum(1 for e in entries if e.status == AttendanceStatus.ABSENT_WITH_PERMISSION),
        absent=sum(1 for e in entries if e.status == AttendanceStatus.ABSENT_WITHOUT_PERMISSION),
    )
