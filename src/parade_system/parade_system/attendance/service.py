from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Mapping, Optional

from ..cadets.model import Cadet
from ..cadets.repository import CadetRepository
from ..common.validators import require_category, require_division
from ..core.enums import AttendanceStatus, ParadeType, Role
from ..core.exceptions import (
    AuthorizationError,
    ConflictError,
    MismatchError,
    NotFoundError,
    ValidationError,
)
from ..parades import lifecycle
from ..parades.model import Parade
from ..parades.repository import ParadeRepository
from ..permissions.model import Permission
from ..permissions.repository import PermissionRepository
from .model import SubmissionSummary
from .reconciler import covering_permissions, reconcile, summarize_batch
from .repository import AttendanceRepository

logger = logging.getLogger(__name__)

# Labels of the senior's sheet filter.
SHEET_PRESENT = "PRESENT"
SHEET_PERMISSION = "PERMISSION"
SHEET_ABSENT = "ABSENT"
SHEET_FILTERS = {SHEET_PRESENT, SHEET_PERMISSION, SHEET_ABSENT}


@dataclass(frozen=True)
class SheetRow:
    cadet: Cadet
    permission: Optional[Permission]
    marked_present: bool

    @property
    def display_status(self) -> str:
        if self.permission is not None:
            return SHEET_PERMISSION
        if self.marked_present:
            return SHEET_PRESENT
        return SHEET_ABSENT

    def to_dict(self) -> dict:
        return {
            "cadet_id": self.cadet.cadet_id,
            "enrollment_no": self.cadet.enrollment_no,
            "name": self.cadet.name,
            "reason": self.permission.reason.value if self.permission else None,
            "present": self.marked_present,
            "status": self.display_status,
        }


@dataclass(frozen=True)
class AttendanceSheet:
    """Senior's view of one (category, division) scope of a parade."""

    parade: Parade
    category: str
    division: str
    parade_type: Optional[ParadeType]
    rows: list[SheetRow]
    has_existing: bool

    @property
    def can_edit(self) -> bool:
        return self.parade.is_open

    def visible_rows(self, status_filter: Optional[str] = None) -> list[SheetRow]:
        flt = (status_filter or "ALL").strip().upper()
        if flt == "ALL":
            return list(self.rows)
        if flt not in SHEET_FILTERS:
            raise ValidationError(f"Unknown filter: {status_filter}")
        return [r for r in self.rows if r.display_status == flt]


class AttendanceService:
    def __init__(
        self,
        attendance: AttendanceRepository,
        parades: ParadeRepository,
        cadets: CadetRepository,
        permissions: PermissionRepository,
    ):
        self._attendance = attendance
        self._parades = parades
        self._cadets = cadets
        self._permissions = permissions

    def _get_parade(self, parade_id: int) -> Parade:
        parade = self._parades.get_by_id(int(parade_id))
        if not parade:
            raise NotFoundError("Parade does not exist")
        return parade

    def _scope(self, parade: Parade, category: str, division: str) -> tuple[str, str, list[Cadet]]:
        category = require_category(category)
        division = require_division(division)
        if category not in parade.categories:
            raise ValidationError(f"Category {category} is not part of this parade")
        roster = list(self._cadets.list_active(categories=parade.categories, category=category, division=division))
        return category, division, roster

    def load_sheet(self, *, parade_id: int, category: str, division: str) -> AttendanceSheet:
        parade = self._get_parade(parade_id)
        category, division, roster = self._scope(parade, category, division)

        covering = covering_permissions(
            self._permissions.list_covering(parade_id=parade.parade_id, parade_date=parade.parade_date),
            parade,
        )
        records = self._attendance.list_for_parade(
            parade_id=parade.parade_id,
            cadet_ids=[c.cadet_id for c in roster],
        )
        present = {r.cadet_id for r in records if r.status == AttendanceStatus.PRESENT}

        rows = [
            SheetRow(cadet=c, permission=covering.get(c.cadet_id), marked_present=c.cadet_id in present)
            for c in roster
        ]
        return AttendanceSheet(
            parade=parade,
            category=category,
            division=division,
            parade_type=parade.parade_type_for(category),
            rows=rows,
            has_existing=len(records) > 0,
        )

    def submit(
        self,
        *,
        current_role: Role,
        actor_id: int,
        parade_id: int,
        category: str,
        division: str,
        present_marks: Mapping[int, bool],
        edit: bool = False,
    ) -> SubmissionSummary:
        """Reconcile the scope and write it as one atomic batch.

        The first submission of a scope advances the parade to
        `attendance_submitted`; resubmitting requires `edit=True` and
        overwrites the scope's records without changing the status.
        """

        if current_role != Role.SENIOR:
            raise AuthorizationError("Only seniors can submit attendance")

        parade = self._get_parade(parade_id)
        lifecycle.ensure_attendance_writable(parade)
        category, division, roster = self._scope(parade, category, division)
        if not roster:
            raise ValidationError(f"No active cadets in Category {category} – {division}")

        existing = self._attendance.list_for_parade(
            parade_id=parade.parade_id,
            cadet_ids=[c.cadet_id for c in roster],
        )
        if existing and not edit:
            raise ConflictError("Attendance already submitted for this scope. Use edit mode to change it.")

        permissions = self._permissions.list_covering(parade_id=parade.parade_id, parade_date=parade.parade_date)
        batch = reconcile(parade, roster, permissions, {int(k): bool(v) for k, v in present_marks.items()})
        if len(batch) != len(roster):
            raise ValidationError("Attendance batch does not cover the roster")

        result = self._attendance.write_attendance_batch(
            actor_id=int(actor_id),
            parade_id=parade.parade_id,
            records=batch,
        )
        if not result.complete or result.expected != len(roster):
            logger.warning(
                "Attendance mismatch: parade=%s scope=%s/%s expected=%s written=%s roster=%s",
                parade.parade_id, category, division, result.expected, result.written, len(roster),
            )
            raise MismatchError(expected=len(roster), written=result.written)

        summary = summarize_batch(batch)
        logger.info(
            "Attendance %s: parade=%s scope=%s/%s by=%s %s",
            "updated" if existing else "submitted",
            parade.parade_id, category, division, actor_id, summary.to_dict(),
        )
        return summary
