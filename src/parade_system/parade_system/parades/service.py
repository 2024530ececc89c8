from __future__ import annotations

import logging
from dataclasses import dataclass
from datetime import date
from typing import Callable, Mapping, Optional

from ..attendance.model import PendingSlot
from ..attendance.pending import detect_pending
from ..attendance.repository import AttendanceRepository
from ..attendance.summary import RankTally, StatusSummary, ordered_ranks, rank_summary, status_summary
from ..cadets.repository import CadetRepository
from ..common.datetime_utils import coerce_date, today_local
from ..common.validators import (
    optional_filter,
    optional_text,
    require_categories,
    require_category,
    require_division,
    require_mapping,
)
from ..core.constants import CATEGORIES, DEFAULT_PARADE_TYPE
from ..core.enums import AttendanceStatus, CloseFailure, ParadeSession, ParadeStatus, ParadeType, Role
from ..core.exceptions import (
    AuthorizationError,
    ConflictError,
    LockedError,
    NotFoundError,
    StoreError,
    TransactionError,
    ValidationError,
)
from ..reports.service import ReportCard, ReportService
from . import lifecycle
from .model import NewParade, Parade
from .repository import ParadeRepository

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ParadeReview:
    """Everything the ANO looks at before closing a parade."""

    parade: Parade
    ranks: list[tuple[str, RankTally]]
    pending: list[PendingSlot]
    summary: StatusSummary
    reports: list[ReportCard]
    status_filter: Optional[AttendanceStatus] = None

    @property
    def can_close(self) -> bool:
        return self.parade.status == ParadeStatus.ATTENDANCE_SUBMITTED and not self.pending

    def to_dict(self) -> dict:
        return {
            "parade": self.parade.to_dict(),
            "ranks": [{"rank": r, "total": t.total, "present": t.present} for r, t in self.ranks],
            "pending": [s.to_dict() | {"label": s.label()} for s in self.pending],
            "summary": self.summary.to_dict(status=self.status_filter),
            "reports": [c.to_dict() for c in self.reports],
            "can_close": self.can_close,
        }


class ParadeService:
    def __init__(
        self,
        parades: ParadeRepository,
        cadets: CadetRepository,
        attendance: AttendanceRepository,
        reports: ReportService,
        *,
        today: Callable[[], date] = today_local,
    ):
        self._parades = parades
        self._cadets = cadets
        self._attendance = attendance
        self._reports = reports
        self._today = today

    def _get_parade(self, parade_id: int) -> Parade:
        parade = self._parades.get_by_id(int(parade_id))
        if not parade:
            raise NotFoundError("Parade does not exist")
        return parade

    # ---------- creation ----------

    def default_parade_types(self) -> dict[str, ParadeType]:
        """Type per category restored from the last completed parade."""

        defaults = {c: ParadeType(DEFAULT_PARADE_TYPE) for c in CATEGORIES}
        last = self._parades.get_latest(status=ParadeStatus.COMPLETED)
        if last:
            defaults.update(last.parade_type_map)
        return defaults

    def create_parade(
        self,
        *,
        current_role: Role,
        actor_id: int,
        parade_date,
        session: str,
        categories,
        parade_types: Optional[Mapping[str, str]] = None,
    ) -> int:
        if current_role != Role.ANO:
            raise AuthorizationError("Only the ANO can create parades")

        if not parade_date:
            raise ValidationError("Parade date is required")
        when = coerce_date(parade_date)
        if when < self._today():
            raise ValidationError("Cannot create parade for a past date.")

        if not session:
            raise ValidationError("Session is required")
        parsed_session = ParadeSession.parse(session, field_name="Session")
        selected = require_categories(categories)

        defaults = self.default_parade_types()
        given = {str(k).strip().upper(): v for k, v in require_mapping(parade_types, "Parade types").items()}
        type_map = {
            c: ParadeType.parse(given[c], field_name="Parade type") if given.get(c) else defaults[c]
            for c in selected
        }

        if self._parades.get_open():
            raise ConflictError("An active parade already exists. Please close it before creating a new one.")

        parade_id = self._parades.create(
            NewParade(
                parade_date=when,
                session=parsed_session,
                categories=selected,
                parade_type_map=type_map,
                created_by=int(actor_id),
            )
        )
        logger.info(
            "Parade %s created for %s (%s) categories=%s by=%s",
            parade_id, when, parsed_session.value, ",".join(selected), actor_id,
        )
        return parade_id

    # ---------- lookups ----------

    def get_parade(self, parade_id: int) -> Parade:
        return self._get_parade(parade_id)

    def get_open_parade(self) -> Optional[Parade]:
        return self._parades.get_open()

    def get_review_parade(self) -> Optional[Parade]:
        parade = self._parades.get_open()
        if parade and parade.status == ParadeStatus.ATTENDANCE_SUBMITTED:
            return parade
        return None

    def get_latest_parade(self) -> Optional[Parade]:
        return self._parades.get_latest()

    # ---------- review ----------

    def pending_slots(self, parade: Parade) -> list[PendingSlot]:
        roster = self._cadets.list_active(categories=parade.categories)
        records = self._attendance.list_for_parade(parade_id=parade.parade_id)
        return detect_pending(roster, records, categories=parade.categories)

    def build_review(
        self,
        *,
        parade_id: int,
        category: Optional[str] = None,
        division: Optional[str] = None,
        status: Optional[str] = None,
    ) -> ParadeReview:
        parade = self._get_parade(parade_id)
        category = optional_filter(category, require_category)
        division = optional_filter(division, require_division)
        status_filter = optional_filter(status, lambda v: AttendanceStatus.parse(v, field_name="Status"))

        roster = list(self._cadets.list_active(categories=parade.categories))
        records = list(self._attendance.list_for_parade(parade_id=parade.parade_id))

        return ParadeReview(
            parade=parade,
            ranks=ordered_ranks(rank_summary(roster, records)),
            pending=detect_pending(roster, records, categories=parade.categories),
            summary=status_summary(roster, records, category=category, division=division),
            reports=self._reports.list_cards(parade),
            status_filter=status_filter,
        )

    def save_remarks(self, *, current_role: Role, parade_id: int, remarks: str) -> None:
        if current_role != Role.ANO:
            raise AuthorizationError("Only the ANO can write remarks")

        parade = self._get_parade(parade_id)
        lifecycle.ensure_remarks_editable(parade)
        text = optional_text(remarks, "Remarks")
        if not self._parades.update_remarks(parade_id=parade.parade_id, remarks=text):
            raise LockedError("Remarks can only be edited while the parade is under review.")

    # ---------- close ----------

    def close_parade(
        self,
        *,
        current_role: Role,
        actor_id: int,
        parade_id: int,
        remarks: Optional[str] = None,
    ) -> None:
        """Run the atomic close transaction.

        Raises AttendancePendingError or ParadeNotReadyError as reported by
        the store; any other store failure surfaces as
        TransactionError(kind=other).
        """

        if current_role != Role.ANO:
            raise AuthorizationError("Only the ANO can close parades")

        self._get_parade(parade_id)
        text = optional_text(remarks, "Remarks")
        try:
            self._parades.close_parade(actor_id=int(actor_id), parade_id=int(parade_id), remarks=text)
        except TransactionError as exc:
            logger.warning("Close rejected for parade %s: %s", parade_id, exc.kind.value)
            raise
        except StoreError as exc:
            logger.error("Close failed for parade %s: %s", parade_id, exc)
            raise TransactionError(CloseFailure.OTHER) from exc

        logger.info("Parade %s closed by %s", parade_id, actor_id)
