from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Optional

from ..common.validators import require_category, require_non_empty
from ..core.enums import ParadeStatus, ParadeType, Role
from ..core.exceptions import AuthorizationError, NotFoundError, ValidationError
from ..parades import lifecycle
from ..parades.model import Parade
from ..parades.repository import ParadeRepository
from .model import ParadeReport
from .repository import ReportRepository
from .templates import template_for

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ReportDraft:
    """What the senior's report editor starts from."""

    category: str
    parade_type: Optional[ParadeType]
    report_text: str
    existing: bool
    locked: bool

    def to_dict(self) -> dict:
        return {
            "category": self.category,
            "parade_type": self.parade_type.value if self.parade_type else None,
            "report_text": self.report_text,
            "existing": self.existing,
            "locked": self.locked,
        }


@dataclass(frozen=True)
class ReportCard:
    """One entry of the review page: a submitted report or a missing one."""

    category: str
    report: Optional[ParadeReport]

    @property
    def submitted(self) -> bool:
        return self.report is not None

    def to_dict(self) -> dict:
        if self.report is None:
            return {"category": self.category, "submitted": False}
        out = self.report.to_dict()
        out.update({"submitted": True, "preview": self.report.preview()})
        return out


class ReportService:
    def __init__(self, reports: ReportRepository, parades: ParadeRepository):
        self._reports = reports
        self._parades = parades

    def _get_parade(self, parade_id: int) -> Parade:
        parade = self._parades.get_by_id(int(parade_id))
        if not parade:
            raise NotFoundError("Parade does not exist")
        return parade

    @staticmethod
    def _category_in(parade: Parade, category: str) -> str:
        category = require_category(category)
        if category not in parade.categories:
            raise ValidationError(f"Category {category} is not part of this parade")
        return category

    def get_draft(self, *, parade_id: int, category: str) -> ReportDraft:
        parade = self._get_parade(parade_id)
        category = self._category_in(parade, category)
        parade_type = parade.parade_type_for(category)
        locked = parade.status == ParadeStatus.COMPLETED

        existing = self._reports.get(parade_id=parade.parade_id, category=category)
        if existing:
            return ReportDraft(
                category=category,
                parade_type=existing.parade_type or parade_type,
                report_text=existing.report_text,
                existing=True,
                locked=locked,
            )

        return ReportDraft(
            category=category,
            parade_type=parade_type,
            report_text=template_for(parade_type),
            existing=False,
            locked=locked,
        )

    def save(
        self,
        *,
        current_role: Role,
        actor_id: int,
        parade_id: int,
        category: str,
        report_text: str,
    ) -> None:
        if current_role != Role.SENIOR:
            raise AuthorizationError("Only seniors can submit parade reports")

        parade = self._get_parade(parade_id)
        lifecycle.ensure_report_editable(parade)
        category = self._category_in(parade, category)
        text = require_non_empty(report_text, "Report")

        self._reports.upsert(
            parade_id=parade.parade_id,
            category=category,
            parade_type=parade.parade_type_for(category),
            report_text=text,
            created_by=int(actor_id),
        )
        logger.info("Report saved for parade %s category %s by %s", parade.parade_id, category, actor_id)

    def list_cards(self, parade: Parade) -> list[ReportCard]:
        by_category = {r.category: r for r in self._reports.list_for_parade(parade_id=parade.parade_id)}
        return [ReportCard(category=c, report=by_category.get(c)) for c in parade.categories]
