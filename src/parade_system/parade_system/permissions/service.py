from __future__ import annotations

import logging
from dataclasses import dataclass
from datetime import date
from typing import Optional, Sequence

from ..cadets.model import Cadet
from ..cadets.repository import CadetRepository
from ..common.datetime_utils import coerce_date
from ..common.validators import optional_filter, require_category, require_division
from ..core.enums import ParadeStatus, PermissionReason, Role
from ..core.exceptions import AuthorizationError, NotFoundError, ValidationError
from ..parades import lifecycle
from ..parades.model import Parade
from ..parades.repository import ParadeRepository
from .model import Permission
from .repository import PermissionRepository

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class PermissionRow:
    cadet: Cadet
    permission: Optional[Permission]

    def to_dict(self) -> dict:
        return {
            "cadet_id": self.cadet.cadet_id,
            "enrollment_no": self.cadet.enrollment_no,
            "rank": self.cadet.rank,
            "name": self.cadet.name,
            "category": self.cadet.category,
            "division": self.cadet.division,
            "permission": self.permission.to_dict() if self.permission else None,
        }


@dataclass(frozen=True)
class PermissionRoster:
    parade: Parade
    rows: list[PermissionRow]
    locked: bool

    @property
    def total(self) -> int:
        return len(self.rows)

    @property
    def permitted(self) -> int:
        return sum(1 for r in self.rows if r.permission is not None)


class PermissionLedger:
    """Advance excusals recorded by the ANO for the open parade.

    Every mutation checks the parade lock first; nothing is written unless the
    parade is still `active`.
    """

    def __init__(self, permissions: PermissionRepository, parades: ParadeRepository, cadets: CadetRepository):
        self._permissions = permissions
        self._parades = parades
        self._cadets = cadets

    def _get_parade(self, parade_id: int) -> Parade:
        parade = self._parades.get_by_id(int(parade_id))
        if not parade:
            raise NotFoundError("Parade does not exist")
        return parade

    def upsert(
        self,
        *,
        current_role: Role,
        parade_id: int,
        cadet_id: int,
        reason: str,
        to_date: Optional[date | str] = None,
    ) -> Permission:
        if current_role != Role.ANO:
            raise AuthorizationError("Only the ANO can record permissions")

        parade = self._get_parade(parade_id)
        lifecycle.ensure_permissions_editable(parade)

        if not reason or not str(reason).strip():
            raise ValidationError("Reason required")
        parsed_reason = PermissionReason.parse(reason, field_name="Reason")

        end = coerce_date(to_date) if to_date else parade.parade_date
        if end < parade.parade_date:
            raise ValidationError("Permission date cannot be before parade date")

        if not self._cadets.get_by_id(int(cadet_id)):
            raise NotFoundError("Cadet does not exist")

        self._permissions.upsert(
            parade_id=parade.parade_id,
            cadet_id=int(cadet_id),
            reason=parsed_reason,
            to_date=end,
        )
        logger.info("Permission recorded: parade=%s cadet=%s reason=%s to=%s", parade.parade_id, cadet_id, parsed_reason.value, end)
        return Permission(parade_id=parade.parade_id, cadet_id=int(cadet_id), reason=parsed_reason, to_date=end)

    def remove(self, *, current_role: Role, parade_id: int, cadet_id: int) -> bool:
        if current_role != Role.ANO:
            raise AuthorizationError("Only the ANO can remove permissions")

        parade = self._get_parade(parade_id)
        lifecycle.ensure_permissions_editable(parade)

        removed = self._permissions.delete(parade_id=parade.parade_id, cadet_id=int(cadet_id))
        if removed:
            logger.info("Permission removed: parade=%s cadet=%s", parade.parade_id, cadet_id)
        return removed

    def get(self, *, parade_id: int, cadet_id: int) -> Optional[Permission]:
        return self._permissions.get(parade_id=int(parade_id), cadet_id=int(cadet_id))

    def list_covering(self, parade: Parade) -> Sequence[Permission]:
        return self._permissions.list_covering(parade_id=parade.parade_id, parade_date=parade.parade_date)

    def roster(
        self,
        *,
        parade_id: int,
        category: Optional[str] = None,
        division: Optional[str] = None,
        search: str = "",
    ) -> PermissionRoster:
        """Cadets of the parade with their permission for it.

        Cadets holding a permission come first, then enrollment order.
        """

        parade = self._get_parade(parade_id)
        category = optional_filter(category, require_category)
        division = optional_filter(division, require_division)
        needle = (search or "").strip().lower()

        cadets = self._cadets.list_active(categories=parade.categories, category=category, division=division)
        by_cadet = {p.cadet_id: p for p in self._permissions.list_for_parade(parade_id=parade.parade_id)}

        rows = [
            PermissionRow(cadet=c, permission=by_cadet.get(c.cadet_id))
            for c in cadets
            if not needle or needle in c.name.lower()
        ]
        rows.sort(key=lambda r: (r.permission is None, r.cadet.enrollment_no))

        return PermissionRoster(parade=parade, rows=rows, locked=parade.status != ParadeStatus.ACTIVE)
