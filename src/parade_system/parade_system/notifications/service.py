from __future__ import annotations

import logging
from typing import Optional, Sequence

from ..attendance.model import PendingSlot
from ..common.validators import optional_filter, require_category, require_division
from ..core.constants import PENDING_NOTICE_ROLE
from ..core.enums import NotificationType, Role
from ..core.exceptions import AuthorizationError, NoOpError, NotFoundError
from ..parades.repository import ParadeRepository
from .model import NewNotification, Notification
from .repository import NotificationRepository

logger = logging.getLogger(__name__)

PENDING_MESSAGE = "Attendance for Category {category} – {division} is pending. Submit attendance immediately."


def pending_notice(parade_id: int, slot: PendingSlot) -> NewNotification:
    return NewNotification(
        parade_id=int(parade_id),
        type=NotificationType.PENDING,
        message=PENDING_MESSAGE.format(category=slot.category, division=slot.division),
        target_role=PENDING_NOTICE_ROLE,
        target_category=slot.category,
        target_division=slot.division,
    )


class NotificationDispatcher:
    def __init__(self, notifications: NotificationRepository, parades: ParadeRepository):
        self._notifications = notifications
        self._parades = parades

    def notify_pending(
        self,
        *,
        current_role: Role,
        parade_id: int,
        pending_slots: Sequence[PendingSlot],
    ) -> int:
        """Post one pending-attendance notice per slot; returns how many were posted."""

        if current_role != Role.ANO:
            raise AuthorizationError("Only the ANO can send reminders")
        if not pending_slots:
            raise NoOpError("No pending attendance to notify.")
        if not self._parades.get_by_id(int(parade_id)):
            raise NotFoundError("Parade does not exist")

        notices = [pending_notice(parade_id, s) for s in pending_slots]
        created = self._notifications.create_many(notices)
        logger.info(
            "Pending notices sent for parade %s: %s",
            parade_id, ", ".join(s.label() for s in pending_slots),
        )
        return created

    def list_for_senior(
        self,
        *,
        parade_id: int,
        division: Optional[str] = None,
        category: Optional[str] = None,
    ) -> Sequence[Notification]:
        return self._notifications.list_active(
            parade_id=int(parade_id),
            target_role=PENDING_NOTICE_ROLE,
            division=optional_filter(division, require_division),
            category=optional_filter(category, require_category),
        )
