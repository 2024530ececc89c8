from __future__ import annotations

from typing import Optional, Protocol, Sequence

from .model import NewNotification, Notification


class NotificationRepository(Protocol):
    def create_many(self, notifications: Sequence[NewNotification]) -> int:
        """Insert all notices in one statement batch; returns rows inserted."""

        raise NotImplementedError

    def list_active(
        self,
        *,
        parade_id: int,
        target_role: str,
        division: Optional[str] = None,
        category: Optional[str] = None,
    ) -> Sequence[Notification]:
        """Active notices for a role; a NULL target matches every division/category."""

        raise NotImplementedError
