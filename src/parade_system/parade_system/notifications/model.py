from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from typing import Optional

from ..core.enums import NotificationType


@dataclass(frozen=True)
class NewNotification:
    parade_id: int
    type: NotificationType
    message: str
    target_role: str
    target_category: Optional[str] = None
    target_division: Optional[str] = None


@dataclass(frozen=True)
class Notification:
    notification_id: int
    parade_id: int
    type: NotificationType
    message: str
    target_role: str
    target_category: Optional[str] = None
    target_division: Optional[str] = None
    is_active: bool = True
    created_at: Optional[datetime] = None

    def to_dict(self) -> dict:
        return {
            "notification_id": self.notification_id,
            "type": self.type.value,
            "message": self.message,
            "target_category": self.target_category,
            "target_division": self.target_division,
        }
