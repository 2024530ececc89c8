from __future__ import annotations

from typing import Optional, Sequence

from ..core.enums import NotificationType
from ..database.connection import DatabaseConnection
from ..database.mysql_base import db_cursor, fetchall
from .model import NewNotification, Notification
from .repository import NotificationRepository


class MySQLNotificationRepository(NotificationRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def create_many(self, notifications: Sequence[NewNotification]) -> int:
        if not notifications:
            return 0

        with db_cursor(self._conn_factory) as (_, cur):
            cur.executemany(
                """
                INSERT INTO notifications(
                    parade_id, type, message, target_role, target_category, target_division, is_active
                )
                VALUES(%s,%s,%s,%s,%s,%s,1)
                """,
                [
                    (
                        int(n.parade_id),
                        n.type.value,
                        n.message,
                        n.target_role,
                        n.target_category,
                        n.target_division,
                    )
                    for n in notifications
                ],
            )
            return len(notifications)

    def list_active(
        self,
        *,
        parade_id: int,
        target_role: str,
        division: Optional[str] = None,
        category: Optional[str] = None,
    ) -> Sequence[Notification]:
        clauses = ["parade_id=%s", "target_role=%s", "is_active=1"]
        params: list[object] = [int(parade_id), target_role]
        if division is not None:
            clauses.append("(target_division IS NULL OR target_division=%s)")
            params.append(division)
        if category is not None:
            clauses.append("(target_category IS NULL OR target_category=%s)")
            params.append(category)

        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"""
                SELECT notification_id, parade_id, type, message, target_role,
                       target_category, target_division, is_active, created_at
                FROM notifications
                WHERE {" AND ".join(clauses)}
                ORDER BY created_at ASC, notification_id ASC
                """,
                tuple(params),
            )
            return [
                Notification(
                    notification_id=int(r["notification_id"]),
                    parade_id=int(r["parade_id"]),
                    type=NotificationType(r["type"]),
                    message=r["message"],
                    target_role=r["target_role"],
                    target_category=r.get("target_category"),
                    target_division=r.get("target_division"),
                    is_active=bool(r["is_active"]),
                    created_at=r.get("created_at"),
                )
                for r in fetchall(cur)
            ]
