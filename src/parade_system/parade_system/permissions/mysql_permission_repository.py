from __future__ import annotations

from datetime import date
from typing import Optional, Sequence

from ..core.enums import PermissionReason
from ..database.connection import DatabaseConnection
from ..database.mysql_base import db_cursor, fetchall, fetchone
from .model import Permission
from .repository import PermissionRepository


def row_to_permission(r: dict) -> Permission:
    return Permission(
        parade_id=int(r["parade_id"]),
        cadet_id=int(r["cadet_id"]),
        reason=PermissionReason(r["reason"]),
        to_date=r["to_date"],
    )


class MySQLPermissionRepository(PermissionRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def get(self, *, parade_id: int, cadet_id: int) -> Optional[Permission]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                SELECT parade_id, cadet_id, reason, to_date
                FROM permissions
                WHERE parade_id=%s AND cadet_id=%s
                """,
                (int(parade_id), int(cadet_id)),
            )
            r = fetchone(cur)
            return row_to_permission(r) if r else None

    def list_for_parade(self, *, parade_id: int) -> Sequence[Permission]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                SELECT parade_id, cadet_id, reason, to_date
                FROM permissions
                WHERE parade_id=%s
                """,
                (int(parade_id),),
            )
            return [row_to_permission(r) for r in fetchall(cur)]

    def list_covering(self, *, parade_id: int, parade_date: date) -> Sequence[Permission]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                SELECT parade_id, cadet_id, reason, to_date
                FROM permissions
                WHERE parade_id=%s OR to_date >= %s
                """,
                (int(parade_id), parade_date),
            )
            return [row_to_permission(r) for r in fetchall(cur)]

    def upsert(self, *, parade_id: int, cadet_id: int, reason: PermissionReason, to_date: date) -> None:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                INSERT INTO permissions(parade_id, cadet_id, reason, to_date)
                VALUES(%s,%s,%s,%s)
                ON DUPLICATE KEY UPDATE reason=VALUES(reason), to_date=VALUES(to_date)
                """,
                (int(parade_id), int(cadet_id), reason.value, to_date),
            )

    def delete(self, *, parade_id: int, cadet_id: int) -> bool:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                "DELETE FROM permissions WHERE parade_id=%s AND cadet_id=%s",
                (int(parade_id), int(cadet_id)),
            )
            return cur.rowcount > 0
