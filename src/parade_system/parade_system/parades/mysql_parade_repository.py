from __future__ import annotations

from typing import Optional

from ..attendance.mysql_attendance_repository import select_attendance
from ..attendance.pending import detect_pending
from ..cadets.mysql_cadet_repository import select_active_cadets
from ..core.enums import OPEN_PARADE_STATUSES, ParadeSession, ParadeStatus, ParadeType
from ..core.exceptions import AttendancePendingError, ParadeNotReadyError
from ..database.connection import DatabaseConnection
from ..database.mysql_base import (
    db_cursor,
    dump_json,
    duplicate_key_as_conflict,
    fetchone,
    in_clause,
    load_json,
)
from . import lifecycle
from .model import NewParade, Parade
from .repository import ParadeRepository

_COLUMNS = """
    parade_id, parade_date, session, categories, parade_type_map, status,
    created_by, ano_remarks, created_at, closed_by, closed_at
"""


def row_to_parade(r: dict) -> Parade:
    type_map = load_json(r.get("parade_type_map"), {})
    return Parade(
        parade_id=int(r["parade_id"]),
        parade_date=r["parade_date"],
        session=ParadeSession.parse(r["session"]),
        categories=tuple(load_json(r.get("categories"), [])),
        parade_type_map={str(k): ParadeType(v) for k, v in type_map.items()},
        status=ParadeStatus(r["status"]),
        created_by=int(r["created_by"]),
        ano_remarks=r.get("ano_remarks"),
        created_at=r.get("created_at"),
        closed_by=r.get("closed_by"),
        closed_at=r.get("closed_at"),
    )


class MySQLParadeRepository(ParadeRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def create(self, new: NewParade) -> int:
        with db_cursor(self._conn_factory) as (_, cur):
            with duplicate_key_as_conflict(
                "An active parade already exists. Please close it before creating a new one."
            ):
                cur.execute(
                    """
                    INSERT INTO parades(parade_date, session, categories, parade_type_map, status, created_by)
                    VALUES(%s,%s,%s,%s,%s,%s)
                    """,
                    (
                        new.parade_date,
                        new.session.value,
                        dump_json(list(new.categories)),
                        dump_json({k: v.value for k, v in new.parade_type_map.items()}),
                        ParadeStatus.ACTIVE.value,
                        int(new.created_by),
                    ),
                )
            return int(cur.lastrowid)

    def get_by_id(self, parade_id: int) -> Optional[Parade]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(f"SELECT {_COLUMNS} FROM parades WHERE parade_id=%s", (int(parade_id),))
            r = fetchone(cur)
            return row_to_parade(r) if r else None

    def get_open(self) -> Optional[Parade]:
        statuses = [s.value for s in OPEN_PARADE_STATUSES]
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"""
                SELECT {_COLUMNS} FROM parades
                WHERE status IN ({in_clause(statuses)})
                ORDER BY created_at DESC, parade_id DESC
                LIMIT 1
                """,
                tuple(statuses),
            )
            r = fetchone(cur)
            return row_to_parade(r) if r else None

    def get_latest(self, *, status: Optional[ParadeStatus] = None) -> Optional[Parade]:
        where = "WHERE status=%s" if status is not None else ""
        params = (status.value,) if status is not None else ()
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"""
                SELECT {_COLUMNS} FROM parades
                {where}
                ORDER BY created_at DESC, parade_id DESC
                LIMIT 1
                """,
                params,
            )
            r = fetchone(cur)
            return row_to_parade(r) if r else None

    def update_remarks(self, *, parade_id: int, remarks: Optional[str]) -> bool:
        with db_cursor(self._conn_factory) as (_, cur):
            # rowcount counts changed rows only, so the status is read under the row lock instead.
            cur.execute("SELECT status FROM parades WHERE parade_id=%s FOR UPDATE", (int(parade_id),))
            r = fetchone(cur)
            if not r or ParadeStatus(r["status"]) != ParadeStatus.ATTENDANCE_SUBMITTED:
                return False

            cur.execute("UPDATE parades SET ano_remarks=%s WHERE parade_id=%s", (remarks, int(parade_id)))
            return True

    def close_parade(self, *, actor_id: int, parade_id: int, remarks: Optional[str] = None) -> None:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(f"SELECT {_COLUMNS} FROM parades WHERE parade_id=%s FOR UPDATE", (int(parade_id),))
            r = fetchone(cur)
            if not r:
                raise ParadeNotReadyError("Parade does not exist.")

            parade = row_to_parade(r)
            if not lifecycle.can_transition(parade.status, ParadeStatus.COMPLETED):
                raise ParadeNotReadyError()

            roster = select_active_cadets(cur, categories=list(parade.categories))
            records = select_attendance(cur, parade_id=parade.parade_id)
            pending = detect_pending(roster, records, categories=parade.categories)
            if pending:
                raise AttendancePendingError(
                    "Cannot close parade. Attendance is still pending for: "
                    + ", ".join(slot.label() for slot in pending)
                )

            status = lifecycle.transition(parade.status, ParadeStatus.COMPLETED)
            cur.execute(
                """
                UPDATE parades
                SET status=%s, ano_remarks=COALESCE(%s, ano_remarks), closed_by=%s, closed_at=NOW()
                WHERE parade_id=%s
                """,
                (status.value, remarks, int(actor_id), parade.parade_id),
            )
