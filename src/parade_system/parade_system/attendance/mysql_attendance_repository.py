from __future__ import annotations

from typing import Optional, Sequence

from ..core.enums import AttendanceStatus, ParadeStatus, PermissionReason
from ..core.exceptions import NotFoundError
from ..database.connection import DatabaseConnection
from ..database.mysql_base import db_cursor, fetchall, fetchone, in_clause, load_json
from ..parades import lifecycle
from .model import AttendanceRecord, BatchEntry, BatchWriteResult
from .repository import AttendanceRepository


def row_to_record(r: dict) -> AttendanceRecord:
    return AttendanceRecord(
        parade_id=int(r["parade_id"]),
        cadet_id=int(r["cadet_id"]),
        status=AttendanceStatus(r["status"]),
        reason=PermissionReason(r["reason"]) if r.get("reason") else None,
    )


def select_attendance(cur, *, parade_id: int, cadet_ids: Optional[Sequence[int]] = None) -> list[AttendanceRecord]:
    """Shared by the repository and the close transaction."""

    clauses = ["parade_id=%s"]
    params: list[object] = [int(parade_id)]
    if cadet_ids is not None:
        if not cadet_ids:
            return []
        clauses.append(f"cadet_id IN ({in_clause(cadet_ids)})")
        params.extend(int(c) for c in cadet_ids)

    cur.execute(
        f"""
        SELECT parade_id, cadet_id, status, reason
        FROM attendance
        WHERE {" AND ".join(clauses)}
        """,
        tuple(params),
    )
    return [row_to_record(r) for r in fetchall(cur)]


class MySQLAttendanceRepository(AttendanceRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def list_for_parade(
        self,
        *,
        parade_id: int,
        cadet_ids: Optional[Sequence[int]] = None,
    ) -> Sequence[AttendanceRecord]:
        with db_cursor(self._conn_factory) as (_, cur):
            return select_attendance(cur, parade_id=parade_id, cadet_ids=cadet_ids)

    def write_attendance_batch(
        self,
        *,
        actor_id: int,
        parade_id: int,
        records: Sequence[BatchEntry],
    ) -> BatchWriteResult:
        expected = len(records)

        with db_cursor(self._conn_factory) as (conn, cur):
            # Row lock serializes batches and the close transaction on this parade.
            cur.execute(
                "SELECT status, categories FROM parades WHERE parade_id=%s FOR UPDATE",
                (int(parade_id),),
            )
            p = fetchone(cur)
            if not p:
                raise NotFoundError(f"Parade {parade_id} does not exist")

            current = ParadeStatus(p["status"])
            next_status = lifecycle.status_after_batch(current)
            categories = list(load_json(p["categories"], []))

            eligible: set[int] = set()
            cadet_ids = sorted({int(e.cadet_id) for e in records})
            if cadet_ids and categories:
                cur.execute(
                    f"""
                    SELECT cadet_id FROM cadets
                    WHERE is_active=1
                      AND category IN ({in_clause(categories)})
                      AND cadet_id IN ({in_clause(cadet_ids)})
                    """,
                    tuple(categories) + tuple(cadet_ids),
                )
                eligible = {int(r["cadet_id"]) for r in fetchall(cur)}

            written = 0
            for entry in records:
                if int(entry.cadet_id) not in eligible:
                    continue
                cur.execute(
                    """
                    INSERT INTO attendance(parade_id, cadet_id, status, reason, recorded_by)
                    VALUES(%s,%s,%s,%s,%s)
                    ON DUPLICATE KEY UPDATE
                        status=VALUES(status), reason=VALUES(reason), recorded_by=VALUES(recorded_by)
                    """,
                    (
                        int(parade_id),
                        int(entry.cadet_id),
                        entry.status.value,
                        entry.reason.value if entry.reason else None,
                        int(actor_id),
                    ),
                )
                written += 1

            if written != expected:
                # Partial batches are never kept; the status stays where it was.
                conn.rollback()
                return BatchWriteResult(expected=expected, written=written)

            if next_status != current:
                cur.execute(
                    "UPDATE parades SET status=%s WHERE parade_id=%s AND status=%s",
                    (next_status.value, int(parade_id), current.value),
                )

            return BatchWriteResult(expected=expected, written=written)
