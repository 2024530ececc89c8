from __future__ import annotations

from typing import Optional, Sequence

from ..core.enums import ParadeType
from ..database.connection import DatabaseConnection
from ..database.mysql_base import db_cursor, fetchall, fetchone
from .model import ParadeReport
from .repository import ReportRepository


def row_to_report(r: dict) -> ParadeReport:
    return ParadeReport(
        parade_id=int(r["parade_id"]),
        category=str(r["category"]),
        report_text=r.get("report_text") or "",
        parade_type=ParadeType(r["parade_type"]) if r.get("parade_type") else None,
        created_by=r.get("created_by"),
        updated_at=r.get("updated_at"),
    )


class MySQLReportRepository(ReportRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def get(self, *, parade_id: int, category: str) -> Optional[ParadeReport]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                SELECT parade_id, category, parade_type, report_text, created_by, updated_at
                FROM parade_reports
                WHERE parade_id=%s AND category=%s
                """,
                (int(parade_id), category),
            )
            r = fetchone(cur)
            return row_to_report(r) if r else None

    def list_for_parade(self, *, parade_id: int) -> Sequence[ParadeReport]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                SELECT parade_id, category, parade_type, report_text, created_by, updated_at
                FROM parade_reports
                WHERE parade_id=%s
                ORDER BY category ASC
                """,
                (int(parade_id),),
            )
            return [row_to_report(r) for r in fetchall(cur)]

    def upsert(
        self,
        *,
        parade_id: int,
        category: str,
        parade_type: Optional[ParadeType],
        report_text: str,
        created_by: int,
    ) -> None:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                INSERT INTO parade_reports(parade_id, category, parade_type, report_text, created_by)
                VALUES(%s,%s,%s,%s,%s)
                ON DUPLICATE KEY UPDATE
                    parade_type=VALUES(parade_type), report_text=VALUES(report_text),
                    created_by=VALUES(created_by), updated_at=CURRENT_TIMESTAMP
                """,
                (
                    int(parade_id),
                    category,
                    parade_type.value if parade_type else None,
                    report_text,
                    int(created_by),
                ),
            )
