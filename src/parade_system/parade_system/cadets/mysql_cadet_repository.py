from __future__ import annotations

from typing import Optional, Sequence

from ..database.connection import DatabaseConnection
from ..database.mysql_base import db_cursor, fetchall, fetchone, in_clause
from .model import Cadet
from .repository import CadetRepository


def row_to_cadet(r: dict) -> Cadet:
    return Cadet(
        cadet_id=int(r["cadet_id"]),
        enrollment_no=str(r["enrollment_no"]),
        rank=str(r["rank"]),
        name=str(r["name"]),
        category=str(r["category"]),
        division=str(r["division"]),
        is_active=bool(r["is_active"]),
    )


def select_active_cadets(cur, *, categories: Sequence[str], category=None, division=None) -> list[Cadet]:
    """Shared by the repository and the transactional procedures."""

    if not categories:
        return []

    clauses = ["is_active=1", f"category IN ({in_clause(categories)})"]
    params: list[object] = list(categories)
    if category is not None:
        clauses.append("category=%s")
        params.append(category)
    if division is not None:
        clauses.append("division=%s")
        params.append(division)

    cur.execute(
        f"""
        SELECT cadet_id, enrollment_no, `rank`, name, category, division, is_active
        FROM cadets
        WHERE {" AND ".join(clauses)}
        ORDER BY enrollment_no ASC
        """,
        tuple(params),
    )
    return [row_to_cadet(r) for r in fetchall(cur)]


class MySQLCadetRepository(CadetRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def get_by_id(self, cadet_id: int) -> Optional[Cadet]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                SELECT cadet_id, enrollment_no, `rank`, name, category, division, is_active
                FROM cadets
                WHERE cadet_id=%s
                """,
                (int(cadet_id),),
            )
            r = fetchone(cur)
            return row_to_cadet(r) if r else None

    def list_active(
        self,
        *,
        categories: Sequence[str],
        category: Optional[str] = None,
        division: Optional[str] = None,
    ) -> Sequence[Cadet]:
        with db_cursor(self._conn_factory) as (_, cur):
            return select_active_cadets(cur, categories=list(categories), category=category, division=division)
