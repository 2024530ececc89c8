"""In-memory repositories used across the test suite.

They follow the same rules as the MySQL repositories: one open parade, batch
writes that keep nothing on mismatch, and a close that re-checks pending
slots.
"""

from __future__ import annotations

from dataclasses import replace
from datetime import date, datetime, timedelta

from src.parade_system.parade_system.attendance.model import AttendanceRecord, BatchWriteResult
from src.parade_system.parade_system.attendance.pending import detect_pending
from src.parade_system.parade_system.cadets.model import Cadet
from src.parade_system.parade_system.core.enums import ParadeSession, ParadeStatus, ParadeType
from src.parade_system.parade_system.core.exceptions import (
    AttendancePendingError,
    ConflictError,
    NotFoundError,
    ParadeNotReadyError,
)
from src.parade_system.parade_system.notifications.model import Notification
from src.parade_system.parade_system.parades import lifecycle
from src.parade_system.parade_system.parades.model import Parade
from src.parade_system.parade_system.permissions.model import Permission
from src.parade_system.parade_system.reports.model import ParadeReport

PARADE_DATE = date(2026, 3, 10)


def cadet(cadet_id, category="A", division="SD", *, rank="CDT", active=True, enrollment_no=None, name=None) -> Cadet:
    return Cadet(
        cadet_id=cadet_id,
        enrollment_no=enrollment_no or f"EN{cadet_id:03d}",
        rank=rank,
        name=name or f"Cadet {cadet_id}",
        category=category,
        division=division,
        is_active=active,
    )


def parade(
    parade_id=1,
    *,
    status=ParadeStatus.ACTIVE,
    categories=("A",),
    parade_date=PARADE_DATE,
    types=None,
) -> Parade:
    return Parade(
        parade_id=parade_id,
        parade_date=parade_date,
        session=ParadeSession.MORNING,
        categories=tuple(categories),
        parade_type_map=types if types is not None else {c: ParadeType.THEORY for c in categories},
        status=status,
        created_by=100,
        created_at=datetime(2026, 3, 1, 8, 0) + timedelta(minutes=parade_id),
    )


class FakeCadetRepo:
    def __init__(self, cadets=()):
        self._cadets = {c.cadet_id: c for c in cadets}

    def get_by_id(self, cadet_id):
        return self._cadets.get(int(cadet_id))

    def list_active(self, *, categories, category=None, division=None):
        out = [
            c
            for c in self._cadets.values()
            if c.is_active
            and c.category in categories
            and (category is None or c.category == category)
            and (division is None or c.division == division)
        ]
        return sorted(out, key=lambda c: c.enrollment_no)


class FakeParadeRepo:
    def __init__(self, parades=(), *, cadets: FakeCadetRepo | None = None, attendance=None):
        self._parades = {p.parade_id: p for p in parades}
        self._next_id = max(self._parades, default=0) + 1
        self.cadets = cadets or FakeCadetRepo()
        self.attendance = attendance
        self.close_error: Exception | None = None
        self.created = []

    def add(self, p: Parade) -> None:
        self._parades[p.parade_id] = p
        self._next_id = max(self._next_id, p.parade_id + 1)

    def set_status(self, parade_id, status) -> None:
        self._parades[parade_id] = replace(self._parades[parade_id], status=ParadeStatus(status))

    def create(self, new):
        if self.get_open():
            raise ConflictError("An active parade already exists. Please close it before creating a new one.")
        pid = self._next_id
        self._next_id += 1
        self._parades[pid] = Parade(
            parade_id=pid,
            parade_date=new.parade_date,
            session=new.session,
            categories=tuple(new.categories),
            parade_type_map=dict(new.parade_type_map),
            status=ParadeStatus.ACTIVE,
            created_by=new.created_by,
            created_at=datetime(2026, 3, 1, 9, pid % 60),
        )
        self.created.append(new)
        return pid

    def get_by_id(self, parade_id):
        return self._parades.get(int(parade_id))

    def get_open(self):
        for p in self._parades.values():
            if p.is_open:
                return p
        return None

    def get_latest(self, *, status=None):
        items = [p for p in self._parades.values() if status is None or p.status == status]
        if not items:
            return None
        return max(items, key=lambda p: (p.created_at or datetime.min, p.parade_id))

    def update_remarks(self, *, parade_id, remarks):
        p = self._parades.get(int(parade_id))
        if not p or p.status != ParadeStatus.ATTENDANCE_SUBMITTED:
            return False
        self._parades[p.parade_id] = replace(p, ano_remarks=remarks)
        return True

    def close_parade(self, *, actor_id, parade_id, remarks=None):
        if self.close_error is not None:
            raise self.close_error

        p = self._parades.get(int(parade_id))
        if not p or not lifecycle.can_transition(p.status, ParadeStatus.COMPLETED):
            raise ParadeNotReadyError()

        roster = self.cadets.list_active(categories=p.categories)
        records = self.attendance.list_for_parade(parade_id=p.parade_id) if self.attendance else []
        if detect_pending(roster, records, categories=p.categories):
            raise AttendancePendingError()

        self._parades[p.parade_id] = replace(
            p,
            status=lifecycle.transition(p.status, ParadeStatus.COMPLETED),
            ano_remarks=remarks if remarks is not None else p.ano_remarks,
            closed_by=int(actor_id),
            closed_at=datetime(2026, 3, 10, 12, 0),
        )


class FakePermissionRepo:
    def __init__(self, permissions=()):
        self._items = {(p.parade_id, p.cadet_id): p for p in permissions}

    def get(self, *, parade_id, cadet_id):
        return self._items.get((int(parade_id), int(cadet_id)))

    def list_for_parade(self, *, parade_id):
        return [p for (pid, _), p in self._items.items() if pid == int(parade_id)]

    def list_covering(self, *, parade_id, parade_date):
        return [p for p in self._items.values() if p.parade_id == int(parade_id) or p.to_date >= parade_date]

    def upsert(self, *, parade_id, cadet_id, reason, to_date):
        self._items[(int(parade_id), int(cadet_id))] = Permission(
            parade_id=int(parade_id), cadet_id=int(cadet_id), reason=reason, to_date=to_date
        )

    def delete(self, *, parade_id, cadet_id):
        return self._items.pop((int(parade_id), int(cadet_id)), None) is not None


class FakeAttendanceRepo:
    """Atomic batch store.

    `drop_next` makes the next batch report that many fewer rows written; the
    batch is then discarded as a whole, the way the database rolls it back.
    """

    def __init__(self, parades: FakeParadeRepo, cadets: FakeCadetRepo):
        self._records: dict[tuple[int, int], AttendanceRecord] = {}
        self._parades = parades
        self._cadets = cadets
        self.drop_next = 0
        self.batches = []
        self.store_error: Exception | None = None

    def seed(self, *records: AttendanceRecord) -> None:
        for r in records:
            self._records[(r.parade_id, r.cadet_id)] = r

    def list_for_parade(self, *, parade_id, cadet_ids=None):
        if self.store_error is not None:
            raise self.store_error
        wanted = None if cadet_ids is None else {int(c) for c in cadet_ids}
        return [
            r
            for (pid, cid), r in sorted(self._records.items())
            if pid == int(parade_id) and (wanted is None or cid in wanted)
        ]

    def write_attendance_batch(self, *, actor_id, parade_id, records):
        p = self._parades.get_by_id(parade_id)
        if not p:
            raise NotFoundError(f"Parade {parade_id} does not exist")
        next_status = lifecycle.status_after_batch(p.status)

        eligible = {
            c.cadet_id for c in self._cadets.list_active(categories=p.categories)
        }
        staged = [r for r in records if r.cadet_id in eligible]
        written = len(staged)
        if self.drop_next:
            written = max(0, written - self.drop_next)
            self.drop_next = 0

        self.batches.append(list(records))
        if written != len(records):
            return BatchWriteResult(expected=len(records), written=written)

        for e in staged:
            self._records[(p.parade_id, e.cadet_id)] = AttendanceRecord(
                parade_id=p.parade_id, cadet_id=e.cadet_id, status=e.status, reason=e.reason
            )
        if next_status != p.status:
            self._parades.set_status(p.parade_id, next_status)
        return BatchWriteResult(expected=len(records), written=written)


class FakeReportRepo:
    def __init__(self):
        self._items: dict[tuple[int, str], ParadeReport] = {}

    def get(self, *, parade_id, category):
        return self._items.get((int(parade_id), category))

    def list_for_parade(self, *, parade_id):
        return [r for (pid, _), r in sorted(self._items.items()) if pid == int(parade_id)]

    def upsert(self, *, parade_id, category, parade_type, report_text, created_by):
        self._items[(int(parade_id), category)] = ParadeReport(
            parade_id=int(parade_id),
            category=category,
            report_text=report_text,
            parade_type=parade_type,
            created_by=created_by,
            updated_at=datetime(2026, 3, 10, 11, 0),
        )


class FakeNotificationRepo:
    def __init__(self):
        self.items: list[Notification] = []

    def create_many(self, notifications):
        for n in notifications:
            self.items.append(
                Notification(
                    notification_id=len(self.items) + 1,
                    parade_id=n.parade_id,
                    type=n.type,
                    message=n.message,
                    target_role=n.target_role,
                    target_category=n.target_category,
                    target_division=n.target_division,
                )
            )
        return len(notifications)

    def list_active(self, *, parade_id, target_role, division=None, category=None):
        return [
            n
            for n in self.items
            if n.parade_id == int(parade_id)
            and n.target_role == target_role
            and n.is_active
            and (division is None or n.target_division in (None, division))
            and (category is None or n.target_category in (None, category))
        ]


class World:
    """All fakes wired together the way `build_container` wires the real ones."""

    def __init__(self, *, cadets=(), parades=(), permissions=()):
        self.cadets = FakeCadetRepo(cadets)
        self.parades = FakeParadeRepo(parades, cadets=self.cadets)
        self.attendance = FakeAttendanceRepo(self.parades, self.cadets)
        self.parades.attendance = self.attendance
        self.permissions = FakePermissionRepo(permissions)
        self.reports = FakeReportRepo()
        self.notifications = FakeNotificationRepo()
