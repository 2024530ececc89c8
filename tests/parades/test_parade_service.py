from __future__ import annotations

from datetime import date

import pytest

from src.parade_system.parade_system.attendance.model import AttendanceRecord
from src.parade_system.parade_system.core.enums import (
    AttendanceStatus,
    CloseFailure,
    ParadeSession,
    ParadeStatus,
    ParadeType,
    Role,
)
from src.parade_system.parade_system.core.exceptions import (
    AttendancePendingError,
    AuthorizationError,
    ConflictError,
    LockedError,
    NotFoundError,
    ParadeNotReadyError,
    StoreError,
    TransactionError,
    ValidationError,
)
from src.parade_system.parade_system.parades.service import ParadeService
from src.parade_system.parade_system.reports.service import ReportService

from ..fakes import World, cadet, parade

TODAY = date(2026, 3, 10)


def _service(w: World) -> ParadeService:
    reports = ReportService(w.reports, w.parades)
    return ParadeService(w.parades, w.cadets, w.attendance, reports, today=lambda: TODAY)


def _create(svc, **kwargs):
    params = dict(
        current_role=Role.ANO,
        actor_id=100,
        parade_date="2026-03-11",
        session="morning",
        categories=["b", "A"],
        parade_types={"A": "Drill"},
    )
    params.update(kwargs)
    return svc.create_parade(**params)


def _rec(cadet_id, status=AttendanceStatus.PRESENT, parade_id=1):
    return AttendanceRecord(parade_id=parade_id, cadet_id=cadet_id, status=status)


ROSTER = [cadet(1, "A", "SD", rank="SGT"), cadet(2, "A", "SW", rank="CPL"), cadet(3, "B", "SD", rank="CDT")]


def test_create_parade_normalizes_input():
    w = World()
    svc = _service(w)

    pid = _create(svc)

    created = w.parades.get_by_id(pid)
    assert created.status == ParadeStatus.ACTIVE
    assert created.categories == ("A", "B")
    assert created.session == ParadeSession.MORNING
    assert created.parade_type_map == {"A": ParadeType.DRILL, "B": ParadeType.THEORY}


def test_default_types_restored_from_last_completed_parade():
    w = World(parades=[parade(1, status=ParadeStatus.COMPLETED, categories=("C",), types={"C": ParadeType.EVENT})])
    svc = _service(w)

    assert svc.default_parade_types()["C"] == ParadeType.EVENT

    pid = _create(svc, categories=["C"], parade_types={})
    assert w.parades.get_by_id(pid).parade_type_map == {"C": ParadeType.EVENT}


def test_scenario_c_second_parade_conflicts_and_leaves_existing_unchanged():
    existing = parade(1, status=ParadeStatus.ATTENDANCE_SUBMITTED)
    w = World(parades=[existing])

    with pytest.raises(ConflictError):
        _create(_service(w))

    assert w.parades.get_by_id(1) == existing
    assert w.parades.created == []


@pytest.mark.parametrize(
    "override",
    [
        {"parade_date": ""},
        {"parade_date": "2026-03-09"},
        {"parade_date": "10/03/2026"},
        {"parade_date": 20260311},
        {"session": ""},
        {"session": "night"},
        {"categories": []},
        {"categories": ["D"]},
        {"categories": "A"},
        {"session": 1},
        {"parade_types": {"A": "Swimming"}},
        {"parade_types": ["A"]},
    ],
)
def test_create_parade_rejects_bad_input(override):
    w = World()

    with pytest.raises(ValidationError):
        _create(_service(w), **override)

    assert w.parades.created == []


def test_same_day_parade_allowed():
    assert _create(_service(World()), parade_date="2026-03-10") == 1


def test_only_ano_creates_parades():
    with pytest.raises(AuthorizationError):
        _create(_service(World()), current_role=Role.SENIOR)


def test_completed_parade_is_not_open():
    svc = _service(World(parades=[parade(1, status=ParadeStatus.COMPLETED)]))

    assert svc.get_open_parade() is None
    assert svc.get_review_parade() is None
    assert svc.get_latest_parade().parade_id == 1


def test_review_parade_only_when_submitted():
    w = World(parades=[parade(1, status=ParadeStatus.ACTIVE)])
    svc = _service(w)
    assert svc.get_review_parade() is None

    w.parades.set_status(1, ParadeStatus.ATTENDANCE_SUBMITTED)
    assert svc.get_review_parade().parade_id == 1


def test_scenario_d_close_fails_with_attendance_pending():
    w = World(cadets=ROSTER, parades=[parade(1, status=ParadeStatus.ATTENDANCE_SUBMITTED, categories=("A", "B"))])
    w.attendance.seed(_rec(3))
    svc = _service(w)

    assert [s.label() for s in svc.pending_slots(w.parades.get_by_id(1))] == ["Category A – SD", "Category A – SW"]
    with pytest.raises(AttendancePendingError) as ei:
        svc.close_parade(current_role=Role.ANO, actor_id=100, parade_id=1)

    assert ei.value.kind == CloseFailure.ATTENDANCE_PENDING
    assert w.parades.get_by_id(1).status == ParadeStatus.ATTENDANCE_SUBMITTED


def test_close_requires_attendance_submitted():
    w = World(cadets=ROSTER, parades=[parade(1, status=ParadeStatus.ACTIVE)])

    with pytest.raises(ParadeNotReadyError) as ei:
        _service(w).close_parade(current_role=Role.ANO, actor_id=100, parade_id=1)

    assert ei.value.kind == CloseFailure.PARADE_NOT_READY


def test_close_not_ready_is_also_a_conflict():
    w = World(cadets=ROSTER, parades=[parade(1, status=ParadeStatus.ACTIVE)])

    with pytest.raises(ConflictError):
        _service(w).close_parade(current_role=Role.ANO, actor_id=100, parade_id=1)

    assert w.parades.get_by_id(1).status == ParadeStatus.ACTIVE


def test_close_completes_and_stores_remarks():
    w = World(cadets=ROSTER, parades=[parade(1, status=ParadeStatus.ATTENDANCE_SUBMITTED, categories=("A", "B"))])
    w.attendance.seed(_rec(1), _rec(2), _rec(3))

    _service(w).close_parade(current_role=Role.ANO, actor_id=100, parade_id=1, remarks="  Good turnout ")

    closed = w.parades.get_by_id(1)
    assert closed.status == ParadeStatus.COMPLETED
    assert closed.ano_remarks == "Good turnout"
    assert closed.closed_by == 100


def test_store_failure_during_close_is_opaque_transaction_error():
    w = World(parades=[parade(1, status=ParadeStatus.ATTENDANCE_SUBMITTED)])
    cause = StoreError("connection lost")
    w.parades.close_error = cause

    with pytest.raises(TransactionError) as ei:
        _service(w).close_parade(current_role=Role.ANO, actor_id=100, parade_id=1)

    assert ei.value.kind == CloseFailure.OTHER
    assert ei.value.__cause__ is cause


def test_close_unknown_parade():
    with pytest.raises(NotFoundError):
        _service(World()).close_parade(current_role=Role.ANO, actor_id=100, parade_id=9)


def test_remarks_editable_only_under_review():
    w = World(parades=[parade(1, status=ParadeStatus.ATTENDANCE_SUBMITTED)])
    svc = _service(w)

    svc.save_remarks(current_role=Role.ANO, parade_id=1, remarks="Well done")
    assert w.parades.get_by_id(1).ano_remarks == "Well done"

    w.parades.set_status(1, ParadeStatus.COMPLETED)
    with pytest.raises(LockedError):
        svc.save_remarks(current_role=Role.ANO, parade_id=1, remarks="Too late")


def test_build_review():
    w = World(cadets=ROSTER, parades=[parade(1, status=ParadeStatus.ATTENDANCE_SUBMITTED, categories=("A", "B"))])
    w.attendance.seed(_rec(1), _rec(2, AttendanceStatus.ABSENT_WITH_PERMISSION))
    w.reports.upsert(parade_id=1, category="A", parade_type=ParadeType.THEORY, report_text="Map reading", created_by=7)

    review = _service(w).build_review(parade_id=1, category="A", status="ALL")

    ranks = dict(review.ranks)
    assert (ranks["SGT"].total, ranks["SGT"].present) == (1, 1)
    assert (ranks["CPL"].total, ranks["CPL"].present) == (1, 0)
    assert [s.label() for s in review.pending] == ["Category B – SD"]
    assert review.summary.total == 2
    assert [(c.category, c.submitted) for c in review.reports] == [("A", True), ("B", False)]
    assert review.can_close is False
    assert review.to_dict()["reports"][0]["preview"] == "Map reading"


def test_saving_unchanged_remarks_succeeds():
    w = World(parades=[parade(1, status=ParadeStatus.ATTENDANCE_SUBMITTED)])
    svc = _service(w)

    svc.save_remarks(current_role=Role.ANO, parade_id=1, remarks="Well done")
    svc.save_remarks(current_role=Role.ANO, parade_id=1, remarks="Well done ")
    assert w.parades.get_by_id(1).ano_remarks == "Well done"

    svc.save_remarks(current_role=Role.ANO, parade_id=1, remarks="")
    svc.save_remarks(current_role=Role.ANO, parade_id=1, remarks="   ")
    assert w.parades.get_by_id(1).ano_remarks is None


def test_remarks_must_be_text():
    w = World(parades=[parade(1, status=ParadeStatus.ATTENDANCE_SUBMITTED)])

    with pytest.raises(ValidationError):
        _service(w).save_remarks(current_role=Role.ANO, parade_id=1, remarks=42)
