from __future__ import annotations

import pytest

from src.parade_system.parade_system.attendance.service import AttendanceService
from src.parade_system.parade_system.container import Container
from src.parade_system.parade_system.core.enums import ParadeStatus
from src.parade_system.parade_system.core.exceptions import StoreError
from src.parade_system.parade_system.main import create_app
from src.parade_system.parade_system.notifications.service import NotificationDispatcher
from src.parade_system.parade_system.parades.service import ParadeService
from src.parade_system.parade_system.permissions.service import PermissionLedger
from src.parade_system.parade_system.reports.service import ReportService

from .fakes import PARADE_DATE, World, cadet, parade


def _container(w: World) -> Container:
    reports = ReportService(w.reports, w.parades)
    return Container(
        conn=None,
        cadets_repo=w.cadets,
        parades_repo=w.parades,
        permissions_repo=w.permissions,
        attendance_repo=w.attendance,
        reports_repo=w.reports,
        notifications_repo=w.notifications,
        parade_service=ParadeService(w.parades, w.cadets, w.attendance, reports, today=lambda: PARADE_DATE),
        permission_ledger=PermissionLedger(w.permissions, w.parades, w.cadets),
        attendance_service=AttendanceService(w.attendance, w.parades, w.cadets, w.permissions),
        report_service=reports,
        notification_dispatcher=NotificationDispatcher(w.notifications, w.parades),
    )


@pytest.fixture
def world():
    return World(
        cadets=[cadet(1, "A", "SD", rank="SGT"), cadet(2, "A", "SD"), cadet(3, "A", "SW")],
        parades=[parade(1, status=ParadeStatus.ACTIVE, categories=("A",))],
    )


@pytest.fixture
def client(world, monkeypatch):
    monkeypatch.setenv("APP_ENV", "testing")
    app = create_app(container=_container(world))
    return app.test_client()


def _login(client, role, *, user_id=7, division=None):
    with client.session_transaction() as sess:
        sess["user_id"] = user_id
        sess["role"] = role
        if division:
            sess["assigned_division"] = division


def test_health(client):
    resp = client.get("/health")

    assert resp.status_code == 200
    assert resp.get_json()["data"] == {"status": "ok"}


def test_login_required(client):
    assert client.get("/api/parades/open").status_code == 401


def test_wrong_role_is_forbidden(client):
    _login(client, "senior", division="SD")

    resp = client.put("/api/parades/1/permissions/1", json={"reason": "Sports"})

    assert resp.status_code == 403
    assert resp.get_json()["success"] is False


def test_create_parade_while_one_is_open_conflicts(client):
    _login(client, "ano", user_id=100)

    resp = client.post(
        "/api/parades",
        json={"parade_date": "2026-03-11", "session": "morning", "categories": ["A"]},
    )

    assert resp.status_code == 409


def test_validation_error_maps_to_400(client):
    _login(client, "ano", user_id=100)

    resp = client.put("/api/parades/1/permissions/1", json={"reason": ""})

    assert resp.status_code == 400
    assert resp.get_json()["message"] == "Reason required"


def test_unknown_parade_maps_to_404(client):
    _login(client, "ano", user_id=100)

    assert client.get("/api/parades/42/review").status_code == 404


def test_senior_submission_flow(client, world):
    _login(client, "ano", user_id=100)
    assert client.put("/api/parades/1/permissions/2", json={"reason": "Sports"}).status_code == 200

    _login(client, "senior", division="SD")
    sheet = client.get("/api/parades/1/attendance/A").get_json()["data"]
    assert [r["status"] for r in sheet["rows"]] == ["ABSENT", "PERMISSION"]

    resp = client.post("/api/parades/1/attendance/A", json={"present": [1, 2]})
    assert resp.status_code == 200
    assert resp.get_json()["data"] == {"total": 2, "present": 1, "permission": 1, "absent": 0}
    assert world.parades.get_by_id(1).status == ParadeStatus.ATTENDANCE_SUBMITTED

    _login(client, "ano", user_id=100)
    locked = client.put("/api/parades/1/permissions/3", json={"reason": "Sports"})
    assert locked.status_code == 409


def test_mismatch_is_retryable_503(client, world):
    world.attendance.drop_next = 1
    _login(client, "senior", division="SD")

    resp = client.post("/api/parades/1/attendance/A", json={"present": [1]})

    body = resp.get_json()
    assert resp.status_code == 503
    assert body["retryable"] is True
    assert (body["expected"], body["written"]) == (2, 1)


def test_senior_without_division_is_forbidden(client):
    _login(client, "senior")

    assert client.get("/api/parades/1/attendance/A").status_code == 403


def test_close_with_pending_attendance_reports_kind(client, world):
    world.parades.set_status(1, ParadeStatus.ATTENDANCE_SUBMITTED)
    _login(client, "ano", user_id=100)

    review = client.get("/api/parades/1/review").get_json()["data"]
    resp = client.post("/api/parades/1/close", json={"remarks": "ok"})

    assert [p["label"] for p in review["pending"]] == ["Category A – SD", "Category A – SW"]
    assert resp.status_code == 409
    assert resp.get_json()["kind"] == "attendance_pending"


def test_notify_pending_then_senior_reads_notices(client):
    _login(client, "ano", user_id=100)
    sent = client.post("/api/parades/1/notifications/pending")
    assert sent.get_json()["data"] == {"sent": 2}

    _login(client, "senior", division="SW")
    notices = client.get("/api/parades/1/notifications").get_json()["data"]

    assert [n["target_division"] for n in notices] == ["SW"]


def test_store_failure_maps_to_500(client, world):
    world.attendance.store_error = StoreError("connection refused")
    _login(client, "senior", division="SD")

    resp = client.get("/api/parades/1/attendance/A")

    assert resp.status_code == 500
    assert resp.get_json()["success"] is False


def test_numeric_parade_date_is_rejected(client, world):
    world.parades.set_status(1, ParadeStatus.COMPLETED)
    _login(client, "ano", user_id=100)

    resp = client.post(
        "/api/parades",
        json={"parade_date": 20260311, "session": "morning", "categories": ["A"]},
    )

    assert resp.status_code == 400
    assert world.parades.created == []


def test_numeric_permission_end_date_is_rejected(client, world):
    _login(client, "ano", user_id=100)

    resp = client.put("/api/parades/1/permissions/1", json={"reason": "Sports", "to_date": 20260311})

    assert resp.status_code == 400
    assert world.permissions.get(parade_id=1, cadet_id=1) is None


def test_categories_as_string_is_rejected(client, world):
    world.parades.set_status(1, ParadeStatus.COMPLETED)
    _login(client, "ano", user_id=100)

    resp = client.post(
        "/api/parades",
        json={"parade_date": "2026-03-11", "session": "morning", "categories": "A"},
    )

    assert resp.status_code == 400
    assert resp.get_json()["message"] == "Categories must be a list"


def test_edit_flag_sent_as_text(client):
    _login(client, "senior", division="SD")
    assert client.post("/api/parades/1/attendance/A", json={"present": [1]}).status_code == 200

    again = client.post("/api/parades/1/attendance/A", json={"present": [1, 2], "edit": "false"})
    edited = client.post("/api/parades/1/attendance/A", json={"present": [1, 2], "edit": "true"})

    assert again.status_code == 409
    assert edited.status_code == 200
    assert edited.get_json()["data"]["present"] == 2


def test_present_mapping_with_text_flags(client):
    _login(client, "senior", division="SD")

    resp = client.post("/api/parades/1/attendance/A", json={"present": {"1": "true", "2": "false"}})

    assert resp.status_code == 200
    assert resp.get_json()["data"] == {"total": 2, "present": 1, "permission": 0, "absent": 1}


def test_unreadable_edit_flag_is_rejected(client):
    _login(client, "senior", division="SD")

    resp = client.post("/api/parades/1/attendance/A", json={"present": [1], "edit": "maybe"})

    assert resp.status_code == 400


def test_parade_under_review(client, world):
    _login(client, "ano", user_id=100)
    assert client.get("/api/parades/review").get_json()["data"] is None

    world.parades.set_status(1, ParadeStatus.ATTENDANCE_SUBMITTED)
    data = client.get("/api/parades/review").get_json()["data"]

    assert data["parade_id"] == 1
    assert data["status"] == "attendance_submitted"
