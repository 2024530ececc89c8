from __future__ import annotations

from dataclasses import dataclass

from .attendance.mysql_attendance_repository import MySQLAttendanceRepository
from .attendance.service import AttendanceService
from .cadets.mysql_cadet_repository import MySQLCadetRepository
from .database.connection import DBConfig, DatabaseConnection
from .notifications.mysql_notification_repository import MySQLNotificationRepository
from .notifications.service import NotificationDispatcher
from .parades.mysql_parade_repository import MySQLParadeRepository
from .parades.service import ParadeService
from .permissions.mysql_permission_repository import MySQLPermissionRepository
from .permissions.service import PermissionLedger
from .reports.mysql_report_repository import MySQLReportRepository
from .reports.service import ReportService


@dataclass(frozen=True)
class Container:
    conn: DatabaseConnection

    cadets_repo: MySQLCadetRepository
    parades_repo: MySQLParadeRepository
    permissions_repo: MySQLPermissionRepository
    attendance_repo: MySQLAttendanceRepository
    reports_repo: MySQLReportRepository
    notifications_repo: MySQLNotificationRepository

    parade_service: ParadeService
    permission_ledger: PermissionLedger
    attendance_service: AttendanceService
    report_service: ReportService
    notification_dispatcher: NotificationDispatcher


def build_container(*, db_config: dict) -> Container:
    conn = DatabaseConnection.get_instance(DBConfig.from_dict(db_config))

    cadets_repo = MySQLCadetRepository(conn)
    parades_repo = MySQLParadeRepository(conn)
    permissions_repo = MySQLPermissionRepository(conn)
    attendance_repo = MySQLAttendanceRepository(conn)
    reports_repo = MySQLReportRepository(conn)
    notifications_repo = MySQLNotificationRepository(conn)

    report_service = ReportService(reports_repo, parades_repo)
    parade_service = ParadeService(parades_repo, cadets_repo, attendance_repo, report_service)
    permission_ledger = PermissionLedger(permissions_repo, parades_repo, cadets_repo)
    attendance_service = AttendanceService(attendance_repo, parades_repo, cadets_repo, permissions_repo)
    notification_dispatcher = NotificationDispatcher(notifications_repo, parades_repo)

    return Container(
        conn=conn,
        cadets_repo=cadets_repo,
        parades_repo=parades_repo,
        permissions_repo=permissions_repo,
        attendance_repo=attendance_repo,
        reports_repo=reports_repo,
        notifications_repo=notifications_repo,
        parade_service=parade_service,
        permission_ledger=permission_ledger,
        attendance_service=attendance_service,
        report_service=report_service,
        notification_dispatcher=notification_dispatcher,
    )
