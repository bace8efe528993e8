from __future__ import annotations

from dataclasses import dataclass
from typing import Optional

from .attendance.factory import MarkingPolicyFactory
from .attendance.mysql_attendance_repository import MySQLAttendanceRepository
from .attendance.service import AttendanceLedgerService
from .classes.mysql_class_repository import MySQLClassRepository
from .classes.mysql_student_repository import MySQLStudentRepository
from .classes.service import RosterService
from .common.datetime_utils import Clock, SystemClock
from .core.constants import ADMIN_EDIT_WINDOW_DAYS, DEFAULT_ACADEMIC_YEAR_START_MONTH
from .database.connection import DBConfig, DatabaseConnection
from .holidays.mysql_holiday_repository import MySQLHolidayRepository
from .holidays.service import CalendarService
from .notifications.adapter import NotificationSender
from .notifications.mysql_message_repository import MySQLMessageLogRepository
from .notifications.service import NotificationService
from .notifications.smtp_sender import SmtpConfig, SmtpNotificationSender
from .promotion.mysql_promotion_repository import MySQLPromotionRepository
from .promotion.service import PromotionService
from .reports.service import ReportService


@dataclass(frozen=True)
class Container:
    roster_service: RosterService
    calendar_service: CalendarService
    ledger_service: AttendanceLedgerService
    report_service: ReportService
    promotion_service: PromotionService
    notification_service: NotificationService


def build_services(
    *,
    classes,
    students,
    holidays,
    attendance,
    promotions,
    messages,
    sender: NotificationSender,
    clock: Optional[Clock] = None,
    start_month: int = DEFAULT_ACADEMIC_YEAR_START_MONTH,
    window_days: int = ADMIN_EDIT_WINDOW_DAYS,
) -> Container:
    """Wire services over any set of repositories (MySQL in production, fakes in tests)."""

    clock = clock or SystemClock()

    roster_service = RosterService(classes, students)
    calendar_service = CalendarService(holidays, start_month=start_month)
    ledger_service = AttendanceLedgerService(
        attendance,
        roster_service,
        clock=clock,
        policy_factory=MarkingPolicyFactory(admin_window_days=window_days),
    )
    report_service = ReportService(roster_service, ledger_service, calendar_service, clock=clock)
    promotion_service = PromotionService(classes, promotions)
    notification_service = NotificationService(messages, sender, roster_service)

    return Container(
        roster_service=roster_service,
        calendar_service=calendar_service,
        ledger_service=ledger_service,
        report_service=report_service,
        promotion_service=promotion_service,
        notification_service=notification_service,
    )


def build_container(
    *,
    db_config: dict,
    smtp_config: Optional[dict] = None,
    start_month: int = DEFAULT_ACADEMIC_YEAR_START_MONTH,
    window_days: int = ADMIN_EDIT_WINDOW_DAYS,
) -> Container:
    config = DBConfig(
        host=str(db_config["host"]),
        port=int(db_config.get("port", 3306)),
        user=str(db_config["user"]),
        password=str(db_config["password"]),
        database=str(db_config["database"]),
    )
    conn = DatabaseConnection.get_instance(config)

    return build_services(
        classes=MySQLClassRepository(conn),
        students=MySQLStudentRepository(conn),
        holidays=MySQLHolidayRepository(conn),
        attendance=MySQLAttendanceRepository(conn),
        promotions=MySQLPromotionRepository(conn),
        messages=MySQLMessageLogRepository(conn),
        sender=SmtpNotificationSender(SmtpConfig(**(smtp_config or {}))),
        start_month=start_month,
        window_days=window_days,
    )
