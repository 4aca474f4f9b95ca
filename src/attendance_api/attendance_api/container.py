from __future__ import annotations

from dataclasses import dataclass
from typing import Optional

from .attendance.mysql_attendance_repository import MySQLAttendanceRepository
from .attendance.service import AttendanceService
from .auth.mysql_user_repository import MySQLUserRepository
from .auth.service import AuthService
from .auth.tokens import JwtTokenService
from .core.constants import (
    DEFAULT_MAIL_ATTEMPTS,
    DEFAULT_MAIL_BACKOFF_MS,
    DEFAULT_RESET_URL,
    RESET_TOKEN_TTL_MINUTES,
)
from .database.connection import DBConfig, DatabaseConnection
from .database.transaction import MySQLTransactionalStore
from .employees.mysql_employee_repository import MySQLEmployeeRepository
from .employees.service import EmployeeService
from .health.service import HealthService
from .mail.delivery import MailDeliveryService, MailSettings
from .mail.mysql_mail_job_repository import MySQLMailJobRepository
from .mail.queue import MailQueueService
from .mail.worker import MailWorker
from .reports.service import DailyReportService


@dataclass(frozen=True)
class Container:
    conn: DatabaseConnection
    store: MySQLTransactionalStore

    employees_repo: MySQLEmployeeRepository
    attendance_repo: MySQLAttendanceRepository
    mail_jobs_repo: MySQLMailJobRepository
    users_repo: MySQLUserRepository

    mail_queue: MailQueueService
    mail_worker: MailWorker
    employee_service: EmployeeService
    attendance_service: AttendanceService
    daily_report_service: DailyReportService
    health_service: HealthService
    auth_service: AuthService


def build_container(*, db_config: dict, settings: Optional[object] = None) -> Container:
    conn = DatabaseConnection(DBConfig.from_dict(db_config))
    store = MySQLTransactionalStore(conn, isolation_level=getattr(settings, "DB_ISOLATION_LEVEL", None))

    employees_repo = MySQLEmployeeRepository(conn)
    attendance_repo = MySQLAttendanceRepository(conn)
    mail_jobs_repo = MySQLMailJobRepository(conn)
    users_repo = MySQLUserRepository(conn)

    mail_queue = MailQueueService(
        mail_jobs_repo,
        attempts=int(getattr(settings, "MAIL_MAX_ATTEMPTS", DEFAULT_MAIL_ATTEMPTS)),
        backoff_ms=int(getattr(settings, "MAIL_BACKOFF_MS", DEFAULT_MAIL_BACKOFF_MS)),
    )
    mail_worker = MailWorker(mail_jobs_repo, MailDeliveryService(MailSettings.from_settings(settings)))

    return Container(
        conn=conn,
        store=store,
        employees_repo=employees_repo,
        attendance_repo=attendance_repo,
        mail_jobs_repo=mail_jobs_repo,
        users_repo=users_repo,
        mail_queue=mail_queue,
        mail_worker=mail_worker,
        employee_service=EmployeeService(employees_repo),
        attendance_service=AttendanceService(store, attendance_repo, employees_repo, mail_queue),
        daily_report_service=DailyReportService(employees_repo, attendance_repo),
        health_service=HealthService(conn, mail_jobs_repo),
        auth_service=AuthService(
            users_repo,
            JwtTokenService(),
            mail_queue,
            reset_url=getattr(settings, "FRONTEND_RESET_URL", DEFAULT_RESET_URL),
            reset_ttl_minutes=int(getattr(settings, "PASSWORD_RESET_TTL_MINUTES", RESET_TOKEN_TTL_MINUTES)),
        ),
    )
