from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from typing import Any, Callable, Optional

from .attendance.mysql_attendance_repository import MySQLAttendanceRepository
from .attendance.service import AttendanceService
from .commanders.mysql_commander_repository import MySQLCommanderRepository
from .common.datetime_utils import TimeAuthority
from .compliance.service import OverdueSweep
from .core.constants import DEFAULT_CUTOFF_HOUR, DEFAULT_REGISTRATION_TTL_MINUTES, DEFAULT_STORE_TIMEOUT_SECONDS, DEFAULT_TIMEZONE
from .database.connection import DBConfig, DatabaseConnection
from .notifications.mysql_notification_repository import MySQLNotificationRepository
from .notifications.sender import LoggingMessageSender, MessageSender, TelegramMessageSender
from .notifications.service import NotificationDispatcher
from .registration.mysql_registration_repository import MySQLRegistrationStateRepository
from .registration.service import RegistrationService
from .trainees.mysql_trainee_repository import MySQLTraineeRepository
from .trainees.service import TraineeService


@dataclass(frozen=True)
class Container:
    """Everything a process entry point needs, built once and passed in."""

    conn: Optional[DatabaseConnection]
    time: TimeAuthority
    sender: MessageSender

    trainee_service: TraineeService
    attendance_service: AttendanceService
    dispatcher: NotificationDispatcher
    overdue_sweep: OverdueSweep
    registration_service: RegistrationService

    telegram_webhook_secret: str = ""
    cron_secret: str = ""


def build_time_authority(settings: Any, *, clock: Optional[Callable[[], datetime]] = None) -> TimeAuthority:
    return TimeAuthority(
        getattr(settings, "TIMEZONE", DEFAULT_TIMEZONE),
        cutoff_hour=int(getattr(settings, "CUTOFF_HOUR", DEFAULT_CUTOFF_HOUR)),
        tz_label=getattr(settings, "TIMEZONE_LABEL", None),
        clock=clock,
    )


def build_sender(settings: Any) -> MessageSender:
    token = getattr(settings, "TELEGRAM_BOT_TOKEN", "")
    if token:
        return TelegramMessageSender(token)
    return LoggingMessageSender()


def wire_services(
    *,
    settings: Any,
    time: TimeAuthority,
    sender: MessageSender,
    trainees_repo,
    commanders_repo,
    attendance_repo,
    notifications_repo,
    registration_repo,
    conn: Optional[DatabaseConnection] = None,
) -> Container:
    """Assemble services over any repository implementations (MySQL or test fakes)."""

    trainee_service = TraineeService(trainees_repo)
    dispatcher = NotificationDispatcher(
        notifications_repo,
        commanders_repo,
        time,
        sender,
        include_admins=bool(getattr(settings, "NOTIFY_ADMINS", False)),
    )
    attendance_service = AttendanceService(attendance_repo, trainee_service, time, dispatcher)
    overdue_sweep = OverdueSweep(attendance_repo, trainees_repo, dispatcher, time)
    registration_service = RegistrationService(
        registration_repo,
        trainee_service,
        time,
        ttl_minutes=int(getattr(settings, "REGISTRATION_TTL_MINUTES", DEFAULT_REGISTRATION_TTL_MINUTES)),
    )

    return Container(
        conn=conn,
        time=time,
        sender=sender,
        trainee_service=trainee_service,
        attendance_service=attendance_service,
        dispatcher=dispatcher,
        overdue_sweep=overdue_sweep,
        registration_service=registration_service,
        telegram_webhook_secret=getattr(settings, "TELEGRAM_WEBHOOK_SECRET", "") or "",
        cron_secret=getattr(settings, "CRON_SECRET", "") or "",
    )


def build_container(*, settings: Any, sender: Optional[MessageSender] = None) -> Container:
    db_config = dict(getattr(settings, "DB_CONFIG"))
    config = DBConfig(
        host=str(db_config["host"]),
        port=int(db_config.get("port", 3306)),
        user=str(db_config["user"]),
        password=str(db_config["password"]),
        database=str(db_config["database"]),
        timeout_seconds=int(db_config.get("timeout_seconds", DEFAULT_STORE_TIMEOUT_SECONDS)),
    )
    conn = DatabaseConnection(config)

    return wire_services(
        settings=settings,
        time=build_time_authority(settings),
        sender=sender or build_sender(settings),
        trainees_repo=MySQLTraineeRepository(conn),
        commanders_repo=MySQLCommanderRepository(conn),
        attendance_repo=MySQLAttendanceRepository(conn),
        notifications_repo=MySQLNotificationRepository(conn),
        registration_repo=MySQLRegistrationStateRepository(conn),
        conn=conn,
    )
