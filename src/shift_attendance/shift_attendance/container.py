from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime, timedelta
from typing import Callable, Optional

from .attendance.engine import ReconciliationEngine
from .attendance.mysql_attendance_repository import MySQLAttendanceRepository
from .attendance.repository import AttendanceRepository
from .attendance.service import AttendanceService, SessionManager
from .common.datetime_utils import now_local
from .core.constants import AUTO_CHECKOUT_HOURS
from .database.connection import DBConfig, DatabaseConnection
from .reports.service import ReportService
from .workers.mysql_worker_repository import MySQLWorkerRepository
from .workers.repository import WorkerRepository
from .workers.service import WorkerService


@dataclass(frozen=True)
class Container:
    conn: Optional[DatabaseConnection]

    workers_repo: WorkerRepository
    attendance_repo: AttendanceRepository

    worker_service: WorkerService
    session_manager: SessionManager
    attendance_service: AttendanceService
    report_service: ReportService


def assemble(
    *,
    workers_repo: WorkerRepository,
    attendance_repo: AttendanceRepository,
    conn: Optional[DatabaseConnection] = None,
    auto_checkout_hours: int = AUTO_CHECKOUT_HOURS,
    clock: Callable[[], datetime] = now_local,
) -> Container:
    window = timedelta(hours=auto_checkout_hours)

    return Container(
        conn=conn,
        workers_repo=workers_repo,
        attendance_repo=attendance_repo,
        worker_service=WorkerService(workers_repo, clock=clock),
        session_manager=SessionManager(
            attendance_repo,
            workers_repo,
            engine=ReconciliationEngine(window=window),
            clock=clock,
        ),
        attendance_service=AttendanceService(attendance_repo, workers_repo, clock=clock, window=window),
        report_service=ReportService(attendance_repo, workers_repo, clock=clock, window=window),
    )


def build_container(*, db_config: dict, auto_checkout_hours: int = AUTO_CHECKOUT_HOURS) -> Container:
    conn = DatabaseConnection.get_instance(DBConfig.from_mapping(db_config))
    return assemble(
        workers_repo=MySQLWorkerRepository(conn),
        attendance_repo=MySQLAttendanceRepository(conn),
        conn=conn,
        auto_checkout_hours=auto_checkout_hours,
    )
