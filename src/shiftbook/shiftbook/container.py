from __future__ import annotations

from dataclasses import dataclass
from typing import Optional

from .core.constants import DEFAULT_BULK_MAX_WORKERS
from .database.connection import DBConfig, DatabaseConnection
from .employees.repository import EmployeeRepository
from .employees.service import EmployeeService
from .notifications.dispatcher import LoggingNotifier, Notifier
from .payroll.repository import PayrollRepository
from .payroll.service import PayrollService
from .schedules.repository import ScheduleRepository
from .schedules.service import ScheduleService
from .timeclock.repository import WorkSessionRepository
from .timeclock.service import TimeClockService
from .timeoff.repository import TimeOffRepository
from .timeoff.service import TimeOffService

BACKEND_MEMORY = "memory"
BACKEND_MYSQL = "mysql"


@dataclass(frozen=True)
class Container:
    backend: str
    conn: Optional[DatabaseConnection]
    notifier: Notifier

    employees_repo: EmployeeRepository
    schedules_repo: ScheduleRepository
    sessions_repo: WorkSessionRepository
    time_off_repo: TimeOffRepository
    payroll_repo: PayrollRepository

    employee_service: EmployeeService
    schedule_service: ScheduleService
    time_clock_service: TimeClockService
    time_off_service: TimeOffService
    payroll_service: PayrollService


def _memory_repositories():
    from .employees.memory_employee_repository import InMemoryEmployeeRepository
    from .payroll.memory_payroll_repository import InMemoryPayrollRepository
    from .schedules.memory_schedule_repository import InMemoryScheduleRepository
    from .timeclock.memory_session_repository import InMemoryWorkSessionRepository
    from .timeoff.memory_timeoff_repository import InMemoryTimeOffRepository

    return (
        InMemoryEmployeeRepository(),
        InMemoryScheduleRepository(),
        InMemoryWorkSessionRepository(),
        InMemoryTimeOffRepository(),
        InMemoryPayrollRepository(),
    )


def _mysql_repositories(conn: DatabaseConnection):
    from .employees.mysql_employee_repository import MySQLEmployeeRepository
    from .payroll.mysql_payroll_repository import MySQLPayrollRepository
    from .schedules.mysql_schedule_repository import MySQLScheduleRepository
    from .timeclock.mysql_session_repository import MySQLWorkSessionRepository
    from .timeoff.mysql_timeoff_repository import MySQLTimeOffRepository

    return (
        MySQLEmployeeRepository(conn),
        MySQLScheduleRepository(conn),
        MySQLWorkSessionRepository(conn),
        MySQLTimeOffRepository(conn),
        MySQLPayrollRepository(conn),
    )


def build_container(
    *,
    backend: str = BACKEND_MEMORY,
    db_config: Optional[dict] = None,
    notifier: Optional[Notifier] = None,
    bulk_max_workers: int = DEFAULT_BULK_MAX_WORKERS,
) -> Container:
    """Composition root: pick one repository backend and wire every service to it."""
    backend = (backend or BACKEND_MEMORY).strip().lower()

    conn: Optional[DatabaseConnection] = None
    if backend == BACKEND_MEMORY:
        repos = _memory_repositories()
    elif backend == BACKEND_MYSQL:
        if not db_config:
            raise ValueError("db_config is required for the mysql backend")
        conn = DatabaseConnection.get_instance(DBConfig.from_dict(db_config))
        repos = _mysql_repositories(conn)
    else:
        raise ValueError(f"Unknown HR backend: {backend!r}")

    employees_repo, schedules_repo, sessions_repo, time_off_repo, payroll_repo = repos
    notifier = notifier or LoggingNotifier()

    return Container(
        backend=backend,
        conn=conn,
        notifier=notifier,
        employees_repo=employees_repo,
        schedules_repo=schedules_repo,
        sessions_repo=sessions_repo,
        time_off_repo=time_off_repo,
        payroll_repo=payroll_repo,
        employee_service=EmployeeService(employees_repo),
        schedule_service=ScheduleService(schedules_repo, employees_repo, notifier=notifier),
        time_clock_service=TimeClockService(sessions_repo, employees_repo, schedules_repo, notifier=notifier),
        time_off_service=TimeOffService(
            time_off_repo,
            employees_repo,
            notifier=notifier,
            max_workers=bulk_max_workers,
        ),
        payroll_service=PayrollService(payroll_repo, employees_repo, sessions_repo, notifier=notifier),
    )
