"""Example: drive the service layer directly (no Flask).

Controllers are a thin layer; the business rules live in the services.
"""

from datetime import date, datetime

from src.shiftbook.shiftbook.container import build_container
from src.shiftbook.shiftbook.core.enums import Role
from src.shiftbook.shiftbook.database.demo_seed import seed_demo_data
from src.shiftbook.shiftbook.payroll.calculator.aggregates import payroll_summary


def main():
    container = build_container(backend="memory")
    today = date.today()
    ids = seed_demo_data(
        employees=container.employees_repo,
        schedules=container.schedules_repo,
        sessions=container.sessions_repo,
        time_off=container.time_off_repo,
        payroll=container.payroll_repo,
        today=today,
        anchor=date(2024, 1, 7),
    )

    clock = container.time_clock_service
    session = clock.clock_in(ids.business_id, ids.employee_id, now=datetime.combine(today, datetime.min.time()))
    print("clocked in:", session.id)

    week = clock.my_week(ids.business_id, ids.employee_id, today=today)
    print("this week:", week.hours)

    pending = [r.id for r in container.time_off_service.list_requests(ids.business_id) if r.is_pending]
    result = container.time_off_service.bulk_approve(
        current_role=Role.MANAGER,
        request_ids=pending,
        approver_id=ids.manager_id,
    )
    print("approved:", len(result.approved), "failed:", result.failed_count)

    print(payroll_summary(container.payroll_service.list_entries(ids.business_id)))


if __name__ == "__main__":
    main()
