from __future__ import annotations

import importlib
import sys
from datetime import date
from pathlib import Path

REPO_ROOT = Path(__file__).resolve().parents[1]
if str(REPO_ROOT) not in sys.path:
    sys.path.insert(0, str(REPO_ROOT))

from dotenv import load_dotenv

from config import get_settings_module

from src.shiftbook.shiftbook.common.datetime_utils import parse_iso_date
from src.shiftbook.shiftbook.container import BACKEND_MYSQL, build_container
from src.shiftbook.shiftbook.core.logging import configure_logging
from src.shiftbook.shiftbook.database.demo_seed import DEMO_BUSINESS_ID, seed_demo_data


def main() -> None:
    load_dotenv(override=False)
    settings = importlib.import_module(get_settings_module())
    configure_logging(getattr(settings, "LOG_LEVEL", None))
    db_config = dict(settings.DB_CONFIG)

    container = build_container(backend=BACKEND_MYSQL, db_config=db_config)
    if container.employees_repo.list_for_business(DEMO_BUSINESS_ID, include_inactive=True):
        print(f"SKIP: business {DEMO_BUSINESS_ID!r} already has employees")
        return

    ids = seed_demo_data(
        employees=container.employees_repo,
        schedules=container.schedules_repo,
        sessions=container.sessions_repo,
        time_off=container.time_off_repo,
        payroll=container.payroll_repo,
        today=date.today(),
        anchor=parse_iso_date(str(settings.PAY_PERIOD_ANCHOR)),
    )
    print(
        "OK: Seeded demo business -> "
        f"{db_config.get('user')}@{db_config.get('host')}:{db_config.get('port', 3306)}/{db_config.get('database')} "
        f"(business={ids.business_id}, employee={ids.employee_id}, manager={ids.manager_id})"
    )


if __name__ == "__main__":
    main()
