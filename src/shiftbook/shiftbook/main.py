from __future__ import annotations

import importlib
import logging
from pathlib import Path
from typing import Optional

from dotenv import load_dotenv
from flask import Flask, jsonify

from config import get_settings_module

from .common.datetime_utils import now_local, parse_iso_date
from .container import BACKEND_MYSQL, Container, build_container
from .core.constants import DEFAULT_BULK_MAX_WORKERS
from .core.exceptions import (
    AuthorizationError,
    DomainError,
    StateConflict,
    TransportError,
    ValidationError,
)
from .core.logging import configure_logging
from .database.bootstrap import apply_schema, list_tables
from .database.demo_seed import DEMO_BUSINESS_ID, seed_demo_data
from .employees.controller import register as register_employees
from .payroll.controller import register as register_payroll
from .schedules.controller import register as register_schedules
from .timeclock.controller import register as register_timeclock
from .timeoff.controller import register as register_timeoff

logger = logging.getLogger(__name__)

_STATUS_BY_ERROR = (
    (ValidationError, 400),
    (AuthorizationError, 403),
    (StateConflict, 409),
    (TransportError, 503),
)


def _register_error_handlers(app: Flask) -> None:
    @app.errorhandler(DomainError)
    def handle_domain_error(e: DomainError):
        status = next((code for cls, code in _STATUS_BY_ERROR if isinstance(e, cls)), 400)
        if status >= 500:
            logger.error("Request failed", extra={"error": str(e)})
        return jsonify({"error": str(e)}), status


def _seed_if_empty(container: Container, *, anchor_raw: str) -> None:
    if container.employees_repo.list_for_business(DEMO_BUSINESS_ID, include_inactive=True):
        return
    seed_demo_data(
        employees=container.employees_repo,
        schedules=container.schedules_repo,
        sessions=container.sessions_repo,
        time_off=container.time_off_repo,
        payroll=container.payroll_repo,
        today=now_local().date(),
        anchor=parse_iso_date(anchor_raw),
    )


def create_app(*, container: Optional[Container] = None) -> Flask:
    load_dotenv(override=False)

    settings_module = get_settings_module()
    settings = importlib.import_module(settings_module)
    configure_logging(getattr(settings, "LOG_LEVEL", None))

    app = Flask(__name__)
    app.secret_key = getattr(settings, "SECRET_KEY")
    app.config["DEBUG"] = bool(getattr(settings, "DEBUG", False))
    app.config["TESTING"] = bool(getattr(settings, "TESTING", False))
    app.config["PAY_PERIOD_ANCHOR"] = str(getattr(settings, "PAY_PERIOD_ANCHOR", "2024-01-07"))

    backend = str(getattr(settings, "HR_BACKEND", "memory"))
    db_config = dict(getattr(settings, "DB_CONFIG", {}) or {})

    if container is None:
        if backend == BACKEND_MYSQL and bool(getattr(settings, "AUTO_INIT_DB", False)):
            schema_path = Path(__file__).resolve().parents[3] / "database" / "schema.sql"
            apply_schema(db_config, schema_path=schema_path)
            logger.info("Schema ready", extra={"tables": len(list_tables(db_config))})

        container = build_container(
            backend=backend,
            db_config=db_config,
            bulk_max_workers=int(getattr(settings, "BULK_MAX_WORKERS", DEFAULT_BULK_MAX_WORKERS)),
        )

        if bool(getattr(settings, "AUTO_SEED_DB", False)):
            _seed_if_empty(container, anchor_raw=app.config["PAY_PERIOD_ANCHOR"])

    logger.info("App configured", extra={"settings": settings_module, "backend": container.backend})
    app.extensions["shiftbook"] = container

    _register_error_handlers(app)

    @app.route("/health", methods=["GET"], endpoint="health")
    def health():
        return jsonify({"status": "ok", "backend": container.backend})

    register_employees(app, container)
    register_schedules(app, container)
    register_timeclock(app, container)
    register_timeoff(app, container)
    register_payroll(app, container)

    return app
