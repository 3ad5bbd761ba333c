from __future__ import annotations

from flask import Flask, jsonify

from ..common.datetime_utils import parse_iso_date
from ..common.http import actor, json_body, query_date, query_str, to_jsonable
from ..core.constants import DEFAULT_BREAK_MINUTES
from ..core.enums import ScheduleStatus
from ..core.exceptions import ValidationError
from ..container import Container


def register(app: Flask, container: Container) -> None:
    service = container.schedule_service

    @app.route("/api/businesses/<bid>/schedules", methods=["GET"], endpoint="list_schedules")
    def list_schedules(bid: str):
        schedules = service.list_schedules(
            bid,
            start=query_date("start"),
            end=query_date("end"),
            employee_id=query_str("employee_id"),
        )
        return jsonify({"schedules": to_jsonable(list(schedules))})

    @app.route("/api/businesses/<bid>/schedules", methods=["POST"], endpoint="create_schedule")
    def create_schedule(bid: str):
        actor_id, role = actor()
        data = json_body()
        try:
            break_duration = int(data.get("break_duration", DEFAULT_BREAK_MINUTES))
        except (TypeError, ValueError):
            raise ValidationError("Break duration must be a whole number of minutes")

        schedule = service.create_schedule(
            current_role=role,
            created_by=actor_id,
            business_id=bid,
            employee_id=data.get("employee_id") or "",
            work_date=parse_iso_date(data.get("date") or ""),
            start_time=data.get("start_time") or "",
            end_time=data.get("end_time") or "",
            break_duration=break_duration,
            notes=data.get("notes"),
        )
        return jsonify({"schedule": to_jsonable(schedule)}), 201

    @app.route("/api/businesses/<bid>/schedules/<schedule_id>/status", methods=["POST"], endpoint="set_schedule_status")
    def set_schedule_status(bid: str, schedule_id: str):
        _, role = actor()
        data = json_body()
        try:
            status = ScheduleStatus(str(data.get("status") or "").lower())
        except ValueError:
            raise ValidationError(f"Unknown schedule status: {data.get('status')!r}")

        schedule = service.set_status(current_role=role, schedule_id=schedule_id, status=status, business_id=bid)
        return jsonify({"schedule": to_jsonable(schedule)})
