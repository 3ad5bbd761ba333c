from __future__ import annotations

from flask import Flask, jsonify

from ..common.http import actor, json_body, query_date, query_str, to_jsonable
from ..core.enums import Role
from ..core.exceptions import AuthorizationError, ValidationError
from ..container import Container


def register(app: Flask, container: Container) -> None:
    service = container.time_clock_service
    employees = container.employee_service

    def _require_self_or_manager(actor_id: str, role: Role, employee_id: str) -> None:
        if role.can_manage:
            return
        employee = employees.get_employee(employee_id)
        if actor_id not in {employee.id, employee.user_id}:
            raise AuthorizationError("Employees can only clock themselves in and out")

    def _session_payload(session):
        payload = to_jsonable(session)
        payload["is_open"] = session.is_open
        payload["elapsed_seconds"] = int(service.elapsed(session).total_seconds())
        return payload

    @app.route("/api/businesses/<bid>/sessions", methods=["GET"], endpoint="list_sessions")
    def list_sessions(bid: str):
        sessions = service.list_sessions(
            bid,
            employee_id=query_str("employee_id"),
            start=query_date("start"),
            end=query_date("end"),
        )
        return jsonify({"sessions": to_jsonable(list(sessions))})

    @app.route("/api/businesses/<bid>/clock-in", methods=["POST"], endpoint="clock_in")
    def clock_in(bid: str):
        actor_id, role = actor()
        data = json_body()
        employee_id = (data.get("employee_id") or "").strip()
        if not employee_id:
            raise ValidationError("employee_id is required")
        _require_self_or_manager(actor_id, role, employee_id)

        session = service.clock_in(bid, employee_id, schedule_id=data.get("schedule_id") or None)
        return jsonify({"session": _session_payload(session)}), 201

    @app.route("/api/businesses/<bid>/clock-out", methods=["POST"], endpoint="clock_out")
    def clock_out(bid: str):
        actor_id, role = actor()
        data = json_body()
        session_id = (data.get("session_id") or "").strip()
        employee_id = (data.get("employee_id") or "").strip()

        if session_id:
            existing = service.get_session(session_id)
            if existing.business_id != bid:
                raise ValidationError("Work session not found")
            _require_self_or_manager(actor_id, role, existing.employee_id)
            session = service.clock_out_session(session_id)
        elif employee_id:
            _require_self_or_manager(actor_id, role, employee_id)
            session = service.clock_out(employee_id, business_id=bid)
        else:
            raise ValidationError("session_id or employee_id is required")

        return jsonify({"session": _session_payload(session)})

    @app.route("/api/businesses/<bid>/employees/<employee_id>/week", methods=["GET"], endpoint="my_week")
    def my_week(bid: str, employee_id: str):
        overview = service.my_week(bid, employee_id, today=query_date("today"))
        payload = to_jsonable(overview)
        payload["active_session"] = _session_payload(overview.active_session) if overview.active_session else None
        return jsonify(payload)
