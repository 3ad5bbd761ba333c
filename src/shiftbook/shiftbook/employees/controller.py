from __future__ import annotations

from flask import Flask, jsonify, request

from ..common.datetime_utils import parse_iso_date
from ..common.http import actor, json_body, to_jsonable
from ..core.enums import Role
from ..core.exceptions import ValidationError
from ..container import Container


def register(app: Flask, container: Container) -> None:
    service = container.employee_service

    def _employee_in_business(bid: str, employee_id: str):
        employee = service.get_employee(employee_id)
        if employee.business_id != bid:
            raise ValidationError("Employee not found")
        return employee

    @app.route("/api/businesses/<bid>/employees", methods=["GET"], endpoint="list_employees")
    def list_employees(bid: str):
        include_inactive = (request.args.get("include_inactive") or "").lower() in {"1", "true", "yes"}
        employees = service.list_employees(bid, include_inactive=include_inactive)
        return jsonify({"employees": to_jsonable(list(employees))})

    @app.route("/api/businesses/<bid>/employees", methods=["POST"], endpoint="create_employee")
    def create_employee(bid: str):
        _, role = actor()
        data = json_body()
        start_raw = (data.get("start_date") or "").strip()
        try:
            new_role = Role(str(data.get("role") or Role.EMPLOYEE.value).upper())
        except ValueError:
            raise ValidationError(f"Unknown role: {data.get('role')!r}")

        employee = service.create_employee(
            current_role=role,
            business_id=bid,
            first_name=data.get("first_name", ""),
            last_name=data.get("last_name", ""),
            email=data.get("email", ""),
            role=new_role,
            hourly_rate=data.get("hourly_rate"),
            overtime_rate=data.get("overtime_rate"),
            start_date=parse_iso_date(start_raw) if start_raw else None,
            user_id=data.get("user_id"),
        )
        return jsonify({"employee": to_jsonable(employee)}), 201

    @app.route("/api/businesses/<bid>/employees/<employee_id>/rate", methods=["PUT"], endpoint="update_employee_rate")
    def update_employee_rate(bid: str, employee_id: str):
        _, role = actor()
        data = json_body()
        _employee_in_business(bid, employee_id)

        employee = service.update_rate(
            current_role=role,
            employee_id=employee_id,
            hourly_rate=data.get("hourly_rate"),
            overtime_rate=data.get("overtime_rate"),
        )
        return jsonify({"employee": to_jsonable(employee)})

    @app.route(
        "/api/businesses/<bid>/employees/<employee_id>/deactivate",
        methods=["POST"],
        endpoint="deactivate_employee",
    )
    def deactivate_employee(bid: str, employee_id: str):
        _, role = actor()
        _employee_in_business(bid, employee_id)
        service.deactivate(current_role=role, employee_id=employee_id)
        return jsonify({"employee": to_jsonable(service.get_employee(employee_id))})
