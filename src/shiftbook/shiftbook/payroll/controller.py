from __future__ import annotations

from flask import Flask, jsonify, request

from ..common.datetime_utils import parse_iso_date
from ..common.http import actor, query_date, query_str, to_jsonable
from ..common.validators import require_manager
from ..core.exceptions import ValidationError
from ..container import Container


def register(app: Flask, container: Container) -> None:
    service = container.payroll_service

    @app.route("/api/businesses/<bid>/payroll/periods", methods=["GET"], endpoint="list_payroll_periods")
    def list_payroll_periods(bid: str):
        periods = service.list_periods(bid)
        current = service.current_period(bid, today=query_date("today"))
        return jsonify(
            {
                "periods": to_jsonable(list(periods)),
                "current_period_id": current.id if current else None,
            }
        )

    @app.route("/api/businesses/<bid>/payroll/periods/sync", methods=["POST"], endpoint="sync_payroll_periods")
    def sync_payroll_periods(bid: str):
        _, role = actor()
        require_manager(role)
        anchor = parse_iso_date(str(app.config["PAY_PERIOD_ANCHOR"]))
        periods = service.sync_periods(bid, anchor=anchor, today=query_date("today"))
        return jsonify({"periods": to_jsonable(list(periods))})

    @app.route("/api/businesses/<bid>/payroll/periods/<period_id>/close", methods=["POST"], endpoint="close_payroll_period")
    def close_payroll_period(bid: str, period_id: str):
        _, role = actor()
        data = request.get_json(silent=True) or {}
        if service.get_period(period_id).business_id != bid:
            raise ValidationError("Payroll period not found")
        entries = service.close_period(
            current_role=role,
            period_id=period_id,
            deduction_rate=data.get("deduction_rate", "0"),
            today=query_date("today"),
        )
        return jsonify({"entries": to_jsonable(list(entries))})

    @app.route("/api/businesses/<bid>/payroll/entries", methods=["GET"], endpoint="list_payroll_entries")
    def list_payroll_entries(bid: str):
        entries = service.list_entries(bid, period_id=query_str("period_id"), employee_id=query_str("employee_id"))
        return jsonify({"entries": to_jsonable(list(entries))})

    @app.route("/api/businesses/<bid>/payroll/summary", methods=["GET"], endpoint="payroll_summary")
    def payroll_summary(bid: str):
        summary = service.summary(bid, period_id=query_str("period_id"), employee_id=query_str("employee_id"))
        return jsonify({"summary": to_jsonable(summary)})

    @app.route(
        "/api/businesses/<bid>/payroll/entries/<entry_id>/advance",
        methods=["POST"],
        endpoint="advance_payroll_entry",
    )
    def advance_payroll_entry(bid: str, entry_id: str):
        _, role = actor()
        if service.get_entry(entry_id).business_id != bid:
            raise ValidationError("Payroll entry not found")
        entry = service.advance_entry(current_role=role, entry_id=entry_id)
        return jsonify({"entry": to_jsonable(entry)})
