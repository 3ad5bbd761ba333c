from __future__ import annotations

from flask import Flask, jsonify

from ..common.datetime_utils import parse_iso_date
from ..common.http import actor, json_body, query_str, to_jsonable
from ..core.exceptions import AuthorizationError, ValidationError
from ..container import Container
from .workflow import pending_of, resolved_of, tally


def register(app: Flask, container: Container) -> None:
    service = container.time_off_service
    employees = container.employee_service

    @app.route("/api/businesses/<bid>/time-off", methods=["GET"], endpoint="list_time_off")
    def list_time_off(bid: str):
        requests = list(service.list_requests(bid, employee_id=query_str("employee_id")))
        return jsonify(
            {
                "pending": to_jsonable(pending_of(requests)),
                "resolved": to_jsonable(resolved_of(requests)),
                "counts": {**to_jsonable(tally(requests)), "total": len(requests)},
            }
        )

    @app.route("/api/businesses/<bid>/time-off", methods=["POST"], endpoint="create_time_off")
    def create_time_off(bid: str):
        actor_id, role = actor()
        data = json_body()
        employee_id = (data.get("employee_id") or "").strip()
        if not employee_id:
            raise ValidationError("employee_id is required")
        if not role.can_manage:
            employee = employees.get_employee(employee_id)
            if actor_id not in {employee.id, employee.user_id}:
                raise AuthorizationError("Employees can only request time off for themselves")

        req = service.create_request(
            business_id=bid,
            employee_id=employee_id,
            type=str(data.get("type") or "").lower(),
            start_date=parse_iso_date(data.get("start_date") or ""),
            end_date=parse_iso_date(data.get("end_date") or ""),
            reason=data.get("reason") or "",
        )
        return jsonify({"request": to_jsonable(req)}), 201

    @app.route("/api/businesses/<bid>/time-off/<request_id>/resolve", methods=["POST"], endpoint="resolve_time_off")
    def resolve_time_off(bid: str, request_id: str):
        actor_id, role = actor()
        data = json_body()

        req = service.resolve(
            current_role=role,
            request_id=request_id,
            decision=str(data.get("decision") or "").lower(),
            approver_id=actor_id,
            business_id=bid,
        )
        return jsonify({"request": to_jsonable(req)})

    @app.route("/api/businesses/<bid>/time-off/bulk-approve", methods=["POST"], endpoint="bulk_approve_time_off")
    def bulk_approve_time_off(bid: str):
        actor_id, role = actor()
        data = json_body()
        ids = data.get("request_ids")
        if not isinstance(ids, list) or not all(isinstance(i, str) for i in ids):
            raise ValidationError("request_ids must be a list of ids")

        result = service.bulk_approve(current_role=role, request_ids=ids, approver_id=actor_id, business_id=bid)
        return jsonify(
            {
                "approved": to_jsonable(list(result.approved)),
                "failures": to_jsonable(list(result.failures)),
                "failed_count": result.failed_count,
            }
        )
