from __future__ import annotations

import logging
from concurrent.futures import ThreadPoolExecutor
from dataclasses import dataclass
from datetime import date, datetime
from typing import Iterable, Optional, Sequence

from ..common.datetime_utils import now_local
from ..common.validators import require_manager, require_non_empty
from ..core.constants import DEFAULT_BULK_MAX_WORKERS
from ..core.enums import NotificationType, Role, TimeOffDecision, TimeOffStatus, TimeOffType
from ..core.exceptions import DomainError, InvalidTransition, ValidationError
from ..employees.repository import EmployeeRepository
from ..notifications.dispatcher import NotificationEvent, Notifier, dispatch
from .model import TimeOffRequest
from .repository import TimeOffRepository

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class BulkFailure:
    request_id: str
    error: str


@dataclass(frozen=True)
class BulkApprovalResult:
    approved: Sequence[TimeOffRequest]
    failures: Sequence[BulkFailure]

    @property
    def failed_count(self) -> int:
        return len(self.failures)


class TimeOffService:
    """Use case: submit and resolve time-off requests.

    A request is resolved at most once. The pending check is repeated inside
    the repository update, so two managers racing on the same request end
    with exactly one winner.
    """

    def __init__(
        self,
        requests: TimeOffRepository,
        employees: EmployeeRepository,
        *,
        notifier: Optional[Notifier] = None,
        max_workers: int = DEFAULT_BULK_MAX_WORKERS,
    ):
        self._requests = requests
        self._employees = employees
        self._notifier = notifier
        self._max_workers = max(1, int(max_workers))

    def list_requests(self, business_id: str, *, employee_id: Optional[str] = None) -> Sequence[TimeOffRequest]:
        return self._requests.list_for_business(business_id, employee_id=employee_id)

    def get_request(self, request_id: str) -> TimeOffRequest:
        req = self._requests.get_by_id(request_id)
        if not req:
            raise ValidationError("Time-off request not found")
        return req

    def create_request(
        self,
        *,
        business_id: str,
        employee_id: str,
        type: object,
        start_date: date,
        end_date: date,
        reason: str,
        now: Optional[datetime] = None,
    ) -> TimeOffRequest:
        try:
            off_type = TimeOffType(type)
        except ValueError:
            raise ValidationError(f"Unknown time-off type: {type!r}")

        if end_date < start_date:
            raise ValidationError("End date must be on or after start date")
        reason = require_non_empty(reason, "Reason")

        employee = self._employees.get_by_id(employee_id)
        if not employee or employee.business_id != business_id:
            raise ValidationError("Employee not found")

        req = self._requests.create(
            business_id=business_id,
            employee_id=employee_id,
            type=off_type,
            start_date=start_date,
            end_date=end_date,
            reason=reason,
            created_at=now or now_local(),
        )
        logger.info("Time-off requested", extra={"request_id": req.id, "employee_id": employee_id})

        dispatch(
            self._notifier,
            NotificationEvent(
                type=NotificationType.TIME_OFF_REQUEST,
                title="New Time Off Request",
                body=f"{employee.full_name} requested {off_type.value} time off",
                business_id=business_id,
                data={"request_id": req.id, "employee_id": employee_id},
            ),
        )
        return req

    def approve(
        self,
        *,
        current_role: Role,
        request_id: str,
        approver_id: str,
        now: Optional[datetime] = None,
        business_id: Optional[str] = None,
    ) -> TimeOffRequest:
        return self._decide(current_role, request_id, approver_id, TimeOffStatus.APPROVED, now, business_id)

    def deny(
        self,
        *,
        current_role: Role,
        request_id: str,
        approver_id: str,
        now: Optional[datetime] = None,
        business_id: Optional[str] = None,
    ) -> TimeOffRequest:
        return self._decide(current_role, request_id, approver_id, TimeOffStatus.DENIED, now, business_id)

    def resolve(
        self,
        *,
        current_role: Role,
        request_id: str,
        decision: object,
        approver_id: str,
        now: Optional[datetime] = None,
        business_id: Optional[str] = None,
    ) -> TimeOffRequest:
        try:
            decision = TimeOffDecision(decision)
        except ValueError:
            raise ValidationError(f"Unknown decision: {decision!r}")

        status = TimeOffStatus.APPROVED if decision == TimeOffDecision.APPROVE else TimeOffStatus.DENIED
        return self._decide(current_role, request_id, approver_id, status, now, business_id)

    def _decide(
        self,
        current_role: Role,
        request_id: str,
        approver_id: str,
        status: TimeOffStatus,
        now: Optional[datetime],
        business_id: Optional[str] = None,
    ) -> TimeOffRequest:
        require_manager(current_role)
        approver_id = require_non_empty(approver_id, "Approver")

        req = self.get_request(request_id)
        if business_id is not None and req.business_id != business_id:
            raise ValidationError("Time-off request not found")
        if not req.is_pending:
            raise InvalidTransition(f"Request is already {req.status.value}")

        decided = self._requests.decide(
            request_id,
            status=status,
            decided_by=approver_id,
            decided_at=now or now_local(),
        )
        if not decided:
            raise InvalidTransition("Request was resolved by someone else")

        updated = self.get_request(request_id)
        logger.info(
            "Time-off request resolved",
            extra={"request_id": request_id, "status": status.value, "approver_id": approver_id},
        )

        dispatch(
            self._notifier,
            NotificationEvent(
                type=NotificationType.TIME_OFF_REQUEST,
                title=f"Time Off {status.value.capitalize()}",
                body=(
                    f"Your {updated.type.value} request for "
                    f"{updated.start_date.isoformat()} to {updated.end_date.isoformat()} was {status.value}"
                ),
                business_id=updated.business_id,
                data={"request_id": request_id, "employee_id": updated.employee_id, "status": status.value},
            ),
        )
        return updated

    def bulk_approve(
        self,
        *,
        current_role: Role,
        request_ids: Iterable[str],
        approver_id: str,
        now: Optional[datetime] = None,
        business_id: Optional[str] = None,
    ) -> BulkApprovalResult:
        """Approve each request independently; failures are collected, never raised.

        With ``business_id`` set, requests of any other business fail as not found.
        """
        require_manager(current_role)

        ids = list(dict.fromkeys(request_ids))
        if not ids:
            return BulkApprovalResult(approved=[], failures=[])

        def approve_one(request_id: str) -> TimeOffRequest:
            return self.approve(
                current_role=current_role,
                request_id=request_id,
                approver_id=approver_id,
                now=now,
                business_id=business_id,
            )

        with ThreadPoolExecutor(max_workers=min(self._max_workers, len(ids))) as pool:
            futures = [(rid, pool.submit(approve_one, rid)) for rid in ids]

        approved: list[TimeOffRequest] = []
        failures: list[BulkFailure] = []
        for rid, fut in futures:
            try:
                approved.append(fut.result())
            except DomainError as e:
                logger.warning("Bulk approval item failed", extra={"request_id": rid, "error": str(e)})
                failures.append(BulkFailure(request_id=rid, error=str(e)))
            except Exception as e:
                logger.exception("Bulk approval item crashed", extra={"request_id": rid})
                failures.append(BulkFailure(request_id=rid, error=str(e) or type(e).__name__))

        logger.info(
            "Bulk approval finished",
            extra={"approved": len(approved), "failed": len(failures)},
        )
        return BulkApprovalResult(approved=approved, failures=failures)
