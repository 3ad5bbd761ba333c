from __future__ import annotations

import threading
import uuid
from dataclasses import replace
from datetime import date, datetime
from typing import Optional, Sequence

from ..core.enums import TimeOffStatus, TimeOffType
from .model import TimeOffRequest
from .repository import TimeOffRepository


class InMemoryTimeOffRepository(TimeOffRepository):
    def __init__(self):
        self._lock = threading.Lock()
        self._by_id: dict[str, TimeOffRequest] = {}

    def add(self, request: TimeOffRequest) -> TimeOffRequest:
        with self._lock:
            self._by_id[request.id] = request
        return request

    def list_for_business(
        self,
        business_id: str,
        *,
        employee_id: Optional[str] = None,
        status: Optional[TimeOffStatus] = None,
    ) -> Sequence[TimeOffRequest]:
        with self._lock:
            items = [r for r in self._by_id.values() if r.business_id == business_id]
        if employee_id is not None:
            items = [r for r in items if r.employee_id == employee_id]
        if status is not None:
            items = [r for r in items if r.status == status]
        items.sort(key=lambda r: r.created_at, reverse=True)
        return items

    def get_by_id(self, request_id: str) -> Optional[TimeOffRequest]:
        with self._lock:
            return self._by_id.get(request_id)

    def create(
        self,
        *,
        business_id: str,
        employee_id: str,
        type: TimeOffType,
        start_date: date,
        end_date: date,
        reason: str,
        created_at: datetime,
    ) -> TimeOffRequest:
        return self.add(
            TimeOffRequest(
                id=str(uuid.uuid4()),
                business_id=business_id,
                employee_id=employee_id,
                type=type,
                start_date=start_date,
                end_date=end_date,
                reason=reason,
                status=TimeOffStatus.PENDING,
                created_at=created_at,
            )
        )

    def decide(
        self,
        request_id: str,
        *,
        status: TimeOffStatus,
        decided_by: str,
        decided_at: datetime,
    ) -> bool:
        with self._lock:
            current = self._by_id.get(request_id)
            if not current or current.status != TimeOffStatus.PENDING:
                return False
            self._by_id[request_id] = replace(
                current,
                status=status,
                approved_by=decided_by,
                approved_at=decided_at,
            )
            return True
