from __future__ import annotations

from datetime import date, datetime
from typing import Optional, Protocol, Sequence

from ..core.enums import TimeOffStatus, TimeOffType
from .model import TimeOffRequest


class TimeOffRepository(Protocol):
    def list_for_business(
        self,
        business_id: str,
        *,
        employee_id: Optional[str] = None,
        status: Optional[TimeOffStatus] = None,
    ) -> Sequence[TimeOffRequest]:
        """Requests ordered newest first (by created_at)."""

        raise NotImplementedError

    def get_by_id(self, request_id: str) -> Optional[TimeOffRequest]:
        raise NotImplementedError

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
        raise NotImplementedError

    def decide(
        self,
        request_id: str,
        *,
        status: TimeOffStatus,
        decided_by: str,
        decided_at: datetime,
    ) -> bool:
        """Resolve a request only if it is still pending."""

        raise NotImplementedError
