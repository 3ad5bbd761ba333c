from __future__ import annotations

from dataclasses import dataclass
from datetime import date, datetime
from typing import Optional

from ..core.enums import TimeOffStatus, TimeOffType


@dataclass(frozen=True)
class TimeOffRequest:
    """Domain entity: an employee's leave request.

    ``approved_by``/``approved_at`` are stamped on approval and denial alike,
    and only then.
    """

    id: str
    business_id: str
    employee_id: str
    type: TimeOffType
    start_date: date
    end_date: date
    reason: str
    status: TimeOffStatus
    created_at: datetime
    approved_by: Optional[str] = None
    approved_at: Optional[datetime] = None

    @property
    def is_pending(self) -> bool:
        return self.status == TimeOffStatus.PENDING

    @property
    def days(self) -> int:
        return (self.end_date - self.start_date).days + 1
