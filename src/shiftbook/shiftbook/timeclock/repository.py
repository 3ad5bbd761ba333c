from __future__ import annotations

from datetime import datetime
from typing import Optional, Protocol, Sequence

from .model import WorkSession


class WorkSessionRepository(Protocol):
    def list_range(
        self,
        business_id: str,
        *,
        employee_id: Optional[str] = None,
        start: Optional[datetime] = None,
        end: Optional[datetime] = None,
    ) -> Sequence[WorkSession]:
        """Sessions ordered by clock-in descending; bounds filter clock-in time."""

        raise NotImplementedError

    def get_by_id(self, session_id: str) -> Optional[WorkSession]:
        raise NotImplementedError

    def get_open_for_employee(self, employee_id: str) -> Optional[WorkSession]:
        raise NotImplementedError

    def create_open(
        self,
        *,
        business_id: str,
        employee_id: str,
        clock_in_time: datetime,
        schedule_id: Optional[str] = None,
        break_duration: int = 0,
    ) -> WorkSession:
        raise NotImplementedError

    def close(self, session_id: str, *, clock_out_time: datetime, total_hours: float) -> bool:
        """Close a session only if it is still open."""

        raise NotImplementedError
