from __future__ import annotations

from datetime import date
from typing import Optional, Protocol, Sequence

from ..core.enums import ScheduleStatus
from .model import Schedule


class ScheduleRepository(Protocol):
    def list_range(
        self,
        business_id: str,
        *,
        start: Optional[date] = None,
        end: Optional[date] = None,
        employee_id: Optional[str] = None,
    ) -> Sequence[Schedule]:
        """Schedules ordered by date ascending; bounds are inclusive."""

        raise NotImplementedError

    def get_by_id(self, schedule_id: str) -> Optional[Schedule]:
        raise NotImplementedError

    def create(
        self,
        *,
        business_id: str,
        employee_id: str,
        work_date: date,
        start_time: str,
        end_time: str,
        break_duration: int,
        created_by: Optional[str],
        notes: Optional[str] = None,
    ) -> Schedule:
        raise NotImplementedError

    def update_status(self, schedule_id: str, *, status: ScheduleStatus, expected: ScheduleStatus) -> bool:
        """Set status only if it still equals ``expected``."""

        raise NotImplementedError
