from __future__ import annotations

from dataclasses import dataclass
from datetime import date
from typing import Optional

from ..core.enums import ScheduleStatus


@dataclass(frozen=True)
class Schedule:
    """A planned shift. Times are wall-clock "HH:MM" on ``date``."""

    id: str
    business_id: str
    employee_id: str
    date: date
    start_time: str
    end_time: str
    break_duration: int
    status: ScheduleStatus
    created_by: Optional[str]
    notes: Optional[str] = None
