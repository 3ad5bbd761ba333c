from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from typing import Optional


@dataclass(frozen=True)
class WorkSession:
    """Domain entity: one clock-in/clock-out span.

    ``total_hours`` stays 0 until the session is closed.
    """

    id: str
    business_id: str
    employee_id: str
    clock_in_time: datetime
    schedule_id: Optional[str] = None
    clock_out_time: Optional[datetime] = None
    break_duration: int = 0
    total_hours: float = 0.0
    notes: Optional[str] = None

    @property
    def is_open(self) -> bool:
        return self.clock_out_time is None
