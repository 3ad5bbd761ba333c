from __future__ import annotations

import threading
import uuid
from dataclasses import replace
from datetime import date
from typing import Optional, Sequence

from ..core.enums import ScheduleStatus
from .model import Schedule
from .repository import ScheduleRepository


class InMemoryScheduleRepository(ScheduleRepository):
    def __init__(self):
        self._lock = threading.Lock()
        self._by_id: dict[str, Schedule] = {}

    def add(self, schedule: Schedule) -> Schedule:
        with self._lock:
            self._by_id[schedule.id] = schedule
        return schedule

    def list_range(
        self,
        business_id: str,
        *,
        start: Optional[date] = None,
        end: Optional[date] = None,
        employee_id: Optional[str] = None,
    ) -> Sequence[Schedule]:
        with self._lock:
            items = [s for s in self._by_id.values() if s.business_id == business_id]
        if employee_id is not None:
            items = [s for s in items if s.employee_id == employee_id]
        if start is not None:
            items = [s for s in items if s.date >= start]
        if end is not None:
            items = [s for s in items if s.date <= end]
        items.sort(key=lambda s: (s.date, s.start_time))
        return items

    def get_by_id(self, schedule_id: str) -> Optional[Schedule]:
        with self._lock:
            return self._by_id.get(schedule_id)

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
        return self.add(
            Schedule(
                id=str(uuid.uuid4()),
                business_id=business_id,
                employee_id=employee_id,
                date=work_date,
                start_time=start_time,
                end_time=end_time,
                break_duration=int(break_duration),
                status=ScheduleStatus.SCHEDULED,
                created_by=created_by,
                notes=notes,
            )
        )

    def update_status(self, schedule_id: str, *, status: ScheduleStatus, expected: ScheduleStatus) -> bool:
        with self._lock:
            current = self._by_id.get(schedule_id)
            if not current or current.status != expected:
                return False
            self._by_id[schedule_id] = replace(current, status=status)
            return True
