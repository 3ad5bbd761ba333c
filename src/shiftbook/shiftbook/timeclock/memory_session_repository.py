from __future__ import annotations

import threading
import uuid
from dataclasses import replace
from datetime import datetime
from typing import Optional, Sequence

from .model import WorkSession
from .repository import WorkSessionRepository


class InMemoryWorkSessionRepository(WorkSessionRepository):
    def __init__(self):
        self._lock = threading.Lock()
        self._by_id: dict[str, WorkSession] = {}

    def add(self, session: WorkSession) -> WorkSession:
        with self._lock:
            self._by_id[session.id] = session
        return session

    def list_range(
        self,
        business_id: str,
        *,
        employee_id: Optional[str] = None,
        start: Optional[datetime] = None,
        end: Optional[datetime] = None,
    ) -> Sequence[WorkSession]:
        with self._lock:
            items = [s for s in self._by_id.values() if s.business_id == business_id]
        if employee_id is not None:
            items = [s for s in items if s.employee_id == employee_id]
        if start is not None:
            items = [s for s in items if s.clock_in_time >= start]
        if end is not None:
            items = [s for s in items if s.clock_in_time <= end]
        items.sort(key=lambda s: s.clock_in_time, reverse=True)
        return items

    def get_by_id(self, session_id: str) -> Optional[WorkSession]:
        with self._lock:
            return self._by_id.get(session_id)

    def get_open_for_employee(self, employee_id: str) -> Optional[WorkSession]:
        with self._lock:
            open_sessions = [s for s in self._by_id.values() if s.employee_id == employee_id and s.is_open]
        if not open_sessions:
            return None
        return max(open_sessions, key=lambda s: s.clock_in_time)

    def create_open(
        self,
        *,
        business_id: str,
        employee_id: str,
        clock_in_time: datetime,
        schedule_id: Optional[str] = None,
        break_duration: int = 0,
    ) -> WorkSession:
        return self.add(
            WorkSession(
                id=str(uuid.uuid4()),
                business_id=business_id,
                employee_id=employee_id,
                schedule_id=schedule_id,
                clock_in_time=clock_in_time,
                break_duration=int(break_duration),
            )
        )

    def close(self, session_id: str, *, clock_out_time: datetime, total_hours: float) -> bool:
        with self._lock:
            current = self._by_id.get(session_id)
            if not current or not current.is_open:
                return False
            self._by_id[session_id] = replace(current, clock_out_time=clock_out_time, total_hours=total_hours)
            return True
