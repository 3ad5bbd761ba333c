from __future__ import annotations

from dataclasses import dataclass
from datetime import date
from decimal import Decimal
from typing import Optional

from ..core.enums import Role


@dataclass(frozen=True)
class Employee:
    """Domain entity: a member of a business who can be scheduled and paid.

    Note: pure data object, no persistence code. ``user_id`` is a weak link to
    the login identity and never owns the record.
    """

    id: str
    business_id: str
    user_id: Optional[str]
    first_name: str
    last_name: str
    email: str
    role: Role
    hourly_rate: Decimal
    start_date: date
    overtime_rate: Optional[Decimal] = None
    is_active: bool = True

    @property
    def full_name(self) -> str:
        return f"{self.first_name} {self.last_name}".strip()
