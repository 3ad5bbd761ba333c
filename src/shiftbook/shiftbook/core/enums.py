from __future__ import annotations

from enum import Enum


class Role(str, Enum):
    """Role of a business member, used for permission checks."""

    OWNER = "OWNER"
    MANAGER = "MANAGER"
    EMPLOYEE = "EMPLOYEE"

    @property
    def can_manage(self) -> bool:
        return self in {Role.OWNER, Role.MANAGER}


class ScheduleStatus(str, Enum):
    SCHEDULED = "scheduled"
    COMPLETED = "completed"
    MISSED = "missed"
    CANCELLED = "cancelled"


class TimeOffType(str, Enum):
    VACATION = "vacation"
    SICK = "sick"
    PERSONAL = "personal"


class TimeOffStatus(str, Enum):
    """Approval flow state of a time-off request."""

    PENDING = "pending"
    APPROVED = "approved"
    DENIED = "denied"


class TimeOffDecision(str, Enum):
    APPROVE = "approve"
    DENY = "deny"


class PayrollPeriodStatus(str, Enum):
    UPCOMING = "upcoming"
    CURRENT = "current"
    COMPLETED = "completed"


class PayrollEntryStatus(str, Enum):
    DRAFT = "draft"
    APPROVED = "approved"
    PAID = "paid"


class NotificationType(str, Enum):
    TIME_OFF_REQUEST = "time_off_request"
    SCHEDULE_UPDATE = "schedule_update"
    PAYROLL_READY = "payroll_ready"
    CLOCK_REMINDER = "clock_reminder"
    GENERAL = "general"
