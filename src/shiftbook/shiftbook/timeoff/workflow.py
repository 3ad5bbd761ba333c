"""Pure views over loaded time-off requests, used for summary counts and lists."""
from __future__ import annotations

from dataclasses import dataclass
from typing import Iterable

from ..core.enums import TimeOffStatus
from .model import TimeOffRequest


@dataclass(frozen=True)
class TimeOffTally:
    pending: int
    approved: int
    denied: int

    @property
    def total(self) -> int:
        return self.pending + self.approved + self.denied


def _newest_first(requests: Iterable[TimeOffRequest]) -> list[TimeOffRequest]:
    return sorted(requests, key=lambda r: r.created_at, reverse=True)


def pending_of(requests: Iterable[TimeOffRequest]) -> list[TimeOffRequest]:
    return _newest_first(r for r in requests if r.status == TimeOffStatus.PENDING)


def resolved_of(requests: Iterable[TimeOffRequest]) -> list[TimeOffRequest]:
    return _newest_first(r for r in requests if r.status != TimeOffStatus.PENDING)


def tally(requests: Iterable[TimeOffRequest]) -> TimeOffTally:
    counts = {s: 0 for s in TimeOffStatus}
    for r in requests:
        counts[r.status] += 1
    return TimeOffTally(
        pending=counts[TimeOffStatus.PENDING],
        approved=counts[TimeOffStatus.APPROVED],
        denied=counts[TimeOffStatus.DENIED],
    )
