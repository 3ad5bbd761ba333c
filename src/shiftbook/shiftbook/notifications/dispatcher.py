"""Fire-and-forget boundary towards the notification dispatcher.

Delivery, per-category preferences and quiet hours belong to the dispatcher
itself. Callers only hand over an event and never see delivery failures.
"""
from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Any, Optional, Protocol

from ..core.enums import NotificationType

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class NotificationEvent:
    type: NotificationType
    title: str
    body: str
    business_id: Optional[str] = None
    data: dict[str, Any] = field(default_factory=dict)


class Notifier(Protocol):
    def notify(self, event: NotificationEvent) -> None:
        raise NotImplementedError


class LoggingNotifier(Notifier):
    """Default notifier: records the event in the application log."""

    def notify(self, event: NotificationEvent) -> None:
        logger.info(
            event.title,
            extra={
                "notification_type": event.type.value,
                "business_id": event.business_id,
                "body": event.body,
                "data": event.data,
            },
        )


class RecordingNotifier(Notifier):
    """Keeps events in memory, for the demo backend and tests."""

    def __init__(self):
        self.events: list[NotificationEvent] = []

    def notify(self, event: NotificationEvent) -> None:
        self.events.append(event)


def dispatch(notifier: Optional[Notifier], event: NotificationEvent) -> None:
    if notifier is None:
        return
    try:
        notifier.notify(event)
    except Exception:
        logger.exception("Notification dispatch failed", extra={"notification_type": event.type.value})
