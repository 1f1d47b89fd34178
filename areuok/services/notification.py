"""
Notification surface — fire-and-forget.

Messages are logged and kept in a bounded in-memory outbox that the client
polls through GET /notifications. notify() never raises.
"""
from __future__ import annotations

import logging
from collections import deque
from dataclasses import dataclass

from areuok.core.config import settings
from areuok.services.device import utc_now_iso

logger = logging.getLogger(__name__)


@dataclass
class Notification:
    title: str
    body: str
    created_at: str


OUTBOX: deque[Notification] = deque(maxlen=settings.NOTIFICATION_OUTBOX_SIZE)


def notify(title: str, body: str) -> None:
    try:
        OUTBOX.append(Notification(title=title, body=body, created_at=utc_now_iso()))
        logger.info("Notification: %s: %s", title, body)
    except Exception:
        logger.exception("Failed to deliver notification %r", title)


def recent_notifications() -> list[Notification]:
    """Newest first."""
    return list(reversed(OUTBOX))
