"""Bounded newest-first notification buffer."""
import uuid
from datetime import datetime
from typing import List
from models.simulation_models import Notification
from configurations.config import Config

def make_notification(message: str, type: str, now: datetime) -> Notification:
    return Notification(
        notification_id=uuid.uuid4().hex,
        message=message,
        type=type,
        timestamp=now
    )

class NotificationFeed:
    def __init__(self, limit: int = None):
        self.limit = limit or Config.MAX_NOTIFICATIONS
        self._items: List[Notification] = []

    def push(self, notification: Notification) -> Notification:
        self._items = [notification] + self._items[:self.limit - 1]
        return notification

    def extend(self, notifications: List[Notification]) -> None:
        """Push in order, so the last one ends up newest."""
        for notification in notifications:
            self.push(notification)

    def clear(self) -> None:
        self._items = []

    def items(self) -> List[Notification]:
        return list(self._items)

    def __len__(self) -> int:
        return len(self._items)
