"""
Notification Center

Transient, write-once messages for the player (rejections, round-end
messages). Each notification expires on its own timer; expiry never blocks
or gates game state transitions.
"""

import itertools
import threading
from typing import Callable, Dict, List, Optional

from ..config.game_settings import NOTIFICATION_TTL_SECONDS
from ..models.game import Notification, NotificationType
from .scheduler import Scheduler


class NotificationCenter:
    """
    Holds the currently visible notifications of one session.

    ``lock`` is shared with the owning session so expiry timers firing on a
    background thread are serialized with game mutations.
    """

    def __init__(self, scheduler: Scheduler, ttl: float = NOTIFICATION_TTL_SECONDS,
                 on_change: Optional[Callable[[], None]] = None,
                 on_post: Optional[Callable[[Notification], None]] = None,
                 lock=None):
        self.scheduler = scheduler
        self.ttl = ttl
        self.on_change = on_change
        self.on_post = on_post
        self.lock = lock or threading.RLock()
        self._active: Dict[int, Notification] = {}
        self._ids = itertools.count()

    def post(self, message: str, type: NotificationType = NotificationType.ERROR) -> Notification:
        with self.lock:
            notification = Notification(id=next(self._ids), message=message, type=type)
            self._active[notification.id] = notification
            self.scheduler.call_later(self.ttl, lambda: self._expire(notification.id))
            if self.on_post:
                self.on_post(notification)
            return notification

    def _expire(self, notification_id: int) -> None:
        with self.lock:
            # Already cleared by a new game
            if self._active.pop(notification_id, None) is None:
                return
            if self.on_change:
                self.on_change()

    def clear(self) -> None:
        with self.lock:
            self._active.clear()

    def active(self) -> List[Notification]:
        with self.lock:
            return list(self._active.values())

    def __len__(self) -> int:
        return len(self._active)
