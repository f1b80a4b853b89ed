"""
Deferred Task Scheduling

Game state finalization and notification expiry run after a delay. The
services only depend on the small ``Scheduler`` interface below, so the same
game logic runs on Flask-SocketIO background tasks in the server and on a
virtual clock in tests.
"""

import heapq
import itertools
from typing import Callable, List, Tuple

from ..utils.game_logger import game_logger


class ScheduledTask:
    """Handle for a deferred callback."""

    def __init__(self, callback: Callable[[], None], due: float):
        self.callback = callback
        self.due = due
        self.cancelled = False
        self.fired = False

    def cancel(self) -> None:
        self.cancelled = True

    def run(self) -> None:
        if self.cancelled or self.fired:
            return
        self.fired = True
        self.callback()


class Scheduler:
    """Interface for deferred callbacks."""

    def call_later(self, delay: float, callback: Callable[[], None]) -> ScheduledTask:
        raise NotImplementedError


class ManualScheduler(Scheduler):
    """
    Scheduler driven by a virtual clock.

    Nothing runs until ``advance`` is called; due tasks then run in order of
    their due time (ties keep scheduling order), including tasks scheduled by
    callbacks that fall inside the advanced window.
    """

    def __init__(self):
        self.now = 0.0
        self._queue: List[Tuple[float, int, ScheduledTask]] = []
        self._counter = itertools.count()

    def call_later(self, delay: float, callback: Callable[[], None]) -> ScheduledTask:
        task = ScheduledTask(callback, self.now + max(delay, 0.0))
        heapq.heappush(self._queue, (task.due, next(self._counter), task))
        return task

    @property
    def pending(self) -> int:
        return sum(1 for _, _, task in self._queue if not task.cancelled)

    def advance(self, seconds: float) -> int:
        """Move the clock forward and run every task that became due. Returns tasks run."""
        deadline = self.now + seconds
        ran = 0
        while self._queue and self._queue[0][0] <= deadline:
            due, _, task = heapq.heappop(self._queue)
            self.now = max(self.now, due)
            if task.cancelled:
                continue
            task.run()
            ran += 1
        self.now = deadline
        return ran

    def run_all(self) -> int:
        """Run everything queued, however far in the future."""
        ran = 0
        while self._queue:
            ran += self.advance(self._queue[0][0] - self.now)
        return ran


class SocketIOScheduler(Scheduler):
    """
    Runs callbacks as Flask-SocketIO background tasks after ``socketio.sleep``.

    In threading mode callbacks fire on their own threads; callers serialize
    them with their own state (``GameSession`` does so with its lock).
    """

    def __init__(self, socketio):
        self.socketio = socketio

    def call_later(self, delay: float, callback: Callable[[], None]) -> ScheduledTask:
        task = ScheduledTask(callback, delay)
        self.socketio.start_background_task(self._run, delay, task)
        return task

    def _run(self, delay: float, task: ScheduledTask) -> None:
        self.socketio.sleep(delay)
        try:
            task.run()
        except Exception as e:
            game_logger.logger.error(f"Error in scheduled task: {e}")
