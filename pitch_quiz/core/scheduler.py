"""Deferred single-shot callbacks delivered on the display side."""

from __future__ import annotations
import queue
import threading
from abc import ABC, abstractmethod
from typing import Callable, Optional, Set

from ..logger import get_logger

logger = get_logger(__name__)


class ScheduledCall(ABC):
    """Handle for a pending deferred call."""

    @abstractmethod
    def cancel(self) -> None:
        """Prevent the call from running if it has not run yet."""
        pass


class IScheduler(ABC):
    """Interface for one-shot timers."""

    @abstractmethod
    def call_later(self, delay: float, callback: Callable[[], None]) -> ScheduledCall:
        """Run ``callback`` once after ``delay`` seconds."""
        pass

    @abstractmethod
    def cancel_all(self) -> None:
        """Cancel every pending call."""
        pass


class _QueuedCall(ScheduledCall):
    def __init__(self, scheduler: "QueueScheduler", callback: Callable[[], None]):
        self._scheduler = scheduler
        self._callback = callback
        self._cancelled = False
        self.timer: Optional[threading.Timer] = None

    def cancel(self) -> None:
        self._cancelled = True
        if self.timer is not None:
            self.timer.cancel()
        self._scheduler._forget(self)

    def _fire(self) -> None:
        # Runs on the timer thread: only hand the call over to the display queue
        if not self._cancelled:
            self._scheduler._queue.put(self._run)

    def _run(self) -> None:
        # Runs on the display thread; a cancel may have raced the timer
        self._scheduler._forget(self)
        if not self._cancelled:
            self._callback()


class QueueScheduler(IScheduler):
    """Schedules callbacks with ``threading.Timer`` and runs them via a queue.

    When a timer elapses the callback is put on ``message_queue``; whoever
    drains that queue (the display loop) executes it. Component state is
    therefore only ever mutated on the draining thread.
    """

    def __init__(self, message_queue: queue.Queue) -> None:
        self._queue = message_queue
        self._pending: Set[_QueuedCall] = set()
        self._lock = threading.Lock()

    def call_later(self, delay: float, callback: Callable[[], None]) -> ScheduledCall:
        call = _QueuedCall(self, callback)
        call.timer = threading.Timer(max(0.0, delay), call._fire)
        call.timer.daemon = True
        with self._lock:
            self._pending.add(call)
        call.timer.start()
        logger.debug(f"Scheduled callback in {delay:.3f}s")
        return call

    def cancel_all(self) -> None:
        with self._lock:
            pending = list(self._pending)
        for call in pending:
            call.cancel()
        if pending:
            logger.debug(f"Cancelled {len(pending)} pending callback(s)")

    @property
    def pending_count(self) -> int:
        with self._lock:
            return len(self._pending)

    def _forget(self, call: _QueuedCall) -> None:
        with self._lock:
            self._pending.discard(call)
