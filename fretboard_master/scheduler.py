"""Timer schedulers for the session countdown and deferred actions."""

import heapq
import itertools
import queue
import threading
import time
from typing import Callable, Dict, List, Tuple

from .core.interfaces import IScheduler, TimerHandle
from .logging_config import get_logger

logger = get_logger(__name__)


class ThreadingScheduler(IScheduler):
    """Wall-clock scheduler backed by threading.Timer.

    Expired timers are not run on the timer thread. They are queued and run
    by run_pending(), which the UI loop calls on its own thread, so every
    session mutation happens on one thread.
    """

    def __init__(self) -> None:
        self._ready: "queue.Queue[TimerHandle]" = queue.Queue()
        self._timers: Dict[TimerHandle, threading.Timer] = {}
        self._lock = threading.Lock()

    def call_later(
        self, delay: float, callback: Callable[[], None], name: str = "timer"
    ) -> TimerHandle:
        handle = TimerHandle(name, self.now() + delay, callback)
        timer = threading.Timer(max(0.0, delay), self._ready.put, args=(handle,))
        timer.daemon = True
        with self._lock:
            self._timers[handle] = timer
        timer.start()
        logger.debug("Scheduled %r", handle)
        return handle

    def run_pending(self) -> int:
        ran = 0
        try:
            while True:
                handle = self._ready.get_nowait()
                with self._lock:
                    self._timers.pop(handle, None)
                if handle.fire():
                    ran += 1
        except queue.Empty:
            # Nothing left to run
            pass
        return ran

    def now(self) -> float:
        return time.monotonic()

    def shutdown(self) -> None:
        with self._lock:
            timers = list(self._timers.items())
            self._timers.clear()
        for handle, timer in timers:
            handle.cancel()
            timer.cancel()
        logger.debug("Cancelled %d outstanding timers", len(timers))


class ManualScheduler(IScheduler):
    """Scheduler with a virtual clock that only moves when told to.

    Used by the tests, and anywhere a deterministic replay of a session is
    wanted.
    """

    def __init__(self, start: float = 0.0) -> None:
        self._now = start
        self._queue: List[Tuple[float, int, TimerHandle]] = []
        self._sequence = itertools.count()

    def call_later(
        self, delay: float, callback: Callable[[], None], name: str = "timer"
    ) -> TimerHandle:
        handle = TimerHandle(name, self._now + max(0.0, delay), callback)
        heapq.heappush(self._queue, (handle.due, next(self._sequence), handle))
        return handle

    def run_pending(self) -> int:
        return self.advance(0.0)

    def advance(self, seconds: float) -> int:
        """Move the clock forward, firing due callbacks in time order.

        Callbacks scheduled while advancing fire too if they fall due
        before the new time.

        Returns:
            Number of callbacks that ran
        """
        target = self._now + seconds
        ran = 0
        while self._queue and self._queue[0][0] <= target:
            due, _, handle = heapq.heappop(self._queue)
            self._now = max(self._now, due)
            if handle.fire():
                ran += 1
        self._now = target
        return ran

    def now(self) -> float:
        return self._now

    @property
    def pending(self) -> List[TimerHandle]:
        """Handles that have not fired or been cancelled, soonest first."""
        return [h for _, _, h in sorted(self._queue) if h.pending]

    def shutdown(self) -> None:
        for _, _, handle in self._queue:
            handle.cancel()
        self._queue.clear()
