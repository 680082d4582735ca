"""Timer loop for Board Station.

Plays the role tkinter's root.after() plays on the touchscreen build:
callbacks are queued with a delay in milliseconds and run one at a time,
each to completion, on the thread that drives the loop. Nothing here is
preemptive, so handlers never need to lock against each other.

Periodic timers can be cancelled and rearmed with a new interval. The
clock is injectable; tests pass a fake clock and step it by hand instead
of sleeping.

Usage:
    scheduler = Scheduler()
    timer = scheduler.every(10_000, rotate, immediate=True)
    scheduler.run_forever(stop_event)
"""

import heapq
import itertools
import logging
import threading
import time
from typing import Callable, List, Optional, Tuple

logger = logging.getLogger(__name__)

# Upper bound on a single sleep so stop() stays responsive
MAX_SLEEP = 0.1  # seconds


class Timer:
    """Handle for a scheduled callback (one-shot or periodic)."""

    def __init__(self, scheduler: "Scheduler", callback: Callable[[], None],
                 interval_ms: Optional[float]):
        self._scheduler = scheduler
        self.callback = callback
        self.interval_ms = interval_ms
        self.due = 0.0
        self.cancelled = False
        self._generation = 0

    @property
    def periodic(self) -> bool:
        return self.interval_ms is not None

    def cancel(self):
        self.cancelled = True
        self._generation += 1

    def rearm(self, interval_ms: Optional[float] = None, immediate: bool = False):
        """Restart the timer, optionally with a new interval."""
        if interval_ms is not None:
            self.interval_ms = interval_ms
        self.cancelled = False
        delay = 0 if immediate else (self.interval_ms or 0)
        self._scheduler._push(self, delay)

    def __repr__(self) -> str:
        kind = f"every {self.interval_ms}ms" if self.periodic else "once"
        state = "cancelled" if self.cancelled else f"due {self.due:.3f}"
        return f"<Timer {getattr(self.callback, '__name__', '?')} {kind} {state}>"


class Scheduler:
    """Single-threaded timer queue with an injectable clock."""

    def __init__(self, clock: Callable[[], float] = time.monotonic):
        self._clock = clock
        self._heap: List[Tuple[float, int, int, Timer]] = []
        self._counter = itertools.count()
        self._lock = threading.Lock()

    def now(self) -> float:
        return self._clock()

    def after(self, delay_ms: float, callback: Callable[[], None]) -> Timer:
        """Run callback once after delay_ms."""
        timer = Timer(self, callback, None)
        self._push(timer, delay_ms)
        return timer

    def every(self, interval_ms: float, callback: Callable[[], None],
              immediate: bool = False) -> Timer:
        """Run callback every interval_ms (first run right away if immediate)."""
        if interval_ms <= 0:
            raise ValueError(f"interval must be positive, got {interval_ms}")
        timer = Timer(self, callback, interval_ms)
        self._push(timer, 0 if immediate else interval_ms)
        return timer

    def _push(self, timer: Timer, delay_ms: float):
        with self._lock:
            timer._generation += 1
            timer.due = self._clock() + delay_ms / 1000.0
            heapq.heappush(
                self._heap, (timer.due, next(self._counter), timer._generation, timer)
            )

    def next_due(self) -> Optional[float]:
        """Clock time of the next live timer, or None if nothing is scheduled."""
        with self._lock:
            while self._heap:
                due, _, generation, timer = self._heap[0]
                if timer.cancelled or generation != timer._generation:
                    heapq.heappop(self._heap)
                    continue
                return due
        return None

    def run_pending(self) -> int:
        """Run every callback that is due now. Returns how many ran."""
        ran = 0
        now = self._clock()
        while True:
            with self._lock:
                if not self._heap or self._heap[0][0] > now:
                    break
                due, _, generation, timer = heapq.heappop(self._heap)
                if timer.cancelled or generation != timer._generation:
                    continue
                if timer.periodic:
                    # Keep cadence anchored to the previous due time unless we fell behind
                    next_due = due + timer.interval_ms / 1000.0
                    if next_due <= now:
                        next_due = now + timer.interval_ms / 1000.0
                    timer.due = next_due
                    heapq.heappush(
                        self._heap, (next_due, next(self._counter), generation, timer)
                    )
                else:
                    timer.cancelled = True

            try:
                timer.callback()
            except Exception as exc:
                logger.error("Timer callback %r failed: %s", timer, exc)
            ran += 1
        return ran

    def run_forever(self, stop: threading.Event):
        """Drive the loop until stop is set."""
        logger.info("Scheduler loop started")
        while not stop.is_set():
            self.run_pending()
            due = self.next_due()
            wait = MAX_SLEEP if due is None else min(max(due - self._clock(), 0), MAX_SLEEP)
            stop.wait(wait)
        logger.info("Scheduler loop stopped")
