"""Thread-safe event bus for Board Station.

Data sources push envelopes via publish() from their worker threads.
The scheduler thread drains the queue and dispatches to subscribers by
message kind, so every board view handler runs on that one thread.
"""

import logging
from queue import Queue, Empty
from typing import Callable, Dict, List, Optional

from core.messages import Envelope
from core.scheduler import Scheduler

logger = logging.getLogger(__name__)

POLL_INTERVAL = 50  # ms
MAX_PER_POLL = 50


class EventBus:
    """Message bus bridging source threads to the scheduler thread."""

    def __init__(self, scheduler: Optional[Scheduler] = None):
        self._queue: Queue = Queue()
        self._subscribers: Dict[str, List[Callable[[Envelope], None]]] = {}
        self._poller = None
        if scheduler is not None:
            self._poller = scheduler.every(POLL_INTERVAL, self.drain)

    def publish(self, envelope: Envelope):
        """Push an envelope from any thread. Thread-safe."""
        self._queue.put(envelope)

    def subscribe(self, kind: str, callback: Callable[[Envelope], None]):
        """Register a callback for a message kind. Called on the scheduler thread."""
        if kind not in self._subscribers:
            self._subscribers[kind] = []
        self._subscribers[kind].append(callback)

    def unsubscribe(self, kind: str, callback: Callable[[Envelope], None]):
        """Remove a callback."""
        if kind in self._subscribers:
            self._subscribers[kind] = [
                cb for cb in self._subscribers[kind] if cb != callback
            ]

    @property
    def pending(self) -> int:
        return self._queue.qsize()

    def drain(self, limit: int = MAX_PER_POLL) -> int:
        """Dispatch up to limit queued envelopes. Returns how many were handled."""
        handled = 0
        try:
            for _ in range(limit):
                envelope = self._queue.get_nowait()
                handled += 1
                for cb in list(self._subscribers.get(envelope.kind, [])):
                    try:
                        cb(envelope)
                    except Exception as exc:
                        logger.error("EventBus callback error [%s]: %s", envelope.kind, exc)
        except Empty:
            pass
        return handled

    def close(self):
        if self._poller is not None:
            self._poller.cancel()
            self._poller = None
