"""Render feed for the web display.

Board views push each fresh render here (via BoardView.add_listener).
The feed keeps the latest render per board for snapshot requests and
fans every update out to connected SSE clients. A client that stops
reading is dropped once its queue fills up.
"""

import logging
import threading
from queue import Queue, Empty, Full
from typing import Any, Dict, Iterator, List, Optional, Tuple

from cards.renderer import RenderResult

logger = logging.getLogger(__name__)

CLIENT_QUEUE_SIZE = 100
KEEPALIVE_SECONDS = 30


class RenderFeed:
    """Latest render per board plus SSE fan-out. No Flask dependency."""

    def __init__(self):
        self._latest: Dict[str, Dict[str, Any]] = {}
        self._lock = threading.Lock()
        self._clients: List[Queue] = []

    def listener(self, board_id: str):
        """Return a BoardView listener that publishes under board_id."""
        def on_render(result: RenderResult):
            self.publish(board_id, result)
        return on_render

    def publish(self, board_id: str, result: RenderResult):
        """Record and broadcast a render. Thread-safe."""
        payload = result.to_dict()
        payload["board"] = board_id
        with self._lock:
            self._latest[board_id] = payload
            clients = list(self._clients)

        dead = []
        for q in clients:
            try:
                q.put_nowait((board_id, payload))
            except Full:
                dead.append(q)
        if dead:
            with self._lock:
                for q in dead:
                    if q in self._clients:
                        self._clients.remove(q)
            logger.info("RenderFeed: dropped %d slow client(s)", len(dead))

    def get_latest(self, board_id: Optional[str] = None) -> Any:
        """Latest render for one board, or all boards."""
        with self._lock:
            if board_id:
                return self._latest.get(board_id)
            return dict(self._latest)

    @property
    def client_count(self) -> int:
        with self._lock:
            return len(self._clients)

    def stream(self, timeout: float = KEEPALIVE_SECONDS) -> Iterator[Tuple[str, Optional[Dict]]]:
        """Generator for SSE clients. Yields (board_id, payload) tuples.

        Yields ("keepalive", None) when nothing arrived within timeout.

        Usage in Flask:
            def generate():
                for board_id, payload in feed.stream():
                    yield f"event: render\\ndata: {json.dumps(payload)}\\n\\n"
        """
        q: Queue = Queue(maxsize=CLIENT_QUEUE_SIZE)
        with self._lock:
            self._clients.append(q)
        try:
            while True:
                try:
                    yield q.get(timeout=timeout)
                except Empty:
                    yield "keepalive", None
        finally:
            with self._lock:
                if q in self._clients:
                    self._clients.remove(q)
