"""Data source abstraction for Board Station.

A DataSource answers list-content requests on a background thread and
publishes the results to the EventBus. Requests are fire-and-forget:
request_list_content() only queues the work, and the answer shows up
later as envelopes addressed to the requesting board view:

    LIST_CONTENT        once, with every card on the list
    CHECK_LIST_CONTENT  once per checklist those cards reference
    TRELLO_ERROR        instead of the above when the card fetch fails

Each envelope echoes the request's seq so the view can drop answers to
requests it has already superseded.
"""

import logging
import threading
from abc import ABC, abstractmethod
from queue import Queue, Empty
from typing import Dict, List, Optional

from core.event_bus import EventBus
from core.messages import (
    CHECK_LIST_CONTENT,
    LIST_CONTENT,
    TRELLO_ERROR,
    Envelope,
    FetchError,
    FetchFailed,
    ListRequest,
)
from core.models import Card, Checklist

logger = logging.getLogger(__name__)


class DataSource(ABC):
    """Base class for list-content providers.

    Subclasses implement fetch_cards() and fetch_checklist(), which run
    on the worker thread and raise FetchFailed on failure.
    """

    def __init__(self, source_id: str, bus: EventBus, config: Dict):
        self.source_id = source_id
        self.bus = bus
        self.config = config
        self.api_key = ""
        self.token = ""
        self._requests: Queue = Queue()
        self._stop = threading.Event()
        self._thread: Optional[threading.Thread] = None

    def configure(self, api_key: str, token: str):
        """Set credentials. Fire-and-forget, like every call into a source."""
        self.api_key = api_key or ""
        self.token = token or ""

    def request_list_content(self, list_id: str, target_id: str, seq: int):
        """Queue a fetch of list_id; results are published for target_id."""
        self._requests.put(ListRequest(list_id, target_id, seq))

    def start(self):
        """Start the background worker thread."""
        if self._thread and self._thread.is_alive():
            return
        self._stop.clear()
        self._thread = threading.Thread(
            target=self._run, daemon=True, name=f"src-{self.source_id}"
        )
        self._thread.start()
        logger.info("DataSource %s started", self.source_id)

    def stop(self):
        """Signal the worker thread to stop."""
        self._stop.set()

    def _run(self):
        """Worker loop -- wait for requests in short slices so stop() is responsive."""
        while not self._stop.is_set():
            try:
                req = self._requests.get(timeout=0.1)
            except Empty:
                continue
            self.process(req)

    def process(self, req: ListRequest):
        """Fetch one list and publish the outcome. Never raises."""
        try:
            cards = self.fetch_cards(req.list_id)
        except FetchFailed as exc:
            logger.warning("DataSource %s: list %s failed: %s", self.source_id, req.list_id, exc)
            self._publish(TRELLO_ERROR, exc.error, req)
            return
        except Exception as exc:
            logger.error("DataSource %s fetch error: %s", self.source_id, exc)
            self._publish(TRELLO_ERROR, FetchError(0, exc.__class__.__name__, str(exc)), req)
            return

        self._publish(LIST_CONTENT, tuple(cards), req)

        for checklist_id in _checklist_ids(cards):
            if self._stop.is_set():
                return
            try:
                checklist = self.fetch_checklist(checklist_id)
            except Exception as exc:
                # Leaves that checklist pending until the next refresh
                logger.warning(
                    "DataSource %s: checklist %s failed: %s", self.source_id, checklist_id, exc
                )
                continue
            self._publish(CHECK_LIST_CONTENT, checklist, req)

    def _publish(self, kind: str, payload, req: ListRequest):
        self.bus.publish(Envelope(kind, payload, target_id=req.target_id, seq=req.seq))

    @abstractmethod
    def fetch_cards(self, list_id: str) -> List[Card]:
        """Fetch the cards on a list. Runs in the worker thread."""
        ...

    @abstractmethod
    def fetch_checklist(self, checklist_id: str) -> Checklist:
        """Fetch one checklist. Runs in the worker thread."""
        ...

    def close(self):
        """Release resources. Override if needed."""
        self.stop()


def _checklist_ids(cards: List[Card]) -> List[str]:
    seen = set()
    ordered = []
    for card in cards:
        for cid in card.checklist_ids:
            if cid not in seen:
                seen.add(cid)
                ordered.append(cid)
    return ordered
