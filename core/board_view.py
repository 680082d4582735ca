"""Board view -- one rotating display of one task-board list.

Ties together the pieces for a single board:
    DataSource       -- fetches list content on request
    DataStore        -- latest cards + checklists
    ErrorState       -- loading / ok / error
    UpdateScheduler  -- refresh and rotation timers
    render()         -- pull-based view of the current state

Several views can share one EventBus; each ignores envelopes addressed
to another view id. Handlers run on the scheduler thread. render() may
also be called from web request threads, so every handler and render
holds the view's lock.
"""

import logging
import threading
from datetime import datetime
from typing import Callable, List, Optional

from cards.renderer import RenderResult, render
from config import BoardConfig
from core.data_source import DataSource
from core.data_store import DataStore, normalize_index
from core.error_state import ErrorState
from core.event_bus import EventBus
from core.messages import (
    CHECK_LIST_CONTENT,
    LIST_CONTENT,
    TRELLO_ERROR,
    USER_PRESENCE,
    Envelope,
    FetchError,
)
from core.registry import get_source_class
from core.scheduler import Scheduler
from core.update_scheduler import UpdateScheduler

logger = logging.getLogger(__name__)


class BoardView:
    """State and timers for one board."""

    def __init__(
        self,
        config: BoardConfig,
        bus: EventBus,
        scheduler: Scheduler,
        source: DataSource,
        now: Optional[Callable[[], datetime]] = None,
    ):
        self.config = config
        self.view_id = config.board_id
        self.bus = bus
        self.source = source
        self._now = now

        self.store = DataStore(prune_checklists=config.prune_checklists)
        self.errors = ErrorState()
        self.index = 0

        self.updates = UpdateScheduler(
            scheduler,
            reload_interval=config.reload_interval,
            update_interval=config.update_interval,
            on_refresh=self._request_update,
            on_rotate=self._rotate,
            whole_list=config.whole_list,
        )

        self._lock = threading.RLock()
        self._listeners: List[Callable[[RenderResult], None]] = []
        self._seq = 0            # last request issued
        self._accepted_seq = 0   # newest response applied
        self._started = False

    # ------------------------------------------------------------------
    # Lifecycle
    # ------------------------------------------------------------------

    def start(self):
        if self._started:
            return
        self._started = True
        logger.info("Starting board view: %s (list %s)", self.view_id, self.config.list_id)
        self.source.configure(self.config.api_key, self.config.token)
        self.bus.subscribe(LIST_CONTENT, self._on_list_content)
        self.bus.subscribe(CHECK_LIST_CONTENT, self._on_checklist)
        self.bus.subscribe(TRELLO_ERROR, self._on_error)
        self.bus.subscribe(USER_PRESENCE, self._on_presence)
        self.updates.start()

    def stop(self):
        if not self._started:
            return
        self._started = False
        self.updates.stop()
        self.bus.unsubscribe(LIST_CONTENT, self._on_list_content)
        self.bus.unsubscribe(CHECK_LIST_CONTENT, self._on_checklist)
        self.bus.unsubscribe(TRELLO_ERROR, self._on_error)
        self.bus.unsubscribe(USER_PRESENCE, self._on_presence)
        logger.info("Stopped board view: %s", self.view_id)

    def add_listener(self, callback: Callable[[RenderResult], None]):
        """Call callback with a fresh render whenever the display should update."""
        self._listeners.append(callback)

    def pause(self):
        with self._lock:
            self.updates.pause()

    def resume(self):
        with self._lock:
            self.updates.resume()

    @property
    def paused(self) -> bool:
        return self.updates.paused

    # ------------------------------------------------------------------
    # Rendering
    # ------------------------------------------------------------------

    def render(self) -> RenderResult:
        """Current view of the board. Never raises."""
        with self._lock:
            self.index = normalize_index(self.index, self.store.card_count)
            now = self._now() if self._now else None
            return render(self.store, self.index, self.errors, self.config, now)

    def _notify(self):
        if not self._listeners:
            return
        result = self.render()
        for cb in list(self._listeners):
            try:
                cb(result)
            except Exception as exc:
                logger.error("Board %s listener error: %s", self.view_id, exc)

    # ------------------------------------------------------------------
    # Timer handlers
    # ------------------------------------------------------------------

    def _request_update(self):
        with self._lock:
            self._seq += 1
            seq = self._seq
        logger.debug("Board %s: requesting list %s (seq %d)", self.view_id, self.config.list_id, seq)
        self.source.request_list_content(self.config.list_id, self.view_id, seq)

    def _rotate(self, advance: bool):
        with self._lock:
            if advance:
                self.index = normalize_index(self.index + 1, self.store.card_count)
        self._notify()

    # ------------------------------------------------------------------
    # Message handlers
    # ------------------------------------------------------------------

    def _mine(self, envelope: Envelope) -> bool:
        return envelope.target_id == self.view_id

    def _stale(self, envelope: Envelope) -> bool:
        if envelope.seq is not None and envelope.seq < self._accepted_seq:
            logger.debug(
                "Board %s: dropping stale %s (seq %d < %d)",
                self.view_id, envelope.kind, envelope.seq, self._accepted_seq,
            )
            return True
        return False

    def _on_list_content(self, envelope: Envelope):
        if not self._mine(envelope):
            return
        with self._lock:
            if self._stale(envelope):
                return
            if self.errors.is_error:
                logger.debug("Board %s: ignoring list content after error", self.view_id)
                return
            if envelope.seq is not None:
                self._accepted_seq = envelope.seq
            self.store.replace_cards(envelope.payload)
            self.errors.mark_ok()
            logger.info("Board %s: %d cards", self.view_id, self.store.card_count)
            self.updates.mark_loaded()

    def _on_checklist(self, envelope: Envelope):
        if not self._mine(envelope):
            return
        with self._lock:
            if self._stale(envelope):
                return
            self.store.upsert_checklist(envelope.payload)

    def _on_error(self, envelope: Envelope):
        if not self._mine(envelope):
            return
        error: FetchError = envelope.payload
        with self._lock:
            message = error.describe()
            logger.error("Board %s: %s", self.view_id, message)
            self.errors.mark_error(message)
            self.updates.mark_errored()
        self._notify()

    def _on_presence(self, envelope: Envelope):
        if envelope.target_id is not None and not self._mine(envelope):
            return
        if envelope.payload:
            self.resume()
        else:
            self.pause()


def build_views(
    configs: List[BoardConfig],
    bus: EventBus,
    scheduler: Scheduler,
    demo: bool = False,
) -> List[BoardView]:
    """Create one BoardView (and its data source) per board config.

    Boards whose source type is unknown are skipped with a warning.
    With demo set, every board uses the simulated source.
    """
    views = []
    for cfg in configs:
        source_type = "demo" if demo else cfg.source
        cls = get_source_class(source_type)
        if cls is None:
            logger.warning("Unknown source type: %s (for %s)", source_type, cfg.board_id)
            continue
        source = cls(f"{source_type}.{cfg.board_id}", bus, dict(cfg.options))
        views.append(BoardView(cfg, bus, scheduler, source))
        logger.info("Board %s uses %s source", cfg.board_id, source_type)
    return views
