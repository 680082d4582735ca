"""Core framework for Board Station.

Keeps a rotating view of one task-board list current without letting a
slow network hold up the display.

Architecture:
    Scheduler       -- single-threaded timer loop (root.after() style)
    EventBus        -- thread-safe queue, dispatches envelopes on the scheduler thread
    DataSource      -- fetches list content on a worker thread, publishes envelopes
    DataStore       -- latest cards + checklists for one board
    ErrorState      -- loading / ok / error
    UpdateScheduler -- refresh + rotation timers with pause and retry suppression
    Registry        -- data source types by name

Built on top (import from their modules; they depend on cards.renderer):
    core.board_view.BoardView    -- one board; render() entry point
    core.render_feed.RenderFeed  -- latest renders + SSE fan-out
"""

from core.scheduler import Scheduler
from core.event_bus import EventBus
from core.data_source import DataSource
from core.data_store import DataStore
from core.error_state import ErrorState
from core.update_scheduler import UpdateScheduler
from core.registry import SOURCE_REGISTRY, register_source, get_source_class

__all__ = [
    "Scheduler",
    "EventBus",
    "DataSource",
    "DataStore",
    "ErrorState",
    "UpdateScheduler",
    "SOURCE_REGISTRY",
    "register_source",
    "get_source_class",
]
