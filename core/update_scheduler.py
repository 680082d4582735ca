"""Refresh and rotation timers for a board view.

Two periodic timers:
    refresh  -- every reload_interval, asks the source for new data
    rotation -- every update_interval, advances to the next card;
                armed only after the first successful load

State machine:
    INITIAL --(first list content)--> LOADED --(fetch error)--> ERRORED
    any --(pause)--> PAUSED --(resume)--> previous state

Pausing does not cancel timers; the handlers simply do nothing until
resume, so resuming takes effect on the very next tick. ERRORED turns
the refresh handler into a permanent no-op. The rotation timer keeps
going so the error render stays current.

Both handlers run on the scheduler thread, each to completion, so a
tick can never land halfway through a pause toggle.
"""

import logging
from enum import Enum, auto
from typing import Callable, Optional

from core.scheduler import Scheduler, Timer

logger = logging.getLogger(__name__)


class State(Enum):
    INITIAL = auto()   # Waiting for the first list content
    LOADED = auto()    # Refreshing and rotating
    PAUSED = auto()    # Timers tick, handlers idle
    ERRORED = auto()   # Fetch failed, no more refreshes


class UpdateScheduler:
    """Owns the refresh and rotation timers of one board view."""

    def __init__(
        self,
        scheduler: Scheduler,
        reload_interval: float,
        update_interval: float,
        on_refresh: Callable[[], None],
        on_rotate: Callable[[bool], None],
        whole_list: bool = False,
    ):
        self._scheduler = scheduler
        self.reload_interval = reload_interval
        # Whole-list mode shows every card at once; rotate at the refresh cadence
        self.update_interval = reload_interval if whole_list else update_interval
        self.whole_list = whole_list
        self._on_refresh = on_refresh
        self._on_rotate = on_rotate

        self._state = State.INITIAL
        self._resume_state = State.INITIAL
        self._refresh_timer: Optional[Timer] = None
        self._rotation_timer: Optional[Timer] = None
        self._rotations = 0

    @property
    def state(self) -> State:
        return self._state

    @state.setter
    def state(self, new_state: State):
        old = self._state
        self._state = new_state
        if old is not new_state:
            logger.info("Updates: %s -> %s", old.name, new_state.name)

    @property
    def paused(self) -> bool:
        return self._state is State.PAUSED

    @property
    def effective_state(self) -> State:
        """The state that applies once any pause is lifted."""
        return self._resume_state if self.paused else self._state

    @property
    def rotation_armed(self) -> bool:
        return self._rotation_timer is not None and not self._rotation_timer.cancelled

    def start(self):
        """Arm the refresh timer; the first request goes out immediately."""
        if self._refresh_timer is not None:
            return
        self._refresh_timer = self._scheduler.every(
            self.reload_interval, self._refresh_tick, immediate=True
        )

    def stop(self):
        for timer in (self._refresh_timer, self._rotation_timer):
            if timer is not None:
                timer.cancel()
        self._refresh_timer = None
        self._rotation_timer = None

    def mark_loaded(self):
        """First successful list content: start rotating."""
        if self.effective_state is not State.INITIAL:
            return
        self._set_effective(State.LOADED)
        self._rotations = 0
        self._rotation_timer = self._scheduler.every(
            self.update_interval, self._rotate_tick, immediate=True
        )

    def mark_errored(self):
        """Fetch failed: no more automatic refreshes."""
        self._set_effective(State.ERRORED)

    def pause(self):
        if self.paused:
            return
        self._resume_state = self._state
        self.state = State.PAUSED

    def resume(self):
        if not self.paused:
            return
        self.state = self._resume_state

    def _set_effective(self, new_state: State):
        if self.paused:
            self._resume_state = new_state
        else:
            self.state = new_state

    def _refresh_tick(self):
        if self._state in (State.PAUSED, State.ERRORED):
            return
        self._on_refresh()

    def _rotate_tick(self):
        if self._state is State.PAUSED:
            return
        # The immediate first firing shows the current card without advancing
        advance = self._rotations > 0
        self._rotations += 1
        self._on_rotate(advance)
