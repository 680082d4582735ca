"""Shared fixtures: a hand-driven clock, scheduler, bus and fake source."""

from datetime import datetime, timezone
from typing import List

import pytest

from config import BoardConfig
from core.board_view import BoardView
from core.data_source import DataSource
from core.event_bus import EventBus
from core.messages import (
    CHECK_LIST_CONTENT,
    LIST_CONTENT,
    TRELLO_ERROR,
    Envelope,
    ListRequest,
)
from core.models import Card, Checklist
from core.scheduler import Scheduler

NOW = datetime(2024, 5, 1, 12, 0, tzinfo=timezone.utc)


class FakeClock:
    def __init__(self, start: float = 1000.0):
        self.now = start

    def __call__(self) -> float:
        return self.now


class RecordingSource(DataSource):
    """Records requests instead of fetching; tests answer by hand."""

    def __init__(self, bus, source_id="fake"):
        super().__init__(source_id, bus, {})
        self.configured = []
        self.requests: List[ListRequest] = []

    def configure(self, api_key, token):
        super().configure(api_key, token)
        self.configured.append((api_key, token))

    def request_list_content(self, list_id, target_id, seq):
        self.requests.append(ListRequest(list_id, target_id, seq))

    def fetch_cards(self, list_id):
        raise NotImplementedError

    def fetch_checklist(self, checklist_id):
        raise NotImplementedError

    # Helpers that answer the most recent request

    def answer_cards(self, cards, seq=None, target_id=None):
        req = self.requests[-1]
        self.bus.publish(Envelope(
            LIST_CONTENT, tuple(cards),
            target_id=target_id or req.target_id,
            seq=req.seq if seq is None else seq,
        ))

    def answer_checklist(self, checklist, seq=None, target_id=None):
        req = self.requests[-1]
        self.bus.publish(Envelope(
            CHECK_LIST_CONTENT, checklist,
            target_id=target_id or req.target_id,
            seq=req.seq if seq is None else seq,
        ))

    def answer_error(self, error, target_id=None):
        req = self.requests[-1]
        self.bus.publish(Envelope(
            TRELLO_ERROR, error, target_id=target_id or req.target_id, seq=req.seq,
        ))


@pytest.fixture
def clock():
    return FakeClock()


@pytest.fixture
def scheduler(clock):
    return Scheduler(clock=clock)


@pytest.fixture
def tick(clock, scheduler):
    """Advance the fake clock by ms, firing every timer due on the way."""
    def advance(ms: float = 0):
        target = clock.now + ms / 1000.0
        while True:
            due = scheduler.next_due()
            if due is None or due > target:
                break
            clock.now = max(clock.now, due)
            scheduler.run_pending()
        clock.now = target
        scheduler.run_pending()
    return advance


@pytest.fixture
def bus(scheduler):
    return EventBus(scheduler)


@pytest.fixture
def source(bus):
    return RecordingSource(bus)


@pytest.fixture
def make_view(bus, scheduler, source):
    """Build (not start) a BoardView with config overrides."""
    def build(**overrides):
        options = {
            "board_id": "board",
            "list_id": "list-1",
            "api_key": "key",
            "token": "tok",
            "reload_interval": 60_000,
            "update_interval": 10_000,
        }
        options.update(overrides)
        return BoardView(BoardConfig(**options), bus, scheduler, source, now=lambda: NOW)
    return build


def card(card_id="1", name="Buy milk", **kwargs) -> Card:
    return Card(id=card_id, name=name, **kwargs)


def checklist(checklist_id="c1", name="Things", items=()) -> Checklist:
    return Checklist(id=checklist_id, name=name, items=tuple(items))
