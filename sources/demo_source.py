"""Demo data source -- a simulated board for running without credentials.

Serves a fixed set of cards with checklists whose items tick over at
random between refreshes. Checklists trail the card list by a short
delay, the same way real ones do.

Config example (in board.yaml):
    boards:
      - id: "demo"
        source: "demo"
        options:
          checklist_delay: 0.5   # seconds between checklist answers
          seed: 7                # repeatable item states
"""

import logging
import random
import time
from datetime import datetime, timedelta, timezone
from typing import Dict, List

from core.data_source import DataSource
from core.models import Card, CheckItem, Checklist, CheckState
from core.registry import register_source

logger = logging.getLogger(__name__)

DEMO_CARDS = [
    {
        "id": "demo-1",
        "name": "Buy groceries",
        "desc": "Milk, eggs, bread\nCoffee if on sale",
        "due_in": timedelta(hours=5),
        "checklists": {"demo-c1": ("Shopping", ["Milk", "Eggs", "Bread", "Coffee"])},
    },
    {
        "id": "demo-2",
        "name": "Water the plants",
        "desc": "",
        "due_in": timedelta(days=-1),
        "checklists": {},
    },
    {
        "id": "demo-3",
        "name": "Plan the weekend trip",
        "desc": "Check the weather first.",
        "due_in": None,
        "checklists": {
            "demo-c2": ("Bookings", ["Train", "Hotel"]),
            "demo-c3": ("Packing", ["Boots", "Rain jacket", "Charger"]),
        },
    },
]


@register_source("demo")
class DemoSource(DataSource):
    """Simulated board. Never fails."""

    def __init__(self, source_id: str, bus, config: Dict):
        super().__init__(source_id, bus, config)
        self.checklist_delay = config.get("checklist_delay", 0.5)
        self._rng = random.Random(config.get("seed"))

    def fetch_cards(self, list_id: str) -> List[Card]:
        now = datetime.now(timezone.utc)
        return [
            Card(
                id=entry["id"],
                name=entry["name"],
                description=entry["desc"],
                due=now + entry["due_in"] if entry["due_in"] is not None else None,
                checklist_ids=tuple(entry["checklists"]),
            )
            for entry in DEMO_CARDS
        ]

    def fetch_checklist(self, checklist_id: str) -> Checklist:
        if self.checklist_delay:
            time.sleep(self.checklist_delay)
        for entry in DEMO_CARDS:
            if checklist_id in entry["checklists"]:
                name, items = entry["checklists"][checklist_id]
                return Checklist(
                    id=checklist_id,
                    name=name,
                    items=tuple(
                        CheckItem(item, self._rng.choice(list(CheckState)))
                        for item in items
                    ),
                )
        raise KeyError(checklist_id)
