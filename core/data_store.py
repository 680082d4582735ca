"""In-memory store for one board's list content.

Holds the latest card list and every checklist received so far:
  - Cards: replaced wholesale on each successful refresh (one tuple swap,
    so a reader never sees half of an old list and half of a new one)
  - Checklists: merged by id, last write wins

Checklists can arrive before or after the card that references them.
A card whose checklist has not arrived yet is not an error; the lookup
reports that checklist as pending.

Eviction: with prune enabled, each card replace keeps only the
checklists referenced by the new cards plus any checklist written since
the previous replace. A checklist that lands just ahead of its card
therefore survives, while checklists of cards that left the list are
dropped one refresh later.
"""

import logging
from typing import Dict, Iterable, List, NamedTuple, Optional, Set, Tuple

from core.models import Card, Checklist

logger = logging.getLogger(__name__)


def normalize_index(index: int, count: int) -> int:
    """Map index into [0, count). Out-of-range indices restart at 0."""
    if count <= 0 or index < 0 or index >= count:
        return 0
    return index


class ChecklistSlot(NamedTuple):
    """A card's checklist reference; checklist is None while pending."""

    checklist_id: str
    checklist: Optional[Checklist]

    @property
    def pending(self) -> bool:
        return self.checklist is None


class DataStore:
    """Card list + checklist mapping for one board view."""

    def __init__(self, prune_checklists: bool = True):
        self._cards: Tuple[Card, ...] = ()
        self._checklists: Dict[str, Checklist] = {}
        self._written_since_replace: Set[str] = set()
        self.prune_checklists = prune_checklists

    @property
    def cards(self) -> Tuple[Card, ...]:
        return self._cards

    @property
    def card_count(self) -> int:
        return len(self._cards)

    @property
    def checklists(self) -> Dict[str, Checklist]:
        """Copy of the checklist mapping."""
        return dict(self._checklists)

    def replace_cards(self, cards: Iterable[Card]):
        """Replace the card list. No validation beyond structure."""
        self._cards = tuple(cards)
        if self.prune_checklists:
            self._prune()
        self._written_since_replace = set()

    def upsert_checklist(self, checklist: Checklist):
        """Insert or overwrite a checklist by id."""
        self._checklists[checklist.id] = checklist
        self._written_since_replace.add(checklist.id)

    def get_checklist(self, checklist_id: str) -> Optional[Checklist]:
        return self._checklists.get(checklist_id)

    def get_card(self, index: int) -> Optional[Card]:
        """Card at the normalized index, or None when the list is empty."""
        if not self._cards:
            return None
        return self._cards[normalize_index(index, len(self._cards))]

    def get_checklists_for_card(self, card: Card) -> List[ChecklistSlot]:
        return [
            ChecklistSlot(cid, self._checklists.get(cid))
            for cid in card.checklist_ids
        ]

    def _prune(self):
        keep = {cid for card in self._cards for cid in card.checklist_ids}
        keep |= self._written_since_replace
        stale = [cid for cid in self._checklists if cid not in keep]
        for cid in stale:
            del self._checklists[cid]
        if stale:
            logger.debug("Evicted %d stale checklists", len(stale))
