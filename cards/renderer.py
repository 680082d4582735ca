"""Card renderer -- turns board state into a render description.

render() is pure: it reads a DataStore and an ErrorState and returns a
RenderResult for the display to draw. Exactly one of four views comes
back:

    ERROR    -- the fetch failed; message carries the details
    LOADING  -- nothing loaded yet
    EMPTY    -- the list has no cards
    CARDS    -- one card (or every card in whole-list mode)

A checklist the card references but the store has not received yet is
rendered as a pending block on its own; the rest of the card still
renders.
"""

import logging
from dataclasses import dataclass
from datetime import datetime
from enum import Enum
from typing import Any, Dict, List, Optional, Tuple

from cards.relative_time import from_now
from config import GLYPHS, BoardConfig
from core.data_store import DataStore, normalize_index
from core.error_state import ErrorState
from core.models import Card

logger = logging.getLogger(__name__)


class ViewKind(Enum):
    LOADING = "loading"
    ERROR = "error"
    EMPTY = "empty"
    CARDS = "cards"


@dataclass(frozen=True)
class ItemView:
    name: str
    complete: bool
    glyph: str


@dataclass(frozen=True)
class ChecklistView:
    checklist_id: str
    title: Optional[str] = None
    items: Tuple[ItemView, ...] = ()
    pending: bool = False


@dataclass(frozen=True)
class CardView:
    card_id: str
    title: Optional[str] = None
    due: Optional[str] = None
    description: Optional[str] = None
    description_lines: Tuple[str, ...] = ()
    checklists: Tuple[ChecklistView, ...] = ()
    completed: bool = False

    @property
    def headline(self) -> str:
        """Title with the due date appended, as the display shows it."""
        parts = [p for p in (self.title, f"({self.due})" if self.due else None) if p]
        return " ".join(parts)


@dataclass(frozen=True)
class RenderResult:
    kind: ViewKind
    message: Optional[str] = None
    cards: Tuple[CardView, ...] = ()
    index: int = 0
    animation_speed: float = 0

    def to_dict(self) -> Dict[str, Any]:
        """JSON-ready form for the web display."""
        return {
            "kind": self.kind.value,
            "message": self.message,
            "index": self.index,
            "animation_speed": self.animation_speed,
            "cards": [_card_dict(card) for card in self.cards],
        }


def _card_dict(card: CardView) -> Dict[str, Any]:
    return {
        "id": card.card_id,
        "title": card.title,
        "due": card.due,
        "description": card.description,
        "description_lines": list(card.description_lines),
        "completed": card.completed,
        "checklists": [
            {
                "id": cl.checklist_id,
                "title": cl.title,
                "pending": cl.pending,
                "items": [
                    {"name": item.name, "complete": item.complete, "glyph": item.glyph}
                    for item in cl.items
                ],
            }
            for cl in card.checklists
        ],
    }


def render(
    store: DataStore,
    index: int,
    error_state: ErrorState,
    config: BoardConfig,
    now: Optional[datetime] = None,
) -> RenderResult:
    """Build the render description. Never raises."""
    speed = config.animation_speed

    if error_state.is_error:
        return RenderResult(
            ViewKind.ERROR,
            message=config.translate("CONFIG_ERROR") + (error_state.message or ""),
            animation_speed=speed,
        )
    if error_state.is_loading:
        return RenderResult(ViewKind.LOADING, animation_speed=speed)
    if store.card_count == 0:
        return RenderResult(
            ViewKind.EMPTY, message=config.translate("NO_CARDS"), animation_speed=speed
        )

    index = normalize_index(index, store.card_count)
    if config.whole_list:
        cards = store.cards
    else:
        cards = (store.cards[index],)

    try:
        views = tuple(_card_view(store, card, config, now) for card in cards)
    except Exception as exc:
        logger.exception("Render failed for board %s", config.board_id)
        return RenderResult(ViewKind.ERROR, message=f"Render failed: {exc}", animation_speed=speed)

    return RenderResult(ViewKind.CARDS, cards=views, index=index, animation_speed=speed)


def _card_view(store: DataStore, card: Card, config: BoardConfig,
               now: Optional[datetime]) -> CardView:
    title = card.name if config.show_title else None

    due = None
    if config.show_due_date and card.due is not None:
        due = from_now(card.due, now)

    description = None
    lines: Tuple[str, ...] = ()
    if config.show_description and card.description:
        description = card.description
        if config.show_line_breaks:
            lines = tuple(description.split("\n"))

    checklists: Tuple[ChecklistView, ...] = ()
    if config.show_checklists:
        checklists = tuple(_checklist_views(store, card, config))

    return CardView(
        card_id=card.id,
        title=title,
        due=due,
        description=description,
        description_lines=lines,
        checklists=checklists,
        completed=config.is_completed,
    )


def _checklist_views(store: DataStore, card: Card, config: BoardConfig) -> List[ChecklistView]:
    views = []
    for slot in store.get_checklists_for_card(card):
        if slot.pending:
            views.append(ChecklistView(slot.checklist_id, pending=True))
            continue
        checklist = slot.checklist
        views.append(ChecklistView(
            checklist_id=checklist.id,
            title=checklist.name if config.show_checklist_title else None,
            items=tuple(
                ItemView(item.name, item.complete, GLYPHS[item.state.value])
                for item in checklist.items
            ),
        ))
    return views
