"""Board data models.

Cards and checklists as received from the task-board API. All models
are frozen: a card list is replaced wholesale on every refresh and a
checklist is overwritten by id, never patched in place.

Parsing is lenient. The API omits optional fields freely (no due date,
empty description), so from_api() fills in empty values instead of
raising and leaves it to the renderer to skip what is missing.
"""

import logging
from dataclasses import dataclass
from datetime import datetime, timezone
from enum import Enum
from typing import Any, Dict, Optional, Tuple

logger = logging.getLogger(__name__)


class CheckState(Enum):
    INCOMPLETE = "incomplete"
    COMPLETE = "complete"

    @classmethod
    def parse(cls, raw: Any) -> "CheckState":
        if raw == cls.COMPLETE.value:
            return cls.COMPLETE
        return cls.INCOMPLETE


def parse_due(raw: Any) -> Optional[datetime]:
    """Parse an ISO-8601 due timestamp ("2024-05-01T12:00:00.000Z").

    Returns an aware datetime, or None when absent or unparseable.
    """
    if not raw or not isinstance(raw, str):
        return None
    text = raw.strip()
    if text.endswith("Z"):
        text = text[:-1] + "+00:00"
    try:
        due = datetime.fromisoformat(text)
    except ValueError:
        logger.warning("Ignoring unparseable due date: %r", raw)
        return None
    if due.tzinfo is None:
        due = due.replace(tzinfo=timezone.utc)
    return due


@dataclass(frozen=True)
class CheckItem:
    name: str
    state: CheckState = CheckState.INCOMPLETE

    @property
    def complete(self) -> bool:
        return self.state is CheckState.COMPLETE

    @classmethod
    def from_api(cls, data: Dict[str, Any]) -> "CheckItem":
        return cls(
            name=str(data.get("name", "")),
            state=CheckState.parse(data.get("state")),
        )


@dataclass(frozen=True)
class Checklist:
    """A named, ordered group of check items belonging to a card."""

    id: str
    name: str = ""
    items: Tuple[CheckItem, ...] = ()

    @classmethod
    def from_api(cls, data: Dict[str, Any]) -> "Checklist":
        items = data.get("checkItems") or []
        return cls(
            id=str(data["id"]),
            name=str(data.get("name", "")),
            items=tuple(CheckItem.from_api(item) for item in items if isinstance(item, dict)),
        )


@dataclass(frozen=True)
class Card:
    """A single task-board card."""

    id: str
    name: str = ""
    description: str = ""
    due: Optional[datetime] = None
    checklist_ids: Tuple[str, ...] = ()

    @classmethod
    def from_api(cls, data: Dict[str, Any]) -> "Card":
        return cls(
            id=str(data["id"]),
            name=str(data.get("name", "")),
            description=data.get("desc") or "",
            due=parse_due(data.get("due")),
            checklist_ids=tuple(str(cid) for cid in data.get("idChecklists") or []),
        )
