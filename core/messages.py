"""Message envelopes exchanged between data sources and board views.

Sources answer fire-and-forget requests with envelopes published on the
EventBus. Every envelope names the board view it is meant for
(target_id); a view drops anything addressed to someone else, so one
bus can serve several boards at once.

Kinds:
    LIST_CONTENT        payload: tuple of Card
    CHECK_LIST_CONTENT  payload: one Checklist
    TRELLO_ERROR        payload: FetchError
    USER_PRESENCE       payload: bool (False pauses, True resumes)
"""

from dataclasses import dataclass
from typing import Any, Optional

LIST_CONTENT = "LIST_CONTENT"
CHECK_LIST_CONTENT = "CHECK_LIST_CONTENT"
TRELLO_ERROR = "TRELLO_ERROR"
USER_PRESENCE = "USER_PRESENCE"

KINDS = (LIST_CONTENT, CHECK_LIST_CONTENT, TRELLO_ERROR, USER_PRESENCE)


@dataclass(frozen=True)
class Envelope:
    kind: str
    payload: Any
    target_id: Optional[str] = None  # None = broadcast
    seq: Optional[int] = None        # request sequence the response answers


@dataclass(frozen=True)
class ListRequest:
    """A queued request for the cards on one list."""

    list_id: str
    target_id: str
    seq: int


@dataclass(frozen=True)
class FetchError:
    """What the source knows about a failed fetch."""

    status_code: int
    status_message: str
    response_body: str = ""

    def describe(self) -> str:
        return f"Error {self.status_code}({self.status_message}): {self.response_body}"


class FetchFailed(Exception):
    """Raised inside a data source when a fetch cannot be completed."""

    def __init__(self, error: FetchError):
        super().__init__(error.describe())
        self.error = error
