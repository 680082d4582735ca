"""Load/error status of a board view.

    LOADING --(list content)--> OK
    LOADING/OK --(fetch error)--> ERROR   (sticky)

An error is terminal: once set, later successes do not clear it and the
view stops requesting data. Recovering means restarting the host.
"""

import logging
from enum import Enum
from typing import Optional

logger = logging.getLogger(__name__)


class Status(Enum):
    LOADING = "loading"
    OK = "ok"
    ERROR = "error"


class ErrorState:

    def __init__(self):
        self._status = Status.LOADING
        self._message: Optional[str] = None

    @property
    def status(self) -> Status:
        return self._status

    @property
    def message(self) -> Optional[str]:
        return self._message

    @property
    def is_error(self) -> bool:
        return self._status is Status.ERROR

    @property
    def is_loading(self) -> bool:
        return self._status is Status.LOADING

    def mark_ok(self) -> bool:
        """Record a successful load. Returns False if an error is already latched."""
        if self._status is Status.ERROR:
            return False
        self._status = Status.OK
        self._message = None
        return True

    def mark_error(self, message: str):
        self._status = Status.ERROR
        self._message = message

    def __repr__(self) -> str:
        if self._message:
            return f"<ErrorState {self._status.value}: {self._message}>"
        return f"<ErrorState {self._status.value}>"
