"""Trello list data source.

Fetches the cards on one list, then each checklist those cards
reference, from the Trello REST API.

Config example (in board.yaml):
    boards:
      - id: "groceries"
        source: "trello"
        list: "5f1c0a..."
        api_key: "..."      # falls back to TRELLO_API_KEY
        token: "..."        # falls back to TRELLO_TOKEN
        options:
          base_url: "https://api.trello.com/1"
          timeout: 15         # seconds

Endpoints:
    GET {base}/lists/{list_id}/cards?key=...&token=...
    GET {base}/checklists/{checklist_id}?key=...&token=...
"""

import logging
from typing import Any, Dict, List

import requests

from config import TRELLO_API_BASE, TRELLO_TIMEOUT
from core.data_source import DataSource
from core.messages import FetchError, FetchFailed
from core.models import Card, Checklist
from core.registry import register_source

logger = logging.getLogger(__name__)


@register_source("trello")
class TrelloSource(DataSource):
    """Fetches list content from api.trello.com."""

    def __init__(self, source_id: str, bus, config: Dict):
        super().__init__(source_id, bus, config)
        self.base_url = config.get("base_url", TRELLO_API_BASE).rstrip("/")
        self._timeout = config.get("timeout", TRELLO_TIMEOUT)
        self._session = requests.Session()
        self._session.headers.update({
            "Accept": "application/json",
            "User-Agent": "BoardStation/1.0",
        })

    def fetch_cards(self, list_id: str) -> List[Card]:
        data = self._get(f"/lists/{list_id}/cards")
        if not isinstance(data, list):
            raise FetchFailed(FetchError(200, "Unexpected response", repr(data)[:200]))
        return [Card.from_api(item) for item in data if isinstance(item, dict) and "id" in item]

    def fetch_checklist(self, checklist_id: str) -> Checklist:
        data = self._get(f"/checklists/{checklist_id}")
        if not isinstance(data, dict) or "id" not in data:
            raise FetchFailed(FetchError(200, "Unexpected response", repr(data)[:200]))
        return Checklist.from_api(data)

    def _get(self, path: str) -> Any:
        url = f"{self.base_url}{path}"
        params = {"key": self.api_key, "token": self.token}
        try:
            resp = self._session.get(url, params=params, timeout=self._timeout)
        except requests.RequestException as exc:
            raise FetchFailed(FetchError(0, exc.__class__.__name__, str(exc))) from exc

        if not 200 <= resp.status_code < 300:
            raise FetchFailed(FetchError(resp.status_code, resp.reason or "", resp.text))

        try:
            return resp.json()
        except ValueError as exc:
            raise FetchFailed(FetchError(resp.status_code, "Invalid JSON", resp.text[:200])) from exc

    def close(self):
        super().close()
        self._session.close()
