"""Board Station - Configuration

Defaults match the MagicMirror MMM-Trello module, so an existing board
config can be pasted into board.yaml unchanged. Option names stay
camelCase in YAML; BoardConfig exposes them as attributes.

Example board.yaml:

    boards:
      - id: groceries
        list: "5f1c0a..."          # Trello list id
        api_key: "..."             # or TRELLO_API_KEY in the environment
        token: "..."               # or TRELLO_TOKEN
        updateInterval: 10000
        showChecklists: true
        language: de               # UI strings; due dates stay English
        options:                   # handed to the data source as-is
          timeout: 10

A single board may also be given at the top level without `boards:`.
"""

import logging
import os
from dataclasses import dataclass, field
from typing import Any, Dict, List

import yaml

logger = logging.getLogger(__name__)


class ConfigError(ValueError):
    """Raised for a board configuration that cannot be used."""


# ---------------------------------------------------------------------------
# Defaults (milliseconds for all intervals)
# ---------------------------------------------------------------------------
DEFAULTS = {
    "reloadInterval": 5 * 60 * 1000,   # refresh list content every 5 minutes
    "updateInterval": 10 * 1000,       # next card every 10 seconds
    "animationSpeed": 2.5 * 1000,      # passed through to the display
    "showTitle": True,
    "api_key": "",
    "token": "",
    "list": "",
    "showLineBreaks": False,
    "showDueDate": True,
    "showDescription": True,
    "showChecklists": True,
    "showChecklistTitle": False,
    "wholeList": False,
    "isCompleted": False,
    "language": "en",
    "pruneChecklists": True,
}

# YAML key -> BoardConfig attribute
OPTION_NAMES = {
    "id": "board_id",
    "source": "source",
    "reloadInterval": "reload_interval",
    "updateInterval": "update_interval",
    "animationSpeed": "animation_speed",
    "showTitle": "show_title",
    "api_key": "api_key",
    "token": "token",
    "list": "list_id",
    "showLineBreaks": "show_line_breaks",
    "showDueDate": "show_due_date",
    "showDescription": "show_description",
    "showChecklists": "show_checklists",
    "showChecklistTitle": "show_checklist_title",
    "wholeList": "whole_list",
    "isCompleted": "is_completed",
    "language": "language",
    "pruneChecklists": "prune_checklists",
    "options": "options",
}

# ---------------------------------------------------------------------------
# Trello API
# ---------------------------------------------------------------------------
TRELLO_API_BASE = "https://api.trello.com/1"
TRELLO_TIMEOUT = 15  # seconds

# ---------------------------------------------------------------------------
# Display
# ---------------------------------------------------------------------------
GLYPHS = {
    "incomplete": "☐",  # open box
    "complete": "☑",    # checked box
}
LOADING_GLYPH = "↻"

TRANSLATIONS = {
    "en": {
        "NO_CARDS": "No cards in this list",
        "CONFIG_ERROR": "Please check your config file, an error occurred: ",
    },
    "de": {
        "NO_CARDS": "Keine Karten in dieser Liste",
        "CONFIG_ERROR": "Bitte Konfigurationsdatei prüfen, ein Fehler ist aufgetreten: ",
    },
    "sv": {
        "NO_CARDS": "Inga kort i denna lista",
        "CONFIG_ERROR": "Kontrollera din konfigurationsfil, ett fel uppstod: ",
    },
    "pl": {
        "NO_CARDS": "Brak kart na tej liście",
        "CONFIG_ERROR": "Sprawdź plik konfiguracyjny, wystąpił błąd: ",
    },
}


def translate(key: str, language: str = "en") -> str:
    """Look up a UI string, falling back to English, then to the key."""
    table = TRANSLATIONS.get(language) or TRANSLATIONS["en"]
    return table.get(key) or TRANSLATIONS["en"].get(key, key)


@dataclass
class BoardConfig:
    """Settings for one board view."""

    board_id: str = "board"
    source: str = "trello"
    list_id: str = ""
    api_key: str = ""
    token: str = ""
    reload_interval: float = DEFAULTS["reloadInterval"]
    update_interval: float = DEFAULTS["updateInterval"]
    animation_speed: float = DEFAULTS["animationSpeed"]
    show_title: bool = True
    show_due_date: bool = True
    show_description: bool = True
    show_line_breaks: bool = False
    show_checklists: bool = True
    show_checklist_title: bool = False
    whole_list: bool = False
    is_completed: bool = False
    language: str = "en"
    prune_checklists: bool = True
    # Passed as-is to the data source (base_url, checklist_delay, ...)
    options: Dict[str, Any] = field(default_factory=dict)

    def __post_init__(self):
        if self.reload_interval <= 0 or self.update_interval <= 0:
            raise ConfigError(
                f"board {self.board_id}: intervals must be positive "
                f"(reloadInterval={self.reload_interval}, updateInterval={self.update_interval})"
            )
        if self.whole_list:
            self.update_interval = self.reload_interval
        if self.options is None:
            self.options = {}
        if not isinstance(self.options, dict):
            raise ConfigError(f"board {self.board_id}: options must be a mapping")

    @classmethod
    def from_dict(cls, raw: Dict[str, Any]) -> "BoardConfig":
        """Build from a YAML mapping using the camelCase option names."""
        kwargs = {}
        for key, value in raw.items():
            attr = OPTION_NAMES.get(key)
            if attr is None:
                logger.warning("Ignoring unknown board option: %s", key)
                continue
            kwargs[attr] = value

        kwargs.setdefault("api_key", os.environ.get("TRELLO_API_KEY", ""))
        kwargs.setdefault("token", os.environ.get("TRELLO_TOKEN", ""))

        try:
            return cls(**kwargs)
        except TypeError as exc:
            raise ConfigError(str(exc)) from exc

    def translate(self, key: str) -> str:
        return translate(key, self.language)


def load_config(path: str) -> Dict:
    """Load the board config from a YAML file ({} if missing)."""
    try:
        with open(path) as f:
            return yaml.safe_load(f) or {}
    except FileNotFoundError:
        logger.warning("Config file not found: %s", path)
        return {}
    except yaml.YAMLError as exc:
        raise ConfigError(f"{path}: {exc}") from exc


def board_configs(raw: Dict) -> List[BoardConfig]:
    """Expand a loaded config into one BoardConfig per board."""
    if not raw:
        return []
    if "boards" in raw:
        entries = raw["boards"] or []
    else:
        entries = [raw]
    if not isinstance(entries, list):
        raise ConfigError("'boards' must be a list")

    configs = []
    seen = set()
    for entry in entries:
        if not isinstance(entry, dict):
            raise ConfigError(f"board entry must be a mapping, got {entry!r}")
        cfg = BoardConfig.from_dict(entry)
        if cfg.board_id in seen:
            raise ConfigError(f"duplicate board id: {cfg.board_id}")
        seen.add(cfg.board_id)
        configs.append(cfg)
    return configs
