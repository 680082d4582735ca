"""Card rendering for Board Station.

render() builds a display-neutral description of the board;
format_text() lays it out for a terminal.
"""

from cards.renderer import (
    CardView,
    ChecklistView,
    ItemView,
    RenderResult,
    ViewKind,
    render,
)
from cards.text_view import format_text

__all__ = [
    "CardView", "ChecklistView", "ItemView", "RenderResult", "ViewKind",
    "render", "format_text",
]
