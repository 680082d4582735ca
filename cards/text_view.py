"""Plain-text layout of a RenderResult for the terminal display."""

from typing import List

from cards.renderer import CardView, RenderResult, ViewKind
from config import LOADING_GLYPH

INDENT = "  "


def format_text(result: RenderResult) -> str:
    return "\n".join(format_lines(result))


def format_lines(result: RenderResult) -> List[str]:
    if result.kind is ViewKind.LOADING:
        return [LOADING_GLYPH]
    if result.kind in (ViewKind.ERROR, ViewKind.EMPTY):
        return [result.message or ""]

    lines: List[str] = []
    for i, card in enumerate(result.cards):
        if i:
            lines.append("")
        lines.extend(_card_lines(card))
    return lines


def _card_lines(card: CardView) -> List[str]:
    lines = []
    if card.headline:
        lines.append(f"~{card.headline}~" if card.completed else card.headline)

    if card.description_lines:
        lines.extend(INDENT + line for line in card.description_lines)
    elif card.description is not None:
        lines.append(INDENT + card.description.replace("\n", " "))

    for checklist in card.checklists:
        if checklist.pending:
            lines.append(INDENT + LOADING_GLYPH)
            continue
        if checklist.title:
            lines.append(INDENT + checklist.title)
        for item in checklist.items:
            lines.append(f"{INDENT}{item.glyph} {item.name}")
    return lines
