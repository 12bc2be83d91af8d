"""Search engine - case-insensitive substring search over item names and tags."""
import re
from typing import Iterable, List, Tuple

from boxinventory.schemas.box import Box
from boxinventory.schemas.search import BoxMatch, ItemMatch, Span


def _pattern(query: str) -> "re.Pattern[str]":
    return re.compile(re.escape(query), re.IGNORECASE)


def highlight_spans(text: str, query: str) -> List[Span]:
    """Every non-overlapping occurrence of ``query`` in ``text``, left to right.
    
    A blank query highlights nothing.
    """
    if not query.strip():
        return []
    return [Span(start=m.start(), end=m.end()) for m in _pattern(query).finditer(text)]


def highlight_segments(text: str, query: str) -> List[Tuple[str, bool]]:
    """Split ``text`` into ``(part, highlighted)`` runs for rendering."""
    segments = []
    cursor = 0
    for span in highlight_spans(text, query):
        if span.start > cursor:
            segments.append((text[cursor:span.start], False))
        segments.append((text[span.start:span.end], True))
        cursor = span.end
    if cursor < len(text) or not segments:
        segments.append((text[cursor:], False))
    return segments


def search_boxes(query: str, boxes: Iterable[Box]) -> List[BoxMatch]:
    """
    Boxes reduced to the items whose name or any tag contains ``query``.
    
    Box and item order follow the collection; boxes without a matching
    item are left out. An empty query returns nothing.
    """
    if not query:
        return []
    pattern = _pattern(query)
    
    results = []
    for box in boxes:
        matches = []
        for item in box.items:
            if not (pattern.search(item.name) or any(pattern.search(tag) for tag in item.tags)):
                continue
            matches.append(ItemMatch(
                item=item,
                name_highlights=highlight_spans(item.name, query),
                tag_highlights=[highlight_spans(tag, query) for tag in item.tags],
            ))
        if matches:
            results.append(BoxMatch(box_id=box.id, items=matches))
    return results
