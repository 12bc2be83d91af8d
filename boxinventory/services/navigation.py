"""Navigation between the app's views as an explicit state machine.

Each view carries only the data it needs; ``navigate`` is a pure
transition from the current view and an event to the next view.
"""
from dataclasses import dataclass
from typing import Union

from boxinventory.exceptions import InvalidScanPayload
from boxinventory.services.scan import normalize_box_id


@dataclass(frozen=True)
class DashboardView:
    pass


@dataclass(frozen=True)
class BoxView:
    box_id: str


@dataclass(frozen=True)
class AllBoxesView:
    pass


@dataclass(frozen=True)
class SearchView:
    query: str


@dataclass(frozen=True)
class ScannerView:
    pass


View = Union[DashboardView, BoxView, AllBoxesView, SearchView, ScannerView]


@dataclass(frozen=True)
class OpenBox:
    box_id: str


@dataclass(frozen=True)
class ShowAllBoxes:
    pass


@dataclass(frozen=True)
class Search:
    query: str


@dataclass(frozen=True)
class OpenScanner:
    pass


@dataclass(frozen=True)
class ScanSucceeded:
    payload: str


@dataclass(frozen=True)
class Back:
    pass


Event = Union[OpenBox, ShowAllBoxes, Search, OpenScanner, ScanSucceeded, Back]


def navigate(view: View, event: Event) -> View:
    """Next view for ``event``. Events that cannot apply leave the view unchanged."""
    if isinstance(event, Back):
        return DashboardView()
    if isinstance(event, ShowAllBoxes):
        return AllBoxesView()
    if isinstance(event, OpenScanner):
        return ScannerView()
    if isinstance(event, Search):
        if not event.query.strip():
            return view
        return SearchView(query=event.query)
    if isinstance(event, ScanSucceeded) and not isinstance(view, ScannerView):
        return view
    if isinstance(event, (OpenBox, ScanSucceeded)):
        raw = event.box_id if isinstance(event, OpenBox) else event.payload
        try:
            return BoxView(box_id=normalize_box_id(raw))
        except InvalidScanPayload:
            return view
    raise TypeError(f"Unknown navigation event: {event!r}")
