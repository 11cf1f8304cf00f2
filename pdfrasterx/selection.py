"""Page selection model and range-string parsing."""

from __future__ import annotations

import re
from dataclasses import dataclass
from typing import Iterable, Iterator

from .exceptions import SelectionError

_SEPARATORS = re.compile("[,，]")
_SINGLE = re.compile(r"^\d+$")
_RANGE = re.compile(r"^(\d+)\s*-\s*(\d+)$")


@dataclass(frozen=True)
class SelectionSet:
    """Immutable set of page ids iterated in ascending order."""

    ids: frozenset[int] = frozenset()

    @classmethod
    def of(cls, ids: Iterable[int]) -> "SelectionSet":
        return cls(frozenset(int(page_id) for page_id in ids))

    def __iter__(self) -> Iterator[int]:
        return iter(sorted(self.ids))

    def __len__(self) -> int:
        return len(self.ids)

    def __contains__(self, page_id: object) -> bool:
        return page_id in self.ids

    def __bool__(self) -> bool:
        return bool(self.ids)

    def union(self, other: Iterable[int]) -> "SelectionSet":
        return SelectionSet(self.ids | frozenset(other))

    def toggle(self, page_id: int) -> "SelectionSet":
        return SelectionSet(self.ids ^ {page_id})

    def prune(self, present: Iterable[int]) -> "SelectionSet":
        """Drop ids that are not in ``present``."""

        return SelectionSet(self.ids & frozenset(present))

    def clamp(self, total_pages: int) -> "SelectionSet":
        """Drop ids outside ``1..total_pages``."""

        return SelectionSet(frozenset(i for i in self.ids if 1 <= i <= total_pages))

    def as_list(self) -> list[int]:
        return sorted(self.ids)


def parse_segment(segment: str) -> range | None:
    """Return the ids a single range segment contributes, or ``None``."""

    token = segment.strip()
    if _SINGLE.match(token):
        value = int(token)
        return range(value, value + 1)
    match = _RANGE.match(token)
    if match is None:
        return None
    first, second = int(match.group(1)), int(match.group(2))
    low, high = min(first, second), max(first, second)
    return range(low, high + 1)


def parse_page_selection(text: str | None, total_pages: int) -> SelectionSet:
    """Parse ``text`` such as ``"1-5, 8"`` into the ids valid for the source.

    Both ASCII and full-width commas separate segments. A segment is either a
    page number or an inclusive ``a-b`` range in any order. Segments that do
    not parse are ignored, and ids outside ``1..total_pages`` are dropped.
    """

    if not text:
        return SelectionSet()

    contributed: set[int] = set()
    for segment in _SEPARATORS.split(text):
        ids = parse_segment(segment)
        if ids is None:
            continue
        # Only the part of the range inside the document is materialised.
        contributed.update(range(max(ids.start, 1), min(ids.stop, total_pages + 1)))
    return SelectionSet(frozenset(contributed)).clamp(total_pages)


class SelectionModel:
    """Working set of selected page ids.

    The model knows two universes: ``total_pages`` from the source and the
    ids present in the current raster generation. Toggling accepts any page
    of the source, so a selection can be made while pages are still being
    rendered; :meth:`prune` brings it back in line when a generation is
    committed.
    """

    def __init__(self, total_pages: int = 0, known_ids: Iterable[int] = ()) -> None:
        self.total_pages = total_pages
        self.known_ids: frozenset[int] = frozenset(known_ids)
        self.selection = SelectionSet()

    def __len__(self) -> int:
        return len(self.selection)

    def __contains__(self, page_id: object) -> bool:
        return page_id in self.selection

    def toggle(self, page_id: int) -> SelectionSet:
        if not 1 <= page_id <= self.total_pages:
            raise SelectionError(f"Page {page_id} is outside 1..{self.total_pages}")
        self.selection = self.selection.toggle(page_id)
        return self.selection

    def select_all(self) -> SelectionSet:
        self.selection = SelectionSet(self.known_ids)
        return self.selection

    def clear(self) -> SelectionSet:
        self.selection = SelectionSet()
        return self.selection

    def toggle_all(self) -> SelectionSet:
        if len(self.selection) == len(self.known_ids):
            return self.clear()
        return self.select_all()

    def apply_range(self, text: str | None, total_pages: int | None = None) -> SelectionSet:
        """Replace the selection with ``text`` unless it selects nothing valid."""

        limit = self.total_pages if total_pages is None else total_pages
        parsed = parse_page_selection(text, limit)
        if parsed:
            self.selection = parsed
        return self.selection

    def prune(self, present: Iterable[int]) -> SelectionSet:
        """Adopt a new generation's ids and drop selected ids it lacks."""

        self.known_ids = frozenset(present)
        self.selection = self.selection.prune(self.known_ids)
        return self.selection

    def reset(self, total_pages: int = 0) -> None:
        self.total_pages = total_pages
        self.known_ids = frozenset()
        self.selection = SelectionSet()


__all__ = ["SelectionModel", "SelectionSet", "parse_page_selection", "parse_segment"]
