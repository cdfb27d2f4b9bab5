"""Journal list selectors: filter, search and sort.

The list view state is an immutable JournalQuery passed in on every call;
select_entries never mutates its input.
"""

from dataclasses import dataclass
from datetime import datetime, timezone
from typing import Any

from backend.utils.constants import FILTER_MODES, SORT_MODES


@dataclass(frozen=True)
class JournalQuery:
    search: str = ""
    filter_mode: str = "all"  # "all", "win", "loss", "favorites"
    sort_mode: str = "newest"  # "newest", "oldest", "pnl-high", "pnl-low", "pair-az"

    def __post_init__(self):
        if self.filter_mode not in FILTER_MODES:
            raise ValueError(f"filter_mode must be one of: {', '.join(FILTER_MODES)}")
        if self.sort_mode not in SORT_MODES:
            raise ValueError(f"sort_mode must be one of: {', '.join(SORT_MODES)}")


def _created(entry: Any) -> datetime:
    value = entry.created_at
    if value.tzinfo is None:
        value = value.replace(tzinfo=timezone.utc)
    return value


def _matches_filter(entry: Any, filter_mode: str) -> bool:
    if filter_mode == "win":
        return entry.outcome == "win"
    if filter_mode == "loss":
        return entry.outcome == "loss"
    if filter_mode == "favorites":
        return bool(entry.favorite)
    return True


def _matches_search(entry: Any, needle: str) -> bool:
    fields = [entry.title, entry.url, entry.description, entry.pair, entry.notes, *(entry.tags or [])]
    return any(needle in f.lower() for f in fields if f)


def _sort(entries: list[Any], sort_mode: str) -> list[Any]:
    if sort_mode == "oldest":
        return sorted(entries, key=_created)
    if sort_mode == "pnl-high":
        return sorted(entries, key=lambda e: e.pnl or 0, reverse=True)
    if sort_mode == "pnl-low":
        return sorted(entries, key=lambda e: e.pnl or 0)
    if sort_mode == "pair-az":
        return sorted(entries, key=lambda e: (e.pair or e.title or "").lower())
    return sorted(entries, key=_created, reverse=True)


def select_entries(entries: list[Any], query: JournalQuery) -> list[Any]:
    """Apply filter mode, then search, then sort. Returns a new list."""
    result = [e for e in entries if _matches_filter(e, query.filter_mode)]
    needle = query.search.strip().lower()
    if needle:
        result = [e for e in result if _matches_search(e, needle)]
    return _sort(result, query.sort_mode)
