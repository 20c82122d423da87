# utils/store.py
"""
In-memory leaderboard state for the recap editor.

- LeaderboardStore owns the entry collection and is the only thing that mutates it.
- Every mutation re-derives the ranked view (sort, rank labels, total) and hands it
  to the renderer before returning, so indices in the last view are always current.
- No Streamlit imports here; the page wires a renderer in (see utils/render.py).
"""

from __future__ import annotations

import logging
import uuid
from dataclasses import dataclass, field, replace
from decimal import Decimal
from typing import Iterable, List, Optional, Protocol, Sequence, Tuple, Union

from config import EMPTY_STATE_MESSAGE, NEW_CAPPER, RANK_WIDTH, TOP_TIER_SIZE
from utils.exceptions import InvalidIndex, PendingRemoval, UnknownField
from utils.recap_io import import_recap
from utils.units import format_units, parse_units, to_units

logger = logging.getLogger(__name__)

FIELDS = ("name", "role", "units")

EMPTY = "Empty"
POPULATED = "Populated"


# ----------------------------
# Data model
# ----------------------------

@dataclass
class Entry:
    name: str
    role: str
    units: Decimal
    entry_id: str = field(default_factory=lambda: uuid.uuid4().hex)
    pending_removal: bool = False


@dataclass(frozen=True)
class RankedRow:
    rank: str
    name: str
    role: str
    units: Decimal
    units_display: str
    is_top_tier: bool
    is_nonnegative: bool
    index_for_events: int
    entry_id: str
    is_pending_removal: bool = False


@dataclass(frozen=True)
class RankedView:
    rows: Tuple[RankedRow, ...]
    total: Decimal
    total_display: str
    total_is_negative: bool
    placeholder: Optional[str] = None

    @property
    def is_empty(self) -> bool:
        return not self.rows


# ----------------------------
# UI intents
# ----------------------------

@dataclass(frozen=True)
class AddRequested:
    pass


@dataclass(frozen=True)
class DeleteRequested:
    index: int
    entry_id: Optional[str] = None


@dataclass(frozen=True)
class FieldCommitted:
    index: int
    field: str
    raw_text: str
    entry_id: Optional[str] = None


@dataclass(frozen=True)
class BulkLoadRequested:
    serialized_state: str


Intent = Union[AddRequested, DeleteRequested, FieldCommitted, BulkLoadRequested]


class Renderer(Protocol):
    def render(self, view: RankedView) -> None:
        ...


SeedItem = Union[Entry, Sequence, dict]


def make_entry(item: SeedItem) -> Entry:
    """Build a fresh Entry from an Entry, a (name, role, units) tuple or a dict."""
    if isinstance(item, Entry):
        name, role, units = item.name, item.role, item.units
    elif isinstance(item, dict):
        name, role, units = item.get("name", ""), item.get("role", ""), item.get("units", 0)
    else:
        name, role, units = item
    return Entry(name=str(name), role=str(role), units=to_units(units))


def rank_label(position: int, width: int = RANK_WIDTH) -> str:
    """1 -> '01', 12 -> '12', 100 -> '100'."""
    return str(position).zfill(width)


def compute_ranked_view(
    entries: Iterable[Entry],
    top_tier_size: int = TOP_TIER_SIZE,
    placeholder: str = EMPTY_STATE_MESSAGE,
) -> RankedView:
    """
    Derive the ranked view from a collection of entries.

    Sorted by units descending; sorted() is stable, so equal units keep their
    input order. Total is an exact Decimal sum and counts as negative only when
    strictly below zero, while a single entry at 0 counts as nonnegative.
    """
    ordered = sorted(entries, key=lambda e: e.units, reverse=True)
    rows = tuple(
        RankedRow(
            rank=rank_label(i + 1),
            name=e.name,
            role=e.role,
            units=e.units,
            units_display=format_units(e.units),
            is_top_tier=i < top_tier_size,
            is_nonnegative=e.units >= 0,
            index_for_events=i,
            entry_id=e.entry_id,
            is_pending_removal=e.pending_removal,
        )
        for i, e in enumerate(ordered)
    )
    total = sum((e.units for e in ordered), Decimal("0"))
    return RankedView(
        rows=rows,
        total=total,
        total_display=format_units(total),
        total_is_negative=total < 0,
        placeholder=None if rows else placeholder,
    )


# ----------------------------
# Store
# ----------------------------

class LeaderboardStore:
    """Owns the cappers and publishes a fresh RankedView after every change."""

    def __init__(self, seed: Iterable[SeedItem] = (), renderer: Optional[Renderer] = None):
        self.renderer = renderer
        self._entries: List[Entry] = []
        self._view: RankedView = compute_ranked_view([])
        self.initialize(seed)

    # --- read side ---

    @property
    def view(self) -> RankedView:
        return self._view

    @property
    def total(self) -> Decimal:
        return self._view.total

    @property
    def entries(self) -> List[Entry]:
        """Copies in rank order; change entries through edit_field."""
        return [replace(e) for e in self._entries]

    @property
    def is_empty(self) -> bool:
        return not self._entries

    @property
    def state(self) -> str:
        return EMPTY if self.is_empty else POPULATED

    def __len__(self) -> int:
        return len(self._entries)

    def entry(self, index: int) -> Entry:
        """Copy of the entry at a position of the last published view."""
        return replace(self._entry(index))

    def _entry(self, index: int) -> Entry:
        if isinstance(index, bool) or not isinstance(index, int) or not 0 <= index < len(self._entries):
            raise InvalidIndex(index, len(self._entries))
        return self._entries[index]

    def index_of(self, entry_id: str) -> int:
        for i, e in enumerate(self._entries):
            if e.entry_id == entry_id:
                return i
        raise InvalidIndex(entry_id, len(self._entries))

    def pending_ids(self) -> List[str]:
        return [e.entry_id for e in self._entries if e.pending_removal]

    def compute_ranked_view(self) -> RankedView:
        return compute_ranked_view(self._entries)

    # --- mutations ---

    def initialize(self, seed: Iterable[SeedItem]) -> None:
        """Replace every entry (startup and bulk load)."""
        self._entries = [make_entry(item) for item in seed]
        logger.debug("Store initialised with %d entries", len(self._entries))
        self._publish()

    def add_entry(self) -> str:
        """Append the default capper and return its id (the page focuses it)."""
        new = make_entry(NEW_CAPPER)
        self._entries.append(new)
        logger.debug("Added entry %s", new.entry_id)
        self._publish()
        return new.entry_id

    def delete_entry(self, index: int) -> Entry:
        removed = self._entry(index)
        del self._entries[index]
        logger.debug("Deleted entry %s (%s)", removed.entry_id, removed.name)
        self._publish()
        return removed

    def edit_field(self, index: int, field_name: str, raw_value: str) -> Entry:
        """Units go through parse_units, name and role are stored as typed."""
        target = self._entry(index)
        if field_name not in FIELDS:
            raise UnknownField(field_name)
        if target.pending_removal:
            raise PendingRemoval(target.entry_id)

        if field_name == "units":
            target.units = parse_units(raw_value)
        else:
            setattr(target, field_name, "" if raw_value is None else str(raw_value))
        logger.debug("Entry %s %s -> %r", target.entry_id, field_name, getattr(target, field_name))
        self._publish()
        return replace(target)

    def request_delete(self, index: int) -> str:
        """
        First half of a delete: flag the entry so the page can play its exit.

        The entry stays in the collection, the view and the total until
        complete_delete() is called with the returned id.
        """
        target = self._entry(index)
        if not target.pending_removal:
            target.pending_removal = True
            self._publish()
        return target.entry_id

    def complete_delete(self, entry_id: str) -> Entry:
        return self.delete_entry(self.index_of(entry_id))

    def dispatch(self, intent: Intent):
        """Apply one UI intent. Intents carrying an entry_id are resolved by identity."""
        if isinstance(intent, AddRequested):
            return self.add_entry()
        if isinstance(intent, DeleteRequested):
            return self.delete_entry(self._resolve(intent.index, intent.entry_id))
        if isinstance(intent, FieldCommitted):
            return self.edit_field(self._resolve(intent.index, intent.entry_id), intent.field, intent.raw_text)
        if isinstance(intent, BulkLoadRequested):
            return import_recap(self, intent.serialized_state)
        raise TypeError(f"Unsupported intent: {intent!r}")

    # --- internals ---

    def _resolve(self, index: int, entry_id: Optional[str]) -> int:
        if entry_id is not None:
            return self.index_of(entry_id)
        return index

    def _publish(self) -> None:
        view = compute_ranked_view(self._entries)
        # Backing order follows the view so positional indices line up
        by_id = {e.entry_id: e for e in self._entries}
        self._entries = [by_id[row.entry_id] for row in view.rows]
        self._view = view
        if self.renderer is not None:
            self.renderer.render(view)
