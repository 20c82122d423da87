# utils/render.py
"""
Streamlit side of the recap editor.

StreamlitRenderer receives every RankedView the store publishes and draws the
latest one. Widgets never touch the store directly: their callbacks turn user
actions into intents (FieldCommitted, DeleteRequested) and dispatch them.
"""
import logging
import time
from typing import Optional

import streamlit as st

from config import DELETE_DELAY_SECONDS, SEED_CAPPERS
from utils.store import FieldCommitted, LeaderboardStore, RankedRow, RankedView
from utils.units import format_units

logger = logging.getLogger(__name__)

STORE_KEY = "store"


def _key(field: str, entry_id: str) -> str:
    return f"{field}_{entry_id}"


class StreamlitRenderer:
    """Renderer for LeaderboardStore that draws into the current Streamlit page."""

    def __init__(self, store: Optional[LeaderboardStore] = None):
        self.store = store
        self.view: Optional[RankedView] = None
        self.publish_count = 0

    def render(self, view: RankedView) -> None:
        # Publishes can arrive inside widget callbacks, before the page body runs,
        # so only remember the view here and draw it from draw().
        self.view = view
        self.publish_count += 1

    # --- callbacks ---

    def _commit(self, entry_id: str, index: int, field: str) -> None:
        key = _key(field, entry_id)
        entry = self.store.dispatch(FieldCommitted(index, field, st.session_state[key], entry_id=entry_id))
        if field == "units":
            st.session_state[key] = format_units(entry.units)

    def _request_delete(self, entry_id: str) -> None:
        self.store.request_delete(self.store.index_of(entry_id))

    # --- drawing ---

    def draw(self) -> None:
        view = self.view or self.store.view
        if view.is_empty:
            st.info(view.placeholder)
        for row in view.rows:
            self._draw_row(row)
        st.divider()
        self.draw_total(view)

    def _draw_row(self, row: RankedRow) -> None:
        for field, value in (("name", row.name), ("role", row.role), ("units", row.units_display)):
            st.session_state.setdefault(_key(field, row.entry_id), value)

        rank_col, name_col, role_col, units_col, delete_col = st.columns([1, 4, 4, 3, 1], vertical_alignment="bottom")
        with rank_col:
            label = f"**{row.rank}**"
            st.markdown(f"🏆 {label}" if row.is_top_tier else label)
        for col, field, title in ((name_col, "name", "Capper"), (role_col, "role", "Role")):
            with col:
                st.text_input(
                    title,
                    key=_key(field, row.entry_id),
                    on_change=self._commit,
                    args=(row.entry_id, row.index_for_events, field),
                    disabled=row.is_pending_removal,
                    label_visibility="collapsed",
                )
        with units_col:
            st.text_input(
                "Units",
                key=_key("units", row.entry_id),
                on_change=self._commit,
                args=(row.entry_id, row.index_for_events, "units"),
                disabled=row.is_pending_removal,
                label_visibility="collapsed",
            )
        with delete_col:
            st.button(
                "✕",
                key=_key("delete", row.entry_id),
                help="Remove capper",
                on_click=self._request_delete,
                args=(row.entry_id,),
                disabled=row.is_pending_removal,
            )
        if row.is_pending_removal:
            st.caption(f"~~{row.name}~~ removing…")
        elif not row.is_nonnegative:
            units_col.caption(":red[UNITS]")
        else:
            units_col.caption(":green[UNITS]")

    @staticmethod
    def draw_total(view: RankedView) -> None:
        # Only strictly negative totals are flagged; "+0.00" stays neutral.
        st.metric(
            "Total units",
            view.total_display,
            delta="negative week" if view.total_is_negative else None,
            delta_color="inverse" if view.total_is_negative else "off",
        )

    def finish_pending_deletes(self, delay: float = DELETE_DELAY_SECONDS) -> bool:
        """Remove rows flagged for deletion once the exit pause has passed."""
        pending = self.store.pending_ids()
        if not pending:
            return False
        time.sleep(delay)
        for entry_id in pending:
            removed = self.store.complete_delete(entry_id)
            logger.info("Removed capper %s", removed.name)
        return True


def get_store() -> LeaderboardStore:
    """One store per browser session, seeded on first use."""
    if STORE_KEY not in st.session_state:
        renderer = StreamlitRenderer()
        store = LeaderboardStore(SEED_CAPPERS, renderer=renderer)
        renderer.store = store
        st.session_state[STORE_KEY] = store
    return st.session_state[STORE_KEY]


def get_renderer() -> StreamlitRenderer:
    return get_store().renderer
