# app.py
import logging
from datetime import date, timedelta

import streamlit as st

from config import APP_TITLE, LOG_LEVEL
from utils import db
from utils.recap_io import export_recap, leaderboard_csv
from utils.render import get_renderer, get_store
from utils.store import BulkLoadRequested

logging.basicConfig(
    format="%(asctime)s - %(name)s - [%(levelname)s] %(message)s", level=LOG_LEVEL
)
logger = logging.getLogger(__name__)

st.set_page_config(page_title=APP_TITLE, page_icon="📈", layout="wide")


def _as_date(value):
    if not value:
        return None
    try:
        return date.fromisoformat(str(value)[:10])
    except ValueError:
        logger.warning("Ignoring recap date %r", value)
        return None


def apply_pending_dates():
    """Copy dates from an import (or a loaded snapshot) into the date pickers."""
    pending = st.session_state.pop("pending_dates", None)
    if pending:
        start, end = (_as_date(d) for d in pending)
        if start:
            st.session_state["start_date"] = start
        if end:
            st.session_state["end_date"] = end
    st.session_state.setdefault("end_date", date.today())
    st.session_state.setdefault("start_date", st.session_state["end_date"] - timedelta(days=6))


def add_capper():
    store = get_store()
    entry_id = store.add_entry()
    st.session_state["new_entry_id"] = entry_id


def import_uploaded():
    """Import the uploaded file, or the pasted JSON when no file is chosen."""
    upload = st.session_state.get("import_file")
    payload = upload.getvalue() if upload is not None else st.session_state.get("import_text", "")
    if not payload:
        st.session_state["import_status"] = ("warning", "Choose a file or paste a recap first.")
        return
    result = get_store().dispatch(BulkLoadRequested(payload))
    if result is None:
        st.session_state["import_status"] = ("error", "Couldn't read that recap. Nothing was changed.")
        return
    st.session_state["pending_dates"] = (result.start_date, result.end_date)
    if result.loaded:
        st.session_state["import_status"] = ("success", f"Loaded {result.capper_count} cappers.")
    else:
        st.session_state["import_status"] = ("warning", "No cappers in that file; only the dates were applied.")


def period_ui():
    c1, c2 = st.columns(2)
    with c1:
        st.date_input("Week start", key="start_date")
    with c2:
        st.date_input("Week end", key="end_date")


def leaderboard_ui():
    store = get_store()
    renderer = get_renderer()

    st.subheader("Leaderboard")
    if st.session_state.pop("new_entry_id", None):
        st.toast("Added @NewCapper. Give them a name below.")
    renderer.draw()
    st.button("➕ Add Capper", key="add_capper", on_click=add_capper, type="primary")

    if renderer.finish_pending_deletes():
        st.rerun()
    return store


def export_ui(store):
    st.subheader("Export / Import")
    start = st.session_state["start_date"].isoformat()
    end = st.session_state["end_date"].isoformat()

    c1, c2 = st.columns(2)
    with c1:
        st.download_button(
            "Download Recap (JSON)",
            export_recap(store, start, end),
            f"recap_{start}_{end}.json",
            "application/json",
        )
    with c2:
        st.download_button(
            "Download Leaderboard (CSV)",
            leaderboard_csv(store.view),
            f"leaderboard_{start}_{end}.csv",
            "text/csv",
        )

    st.file_uploader("Import a recap export", type=["json"], key="import_file")
    st.text_area("…or paste recap JSON", key="import_text", height=120)
    st.button("Import Recap", key="import_recap", on_click=import_uploaded)
    status = st.session_state.pop("import_status", None)
    if status:
        kind, message = status
        getattr(st, kind)(message)


def snapshot_ui(store):
    st.subheader("Save Snapshot")
    with st.form("snapshot"):
        title = st.text_input("Snapshot title", placeholder="Week 12 recap")
        submitted = st.form_submit_button("💾 Save Snapshot")
        if submitted:
            start = st.session_state["start_date"].isoformat()
            end = st.session_state["end_date"].isoformat()
            snapshot_id = db.save_snapshot(title, export_recap(store, start, end), store.view.total_display)
            st.success(f"Saved snapshot #{snapshot_id}. Find it under Saved Recaps.")


def main():
    db.init_db()

    st.title(APP_TITLE)
    st.caption("Edit names, roles and units in place · Rankings and the total update as you go")

    apply_pending_dates()
    period_ui()
    store = leaderboard_ui()

    st.divider()
    export_ui(store)
    st.divider()
    snapshot_ui(store)


if __name__ == "__main__":
    main()
