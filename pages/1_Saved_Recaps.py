# pages/1_🗂️_Saved_Recaps.py
import pandas as pd
import streamlit as st

from utils import db
from utils.recap_io import import_recap, leaderboard_frame
from utils.render import get_store
from utils.store import BulkLoadRequested, LeaderboardStore

st.set_page_config(page_title="Saved Recaps", page_icon="🗂️", layout="wide")


def preview(snapshot):
    scratch = LeaderboardStore()
    if import_recap(scratch, snapshot["payload"]) is None:
        st.error("This snapshot can't be read.")
        return
    st.markdown(f"**{snapshot['title']}** · {snapshot['start_date'] or '?'} → {snapshot['end_date'] or '?'}")
    st.dataframe(leaderboard_frame(scratch.view), use_container_width=True, hide_index=True)
    st.metric("Total units", scratch.view.total_display)


def load_into_editor(snapshot):
    result = get_store().dispatch(BulkLoadRequested(snapshot["payload"]))
    if result is None:
        st.error("This snapshot can't be read. The editor was left unchanged.")
        return
    st.session_state["pending_dates"] = (result.start_date, result.end_date)
    st.switch_page("app.py")


def main():
    st.title("🗂️ Saved Recaps")
    db.init_db()

    snapshots = db.list_snapshots()
    if not snapshots:
        st.info("No snapshots yet. Save one from the editor page.")
        return

    st.dataframe(pd.DataFrame(snapshots), use_container_width=True, hide_index=True)

    by_id = {s["id"]: s for s in snapshots}
    chosen = st.selectbox(
        "Snapshot",
        options=list(by_id),
        format_func=lambda i: f"#{i} · {by_id[i]['title']} ({by_id[i]['total']})",
    )
    snapshot = db.get_snapshot(chosen)
    if snapshot is None:
        st.warning("That snapshot was removed.")
        return

    st.divider()
    preview(snapshot)

    c1, c2 = st.columns(2)
    with c1:
        if st.button("Load into editor", type="primary", use_container_width=True):
            load_into_editor(snapshot)
    with c2:
        if st.button("🗑️ Delete snapshot", use_container_width=True):
            db.delete_snapshot(chosen)
            st.rerun()


if __name__ == "__main__":
    main()
