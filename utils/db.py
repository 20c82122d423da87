"""
Snapshot storage for saved weekly recaps.

- Uses SQLAlchemy; local runs default to SQLite, deployments can point DB_URL at Postgres.
- Reads the connection string via config.db_url() (env RECAP_DB_URL, then st.secrets["DB_URL"]).
- Each snapshot stores the JSON produced by utils.recap_io.export_recap.
- All functions return plain Python types (dicts, lists, ints) to be pandas/Streamlit-friendly.
"""

from __future__ import annotations

import json
import logging
from datetime import datetime, timezone
from typing import Any, Dict, List, Optional

from sqlalchemy import create_engine, text
from sqlalchemy.engine import Engine, Result

from config import db_url

logger = logging.getLogger(__name__)


# ----------------------------
# Engine / Connection helpers
# ----------------------------

_engine: Optional[Engine] = None


def get_engine() -> Engine:
    """Create (or reuse) a global SQLAlchemy engine."""
    global _engine
    if _engine is not None:
        return _engine

    url = db_url()
    if url.startswith("sqlite"):
        _engine = create_engine(url, future=True)
    else:
        _engine = create_engine(
            url,
            pool_pre_ping=True,
            pool_size=5,
            max_overflow=5,
            future=True,
        )
    return _engine


def reset_engine() -> None:
    """Dispose of the cached engine so the next call re-reads the URL."""
    global _engine
    if _engine is not None:
        _engine.dispose()
    _engine = None


def _fetchall(query: str, params: Optional[Dict[str, Any]] = None) -> List[Dict[str, Any]]:
    """Run a SELECT and return list of dicts."""
    eng = get_engine()
    with eng.connect() as conn:
        result: Result = conn.execute(text(query), params or {})
        return [dict(r) for r in result.mappings().all()]


def _fetchone(query: str, params: Optional[Dict[str, Any]] = None) -> Optional[Dict[str, Any]]:
    """Run a SELECT and return a single dict or None."""
    eng = get_engine()
    with eng.connect() as conn:
        result: Result = conn.execute(text(query), params or {})
        row = result.mappings().first()
        return dict(row) if row else None


def _execute(query: str, params: Optional[Dict[str, Any]] = None) -> int:
    """Run an INSERT/UPDATE/DELETE in a transaction and return the affected row count."""
    eng = get_engine()
    with eng.begin() as conn:
        return conn.execute(text(query), params or {}).rowcount


# ----------------------------
# Schema init
# ----------------------------

def init_db() -> None:
    """Create the snapshots table if it doesn't exist."""
    eng = get_engine()
    id_column = "SERIAL PRIMARY KEY" if eng.dialect.name == "postgresql" else "INTEGER PRIMARY KEY AUTOINCREMENT"
    ddl = f"""
    CREATE TABLE IF NOT EXISTS recap_snapshots (
        id {id_column},
        title TEXT,
        start_date TEXT,
        end_date TEXT,
        payload TEXT NOT NULL,   -- export_recap JSON
        total TEXT,              -- display string, e.g. "+168.45"
        created_at TEXT          -- ISO datetime string (UTC)
    );
    """
    with eng.begin() as conn:
        conn.execute(text(ddl))


# ----------------------------
# Snapshots
# ----------------------------

def save_snapshot(title: str, payload: str, total_display: str = "") -> int:
    """Store one export_recap payload and return the new snapshot id."""
    data = json.loads(payload)
    eng = get_engine()
    with eng.begin() as conn:
        result: Result = conn.execute(
            text(
                """
                INSERT INTO recap_snapshots (title, start_date, end_date, payload, total, created_at)
                VALUES (:title, :start_date, :end_date, :payload, :total, :created_at)
                RETURNING id;
                """
            ),
            {
                "title": (title or "").strip() or "Untitled recap",
                "start_date": data.get("startDate") or None,
                "end_date": data.get("endDate") or None,
                "payload": payload,
                "total": total_display,
                "created_at": datetime.now(timezone.utc).isoformat(),
            },
        )
        snapshot_id = int(result.scalar_one())
    logger.info("Saved recap snapshot %d (%s)", snapshot_id, title)
    return snapshot_id


def list_snapshots() -> List[Dict[str, Any]]:
    """Newest first. Columns: id, title, start_date, end_date, total, created_at"""
    return _fetchall(
        """
        SELECT id, title, start_date, end_date, total, created_at
        FROM recap_snapshots
        ORDER BY created_at DESC, id DESC;
        """
    )


def get_snapshot(snapshot_id: int) -> Optional[Dict[str, Any]]:
    return _fetchone(
        """
        SELECT id, title, start_date, end_date, payload, total, created_at
        FROM recap_snapshots
        WHERE id = :id;
        """,
        {"id": int(snapshot_id)},
    )


def delete_snapshot(snapshot_id: int) -> bool:
    deleted = _execute("DELETE FROM recap_snapshots WHERE id = :id;", {"id": int(snapshot_id)}) > 0
    if deleted:
        logger.info("Deleted recap snapshot %d", snapshot_id)
    return deleted
