# utils/recap_io.py
"""
Import/export of a recap as plain JSON, plus the tabular projection used for
display and CSV download.

Export shape:
    {"startDate": "...", "endDate": "...",
     "cappers": [{"name": ..., "role": ..., "units": 4.38}, ...],
     "total": 168.45}
"""

import json
import logging
from dataclasses import dataclass
from decimal import Decimal
from typing import Any, Dict, List, Optional

import pandas as pd

from utils.exceptions import MalformedImportPayload
from utils.units import round_cents, to_units

logger = logging.getLogger(__name__)

FRAME_COLUMNS = ["rank", "name", "role", "units"]


@dataclass(frozen=True)
class RecapImport:
    start_date: Optional[str]
    end_date: Optional[str]
    loaded: bool          # False when the payload had no cappers list
    capper_count: int = 0


def _number(value: Decimal):
    """
    Units as written to JSON: rounded to cents like the page shows them.

    Whole values are ints, other values floats when the float holds the cents
    exactly. Anything a float can't hold (huge or beyond float range) is written
    as its decimal text, which import_recap reads back unchanged.
    """
    cents = round_cents(value)
    if cents == cents.to_integral_value():
        return int(cents)
    as_float = float(cents)
    if Decimal(repr(as_float)) == cents:
        return as_float
    return str(cents)


def recap_dict(store, start_date: str = "", end_date: str = "") -> Dict[str, Any]:
    return {
        "startDate": start_date or "",
        "endDate": end_date or "",
        "cappers": [
            {"name": row.name, "role": row.role, "units": _number(row.units)}
            for row in store.view.rows
        ],
        "total": _number(store.total),
    }


def export_recap(store, start_date: str = "", end_date: str = "") -> str:
    return json.dumps(recap_dict(store, start_date, end_date), indent=2, allow_nan=False)


def _read_payload(payload) -> Dict[str, Any]:
    if isinstance(payload, bytes):
        try:
            payload = payload.decode("utf-8-sig")
        except UnicodeDecodeError as e:
            raise MalformedImportPayload(f"not UTF-8 ({e})") from e
    try:
        data = json.loads(payload, parse_float=Decimal)
    except (TypeError, ValueError) as e:
        raise MalformedImportPayload(str(e)) from e
    if not isinstance(data, dict):
        raise MalformedImportPayload(f"expected an object, got {type(data).__name__}")
    return data


def _coerce_cappers(items: List[Any]) -> List[Dict[str, Any]]:
    cappers = []
    for i, item in enumerate(items):
        if not isinstance(item, dict):
            raise MalformedImportPayload(f"capper #{i + 1} is not an object")
        cappers.append({
            "name": "" if item.get("name") is None else str(item["name"]),
            "role": "" if item.get("role") is None else str(item["role"]),
            "units": to_units(item.get("units")),
        })
    return cappers


def import_recap(store, payload) -> Optional[RecapImport]:
    """
    Load a recap export into the store.

    Entries are replaced only when the payload carries a "cappers" list. A payload
    that can't be read is discarded: the store is left as it was, the problem is
    logged for the operator and None is returned.
    """
    try:
        data = _read_payload(payload)
        cappers = data.get("cappers")
        rows = _coerce_cappers(cappers) if isinstance(cappers, list) else None
    except MalformedImportPayload as e:
        logger.error("Failed to import recap: %s", e)
        return None

    start_date = str(data["startDate"]) if data.get("startDate") else None
    end_date = str(data["endDate"]) if data.get("endDate") else None
    if rows is None:
        logger.info("Recap payload has no cappers list; entries left unchanged")
        return RecapImport(start_date=start_date, end_date=end_date, loaded=False)

    store.initialize(rows)
    logger.info("Imported recap with %d cappers", len(rows))
    return RecapImport(start_date=start_date, end_date=end_date, loaded=True, capper_count=len(rows))


def leaderboard_frame(view) -> pd.DataFrame:
    """Ranked view as a DataFrame: rank, name, role, units (display text)."""
    if view.is_empty:
        return pd.DataFrame(columns=FRAME_COLUMNS)
    return pd.DataFrame(
        [[row.rank, row.name, row.role, row.units_display] for row in view.rows],
        columns=FRAME_COLUMNS,
    )


def leaderboard_csv(view) -> bytes:
    return leaderboard_frame(view).to_csv(index=False).encode("utf-8")
