import json
import logging
from decimal import Decimal

import pytest

from utils.recap_io import export_recap, import_recap, leaderboard_csv, leaderboard_frame
from utils.store import LeaderboardStore


def test_export_shape(store):
    data = json.loads(export_recap(store, "2026-10-12", "2026-10-18"))
    assert data["startDate"] == "2026-10-12"
    assert data["endDate"] == "2026-10-18"
    assert data["cappers"] == [
        {"name": "@MarshyPicks", "role": "Lead Analyst", "units": 173.27},
        {"name": "@Capper06", "role": "NHL Expert", "units": -2.37},
        {"name": "@Capper07", "role": "Tennis Analyst", "units": -2.45},
    ]
    assert data["total"] == 168.45


def test_export_is_pretty_printed(store):
    assert export_recap(store).startswith('{\n  "startDate": ""')


def test_export_then_import_keeps_leaderboard(store):
    payload = export_recap(store, "2026-10-12", "2026-10-18")
    other = LeaderboardStore()
    result = import_recap(other, payload)
    assert result.loaded
    assert result.capper_count == 3
    assert (result.start_date, result.end_date) == ("2026-10-12", "2026-10-18")
    assert [(r.name, r.units) for r in other.view.rows] == [(r.name, r.units) for r in store.view.rows]
    assert other.total == Decimal("168.45")


def test_import_coerces_capper_fields(renderer):
    store = LeaderboardStore(renderer=renderer)
    payload = json.dumps({"cappers": [
        {"name": "@Text", "role": None, "units": "+4.5u"},
        {"name": 7, "units": "junk"},
        {"role": "Props", "units": 1e2},
    ]})
    import_recap(store, payload)
    assert [(r.name, r.role, r.units) for r in store.view.rows] == [
        ("", "Props", Decimal("100.0")),
        ("@Text", "", Decimal("4.5")),
        ("7", "", Decimal("0")),
    ]


def test_import_accepts_bytes(store):
    result = import_recap(store, b'\xef\xbb\xbf{"cappers": []}')
    assert result.loaded
    assert store.is_empty


def test_import_without_cappers_list_keeps_entries(store):
    before = store.entries
    result = import_recap(store, '{"startDate": "2026-10-01", "cappers": "nope"}')
    assert not result.loaded
    assert result.start_date == "2026-10-01"
    assert result.end_date is None
    assert store.entries == before


@pytest.mark.parametrize("payload", [
    "{not json",
    "[1, 2, 3]",
    '{"cappers": [{"name": "@ok", "units": 1}, "@bad"]}',
    b"\xff\xfe\x00",
    None,
])
def test_malformed_payload_is_logged_and_discarded(store, renderer, caplog, payload):
    before = store.entries
    published = len(renderer.views)
    with caplog.at_level(logging.ERROR, logger="utils.recap_io"):
        assert import_recap(store, payload) is None
    assert store.entries == before
    assert len(renderer.views) == published
    assert "Failed to import recap" in caplog.text


def test_leaderboard_frame_and_csv(store):
    frame = leaderboard_frame(store.view)
    assert list(frame.columns) == ["rank", "name", "role", "units"]
    assert frame.iloc[0].tolist() == ["01", "@MarshyPicks", "Lead Analyst", "+173.27"]
    csv = leaderboard_csv(store.view).decode("utf-8").splitlines()
    assert csv[0] == "rank,name,role,units"
    assert csv[3] == "03,@Capper07,Tennis Analyst,-2.45"


def test_leaderboard_frame_empty():
    frame = leaderboard_frame(LeaderboardStore().view)
    assert frame.empty
    assert list(frame.columns) == ["rank", "name", "role", "units"]


def test_export_rounds_units_to_cents(renderer):
    store = LeaderboardStore([("@a", "", "1.005"), ("@b", "", "2")], renderer=renderer)
    data = json.loads(export_recap(store))
    assert [c["units"] for c in data["cappers"]] == [2, 1.01]
    assert data["total"] == 3.01


def test_large_units_survive_export_and_import():
    store = LeaderboardStore([("@huge", "", "12345678901234567.89"), ("@far", "", Decimal("1E+400"))])
    payload = export_recap(store)
    assert "Infinity" not in payload

    other = LeaderboardStore()
    import_recap(other, payload)
    assert [r.units for r in other.view.rows] == [r.units for r in store.view.rows]
    assert other.total == store.total
