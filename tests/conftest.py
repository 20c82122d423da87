import os
import sys

import pytest

sys.path.insert(0, os.path.join(os.path.dirname(__file__), ".."))

from utils import db
from utils.store import LeaderboardStore


class RecordingRenderer:
    """Keeps every view the store publishes."""

    def __init__(self):
        self.views = []

    def render(self, view):
        self.views.append(view)

    @property
    def last(self):
        return self.views[-1]


@pytest.fixture
def renderer():
    return RecordingRenderer()


@pytest.fixture
def scenario_seed():
    return [
        ("@MarshyPicks", "Lead Analyst", "173.27"),
        ("@Capper06", "NHL Expert", "-2.37"),
        ("@Capper07", "Tennis Analyst", "-2.45"),
    ]


@pytest.fixture
def store(renderer, scenario_seed):
    return LeaderboardStore(scenario_seed, renderer=renderer)


@pytest.fixture
def sqlite_url(tmp_path, monkeypatch):
    url = f"sqlite:///{tmp_path / 'recaps.db'}"
    monkeypatch.setenv("RECAP_DB_URL", url)
    db.reset_engine()
    yield url
    db.reset_engine()
