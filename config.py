# config.py
import os

# --- EDIT THESE FOR YOUR RECAP ---
APP_TITLE = "OGTT Weekly Recap"

# Starting leaderboard: (name, role, units)
SEED_CAPPERS = [
    ("@MarshyPicks", "Lead Analyst", "173.27"),
    ("@Capper01", "NBA Specialist", "19.37"),
    ("@Capper02", "NFL Expert", "8.67"),
    ("@Capper03", "MMA Specialist", "4.62"),
    ("@Capper04", "Props Expert", "4.38"),
    ("@Capper05", "Soccer Analyst", "1.59"),
    ("@Capper06", "NHL Expert", "-2.37"),
    ("@Capper07", "Tennis Analyst", "-2.45"),
]

# What "Add Capper" creates
NEW_CAPPER = {"name": "@NewCapper", "role": "Specialist", "units": "0"}

TOP_TIER_SIZE = 3   # Ranks highlighted as top tier
RANK_WIDTH = 2      # "01", "02", ...

# Pause between clicking delete and the row disappearing
DELETE_DELAY_SECONDS = 0.3

EMPTY_STATE_MESSAGE = 'No cappers added yet. Click "Add Capper" to get started.'

LOG_LEVEL = os.getenv("RECAP_LOG_LEVEL", "INFO").upper()

DEFAULT_DB_URL = "sqlite:///recaps.db"


def db_url() -> str:
    """Snapshot database URL: env var, then Streamlit secrets, then local SQLite."""
    env_url = os.getenv("RECAP_DB_URL")
    if env_url:
        return env_url
    try:
        import streamlit as st
        secret_url = st.secrets.get("DB_URL")
    except Exception:
        # No secrets.toml outside a configured Streamlit deployment
        secret_url = None
    return secret_url or DEFAULT_DB_URL
