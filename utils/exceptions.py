# utils/exceptions.py
"""
Exceptions for the recap leaderboard.

Each error carries a developer-facing message plus a short ``user_message``
that the pages can show without leaking internals.
"""
from typing import Optional


class LeaderboardError(Exception):
    """Base exception for leaderboard errors."""
    def __init__(self, message: str, user_message: Optional[str] = None):
        super().__init__(message)
        self.user_message = user_message or message


class MalformedNumericInput(LeaderboardError):
    """Raised when units text has no readable number in it."""
    def __init__(self, raw_text: str):
        super().__init__(
            f"No number found in units input {raw_text!r}",
            "Units must be a number like +4.50 or -2.37.",
        )
        self.raw_text = raw_text


class InvalidIndex(LeaderboardError):
    """Raised when an intent points at a row that is not in the current view."""
    def __init__(self, index, size: int):
        super().__init__(
            f"Row {index!r} is outside the current view of {size} entries",
            "That row no longer exists. Refresh the leaderboard and try again.",
        )
        self.index = index
        self.size = size


class UnknownField(LeaderboardError):
    """Raised when an edit names a field other than name, role or units."""
    def __init__(self, field: str):
        super().__init__(f"Unknown entry field {field!r}", "That field can't be edited.")
        self.field = field


class PendingRemoval(LeaderboardError):
    """Raised when an entry that is being removed gets edited."""
    def __init__(self, entry_id: str):
        super().__init__(
            f"Entry {entry_id} is pending removal",
            "This capper is being removed.",
        )
        self.entry_id = entry_id


class MalformedImportPayload(LeaderboardError):
    """Raised when an imported recap can't be read."""
    def __init__(self, details: str):
        super().__init__(
            f"Malformed recap payload: {details}",
            "That file doesn't look like a recap export.",
        )
