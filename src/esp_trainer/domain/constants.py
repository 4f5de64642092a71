"""Centralized constants for the ESP trainer.

All magic numbers and configuration defaults live here so every layer
imports from a single source of truth.
"""

# ---------- Decks ----------
DECK_TYPES = ("zener", "rws", "thoth", "playing")
DEFAULT_DECK = "zener"
SUIT_ONLY_SENTINEL = "suit-only"

# ---------- Statistics ----------
DEFAULT_WINDOW_SIZE = 20
DEFAULT_HEATMAP_MIN_POINTS = 3
PERCENT_DECIMALS = 2

# ---------- Time ----------
TIME_RANGE_DAYS = {"7d": 7, "30d": 30, "90d": 90, "all": 0}
DAY_NAMES = [
    "Sunday",
    "Monday",
    "Tuesday",
    "Wednesday",
    "Thursday",
    "Friday",
    "Saturday",
]
UNKNOWN_DAY = "Unknown"

# ---------- Storage ----------
DB_FILENAME = "telepathy.db"
PREFERENCES_FILENAME = "preferences.json"
GUESS_ID_PREFIX = "guess_"
