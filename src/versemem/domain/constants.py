"""Centralized constants for versemem.

Scheduling numbers and defaults live here so every layer
imports from a single source of truth.
"""

# ---------- SM-2 ----------
INITIAL_EASE_FACTOR = 2.5
MIN_EASE_FACTOR = 1.3
MIN_QUALITY = 0
MAX_QUALITY = 5
PASSING_QUALITY = 3
FIRST_INTERVAL_DAYS = 1
SECOND_INTERVAL_DAYS = 6
LAPSE_INTERVAL_DAYS = 1
# Growth stops here (about 100 years), keeping due dates representable.
MAX_INTERVAL_DAYS = 36500

# ---------- Ratings ----------
# Button names used by the practice views.
RATING_NAMES = {
    "again": 0,
    "hard": 2,
    "good": 4,
    "easy": 5,
}

# ---------- Classification ----------
MASTERY_REPETITIONS = 10

# ---------- Items ----------
DEFAULT_TRANSLATION = "NIV"
ITEM_ID_PREFIX = "verse_"

# ---------- Sessions ----------
DEFAULT_MAX_SESSION_SIZE = 50
