"""Centralized constants for kairos.

Scheduling policy numbers live here so the scheduler, the policies and the
interface layers all import from a single source of truth.
"""

# ---------- Easiness factor ----------
MIN_EASINESS = 1.3
MAX_EASINESS = 2.8
DEFAULT_EASINESS = 2.5
EASINESS_PRECISION = 2  # decimals kept when persisting

# ---------- Intervals (days) ----------
MIN_INTERVAL = 1
MAX_INTERVAL = 180  # ~6 months
FIRST_INTERVAL = 1
SECOND_INTERVAL = 6
LONG_TERM_INTERVAL = 30

# ---------- Quality gates ----------
MIN_QUALITY = 0
MAX_QUALITY = 5
PASSING_QUALITY = 3
STRENGTHENING_QUALITY = 4

# ---------- Time of day (inclusive hour windows) ----------
PEAK_WINDOWS = ((9, 11), (15, 17))
PEAK_BONUS = 0.10
PRE_SLEEP_WINDOW = (21, 23)
PRE_SLEEP_BONUS = 0.05
PREFERRED_REVIEW_HOUR = 10

# ---------- Checkpoints ----------
CHECKPOINT_EVERY = 3
