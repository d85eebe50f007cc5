"""Constants and defaults.

Note: Keep constants here to avoid magic numbers spread across code.
"""

DEFAULT_DLB_TIMEOUT_SECONDS = 30
DEFAULT_BRIGADE_ID = 1

DEFAULT_HOLIDAY_REGION = "auckland"
DEFAULT_TRAINING_WEEKDAY = 0  # Monday
DEFAULT_TRAINING_TIME = "19:00"
DEFAULT_TRAINING_DURATION_HOURS = 2
DEFAULT_GENERATE_MONTHS_AHEAD = 12
TRAINING_EVENT_TITLE = "Training Night"

FULL_SYNC_MONTHS = 12
INCREMENTAL_SYNC_FALLBACK_MONTHS = 3

STATS_WINDOW_MONTHS = 12
TRAINING_THRESHOLD_PERCENT = 20
CALLOUT_THRESHOLD_PERCENT = 60
DEFAULT_RECENT_EVENTS_LIMIT = 10
