"""Constants and defaults.

Note: Keep constants here to avoid magic numbers spread across code.
"""

ACTIVITY_LOG_LIMIT = 50
DEFAULT_RECENT_ACTIVITIES = 10
REPORT_RECENT_ACTIVITIES = 20
TOP_ROUTES_LIMIT = 5

MIN_PASSWORD_LENGTH = 6

DEFAULT_LOCATION_POLL_SECONDS = 5.0
DEFAULT_LOCATION_HISTORY_LIMIT = 10
DEMO_LOCATION_JITTER = 0.01

DEMO_BUS_PREFIX = "demo-"
