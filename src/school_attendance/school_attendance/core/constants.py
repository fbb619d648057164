"""Constants and defaults.

Note: Keep constants here to avoid magic numbers spread across code.
"""

POINTS_PRESENT = 10
POINTS_LATE = 5
POINTS_ADDITIONAL_TASK = 5

DEFAULT_LEADERBOARD_LIMIT = 5
LEADERBOARD_ALL_STAFF = "all"
LOW_ATTENDANCE_THRESHOLD = 50
DEFAULT_HISTORY_LIMIT = 30

DEFAULT_IMPORT_PASSWORD = "123456"
MIN_PASSWORD_LENGTH = 6
MAX_ROLE_LABEL_LENGTH = 100
