"""Constants and defaults.

Note: Keep constants here to avoid magic numbers spread across code.
"""

TIME_FORMAT = "%H:%M"
DATE_FORMAT = "%Y-%m-%d"
DATETIME_FORMAT = "%Y-%m-%dT%H:%M:%S"

DEFAULT_LIST_LIMIT = 200
MIN_PASSWORD_LENGTH = 6
