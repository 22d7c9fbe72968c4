"""Constants and defaults.

Note: Keep constants here to avoid magic numbers spread across code.
"""

DEFAULT_SUMMARY_DAYS = 30
MAX_RANGE_DAYS = 366
DEFAULT_SESSION_LOG_LIMIT = 200
DEFAULT_REPORT_LIMIT = 500
MAX_ENROLL_BATCH = 500
