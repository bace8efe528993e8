"""Constants and defaults.

Note: Keep constants here to avoid magic numbers spread across code.
"""

# A school day without a record counts as attended (teachers mark only exceptions).
UNMARKED_COUNTS_AS_PRESENT = True

ADMIN_EDIT_WINDOW_DAYS = 31
DEFAULT_ACADEMIC_YEAR_START_MONTH = 4

MIN_STANDARD = 1
TERMINAL_STANDARD = 12

PROMOTION_CONFLICT_RETRIES = 1
MESSAGE_HISTORY_LIMIT = 100
