"""Constants for trayplan.

This module centralizes the string conventions shared with task readers and the
default values used throughout the application.
"""


# Generated task title markers. Readers match these case-insensitively, so they
# must not change.
SUMMARY_TITLE_PREFIX = "SYS:"
DETAIL_TITLE_PREFIX = "SYS:DETAIL:"

# Separators used when rendering detail titles
DETAIL_SEPARATOR = " — "
DELIVERY_BULLET = " • "
ITEM_SEPARATOR = ", "
PAIR_ARROW = " → "

# Fallback display names for orders whose joins are missing
DEFAULT_VARIETY_NAME = "Variety"
DEFAULT_CUSTOMER_NAME = "Customer"

# Default and maximum sync window (days)
TASK_BOARD_SYNC_DAYS = 7
MAX_SYNC_DAYS = 366
