"""Constants and defaults.

Note: Keep constants here to avoid magic numbers spread across code.
"""

from decimal import Decimal

HALF_DAY_THRESHOLD_HOURS = Decimal("4.0")
DEFAULT_LIST_LIMIT = 200
DEFAULT_HISTORY_DAYS = 30
WEEK_DAYS = 7
UNASSIGNED_DEPARTMENT = "Unassigned"
