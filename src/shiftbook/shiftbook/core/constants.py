"""Constants and defaults.

Note: Keep constants here to avoid magic numbers spread across code.
"""

from datetime import date
from decimal import Decimal

OVERTIME_MULTIPLIER = Decimal("1.5")
WEEKLY_OVERTIME_THRESHOLD_HOURS = Decimal("40")
CENTS = Decimal("0.01")

DEFAULT_BREAK_MINUTES = 30
PAY_PERIOD_DAYS = 14
DEFAULT_PERIODS_PAST = 2
DEFAULT_PERIODS_FUTURE = 1

# Shift times are parsed as wall-clock times on this fixed day.
SHIFT_REFERENCE_DATE = date(2000, 1, 1)

DEFAULT_BULK_MAX_WORKERS = 4
