"""
Month/day refinement — a dependent pair.

The valid range of the day depends on the value of the month, so the
day stage reads the month that precedes it. Leap years are not
modelled: February always has 28 days.
"""

from __future__ import annotations

from typing import Any

from ..predicates import Domain, Stage, default_registry
from ..verified import Verified, ensure_verified, unwrap
from .numeric import is_integral


# =============================================================================
# CONFIGURATION CONSTANTS
# =============================================================================

MONTHS = (
    "January", "February", "March", "April", "May", "June",
    "July", "August", "September", "October", "November", "December",
)

FEBRUARY_DAYS = 28

THIRTY_ONE_DAY_MONTHS = frozenset({
    "January", "March", "May", "July", "August", "October", "December",
})


def days_in_month(month: str) -> int:
    """Upper day bound for a month name. February is fixed at 28."""
    if month == "February":
        return FEBRUARY_DAYS
    if month in THIRTY_ONE_DAY_MONTHS:
        return 31
    return 30


# =============================================================================
# STAGES
# =============================================================================

def _is_month(context: tuple, month: Any) -> bool:
    return isinstance(month, str) and month in MONTHS


def _is_day_in_month(context: tuple, day: Any) -> bool:
    (month,) = context
    return is_integral(day) and 1 <= day <= days_in_month(month)


month_day = default_registry.dependent(
    "month_day",
    [
        Stage("month", 0, _is_month),
        Stage("day_in_month", 1, _is_day_in_month),
    ],
    domain=Domain.TUPLE,
    description="A (month name, day) pair naming a real calendar day",
)


# =============================================================================
# TRUSTED OPERATIONS
# =============================================================================

def day_of_year(pair: Verified) -> int:
    """
    Ordinal day of a verified month/day pair in a 365-day year.

    Raises:
        UnverifiedValueError: If ``pair`` is not verified as month_day
    """
    month, day = unwrap(ensure_verified(pair, "month_day"))
    preceding = sum(days_in_month(m) for m in MONTHS[:MONTHS.index(month)])
    return preceding + int(day)
