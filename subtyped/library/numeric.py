"""
Scalar numeric refinements.

All checks are exact. Integrality is decided without floating-point
tolerance: a float is whole only if ``float.is_integer()`` says so,
rationals must have denominator 1, and decimals must equal their
integral value. Booleans are not numbers here even though Python
treats them as ints.
"""

from __future__ import annotations

import math
import numbers
from decimal import Decimal
from typing import Any, Optional

from ..predicates import Domain, Predicate, default_registry
from ..verified import Verified, ensure_verified, unwrap


# =============================================================================
# CONFIGURATION CONSTANTS
# =============================================================================

POSITIVE_THRESHOLD = 1
HIGH_NUMBER_THRESHOLD = 100


# =============================================================================
# HELPERS
# =============================================================================

def is_number(x: Any) -> bool:
    """True for real numbers and decimals, false for bools and everything else."""
    if isinstance(x, bool):
        return False
    return isinstance(x, (numbers.Real, Decimal))


def is_integral(x: Any) -> bool:
    """True if ``x`` is a number equal to its own floor, checked exactly."""
    if isinstance(x, bool):
        return False
    if isinstance(x, numbers.Integral):
        return True
    if isinstance(x, numbers.Rational):
        return x.denominator == 1
    if isinstance(x, float):
        return x.is_integer()
    if isinstance(x, Decimal):
        return x.is_finite() and x == x.to_integral_value()
    return False


# =============================================================================
# PREDICATES
# =============================================================================

@default_registry.predicate("non_negative_integer")
def is_non_negative_integer(x: Any) -> bool:
    """Integral and not below zero."""
    return is_integral(x) and not (x < 0)


@default_registry.predicate("whole_number")
def is_whole_number(x: Any) -> bool:
    """Equal to its own floor, with no tolerance."""
    return is_integral(x)


@default_registry.predicate("prime")
def is_prime(n: Any) -> bool:
    """Integral, at least 2, and with no divisor in [2, isqrt(n)]."""
    if not is_integral(n) or n < 2:
        return False
    n = int(n)
    for d in range(2, math.isqrt(n) + 1):
        if n % d == 0:
            return False
    return True


@default_registry.predicate("never")
def is_never(x: Any) -> bool:
    """Holds for nothing; no value of this refinement can exist."""
    return False


def at_least(threshold: Any, name: Optional[str] = None) -> Predicate:
    """
    Build an "at least N" predicate.

    The result is not registered; pass it to ``verify`` directly or to
    ``PredicateRegistry.register``.
    """
    def check(x: Any) -> bool:
        return is_number(x) and x >= threshold

    return Predicate(
        name=name or f"at_least_{threshold}",
        check=check,
        domain=Domain.SCALAR,
        description=f"A number no smaller than {threshold}",
    )


positive_number = default_registry.register(at_least(POSITIVE_THRESHOLD, "positive_number"))
high_number = default_registry.register(at_least(HIGH_NUMBER_THRESHOLD, "high_number"))


# =============================================================================
# TRUSTED OPERATIONS
# =============================================================================

def repeat(s: str, times: Verified) -> str:
    """
    Repeat ``s`` a verified non-negative integer number of times.

    Raises:
        UnverifiedValueError: If ``times`` is not verified as non_negative_integer
    """
    count = unwrap(ensure_verified(times, "non_negative_integer"))
    return s * int(count)
