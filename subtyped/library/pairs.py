"""
Numeric and tagged pair refinements.

divisible       — (x, y) where y divides x exactly
tagged_payload  — (flag, payload): a number when flag is True, a bool otherwise

Divisibility is decided with exact rational arithmetic. Floats are
taken at their exact binary value, so (0.3, 0.1) is not divisible even
though the decimal literals suggest it. A zero divisor never divides.
"""

from __future__ import annotations

import math
from decimal import Decimal
from fractions import Fraction
from typing import Any, Optional

from ..predicates import Domain, Stage, default_registry
from ..verified import Verified, ensure_verified, unwrap
from .numeric import is_number


def as_fraction(x: Any) -> Optional[Fraction]:
    """Exact rational value of a finite number, or None."""
    if not is_number(x):
        return None
    if isinstance(x, float) and not math.isfinite(x):
        return None
    if isinstance(x, Decimal) and not x.is_finite():
        return None
    return Fraction(x)


# =============================================================================
# DIVISIBLE
# =============================================================================

def _is_dividend(context: tuple, x: Any) -> bool:
    return as_fraction(x) is not None


def _divides(context: tuple, y: Any) -> bool:
    divisor = as_fraction(y)
    if divisor is None or divisor == 0:
        return False
    (x,) = context
    return (as_fraction(x) / divisor).denominator == 1


divisible = default_registry.dependent(
    "divisible",
    [
        Stage("dividend", 0, _is_dividend),
        Stage("divides_exactly", 1, _divides),
    ],
    domain=Domain.TUPLE,
    description="A pair (x, y) where x / y is a whole number",
)


def quotient(pair: Verified) -> int:
    """
    Exact integer quotient of a verified divisible pair.

    Raises:
        UnverifiedValueError: If ``pair`` is not verified as divisible
    """
    x, y = unwrap(ensure_verified(pair, "divisible"))
    return int(as_fraction(x) / as_fraction(y))


# =============================================================================
# TAGGED PAYLOAD
# =============================================================================

def _is_flag(context: tuple, flag: Any) -> bool:
    return isinstance(flag, bool)


def _payload_matches_flag(context: tuple, payload: Any) -> bool:
    (flag,) = context
    if flag:
        return is_number(payload)
    return isinstance(payload, bool)


tagged_payload = default_registry.dependent(
    "tagged_payload",
    [
        Stage("flag", 0, _is_flag),
        Stage("payload_matches_flag", 1, _payload_matches_flag),
    ],
    domain=Domain.TUPLE,
    description="A pair whose second type depends on the first: (True, number) or (False, bool)",
)
