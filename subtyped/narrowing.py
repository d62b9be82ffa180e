"""
Narrowing helpers for subtyped.

An outcome decides, for the rest of the caller's scope, whether a base
value may be treated as verified. These helpers make both branches
explicit:

    outcome = verify("non_empty", xs)
    if not outcome:
        return None         # negated branch: xs stays unverified
    head(outcome)           # only reachable with the proof

``if is_unverified(o): return`` followed by the verified code is
equivalent to ``if is_verified(o): ...``. ``require`` is the same
early-exit shape expressed as an exception.
"""

from __future__ import annotations

from typing import Any, Callable, Iterable, Optional, TypeGuard, TypeVar, Union

from .predicates import AnyPredicate, PredicateRegistry, default_registry
from .validation import verify
from .verified import Outcome, Unverified, Verified, VerificationError

R = TypeVar("R")


def is_verified(outcome: Outcome) -> TypeGuard[Verified]:
    return isinstance(outcome, Verified)


def is_unverified(outcome: Outcome) -> TypeGuard[Unverified]:
    return isinstance(outcome, Unverified)


def require(
    predicate: Union[str, AnyPredicate],
    value: Any,
    registry: PredicateRegistry = default_registry,
) -> Verified:
    """
    Verify or leave the current scope.

    Raises:
        VerificationError: If the predicate does not hold
    """
    outcome = verify(predicate, value, registry)
    if isinstance(outcome, Unverified):
        raise VerificationError(outcome.predicate, outcome.reason, outcome.value)
    return outcome


def refine(
    predicate: Union[str, AnyPredicate],
    value: Any,
    on_verified: Callable[[Verified], R],
    on_unverified: Optional[Callable[[Unverified], R]] = None,
    registry: PredicateRegistry = default_registry,
) -> Optional[R]:
    """
    Run exactly one branch for ``value``.

    Returns whatever the chosen callback returns, or None when the value
    is unverified and no ``on_unverified`` is given.
    """
    outcome = verify(predicate, value, registry)
    if isinstance(outcome, Verified):
        return on_verified(outcome)
    if on_unverified is None:
        return None
    return on_unverified(outcome)


def partition(
    predicate: Union[str, AnyPredicate],
    values: Iterable[Any],
    registry: PredicateRegistry = default_registry,
) -> tuple[list[Verified], list[Unverified]]:
    """Split values into those that verified and those that did not."""
    verified: list[Verified] = []
    rejected: list[Unverified] = []
    for value in values:
        outcome = verify(predicate, value, registry)
        if isinstance(outcome, Unverified):
            rejected.append(outcome)
            continue
        verified.append(outcome)
    return verified, rejected


def first_verified(
    predicate: Union[str, AnyPredicate],
    values: Iterable[Any],
    registry: PredicateRegistry = default_registry,
) -> Optional[Verified]:
    """Return the first value that verifies, or None. Stops at the first hit."""
    for value in values:
        outcome = verify(predicate, value, registry)
        if outcome:
            return outcome
    return None
