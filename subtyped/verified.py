"""
Verified Values — the proof-carrying wrapper for subtyped.

SYSTEM INVARIANT:
    A Verified value under predicate P exists only if P held for its
    underlying base value at the moment of its creation.

The wrapper holds a snapshot of the base value taken when the predicate
ran: equal in value and shape, and the same object whenever the value is
immutable. Later mutation of the caller's object cannot reach it, and
``unwrap`` hands out a fresh copy of mutable values. The only producer is the validation engine, which holds the
construction token below. Calling ``Verified(...)`` directly raises.

Python offers no truly private constructor: ``object.__new__`` plus
``object.__setattr__`` can still assemble one. That is a caller
discipline violation the library cannot prevent and does not try to
detect. Such values must never be built. Mutating ``Verified.value``
in place is the same kind of violation; read it through ``unwrap``.

Outcomes:
    Verified    — the predicate held; carries the proof
    Unverified  — the predicate did not hold; grants nothing
"""

from __future__ import annotations

import copy
from dataclasses import InitVar, dataclass, field
from typing import Any, Generic, Literal, Optional, TypeVar, Union

from .predicates import AnyPredicate, PredicateRegistry, default_registry

T = TypeVar("T")


# Only the validation engine imports this.
_CONSTRUCTION_TOKEN = object()


# =============================================================================
# ERRORS
# =============================================================================

class VerificationError(Exception):
    """Raised when a caller insists on a proof that could not be produced."""

    def __init__(self, predicate: str, reason: str, value: Any = None):
        self.predicate = predicate
        self.reason = reason
        self.value = value
        super().__init__(f"[{predicate}] {reason}")


class UnverifiedValueError(VerificationError, TypeError):
    """Raised when a trusted operation receives a value without a matching proof."""
    pass


# =============================================================================
# OUTCOMES
# =============================================================================

@dataclass(frozen=True)
class Verified(Generic[T]):
    """
    A base value together with the proof that a predicate held for it.

    Invariants enforced:
    1. Construction requires the engine's token
    2. ``value`` is the snapshot the predicate was run against
    3. The wrapper is immutable once built
    """
    value: T
    predicate: str
    proof: Optional[AnyPredicate] = field(default=None, repr=False, compare=False)
    _token: InitVar[object] = None

    def __post_init__(self, _token: object):
        """Refuse construction outside the validation engine."""
        if _token is not _CONSTRUCTION_TOKEN:
            raise TypeError(
                "Verified values can only be produced by subtyped.verify()"
            )

    @property
    def ok(self) -> Literal[True]:
        return True

    def __bool__(self) -> Literal[True]:
        return True

    def as_tuple(self) -> tuple[bool, Optional[Verified[T]]]:
        """Return the ``(ok, value)`` pair form of this outcome."""
        return True, self

    def expect(self) -> Verified[T]:
        return self


@dataclass(frozen=True)
class Unverified(Generic[T]):
    """
    The negative outcome: the predicate did not hold.

    This is a result, not an error. ``stage`` names the failing stage
    when the predicate was a dependent chain.
    """
    value: T
    predicate: str
    reason: str
    stage: Optional[str] = None

    @property
    def ok(self) -> Literal[False]:
        return False

    def __bool__(self) -> Literal[False]:
        return False

    def as_tuple(self) -> tuple[bool, Optional[Verified[T]]]:
        """Return the ``(ok, value)`` pair form of this outcome."""
        return False, None

    def expect(self) -> Verified[T]:
        """Raise, since there is no proof to hand out."""
        raise VerificationError(self.predicate, self.reason, self.value)


Outcome = Union[Verified[T], Unverified[T]]


def snapshot(value: T) -> T:
    """Value-equal copy that shares nothing mutable with ``value``."""
    return copy.deepcopy(value)


def _issue(value: T, proof: AnyPredicate) -> Verified[T]:
    """
    Mint a Verified value.

    ``value`` must be the snapshot ``proof`` was just run against.
    """
    return Verified(
        value=value,
        predicate=proof.name,
        proof=proof,
        _token=_CONSTRUCTION_TOKEN,
    )


# =============================================================================
# ACCESS
# =============================================================================

def unwrap(verified: Verified[T]) -> T:
    """
    Return the verified base value.

    Immutable values come back as the same object. Mutable ones come back
    as a fresh copy, so changing the result never touches the proof.
    """
    return snapshot(verified.value)


def ensure_verified(
    candidate: Any,
    predicate: str,
    registry: PredicateRegistry = default_registry,
) -> Verified:
    """
    Gate for trusted operations.

    The proof must come from the very predicate registered under
    ``predicate``; a different predicate object that merely shares the
    name is refused.

    Raises:
        UnverifiedValueError: If ``candidate`` is not a Verified value
            proven under ``predicate``
    """
    if isinstance(candidate, Unverified):
        raise UnverifiedValueError(
            predicate,
            f"value failed '{candidate.predicate}': {candidate.reason}",
            candidate.value,
        )
    if not isinstance(candidate, Verified):
        raise UnverifiedValueError(
            predicate,
            f"expected a value verified under '{predicate}', "
            f"got unverified {type(candidate).__name__}",
            candidate,
        )
    if candidate.predicate != predicate:
        raise UnverifiedValueError(
            predicate,
            f"value was verified under '{candidate.predicate}', not '{predicate}'",
            candidate.value,
        )
    if candidate.proof is not registry.get(predicate):
        raise UnverifiedValueError(
            predicate,
            f"value was verified by a predicate named '{predicate}' "
            f"that is not the registered one",
            candidate.value,
        )
    return candidate
