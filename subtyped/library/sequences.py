"""Sequence refinements."""

from __future__ import annotations

from collections.abc import Sequence
from typing import Any, TypeVar

from ..predicates import Domain, default_registry
from ..verified import Verified, ensure_verified, unwrap

T = TypeVar("T")


@default_registry.predicate("non_empty", domain=Domain.SEQUENCE)
def is_non_empty(xs: Any) -> bool:
    """A sequence holding at least one element."""
    return isinstance(xs, Sequence) and len(xs) >= 1


def head(xs: Verified[Sequence[T]]) -> T:
    """
    First element of a sequence proven non-empty.

    Total on its domain: there is no empty case to handle.

    Raises:
        UnverifiedValueError: If ``xs`` carries no non_empty proof
    """
    return unwrap(ensure_verified(xs, "non_empty"))[0]


def last(xs: Verified[Sequence[T]]) -> T:
    """Last element of a sequence proven non-empty."""
    return unwrap(ensure_verified(xs, "non_empty"))[-1]
