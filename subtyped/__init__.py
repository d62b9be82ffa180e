# subtyped
# Runtime-verified refinement values

"""
Core invariant: a Verified value under a predicate exists only if that
predicate held for its base value when it was created.

    outcome = verify("prime", 13)
    if outcome:
        unwrap(outcome)   # 13, carrying the proof

Importing this package registers the reference library of predicates
in ``default_registry``.
"""

from .predicates import (
    DependentPredicate,
    Domain,
    Predicate,
    PredicateRegistry,
    Stage,
    UnknownPredicateError,
    default_registry,
)
from .verified import (
    Outcome,
    Unverified,
    UnverifiedValueError,
    Verified,
    VerificationError,
    ensure_verified,
    unwrap,
)
from .validation import (
    StagedComposite,
    begin,
    check,
    evaluate,
    evaluate_composite,
    verify,
    verify_all,
)
from .narrowing import (
    first_verified,
    is_unverified,
    is_verified,
    partition,
    refine,
    require,
)
from . import library

__version__ = "0.1.0"

__all__ = [
    "DependentPredicate",
    "Domain",
    "Outcome",
    "Predicate",
    "PredicateRegistry",
    "Stage",
    "StagedComposite",
    "UnknownPredicateError",
    "Unverified",
    "UnverifiedValueError",
    "Verified",
    "VerificationError",
    "begin",
    "check",
    "default_registry",
    "ensure_verified",
    "evaluate",
    "evaluate_composite",
    "first_verified",
    "is_unverified",
    "is_verified",
    "library",
    "partition",
    "refine",
    "require",
    "unwrap",
    "verify",
    "verify_all",
]
