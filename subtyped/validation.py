"""
Validation Engine for subtyped.

This module runs predicates against candidate base values. It is the
only place Verified values are minted. The outcome is binary: the
predicate held, or the value is simply not convertible. There is no
"maybe" state and a negative outcome is never an exception.

Dependent predicates are evaluated left to right over the composite's
declared fields. Each stage sees the prefix before it. The first
failing stage ends the evaluation, so later stages never run against a
context they would be ill-defined for.
"""

from __future__ import annotations

import logging
from collections.abc import Mapping, Sequence
from dataclasses import dataclass, field
from typing import Any, Iterable, Optional, Union

from .predicates import (
    AnyPredicate,
    DependentPredicate,
    Domain,
    Predicate,
    PredicateRegistry,
    Stage,
    default_registry,
)
from .verified import Outcome, Unverified, _issue, snapshot

logger = logging.getLogger(__name__)


# =============================================================================
# CHECK RESULT
# =============================================================================

@dataclass(frozen=True)
class Check:
    """Result of running one predicate, with the reason when it did not hold."""
    held: bool
    reason: str = ""
    stage: Optional[str] = None


HELD = Check(held=True)


# =============================================================================
# SIMPLE PREDICATES
# =============================================================================

def _check_simple(predicate: Predicate, value: Any) -> Check:
    if predicate.check(value):
        return HELD
    return Check(held=False, reason=f"{value!r} does not satisfy '{predicate.name}'")


# =============================================================================
# DEPENDENT PREDICATES
# =============================================================================

def _split_fields(predicate: DependentPredicate, composite: Any) -> Optional[list[Any]]:
    """
    Pull the declared fields out of a composite, in stage order.

    Returns None when the composite does not have the expected shape.
    """
    if predicate.domain == Domain.TUPLE:
        if not isinstance(composite, Sequence) or isinstance(composite, (str, bytes)):
            return None
        if len(composite) != len(predicate.stages):
            return None
        return list(composite)

    if not isinstance(composite, Mapping):
        return None
    if any(key not in composite for key in predicate.fields):
        return None
    return [composite[key] for key in predicate.fields]


def _context_for(predicate: DependentPredicate, prefix: Sequence[Any]) -> Any:
    """Present a validated prefix the way stages expect it."""
    if predicate.domain == Domain.TUPLE:
        return tuple(prefix)
    return {stage.field: value for stage, value in zip(predicate.stages, prefix)}


def _run_stage(
    predicate: DependentPredicate,
    stage: Stage,
    prefix: Sequence[Any],
    value: Any,
) -> Check:
    if stage.check(_context_for(predicate, prefix), value):
        return HELD
    return Check(
        held=False,
        reason=f"field {stage.field!r}={value!r} fails stage '{stage.name}' of '{predicate.name}'",
        stage=stage.name,
    )


def _check_dependent(predicate: DependentPredicate, composite: Any) -> Check:
    values = _split_fields(predicate, composite)
    if values is None:
        expected = (
            f"a {len(predicate.stages)}-tuple"
            if predicate.domain == Domain.TUPLE
            else f"a record with fields {list(predicate.fields)}"
        )
        return Check(
            held=False,
            reason=f"{composite!r} is not {expected} for '{predicate.name}'",
        )

    for index, (stage, value) in enumerate(zip(predicate.stages, values)):
        result = _run_stage(predicate, stage, values[:index], value)
        if not result.held:
            return result
    return HELD


# =============================================================================
# PUBLIC EVALUATION
# =============================================================================

def check(predicate: AnyPredicate, value: Any) -> Check:
    """Run any predicate and report whether it held, and why not."""
    if isinstance(predicate, DependentPredicate):
        return _check_dependent(predicate, value)
    return _check_simple(predicate, value)


def evaluate(predicate: AnyPredicate, value: Any) -> bool:
    """Deterministic, total boolean evaluation of a predicate."""
    return check(predicate, value).held


def evaluate_composite(predicate: DependentPredicate, composite: Any) -> bool:
    """
    Evaluate a dependent chain over a tuple or record.

    Stages run in declaration order and stop at the first failure.
    """
    if not isinstance(predicate, DependentPredicate):
        raise TypeError(
            f"evaluate_composite needs a DependentPredicate, got {type(predicate).__name__}"
        )
    return _check_dependent(predicate, composite).held


def verify(
    predicate: Union[str, AnyPredicate],
    value: Any,
    registry: PredicateRegistry = default_registry,
) -> Outcome:
    """
    The smart constructor: the only way to obtain a Verified value.

    Returns:
        Verified if the predicate held for ``value``, Unverified otherwise

    Raises:
        UnknownPredicateError: If ``predicate`` is a name the registry lacks
    """
    resolved = registry.resolve(predicate)
    candidate = snapshot(value)
    result = check(resolved, candidate)

    if result.held:
        logger.debug("Verified %r under '%s'", value, resolved.name)
        return _issue(candidate, resolved)

    logger.debug("Rejected %r under '%s': %s", value, resolved.name, result.reason)
    return Unverified(
        value=value,
        predicate=resolved.name,
        reason=result.reason,
        stage=result.stage,
    )


def verify_all(
    predicate: Union[str, AnyPredicate],
    values: Iterable[Any],
    registry: PredicateRegistry = default_registry,
) -> list[Outcome]:
    """Verify each value independently, preserving order."""
    resolved = registry.resolve(predicate)
    return [verify(resolved, value, registry) for value in values]


# =============================================================================
# STAGED CONSTRUCTION
# =============================================================================

@dataclass(frozen=True)
class StagedComposite:
    """
    Builder for dependent composites.

    Field i is only accepted together with the already-validated fields
    0..i-1 as its context. ``feed`` returns a new builder or an
    Unverified; the final composite exists only after ``finish``.
    """
    predicate: DependentPredicate
    prefix: tuple[Any, ...] = field(default_factory=tuple)

    @property
    def complete(self) -> bool:
        return len(self.prefix) == len(self.predicate.stages)

    @property
    def next_field(self) -> Optional[Union[int, str]]:
        if self.complete:
            return None
        return self.predicate.stages[len(self.prefix)].field

    def feed(self, value: Any) -> Union[StagedComposite, Unverified]:
        """
        Validate the next field against the prefix.

        Raises:
            ValueError: If every stage has already been fed
        """
        if self.complete:
            raise ValueError(
                f"'{self.predicate.name}' already has all {len(self.prefix)} fields"
            )
        stage = self.predicate.stages[len(self.prefix)]
        result = _run_stage(self.predicate, stage, self.prefix, value)
        if not result.held:
            logger.debug("Staged '%s' stopped at '%s': %s",
                         self.predicate.name, stage.name, result.reason)
            return Unverified(
                value=self._assemble(self.prefix + (value,)),
                predicate=self.predicate.name,
                reason=result.reason,
                stage=result.stage,
            )
        return StagedComposite(self.predicate, self.prefix + (value,))

    def finish(self) -> Outcome:
        """
        Produce the Verified composite once every field has been fed.

        The whole chain is run again over the assembled composite, so a
        builder created with an arbitrary prefix cannot skip a stage.
        """
        composite = snapshot(self._assemble(self.prefix))
        if not self.complete:
            return Unverified(
                value=composite,
                predicate=self.predicate.name,
                reason=(
                    f"only {len(self.prefix)} of {len(self.predicate.stages)} "
                    f"fields supplied; next is {self.next_field!r}"
                ),
            )
        result = _check_dependent(self.predicate, composite)
        if not result.held:
            logger.debug("Staged '%s' rejected at finish: %s", self.predicate.name, result.reason)
            return Unverified(
                value=composite,
                predicate=self.predicate.name,
                reason=result.reason,
                stage=result.stage,
            )
        logger.debug("Verified staged %r under '%s'", composite, self.predicate.name)
        return _issue(composite, self.predicate)

    def _assemble(self, values: tuple[Any, ...]) -> Any:
        if self.predicate.domain == Domain.TUPLE:
            return tuple(values)
        return {stage.field: value for stage, value in zip(self.predicate.stages, values)}


def begin(
    predicate: Union[str, DependentPredicate],
    registry: PredicateRegistry = default_registry,
) -> StagedComposite:
    """
    Start staged construction of a dependent composite.

    Raises:
        TypeError: If the predicate is not a dependent chain
    """
    resolved = registry.resolve(predicate)
    if not isinstance(resolved, DependentPredicate):
        raise TypeError(f"'{resolved.name}' is not a dependent predicate")
    return StagedComposite(resolved)
