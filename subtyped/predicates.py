"""
Predicate Registry for subtyped.

A registry maps refinement names to their predicates. It is pure
association: registering never validates anything, and a duplicate name
simply replaces the earlier entry.

Predicate kinds:
    Predicate           — a total boolean function over one base value
    DependentPredicate  — an ordered chain of stages over a tuple or record,
                          where each stage may consult the fields before it
"""

from __future__ import annotations

import logging
import threading
from dataclasses import dataclass
from enum import Enum
from typing import Any, Callable, Iterator, Optional, Union

logger = logging.getLogger(__name__)


class Domain(Enum):
    """Shapes of base value a predicate can be registered over."""
    SCALAR = "scalar"
    SEQUENCE = "sequence"
    TUPLE = "tuple"
    RECORD = "record"


class UnknownPredicateError(KeyError):
    """Raised when a predicate name is not in the registry."""

    def __init__(self, name: str):
        self.name = name
        super().__init__(f"no predicate registered under '{name}'")

    def __str__(self) -> str:
        return self.args[0]


# =============================================================================
# PREDICATES
# =============================================================================

@dataclass(frozen=True)
class Predicate:
    """A named, pure, total predicate over a single base value."""
    name: str
    check: Callable[[Any], bool]
    domain: Domain = Domain.SCALAR
    description: str = ""


@dataclass(frozen=True)
class Stage:
    """
    One link of a dependent chain.

    ``field`` is a tuple index or a record key. ``check`` receives the
    already-validated prefix (a tuple for tuples, a dict for records)
    and the value of this field.
    """
    name: str
    field: Union[int, str]
    check: Callable[[Any, Any], bool]


@dataclass(frozen=True)
class DependentPredicate:
    """
    A predicate expressed as P0(f0) and P1(f0, f1) and ... Pn(f0..fn-1, fn).

    The composite is only ever judged as a whole. Stages run in
    declaration order and the first failure ends the evaluation.
    """
    name: str
    stages: tuple[Stage, ...]
    domain: Domain = Domain.TUPLE
    description: str = ""

    def __post_init__(self):
        if self.domain not in (Domain.TUPLE, Domain.RECORD):
            raise ValueError(
                f"dependent predicate '{self.name}' must be over a tuple or record, "
                f"got {self.domain.value}"
            )
        if not self.stages:
            raise ValueError(f"dependent predicate '{self.name}' needs at least one stage")
        if self.domain == Domain.TUPLE:
            indices = [stage.field for stage in self.stages]
            if indices != list(range(len(self.stages))):
                raise ValueError(
                    f"tuple stages of '{self.name}' must cover fields 0..{len(self.stages) - 1} "
                    f"in order, got {indices}"
                )

    @property
    def fields(self) -> tuple[Union[int, str], ...]:
        return tuple(stage.field for stage in self.stages)


AnyPredicate = Union[Predicate, DependentPredicate]


# =============================================================================
# REGISTRY
# =============================================================================

class PredicateRegistry:
    """
    Catalog of named predicates.

    Extending the catalog never requires touching the engine: register a
    new predicate and ``verify`` can use it by name.
    """

    def __init__(self) -> None:
        self._predicates: dict[str, AnyPredicate] = {}
        self._lock = threading.Lock()

    def register(self, predicate: AnyPredicate) -> AnyPredicate:
        """Add a predicate, replacing any earlier one with the same name."""
        with self._lock:
            if predicate.name in self._predicates:
                logger.warning("Predicate '%s' re-registered; replacing earlier entry", predicate.name)
            self._predicates[predicate.name] = predicate
        logger.debug("Registered %s predicate '%s'", predicate.domain.value, predicate.name)
        return predicate

    def predicate(
        self,
        name: Optional[str] = None,
        domain: Domain = Domain.SCALAR,
        description: Optional[str] = None,
    ) -> Callable[[Callable[[Any], bool]], Callable[[Any], bool]]:
        """
        Decorator registering a plain function as a predicate.

        The function itself is returned unchanged so it stays callable
        as an ordinary boolean check.
        """
        def decorator(fn: Callable[[Any], bool]) -> Callable[[Any], bool]:
            doc = (fn.__doc__ or "").strip().splitlines()
            self.register(Predicate(
                name=name or fn.__name__,
                check=fn,
                domain=domain,
                description=description if description is not None else (doc[0] if doc else ""),
            ))
            return fn
        return decorator

    def dependent(
        self,
        name: str,
        stages: list[Stage],
        domain: Domain = Domain.TUPLE,
        description: str = "",
    ) -> DependentPredicate:
        """Build and register a dependent predicate from its stages."""
        return self.register(DependentPredicate(
            name=name,
            stages=tuple(stages),
            domain=domain,
            description=description,
        ))

    def get(self, name: str) -> AnyPredicate:
        """
        Look up a predicate by name.

        Raises:
            UnknownPredicateError: If nothing is registered under ``name``
        """
        try:
            return self._predicates[name]
        except KeyError:
            raise UnknownPredicateError(name) from None

    def resolve(self, predicate: Union[str, AnyPredicate]) -> AnyPredicate:
        """Accept either a registered name or a predicate object."""
        if isinstance(predicate, str):
            return self.get(predicate)
        return predicate

    def names(self) -> list[str]:
        return sorted(self._predicates)

    def __contains__(self, name: object) -> bool:
        return name in self._predicates

    def __iter__(self) -> Iterator[AnyPredicate]:
        return iter([self._predicates[name] for name in self.names()])

    def __len__(self) -> int:
        return len(self._predicates)


default_registry = PredicateRegistry()
