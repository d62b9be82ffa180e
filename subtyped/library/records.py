"""
Record refinements.

form_input  — a sign-up form whose name and birth year are both valid
wardrobe    — a wardrobe able to produce at least the requested number
              of outfits

Both are judged as whole records. Validating the record at once gives
up knowing which field failed in exchange for a single outcome.
"""

from __future__ import annotations

import itertools
from collections.abc import Mapping, Sequence
from dataclasses import dataclass
from datetime import date
from decimal import Decimal, InvalidOperation
from typing import Any, Optional, TypedDict

from ..predicates import Domain, default_registry
from ..verified import Verified, ensure_verified, unwrap
from .numeric import is_integral


# =============================================================================
# CONFIGURATION CONSTANTS
# =============================================================================

MIN_BIRTH_YEAR = 1900

BOTTOM_CATEGORIES = ("pants", "shorts", "skirts")


# =============================================================================
# FORM INPUT
# =============================================================================

class FormInput(TypedDict):
    name: str
    birth_year: str


def current_year() -> int:
    return date.today().year


def parse_year(raw: Any) -> Optional[int]:
    """
    Parse a birth year from form text. Returns None if it is not a whole number.

    Text is read as a decimal number, so "1990.0" and "1.99e3" are years
    while digit-grouping underscores are not accepted.
    """
    if is_integral(raw):
        return int(raw)
    if not isinstance(raw, str):
        return None
    text = raw.strip()
    if "_" in text:
        return None
    try:
        year = Decimal(text)
    except InvalidOperation:
        return None
    if not is_integral(year):
        return None
    return int(year)


@default_registry.predicate("valid_name")
def is_valid_name(name: Any) -> bool:
    """A string with at least one non-whitespace character."""
    return isinstance(name, str) and len(name.strip()) > 0


@default_registry.predicate("valid_birth_year")
def is_valid_birth_year(year: Any) -> bool:
    """A whole year between 1900 and the current year."""
    return is_integral(year) and MIN_BIRTH_YEAR <= year <= current_year()


@default_registry.predicate("form_input", domain=Domain.RECORD)
def is_valid_form_input(form: Any) -> bool:
    """A form whose name and birth year are both valid."""
    if not isinstance(form, Mapping):
        return False
    year = parse_year(form.get("birth_year"))
    return is_valid_name(form.get("name")) and year is not None and is_valid_birth_year(year)


@dataclass(frozen=True)
class UserRegistration:
    name: str
    birth_year: int


def register_user(name: Verified, birth_year: Verified) -> UserRegistration:
    """
    Register a user from separately verified fields.

    Raises:
        UnverifiedValueError: If either field lacks its proof
    """
    return UserRegistration(
        name=unwrap(ensure_verified(name, "valid_name")).strip(),
        birth_year=int(unwrap(ensure_verified(birth_year, "valid_birth_year"))),
    )


def register_form(form: Verified) -> UserRegistration:
    """Register a user from a form verified as a whole."""
    record = unwrap(ensure_verified(form, "form_input"))
    return UserRegistration(
        name=record["name"].strip(),
        birth_year=parse_year(record["birth_year"]),
    )


# =============================================================================
# WARDROBE
# =============================================================================

class Owner(TypedDict):
    name: str
    age: int


class Wardrobe(TypedDict):
    owner: Owner
    tops: list[str]
    pants: list[str]
    shorts: list[str]
    skirts: list[str]
    desired_number_of_outfits: int


def _garments(wardrobe: Mapping, key: str) -> Optional[Sequence]:
    items = wardrobe.get(key)
    if not isinstance(items, Sequence) or isinstance(items, (str, bytes)):
        return None
    return items


def count_outfits(wardrobe: Mapping) -> int:
    """Number of top-and-bottom combinations the wardrobe can produce."""
    tops = len(wardrobe["tops"])
    return sum(tops * len(wardrobe[category]) for category in BOTTOM_CATEGORIES)


@default_registry.predicate("wardrobe", domain=Domain.RECORD)
def is_valid_wardrobe(wardrobe: Any) -> bool:
    """A wardrobe with enough combinations for the desired number of outfits."""
    if not isinstance(wardrobe, Mapping):
        return False
    if any(_garments(wardrobe, key) is None for key in ("tops",) + BOTTOM_CATEGORIES):
        return False
    desired = wardrobe.get("desired_number_of_outfits")
    if not is_integral(desired):
        return False
    return count_outfits(wardrobe) >= desired


def suggest_outfits(wardrobe: Verified) -> list[tuple[str, str]]:
    """
    Suggest the requested number of (top, bottom) outfits.

    The wardrobe's proof guarantees there are enough combinations, so
    the result always has exactly ``desired_number_of_outfits`` entries.

    Raises:
        UnverifiedValueError: If ``wardrobe`` is not verified as wardrobe
    """
    record = unwrap(ensure_verified(wardrobe, "wardrobe"))
    bottoms = itertools.chain.from_iterable(record[c] for c in BOTTOM_CATEGORIES)
    combinations = itertools.product(record["tops"], list(bottoms))
    return list(itertools.islice(combinations, max(0, int(record["desired_number_of_outfits"]))))
