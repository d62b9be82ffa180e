# Domain predicate library for subtyped
"""
Reference refinements registered in ``default_registry`` on import.

Scalar:   non_negative_integer, whole_number, prime, positive_number,
          high_number, never, valid_name, valid_birth_year
Sequence: non_empty
Tuple:    divisible, month_day, tagged_payload
Record:   form_input, wardrobe
"""

from . import dates, numeric, pairs, records, sequences
from .dates import day_of_year, days_in_month
from .numeric import at_least, repeat
from .pairs import quotient
from .records import register_form, register_user, suggest_outfits
from .sequences import head, last

__all__ = [
    "at_least",
    "day_of_year",
    "days_in_month",
    "head",
    "last",
    "quotient",
    "register_form",
    "register_user",
    "repeat",
    "suggest_outfits",
]
