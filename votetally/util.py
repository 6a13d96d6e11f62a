'''Helpers shared by the other modules of Votetally.'''

from numbers import Real
from typing import Any


MIN_VOTER_AGE: int = 18


def is_number(value: Any) -> bool:
    '''Return True for real numbers, excluding booleans.'''
    return isinstance(value, Real) and not isinstance(value, bool)
