"""
polyrep/utilities.py

Depository for generic python utility snippets.
"""

from fractions import Fraction
from functools import reduce, wraps
import math


epsilon = 1e-6
"""
Default tolerance of the floating point backend.  The exact code paths never
consult it: their tolerances are always explicit arguments defaulting to 0.
"""


def memoized_property(fget):
    attr_name = f'_{fget.__name__}'

    @wraps(fget)
    def fget_memoized(self):
        if not hasattr(self, attr_name):
            setattr(self, attr_name, fget(self))
        return getattr(self, attr_name)

    return property(fget_memoized)


def lcm(*numbers):
    assert 1 <= len(numbers)
    ret = numbers[0]
    for number in numbers[1:]:
        ret = ret * number // math.gcd(ret, number)
    return ret


def primitive_scale(values):
    """
    Returns the positive rational by which the exact `values` must be
    multiplied so that they become coprime integers.  Returns 1 for an all-zero
    sequence.
    """
    values = [Fraction(v) for v in values]
    numerator_gcd = abs(reduce(math.gcd, [v.numerator for v in values], 0))
    if 0 == numerator_gcd:
        return Fraction(1)
    denominator_lcm = abs(lcm(*[v.denominator for v in values]))
    return Fraction(denominator_lcm, numerator_gcd)


def dot(x, y):
    """Inner product of two coordinate sequences of equal length."""
    return sum((a * b for a, b in zip(x, y)), 0)
