"""
polyrep/promotion.py

Rules deciding the coefficient type, the ambient dimension, and the
representation class of the result of combining two operands.

Coefficient types are promoted through an explicit table rather than through
Python's arithmetic coercions, so that, e.g., a `Decimal` coefficient meeting a
`Fraction` is reported instead of silently producing whichever type the
arithmetic happens to return:

    int < Fraction < float
    int < numpy.float32 < float

Any numbers.Integral (including numpy integers and bools) is read as `int`, and
any float subclass other than numpy.float32 (e.g. numpy.float64) as `float`.
"""

from fractions import Fraction
from functools import reduce
from numbers import Integral

import numpy as np

from .exceptions import DimensionMismatch, TypeMismatch


_PROMOTIONS = {
    (int, int): int,
    (int, Fraction): Fraction,
    (Fraction, Fraction): Fraction,
    (int, np.float32): np.float32,
    (np.float32, np.float32): np.float32,
    (Fraction, np.float32): float,
    (int, float): float,
    (Fraction, float): float,
    (np.float32, float): float,
    (float, float): float,
}


EXACT_TYPES = (int, Fraction)


def canonical_type(coefficient_type):
    """
    Maps a Python / numpy scalar type onto its row / column in the promotion
    table.  Types outside the table are returned unchanged.
    """
    if issubclass(coefficient_type, Integral):
        return int
    if coefficient_type is np.float32:
        return np.float32
    if issubclass(coefficient_type, float):
        return float
    return coefficient_type


def promote_type(left, right):
    """
    The least coefficient type covering both `left` and `right`.

    Raises TypeMismatch for pairs missing from the promotion table.
    """
    left, right = canonical_type(left), canonical_type(right)
    promoted = _PROMOTIONS.get((left, right), _PROMOTIONS.get((right, left)))
    if promoted is None:
        raise TypeMismatch(f"No common coefficient type for "
                           f"{left.__name__} and {right.__name__}.")
    return promoted


def promote_types(*coefficient_types):
    return reduce(promote_type, coefficient_types, int)


def coefficient_type_of(values):
    """Promoted coefficient type of a sequence of scalars."""
    return promote_types(*[type(v) for v in values])


def is_exact(coefficient_type):
    return canonical_type(coefficient_type) in EXACT_TYPES


def convert_scalar(value, coefficient_type):
    if type(value) is coefficient_type:
        return value
    if coefficient_type is int:
        if value != int(value):
            raise TypeMismatch(f"{value} is not an integer.")
        return int(value)
    if coefficient_type is np.float32:
        return np.float32(float(value))
    return coefficient_type(value)


def common_fulldim(*reps):
    """
    The ambient dimension shared by `reps`, which must agree.
    """
    dimensions = {rep.fulldim for rep in reps}
    if 1 != len(dimensions):
        raise DimensionMismatch(f"Ambient dimensions disagree: "
                                f"{[rep.fulldim for rep in reps]}.")
    return dimensions.pop()


def cartesian_fulldim(left, right):
    return left.fulldim + right.fulldim


def result_type(first, side, linearities_only=False):
    """
    The representation class of the result of an operation whose first operand
    is `first`.

    The result always follows the first operand: a polyhedron yields a
    polyhedron, and an H- (resp. V-)representation yields the same class of
    representation when that class can hold the result.  `linearities_only`
    signals that the result consists of hyperplanes (resp. lines) alone, which
    is what allows an affine space to produce an affine space.
    """
    if side == "h":
        return first.hresult_type(linearities_only)
    elif side == "v":
        return first.vresult_type(linearities_only)
    raise ValueError(f"Unknown representation side {side}.")


def is_decomposed(rep, side):
    """
    True when `rep` iterates its hyperplanes / halfspaces (side "h") or its
    points / rays / lines (side "v") cheaply as separate streams.
    """
    return rep.decomposed_h if side == "h" else rep.decomposed_v
