"""
polyrep/elements.py

The five element kinds out of which representations are built:

+ H-side: `HalfSpace(a, beta)` is {x : <a, x> <= beta} and `HyperPlane(a, beta)`
  is {x : <a, x> = beta}.
+ V-side: `Point(x)`, `Ray(r)` is the ray from the origin through r, and
  `Line(l)` is the span of l.

Elements are immutable.  The arithmetic below acts on the full coefficient
tuple, i.e. on (a, beta) for the H-side elements, and always returns an
element of the same kind as the left operand.
"""

from dataclasses import dataclass
from typing import Tuple

import numpy as np

from .exceptions import DimensionMismatch, IncompatibleKind
from .promotion import coefficient_type_of, convert_scalar, is_exact
from .utilities import primitive_scale


class RepElement:
    """
    Shared behavior of the element kinds.  Subclasses store their coefficients
    in `parts`, which for the H-side is (a_1, ..., a_n, beta).
    """

    side = None

    @property
    def parts(self) -> tuple:
        raise NotImplementedError()

    @classmethod
    def from_parts(cls, parts):
        raise NotImplementedError()

    @property
    def fulldim(self) -> int:
        return len(self.coord)

    @property
    def coefficient_type(self):
        return coefficient_type_of(self.parts)

    def _check_operand(self, other):
        if not isinstance(other, RepElement) or other.side != self.side:
            raise IncompatibleKind(f"Cannot combine {type(self).__name__} "
                                   f"with {type(other).__name__}.")
        if other.fulldim != self.fulldim:
            raise DimensionMismatch(f"Cannot combine elements of dimension "
                                    f"{self.fulldim} and {other.fulldim}.")

    def __add__(self, other):
        self._check_operand(other)
        return self.from_parts([x + y for x, y in zip(self.parts, other.parts)])

    def __sub__(self, other):
        self._check_operand(other)
        return self.from_parts([x - y for x, y in zip(self.parts, other.parts)])

    def __neg__(self):
        return self.from_parts([-x for x in self.parts])

    def __mul__(self, scalar):
        if isinstance(scalar, RepElement):
            return NotImplemented
        return self.from_parts([x * scalar for x in self.parts])

    __rmul__ = __mul__


@dataclass(frozen=True)
class HalfSpace(RepElement):
    """The halfspace <a, x> <= beta."""

    a: Tuple
    beta: object

    side = "h"

    def __post_init__(self):
        object.__setattr__(self, "a", tuple(self.a))

    @property
    def coord(self):
        return self.a

    @property
    def parts(self):
        return (*self.a, self.beta)

    @classmethod
    def from_parts(cls, parts):
        return cls(tuple(parts[:-1]), parts[-1])

    def __str__(self):
        return f"{_linear_form(self.a)} <= {self.beta}"


@dataclass(frozen=True)
class HyperPlane(RepElement):
    """The hyperplane <a, x> = beta."""

    a: Tuple
    beta: object

    side = "h"

    def __post_init__(self):
        object.__setattr__(self, "a", tuple(self.a))

    @property
    def coord(self):
        return self.a

    @property
    def parts(self):
        return (*self.a, self.beta)

    @classmethod
    def from_parts(cls, parts):
        return cls(tuple(parts[:-1]), parts[-1])

    def __str__(self):
        return f"{_linear_form(self.a)} == {self.beta}"


@dataclass(frozen=True)
class _VRepElement(RepElement):
    coord: Tuple

    side = "v"

    def __post_init__(self):
        object.__setattr__(self, "coord", tuple(self.coord))

    @property
    def parts(self):
        return self.coord

    @classmethod
    def from_parts(cls, parts):
        return cls(tuple(parts))

    def __str__(self):
        return f"{type(self).__name__.lower()} " \
               f"({', '.join(str(x) for x in self.coord)})"


@dataclass(frozen=True)
class Point(_VRepElement):
    """A point of the ambient space."""
    pass


@dataclass(frozen=True)
class Ray(_VRepElement):
    """The ray {t r : t >= 0}."""
    pass


@dataclass(frozen=True)
class Line(_VRepElement):
    """The line {t l : t real}."""
    pass


H_ELEMENTS = (HalfSpace, HyperPlane)
V_ELEMENTS = (Point, Ray, Line)


def _linear_form(a):
    terms = [f"{x} x{1 + index}" for index, x in enumerate(a) if x != 0]
    return " + ".join(terms) if terms else "0"


def coord(element):
    return element.coord


def convert(element, coefficient_type):
    """Casts the coefficients of `element` to `coefficient_type`."""
    return element.from_parts([convert_scalar(x, coefficient_type)
                               for x in element.parts])


def zeropad(element, n):
    """
    Embeds `element` into a space of dimension `fulldim + |n|`, appending `n`
    zero coordinates for n > 0 and prepending `-n` of them for n < 0.
    """
    zeros = (element.coefficient_type(0),) * abs(n)
    if n >= 0:
        coords = (*element.coord, *zeros)
    else:
        coords = (*zeros, *element.coord)
    if element.side == "h":
        return type(element)(coords, element.beta)
    return type(element)(coords)


def is_zero(element, tol=0):
    """
    True when all coefficients of `element` (including the offset) vanish, up
    to the explicit absolute tolerance `tol`.
    """
    if tol == 0:
        return all(x == 0 for x in element.parts)
    return all(abs(x) <= tol for x in element.parts)


def simplify(element):
    """
    Rescales `element` by a positive factor so that its coefficients are as
    small as possible without changing the set it describes.

    Exact elements become coprime integers (kept in their `Fraction` type when
    they had one); floating point elements are returned as-is.
    """
    coefficient_type = element.coefficient_type
    if not is_exact(coefficient_type):
        return element
    scale = primitive_scale(element.parts)
    if scale == 1:
        return element
    return element.from_parts([convert_scalar(x * scale, coefficient_type)
                               for x in element.parts])


def _proportionality(left, right):
    """
    Returns the sign of t when left == t * right for some nonzero t, and None
    when no such t exists.
    """
    x, y = left.parts, right.parts
    pivot = next((i for i, v in enumerate(y) if v != 0), None)
    if pivot is None or x[pivot] == 0:
        return None
    if any(xv * y[pivot] != yv * x[pivot] for xv, yv in zip(x, y)):
        return None
    return 1 if (x[pivot] > 0) == (y[pivot] > 0) else -1


def is_duplicate(left, right):
    """
    True when `left` and `right` describe the same object: equal points,
    positive multiples for halfspaces and rays, nonzero multiples for
    hyperplanes and lines.
    """
    if type(left) is not type(right) or left.fulldim != right.fulldim:
        return False
    if isinstance(left, Point):
        return left.coord == right.coord
    sign = _proportionality(left, right)
    if sign is None:
        return False
    if isinstance(left, (HalfSpace, Ray)):
        return sign > 0
    return True


def linear_map(element, matrix):
    """
    Image of a V-side element under x -> matrix @ x.  `matrix` is a numpy
    object array.
    """
    return type(element)(tuple(matrix.dot(np.array(element.coord,
                                                    dtype=object))))


def inverse_linear_map(element, matrix):
    """
    Pulls an H-side element back along x -> matrix @ x, i.e. sends the normal
    `a` to matrix.T @ a and keeps the offset.  `matrix` is a numpy object
    array.
    """
    return type(element)(tuple(matrix.T.dot(np.array(element.a, dtype=object))),
                         element.beta)
