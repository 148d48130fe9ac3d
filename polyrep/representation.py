"""
polyrep/representation.py

The H- and V-representation capability classes, together with their generic
containers.

The set of representation classes is closed:

+ H-side: `MixedHRep` (one stream of hyperplanes and halfspaces),
  `DecomposedHRep` (separate streams), `HAffineSpace` (hyperplanes only).
+ V-side: `MixedVRep`, `DecomposedVRep`, `VAffineSpace` (lines only).
+ Both sides: `Polyhedron`.

Each representation carries its ambient dimension `fulldim` and coefficient
type `coefficient_type`.  Its element streams are either materialized tuples or
lazy views (see `polyrep/iterators.py`), which the containers keep as they are.

NOTE: Representations are meant to be read-only after instantiation.
"""

from itertools import chain
import warnings

import numpy as np

from .elements import H_ELEMENTS, V_ELEMENTS, HalfSpace, HyperPlane, \
    Line, Point, Ray, convert
from .exceptions import DimensionMismatch, IncompatibleKind, \
    LinearityDetectionNotImplemented, TypeMismatch
from .iterators import ChainView, ConvertView, KindFilterView, LazyView, \
    grouped, shared_source
from .promotion import canonical_type, promote_type, promote_types


def _is_matrix(value):
    return not isinstance(value, Representation) and 2 == np.ndim(value)


def as_source(elements, kinds, owner):
    """
    Prepares an element stream for storage: lazy views are kept as they are,
    anything else is collected into a tuple whose entries must be `kinds`.
    """
    if isinstance(elements, LazyView):
        return elements
    elements = tuple(elements)
    for element in elements:
        if not isinstance(element, kinds):
            raise IncompatibleKind(f"{owner} cannot hold a "
                                   f"{type(element).__name__}.")
    return elements


def infer_parameters(sources, fulldim=None, coefficient_type=None):
    """
    Determines (fulldim, coefficient_type) from the stored `sources`, checking
    them against the requested values when those are given.
    """
    views = [s for s in sources if isinstance(s, LazyView)]
    elements = [e for s in sources if not isinstance(s, LazyView) for e in s]

    if fulldim is None:
        candidates = [v.fulldim for v in views] + [e.fulldim for e in elements]
        if 0 == len(candidates):
            raise ValueError("Cannot infer the ambient dimension of an empty "
                             "representation; pass `fulldim`.")
        fulldim = candidates[0]
    for item in views + elements:
        if item.fulldim != fulldim:
            raise DimensionMismatch(f"Expected elements of dimension "
                                    f"{fulldim}, got {item.fulldim}.")

    inferred = promote_types(*[v.coefficient_type for v in views],
                             *[e.coefficient_type for e in elements])
    if coefficient_type is None:
        coefficient_type = inferred
    else:
        coefficient_type = canonical_type(coefficient_type)
        if promote_type(inferred, coefficient_type) != coefficient_type:
            raise TypeMismatch(f"Elements of type {inferred.__name__} do not "
                               f"fit in {coefficient_type.__name__}.")
    return fulldim, coefficient_type


def cast_source(source, coefficient_type):
    """Casts a stored stream to `coefficient_type`."""
    if isinstance(source, LazyView):
        if source.coefficient_type is coefficient_type:
            return source
        return ConvertView(source, coefficient_type)
    return tuple(convert(e, coefficient_type) for e in source)


def _count(iterable):
    return sum(1 for _ in iterable)


class Representation:
    """
    Shared plumbing: ambient parameters and the operator overloads, which
    forward to `polyrep/operators.py`.
    """

    # makes numpy defer `matrix @ rep` and `matrix * rep` to this class
    __array_ufunc__ = None

    decomposed_h = False
    decomposed_v = False

    fulldim = None
    coefficient_type = None
    # absolute tolerance of derived comparisons such as `dim`; exact by default
    tol = 0

    def __and__(self, other):
        if not isinstance(other, Representation):
            return NotImplemented
        from .operators import intersect
        return intersect(self, other)

    def __or__(self, other):
        if not isinstance(other, Representation):
            return NotImplemented
        from .operators import convexhull
        return convexhull(self, other)

    def __add__(self, other):
        if not isinstance(other, Representation):
            return NotImplemented
        from .operators import minkowski_sum
        return minkowski_sum(self, other)

    def __mul__(self, other):
        from .operators import cartesian_product
        if isinstance(other, Representation):
            return cartesian_product(self, other)
        if isinstance(self, HRepresentation) and _is_matrix(other):
            warnings.warn("`hrep * P` is deprecated. Use `left_divide(P, hrep)`"
                          " or `hrep / P.T` instead.",
                          DeprecationWarning, stacklevel=2)
            return None
        return NotImplemented

    def __rmatmul__(self, other):
        if not (isinstance(self, VRepresentation) and _is_matrix(other)):
            return NotImplemented
        from .operators import linear_map
        return linear_map(other, self)

    __rmul__ = __rmatmul__

    def __truediv__(self, other):
        if not (isinstance(self, HRepresentation) and _is_matrix(other)):
            return NotImplemented
        from .operators import inverse_linear_map
        return inverse_linear_map(self, other)

    def __repr__(self):
        return f"<{type(self).__name__} fulldim={self.fulldim} " \
               f"coefficient_type={self.coefficient_type.__name__}>"


class HRepresentation(Representation):
    """
    Capability class of H-representations: an intersection of hyperplanes and
    halfspaces.
    """

    def hyperplanes(self):
        raise NotImplementedError()

    def halfspaces(self):
        raise NotImplementedError()

    def hrep_elements(self):
        return chain(self.hyperplanes(), self.halfspaces())

    def nhyperplanes(self) -> int:
        return _count(self.hyperplanes())

    def nhalfspaces(self) -> int:
        return _count(self.halfspaces())

    def detect_hlinearities(self):
        """
        Marks the halfspaces which are forced to hold with equality as
        hyperplanes.  Concrete (backend-bound) representations must override.
        """
        raise LinearityDetectionNotImplemented(
            f"detect_hlinearities not implemented for {type(self).__name__}"
        )

    def hresult_type(self, linearities_only=False):
        return type(self)

    def has_element(self, point, tol=0) -> bool:
        """
        Returns True when `point` satisfies every hyperplane and halfspace, up
        to the explicit absolute tolerance `tol`.
        """
        if isinstance(point, Point):
            point = point.coord
        if len(point) != self.fulldim:
            raise DimensionMismatch(f"Expected a point of dimension "
                                    f"{self.fulldim}, got {len(point)}.")
        return (all(abs(sum(a * x for a, x in zip(h.a, point)) - h.beta) <= tol
                    for h in self.hyperplanes()) and
                all(sum(a * x for a, x in zip(h.a, point)) <= h.beta + tol
                    for h in self.halfspaces()))

    def __str__(self) -> str:
        output = f"# {type(self).__name__} in dimension {self.fulldim}: \n"
        for element in self.hrep_elements():
            output += f"{element}\n"
        return output


class VRepresentation(Representation):
    """
    Capability class of V-representations: the convex hull of points plus the
    conic hull of rays plus the span of lines.
    """

    def points(self):
        raise NotImplementedError()

    def rays(self):
        raise NotImplementedError()

    def lines(self):
        raise NotImplementedError()

    def vrep_elements(self):
        return chain(self.points(), self.lines(), self.rays())

    def npoints(self) -> int:
        return _count(self.points())

    def nrays(self) -> int:
        return _count(self.rays())

    def nlines(self) -> int:
        return _count(self.lines())

    def detect_vlinearities(self):
        """
        Marks the rays whose opposites also belong to the cone as lines.
        Concrete (backend-bound) representations must override.
        """
        raise LinearityDetectionNotImplemented(
            f"detect_vlinearities not implemented for {type(self).__name__}"
        )

    def vresult_type(self, linearities_only=False):
        return type(self)

    def __str__(self) -> str:
        output = f"# {type(self).__name__} in dimension {self.fulldim}: \n"
        for element in self.vrep_elements():
            output += f"{element}\n"
        return output


class MixedHRep(HRepresentation):
    """H-representation storing hyperplanes and halfspaces in one stream."""

    def __init__(self, elements=(), fulldim=None, coefficient_type=None):
        source = as_source(elements, H_ELEMENTS, type(self).__name__)
        self.fulldim, self.coefficient_type = infer_parameters(
            [source], fulldim, coefficient_type)
        self._elements = cast_source(source, self.coefficient_type)

    @classmethod
    def from_hrep_stream(cls, elements, fulldim, coefficient_type, like=None):
        return cls(elements, fulldim, coefficient_type)

    @classmethod
    def from_hrep_streams(cls, hyperplanes, halfspaces, fulldim,
                          coefficient_type, like=None):
        return cls(ChainView([hyperplanes, halfspaces], fulldim,
                             coefficient_type),
                   fulldim, coefficient_type)

    def hrep_elements(self):
        return iter(self._elements)

    def hyperplanes(self):
        return (e for e in self._elements if isinstance(e, HyperPlane))

    def halfspaces(self):
        return (e for e in self._elements if isinstance(e, HalfSpace))

    def materialize(self):
        return MixedHRep(tuple(self._elements), self.fulldim,
                         self.coefficient_type)


class DecomposedHRep(HRepresentation):
    """H-representation storing hyperplanes and halfspaces separately."""

    decomposed_h = True

    def __init__(self, hyperplanes=(), halfspaces=(), fulldim=None,
                 coefficient_type=None):
        owner = type(self).__name__
        hyperplanes = as_source(hyperplanes, (HyperPlane,), owner)
        halfspaces = as_source(halfspaces, (HalfSpace,), owner)
        self.fulldim, self.coefficient_type = infer_parameters(
            [hyperplanes, halfspaces], fulldim, coefficient_type)
        self._hyperplanes = cast_source(hyperplanes, self.coefficient_type)
        self._halfspaces = cast_source(halfspaces, self.coefficient_type)

    @classmethod
    def from_hrep_stream(cls, elements, fulldim, coefficient_type, like=None):
        if not isinstance(elements, LazyView):
            elements = tuple(elements)
            return cls([e for e in elements if isinstance(e, HyperPlane)],
                       [e for e in elements if isinstance(e, HalfSpace)],
                       fulldim, coefficient_type)
        return cls(KindFilterView(elements, HyperPlane),
                   KindFilterView(elements, HalfSpace),
                   fulldim, coefficient_type)

    @classmethod
    def from_hrep_streams(cls, hyperplanes, halfspaces, fulldim,
                          coefficient_type, like=None):
        return cls(hyperplanes, halfspaces, fulldim, coefficient_type)

    def hyperplanes(self):
        return iter(self._hyperplanes)

    def halfspaces(self):
        return iter(self._halfspaces)

    def hrep_elements(self):
        source = shared_source(self._hyperplanes, self._halfspaces)
        if source is None:
            return super().hrep_elements()
        return grouped(source, (HyperPlane, HalfSpace))

    def materialize(self):
        return DecomposedHRep.from_hrep_stream(
            tuple(self.hrep_elements()), self.fulldim, self.coefficient_type)


class MixedVRep(VRepresentation):
    """V-representation storing points, rays and lines in one stream."""

    def __init__(self, elements=(), fulldim=None, coefficient_type=None):
        source = as_source(elements, V_ELEMENTS, type(self).__name__)
        self.fulldim, self.coefficient_type = infer_parameters(
            [source], fulldim, coefficient_type)
        self._elements = cast_source(source, self.coefficient_type)

    @classmethod
    def from_vrep_stream(cls, elements, fulldim, coefficient_type, like=None):
        return cls(elements, fulldim, coefficient_type)

    @classmethod
    def from_vrep_streams(cls, points, rays, lines, fulldim, coefficient_type,
                          like=None):
        return cls(ChainView([points, lines, rays], fulldim, coefficient_type),
                   fulldim, coefficient_type)

    def vrep_elements(self):
        return iter(self._elements)

    def points(self):
        return (e for e in self._elements if isinstance(e, Point))

    def rays(self):
        return (e for e in self._elements if isinstance(e, Ray))

    def lines(self):
        return (e for e in self._elements if isinstance(e, Line))

    def materialize(self):
        return MixedVRep(tuple(self._elements), self.fulldim,
                         self.coefficient_type)


class DecomposedVRep(VRepresentation):
    """V-representation storing points, rays and lines separately."""

    decomposed_v = True

    def __init__(self, points=(), rays=(), lines=(), fulldim=None,
                 coefficient_type=None):
        owner = type(self).__name__
        points = as_source(points, (Point,), owner)
        rays = as_source(rays, (Ray,), owner)
        lines = as_source(lines, (Line,), owner)
        self.fulldim, self.coefficient_type = infer_parameters(
            [points, rays, lines], fulldim, coefficient_type)
        self._points = cast_source(points, self.coefficient_type)
        self._rays = cast_source(rays, self.coefficient_type)
        self._lines = cast_source(lines, self.coefficient_type)

    @classmethod
    def from_vrep_stream(cls, elements, fulldim, coefficient_type, like=None):
        if not isinstance(elements, LazyView):
            elements = tuple(elements)
            return cls([e for e in elements if isinstance(e, Point)],
                       [e for e in elements if isinstance(e, Ray)],
                       [e for e in elements if isinstance(e, Line)],
                       fulldim, coefficient_type)
        return cls(KindFilterView(elements, Point),
                   KindFilterView(elements, Ray),
                   KindFilterView(elements, Line),
                   fulldim, coefficient_type)

    @classmethod
    def from_vrep_streams(cls, points, rays, lines, fulldim, coefficient_type,
                          like=None):
        return cls(points, rays, lines, fulldim, coefficient_type)

    def points(self):
        return iter(self._points)

    def rays(self):
        return iter(self._rays)

    def lines(self):
        return iter(self._lines)

    def vrep_elements(self):
        source = shared_source(self._points, self._rays, self._lines)
        if source is None:
            return super().vrep_elements()
        return grouped(source, (Point, Line, Ray))

    def materialize(self):
        return DecomposedVRep.from_vrep_stream(
            tuple(self.vrep_elements()), self.fulldim, self.coefficient_type)


def hrep(elements, fulldim=None, coefficient_type=None):
    """
    Builds an H-representation from a list of hyperplanes and halfspaces.  A
    list of hyperplanes alone produces an `HAffineSpace`:

        hrep([HyperPlane([0, 1, 0], 1), HyperPlane([0, 0, 1], 0)])

    is the line {(t, 1, 0)} of 3-space.
    """
    elements = tuple(elements)
    if 0 < len(elements) and all(isinstance(e, HyperPlane) for e in elements):
        from .affine import HAffineSpace
        return HAffineSpace(elements, fulldim, coefficient_type)
    return MixedHRep(elements, fulldim, coefficient_type)


def vrep(elements, fulldim=None, coefficient_type=None):
    """
    Builds a V-representation from a list of points, rays and lines.  A list of
    lines alone produces a `VAffineSpace`:

        vrep([Line([1, 0, 0]), Line([0, 1, 0])])

    is the x_1 x_2-plane of 3-space.
    """
    elements = tuple(elements)
    if 0 < len(elements) and all(isinstance(e, Line) for e in elements):
        from .affine import VAffineSpace
        return VAffineSpace(elements, fulldim, coefficient_type)
    return MixedVRep(elements, fulldim, coefficient_type)
