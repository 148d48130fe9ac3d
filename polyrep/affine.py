"""
polyrep/affine.py

Affine spaces (also called flats, affine manifolds or linear varieties) and the
extraction of the affine space implied by a representation.

An affine space L satisfies

    λ x + (1 - λ) y ∈ L,    for all x, y ∈ L and all real λ,

with λ not required to lie in [0, 1] as it would be for a convex set.  On the
H-side it is the intersection of a family of hyperplanes; on the V-side it is
the span of a family of lines (a cone containing the origin).

Membership of an element in an affine space is decided by projecting the
element against the space and checking that nothing remains.  Each space keeps
an orthogonal basis of residuals, obtained by inserting its elements one at a
time and keeping the part of each new element which is not yet accounted for,
so that projecting against the basis one element after another is exact.
"""

from fractions import Fraction

from .elements import H_ELEMENTS, V_ELEMENTS, HyperPlane, Line, Point, \
    is_zero, simplify
from .exceptions import DimensionMismatch, IncompatibleKind
from .promotion import canonical_type, coefficient_type_of, convert_scalar, \
    is_exact
from .representation import DecomposedHRep, DecomposedVRep, HRepresentation, \
    VRepresentation, as_source, cast_source, infer_parameters
from .utilities import dot, memoized_property


def _projection_weights(x, l):
    """
    Returns the pair (<x, l>, <l, l>) used to project `x` along `l`.

    A hyperplane with zero normal, i.e. 0 = beta with beta nonzero, is
    projected along its offset coordinate instead.
    """
    ll = dot(l.coord, l.coord)
    if ll == 0 and isinstance(l, H_ELEMENTS):
        return x.beta * l.beta, l.beta * l.beta
    return dot(x.coord, l.coord), ll


def remproj(x, l):
    """
    Removes from `x` its component along `l`.

    With integer coefficients the residual is computed as

        x <l, l> - l <x, l>,

    which stays integral at the price of growing coefficients.  Otherwise it is
    x - l <x, l> / <l, l>, simplified to reduce its coefficients.
    """
    if x.side != l.side:
        raise IncompatibleKind(f"Cannot project {type(x).__name__} along "
                               f"{type(l).__name__}.")
    if x.fulldim != l.fulldim:
        raise DimensionMismatch(f"Cannot project an element of dimension "
                                f"{x.fulldim} along one of dimension "
                                f"{l.fulldim}.")
    xl, ll = _projection_weights(x, l)
    if ll == 0:
        return x
    if xl == 0:
        return x
    if coefficient_type_of(x.parts + l.parts) is int:
        return x * ll - l * xl
    if is_exact(type(xl)) and is_exact(type(ll)):
        ratio = Fraction(xl) / ll
    else:
        ratio = xl / ll
    return simplify(x - l * ratio)


class _AffineSpace:
    """
    Membership and projection against the orthogonal residual basis, shared by
    the affine spaces and their builders.
    """

    element_kinds = ()
    member_kinds = ()

    def _basis_elements(self):
        raise NotImplementedError()

    def remproj(self, element):
        """Residual of `element` after projecting it against this space."""
        for l in self._basis_elements():
            element = remproj(element, l)
        return element

    def _check_member_kind(self, element):
        if not isinstance(element, self.member_kinds):
            raise IncompatibleKind(f"{type(self).__name__} cannot test "
                                   f"membership of a "
                                   f"{type(element).__name__}.")
        if element.fulldim != self.fulldim:
            raise DimensionMismatch(f"{type(self).__name__} has dimension "
                                    f"{self.fulldim}, got an element of "
                                    f"dimension {element.fulldim}.")

    def contains(self, element, tol=0) -> bool:
        """
        True when `element` belongs to this space, up to the explicit absolute
        tolerance `tol` on the residual coefficients.
        """
        self._check_member_kind(element)
        return is_zero(self.remproj(element), tol=tol)

    def __contains__(self, element) -> bool:
        return self.contains(element)


class HAffineSpace(_AffineSpace, HRepresentation):
    """
    Affine space presented as the intersection of hyperplanes.  Points are
    members when they satisfy every hyperplane; halfspaces and hyperplanes are
    members when they are implied by the hyperplanes of the space.
    """

    decomposed_h = True
    element_kinds = (HyperPlane,)
    member_kinds = (*H_ELEMENTS, Point)

    def __init__(self, hyperplanes=(), fulldim=None, coefficient_type=None):
        source = as_source(hyperplanes, self.element_kinds, type(self).__name__)
        self.fulldim, self.coefficient_type = infer_parameters(
            [source], fulldim, coefficient_type)
        self._hyperplanes = cast_source(source, self.coefficient_type)

    @classmethod
    def from_hrep_stream(cls, elements, fulldim, coefficient_type, like=None):
        return cls(elements, fulldim, coefficient_type)

    @classmethod
    def from_hrep_streams(cls, hyperplanes, halfspaces, fulldim,
                          coefficient_type, like=None):
        return cls(hyperplanes, fulldim, coefficient_type)

    def hyperplanes(self):
        return iter(self._hyperplanes)

    def halfspaces(self):
        return iter(())

    def __len__(self):
        return self.nhyperplanes()

    @memoized_property
    def basis(self):
        builder = HAffineSpaceBuilder(self.fulldim, self.coefficient_type)
        for hyperplane in self.hyperplanes():
            builder.insert(hyperplane)
        return tuple(builder.basis)

    def _basis_elements(self):
        return self.basis

    def contains(self, element, tol=0) -> bool:
        self._check_member_kind(element)
        if isinstance(element, Point):
            return all(abs(dot(h.a, element.coord) - h.beta) <= tol
                       for h in self.hyperplanes())
        return is_zero(self.remproj(element), tol=tol)

    def detect_hlinearities(self):
        # every element of an affine space is a linearity
        pass

    def hresult_type(self, linearities_only=False):
        return HAffineSpace if linearities_only else DecomposedHRep

    def materialize(self):
        return HAffineSpace(tuple(self._hyperplanes), self.fulldim,
                            self.coefficient_type)


class VAffineSpace(_AffineSpace, VRepresentation):
    """
    Linear space presented as the span of lines.  As a V-representation it is a
    cone, whose only point is the origin.
    """

    decomposed_v = True
    element_kinds = (Line,)
    member_kinds = V_ELEMENTS

    def __init__(self, lines=(), fulldim=None, coefficient_type=None):
        source = as_source(lines, self.element_kinds, type(self).__name__)
        self.fulldim, self.coefficient_type = infer_parameters(
            [source], fulldim, coefficient_type)
        self._lines = cast_source(source, self.coefficient_type)

    @classmethod
    def from_vrep_stream(cls, elements, fulldim, coefficient_type, like=None):
        return cls(elements, fulldim, coefficient_type)

    @classmethod
    def from_vrep_streams(cls, points, rays, lines, fulldim, coefficient_type,
                          like=None):
        return cls(lines, fulldim, coefficient_type)

    def points(self):
        zero = self.coefficient_type(0)
        return iter((Point((zero,) * self.fulldim),))

    def rays(self):
        return iter(())

    def lines(self):
        return iter(self._lines)

    def __len__(self):
        return self.nlines()

    @memoized_property
    def basis(self):
        builder = VAffineSpaceBuilder(self.fulldim, self.coefficient_type)
        for line in self.lines():
            builder.insert(line)
        return tuple(builder.basis)

    def _basis_elements(self):
        return self.basis

    def detect_vlinearities(self):
        # every element of a linear space is a linearity
        pass

    def vresult_type(self, linearities_only=False):
        return VAffineSpace if linearities_only else DecomposedVRep

    def materialize(self):
        return VAffineSpace(tuple(self._lines), self.fulldim,
                            self.coefficient_type)


class _AffineSpaceBuilder(_AffineSpace):
    """
    Grows an affine space one element at a time.

    The builder moves through the states "empty" -> "growing" -> "closed";
    `finalize` closes it and returns the immutable affine space, after which
    further insertions are refused.
    """

    space_type = None

    def __init__(self, fulldim, coefficient_type=int):
        self.fulldim = fulldim
        self.coefficient_type = canonical_type(coefficient_type)
        self.elements = []
        self.basis = []
        self.closed = False

    @property
    def member_kinds(self):
        return self.space_type.member_kinds

    @property
    def state(self) -> str:
        if self.closed:
            return "closed"
        return "growing" if self.elements else "empty"

    def _basis_elements(self):
        return self.basis

    def insert(self, element):
        """Adds `element` to the space under construction."""
        if self.closed:
            raise ValueError(f"{type(self).__name__} was already finalized.")
        if not isinstance(element, self.space_type.element_kinds):
            raise IncompatibleKind(f"{self.space_type.__name__} cannot hold a "
                                   f"{type(element).__name__}.")
        if element.fulldim != self.fulldim:
            raise DimensionMismatch(f"{type(self).__name__} has dimension "
                                    f"{self.fulldim}, got an element of "
                                    f"dimension {element.fulldim}.")
        element = element.from_parts([
            convert_scalar(x, self.coefficient_type) for x in element.parts
        ])
        residual = self.remproj(element)
        if not is_zero(residual):
            self.basis.append(residual)
        self.elements.append(element)
        return self

    def __len__(self):
        return len(self.elements)

    def finalize(self):
        """Closes the builder and returns the immutable affine space."""
        self.closed = True
        return self.space_type(tuple(self.elements), self.fulldim,
                               self.coefficient_type)


class HAffineSpaceBuilder(_AffineSpaceBuilder):
    space_type = HAffineSpace

    def contains(self, element, tol=0) -> bool:
        self._check_member_kind(element)
        if isinstance(element, Point):
            return all(abs(dot(h.a, element.coord) - h.beta) <= tol
                       for h in self.elements)
        return is_zero(self.remproj(element), tol=tol)


class VAffineSpaceBuilder(_AffineSpaceBuilder):
    space_type = VAffineSpace


def builder_for(space):
    """An empty builder for spaces of the same kind and parameters as `space`."""
    if isinstance(space, HAffineSpace):
        return HAffineSpaceBuilder(space.fulldim, space.coefficient_type)
    elif isinstance(space, VAffineSpace):
        return VAffineSpaceBuilder(space.fulldim, space.coefficient_type)
    raise IncompatibleKind(f"{type(space).__name__} is not an affine space.")


def remove_duplicates(space, tol=0):
    """
    Returns a new affine space equal to `space`, keeping an element only if it
    is not already a member of the space formed by the elements kept before it.

    Costs O(k) projections per element for k elements.
    """
    builder = builder_for(space)
    elements = space.hyperplanes() if isinstance(space, HAffineSpace) \
        else space.lines()
    for element in elements:
        if not builder.contains(element, tol=tol):
            builder.insert(element)
    return builder.finalize()


def detect_hlinearities(rep):
    """Asks `rep` to mark its implicit equalities as hyperplanes."""
    rep.detect_hlinearities()
    return rep


def detect_vlinearities(rep):
    """Asks `rep` to mark the rays whose opposites it contains as lines."""
    rep.detect_vlinearities()
    return rep


def detect_linearities(rep):
    if isinstance(rep, HRepresentation):
        detect_hlinearities(rep)
    if isinstance(rep, VRepresentation):
        detect_vlinearities(rep)
    return rep


def affine_hull(h, current=False, tol=None):
    """
    The affine hull {λ x + (1 - λ) y : x, y ∈ h, λ real} of the
    H-representation `h`, as an `HAffineSpace` of independent hyperplanes.

    Unless `current` is set, linearities are detected first.  A hyperplane is
    dropped when the ones kept before it imply it up to the absolute tolerance
    `tol`, which defaults to `h.tol`: the backend's tolerance for a
    `Polyhedron`, and 0 (exact) otherwise.
    """
    if not current:
        detect_hlinearities(h)
    hull = HAffineSpace(tuple(h.hyperplanes()), h.fulldim, h.coefficient_type)
    return remove_duplicates(hull, tol=h.tol if tol is None else tol)


def line_space(v, current=False, tol=None):
    """
    The span of the lines of the V-representation `v`, as a `VAffineSpace` of
    independent lines.

    Unless `current` is set, linearities are detected first.  `tol` is as for
    `affine_hull`.
    """
    if not current:
        detect_vlinearities(v)
    lines = VAffineSpace(tuple(v.lines()), v.fulldim, v.coefficient_type)
    return remove_duplicates(lines, tol=v.tol if tol is None else tol)


def dim(h, current=False, tol=None) -> int:
    """
    Dimension of the H-representation `h`: its ambient dimension minus the
    number of independent hyperplanes among its linearities.

    Unless `current` is set, linearities are detected first.  `tol` is as for
    `affine_hull`.
    """
    return h.fulldim - len(affine_hull(h, current=current, tol=tol))
