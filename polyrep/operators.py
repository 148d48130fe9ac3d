"""
polyrep/operators.py

Algebraic operations on representations: intersection, convex hull, Minkowski
sum, Cartesian product, and linear maps in both directions.

None of these materializes its result: each returns a representation whose
element streams are lazy views over the operands (see `polyrep/iterators.py`).
The class of the result always follows the *first* operand (see
`polyrep.promotion.result_type`), so e.g. `intersect(p, h)` is a `Polyhedron`
when `p` is one and `h` is a plain H-representation, while `intersect(h, p)` is
an H-representation.  The coefficient type is promoted from both operands.
"""

import numpy as np

from .affine import HAffineSpace, VAffineSpace
from .elements import inverse_linear_map as _inverse_map_element, \
    linear_map as _map_element, zeropad
from .exceptions import DimensionMismatch, IncompatibleKind
from .iterators import HalfSpaceIterator, HRepIterator, HyperPlaneIterator, \
    LineIterator, MinkowskiIterator, PointIterator, RayIterator, VRepIterator
from .polyhedron import Polyhedron
from .promotion import cartesian_fulldim, coefficient_type_of, common_fulldim, \
    is_decomposed, promote_type, result_type
from .representation import HRepresentation, VRepresentation


def _check_side(side_class, *reps):
    for rep in reps:
        if not isinstance(rep, side_class):
            raise IncompatibleKind(f"Expected a {side_class.__name__}, got a "
                                   f"{type(rep).__name__}.")


def _build_hrep(rep_type, first, reps, fulldim, coefficient_type, f=None):
    """
    Builds a `rep_type` over the lazily transformed H-elements of `reps`.

    Hyperplanes and halfspaces are streamed separately only when every operand
    stores them apart; otherwise the result splits one combined stream, so that
    each operand is traversed once per traversal of the result.
    """
    if all(is_decomposed(rep, "h") for rep in reps):
        return rep_type.from_hrep_streams(
            HyperPlaneIterator(reps, fulldim, coefficient_type, f),
            HalfSpaceIterator(reps, fulldim, coefficient_type, f),
            fulldim, coefficient_type, like=first,
        )
    return rep_type.from_hrep_stream(
        HRepIterator(reps, fulldim, coefficient_type, f),
        fulldim, coefficient_type, like=first,
    )


def _build_vrep(rep_type, first, reps, fulldim, coefficient_type, f=None):
    """
    Builds a `rep_type` over the lazily transformed V-elements of `reps`,
    streaming points, rays and lines separately only when every operand
    stores them apart (see `_build_hrep`).
    """
    if all(is_decomposed(rep, "v") for rep in reps):
        return rep_type.from_vrep_streams(
            PointIterator(reps, fulldim, coefficient_type, f),
            RayIterator(reps, fulldim, coefficient_type, f),
            LineIterator(reps, fulldim, coefficient_type, f),
            fulldim, coefficient_type, like=first,
        )
    return rep_type.from_vrep_stream(
        VRepIterator(reps, fulldim, coefficient_type, f),
        fulldim, coefficient_type, like=first,
    )


def intersect(p1, p2):
    """
    Intersection {x : x ∈ p1, x ∈ p2} of two H-representations (or polyhedra).

    Concatenates the hyperplanes and halfspaces of both operands without
    removing redundant ones.  For a polyhedron whose H-representation has not
    been computed yet, iterating the result triggers a costly conversion.
    """
    _check_side(HRepresentation, p1, p2)
    fulldim = common_fulldim(p1, p2)
    coefficient_type = promote_type(p1.coefficient_type, p2.coefficient_type)
    both_affine = isinstance(p1, HAffineSpace) and isinstance(p2, HAffineSpace)
    rep_type = result_type(p1, "h", linearities_only=both_affine)
    return _build_hrep(rep_type, p1, (p1, p2), fulldim, coefficient_type)


def convexhull(p1, p2):
    """
    Convex hull {λ x + (1 - λ) y : x ∈ p1, y ∈ p2, λ ∈ [0, 1]} of two
    V-representations (or polyhedra).

    Concatenates the points, rays and lines of both operands.
    """
    _check_side(VRepresentation, p1, p2)
    fulldim = common_fulldim(p1, p2)
    coefficient_type = promote_type(p1.coefficient_type, p2.coefficient_type)
    both_affine = isinstance(p1, VAffineSpace) and isinstance(p2, VAffineSpace)
    rep_type = result_type(p1, "v", linearities_only=both_affine)
    return _build_vrep(rep_type, p1, (p1, p2), fulldim, coefficient_type)


def minkowski_sum(p1, p2):
    """
    Minkowski sum {x + y : x ∈ p1, y ∈ p2} of two V-representations.

    The points of the result are all |points(p1)| * |points(p2)| pairwise sums;
    its rays and lines are the union of those of the operands.  Each operand
    is traversed once per traversal of the result.
    """
    _check_side(VRepresentation, p1, p2)
    fulldim = common_fulldim(p1, p2)
    coefficient_type = promote_type(p1.coefficient_type, p2.coefficient_type)
    if isinstance(p1, VAffineSpace) and isinstance(p2, VAffineSpace):
        # the sum of two linear spaces is spanned by their lines
        return VAffineSpace(LineIterator((p1, p2), fulldim, coefficient_type),
                            fulldim, coefficient_type)
    return result_type(p1, "v").from_vrep_stream(
        MinkowskiIterator(p1, p2, fulldim, coefficient_type),
        fulldim, coefficient_type, like=p1,
    )


def use_hrep(p1, p2) -> bool:
    """
    Whether an operation on two polyhedra should go through their
    H-representations.  `p1` has priority.
    """
    return p1.hrep_is_computed() and (not p1.vrep_is_computed() or
                                      p2.hrep_is_computed())


def hcartesianproduct(p1, p2):
    """
    Cartesian product of two H-representations, in dimension N1 + N2: each
    element of p1 (resp. p2) is padded with zeros on the coordinates of p2
    (resp. p1).
    """
    _check_side(HRepresentation, p1, p2)
    n1, n2 = p1.fulldim, p2.fulldim
    fulldim = cartesian_fulldim(p1, p2)
    coefficient_type = promote_type(p1.coefficient_type, p2.coefficient_type)
    both_affine = isinstance(p1, HAffineSpace) and isinstance(p2, HAffineSpace)
    rep_type = result_type(p1, "h", linearities_only=both_affine)

    def pad(index, h):
        return zeropad(h, n2 if index == 0 else -n1)

    return _build_hrep(rep_type, p1, (p1, p2), fulldim, coefficient_type, pad)


def vcartesianproduct(p1, p2):
    """
    Cartesian product of two V-representations, in dimension N1 + N2: each
    operand is embedded into its block of coordinates, and the two embeddings
    are Minkowski-summed.
    """
    _check_side(VRepresentation, p1, p2)
    n1, n2 = p1.fulldim, p2.fulldim
    fulldim = cartesian_fulldim(p1, p2)
    coefficient_type = promote_type(p1.coefficient_type, p2.coefficient_type)

    q1 = _build_vrep(
        result_type(p1, "v", linearities_only=isinstance(p1, VAffineSpace)),
        p1, (p1,), fulldim, coefficient_type, lambda i, v: zeropad(v, n2),
    )
    q2 = _build_vrep(
        result_type(p2, "v", linearities_only=isinstance(p2, VAffineSpace)),
        p2, (p2,), fulldim, coefficient_type, lambda i, v: zeropad(v, -n1),
    )
    return minkowski_sum(q1, q2)


def cartesian_product(p1, p2):
    """
    Cartesian product {(x, y) : x ∈ p1, y ∈ p2}.

    Two polyhedra are combined through whichever side `use_hrep` selects;
    otherwise both operands must share a side.
    """
    if isinstance(p1, Polyhedron) and isinstance(p2, Polyhedron):
        if use_hrep(p1, p2):
            return hcartesianproduct(p1, p2)
        return vcartesianproduct(p1, p2)
    if isinstance(p1, HRepresentation) and isinstance(p2, HRepresentation):
        return hcartesianproduct(p1, p2)
    if isinstance(p1, VRepresentation) and isinstance(p2, VRepresentation):
        return vcartesianproduct(p1, p2)
    raise IncompatibleKind(f"Cannot take the product of a "
                           f"{type(p1).__name__} and a {type(p2).__name__}.")


def as_matrix(matrix):
    """
    Reads `matrix` as a 2-dimensional numpy object array, so that exact
    coefficients survive the products taken with it.
    """
    matrix = np.asarray(matrix, dtype=object)
    if 2 != matrix.ndim:
        raise DimensionMismatch(f"Expected a matrix, got an array of shape "
                                f"{matrix.shape}.")
    return matrix


def linear_map(matrix, rep):
    """
    Image {P x : x ∈ rep} of a V-representation under the matrix P, obtained
    by sending each point, ray and line v to P v.

    Requires columns(P) == fulldim(rep); the result has dimension rows(P).
    """
    _check_side(VRepresentation, rep)
    matrix = as_matrix(matrix)
    if matrix.shape[1] != rep.fulldim:
        raise DimensionMismatch("The number of columns of P must match the "
                                "dimension of the V-representation.")
    fulldim = matrix.shape[0]
    coefficient_type = promote_type(rep.coefficient_type,
                                    coefficient_type_of(matrix.flat))
    rep_type = result_type(rep, "v",
                           linearities_only=isinstance(rep, VAffineSpace))
    return _build_vrep(rep_type, rep, (rep,), fulldim, coefficient_type,
                       lambda i, v: _map_element(v, matrix))


def inverse_linear_map(rep, matrix):
    """
    Preimage {x : P x ∈ rep} of an H-representation under the matrix P,
    obtained by sending each halfspace <a, x> <= β to <P^T a, x> <= β and each
    hyperplane <a, x> = β to <P^T a, x> = β.

    Requires rows(P) == fulldim(rep); the result has dimension columns(P).
    """
    _check_side(HRepresentation, rep)
    matrix = as_matrix(matrix)
    if matrix.shape[0] != rep.fulldim:
        raise DimensionMismatch("The number of rows of P must match the "
                                "dimension of the H-representation.")
    fulldim = matrix.shape[1]
    coefficient_type = promote_type(rep.coefficient_type,
                                    coefficient_type_of(matrix.flat))
    rep_type = result_type(rep, "h",
                           linearities_only=isinstance(rep, HAffineSpace))
    return _build_hrep(rep_type, rep, (rep,), fulldim, coefficient_type,
                       lambda i, h: _inverse_map_element(h, matrix))


def left_divide(matrix, rep):
    """
    `P \\ rep`, i.e. `rep / P^T`: sends each normal a to P a.
    """
    return inverse_linear_map(rep, as_matrix(matrix).T)
