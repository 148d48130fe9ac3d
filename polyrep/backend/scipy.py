"""
polyrep/backend/scipy.py

Backend routines which are based on `scipy` rather than on `lrs`.

NOTE: These work in floating point.  Every comparison they make goes through
      the backend's explicit tolerance `tol`, and the conversions only handle
      bounded, full-dimensional polyhedra (the cases `qhull` supports).
"""

from typing import List

import numpy as np

from scipy.optimize import linprog
from scipy.spatial import ConvexHull, HalfspaceIntersection, QhullError

from .backend_abc import Backend
from ..elements import HalfSpace, HyperPlane, Line, Point
from ..exceptions import NoFeasibleSolutions
from ..representation import DecomposedHRep, DecomposedVRep
from ..utilities import epsilon


_LINPROG_OPTIMAL = 0
_LINPROG_INFEASIBLE = 2
_LINPROG_UNBOUNDED = 3

# presolve may report "infeasible or unbounded" without telling them apart
_HIGHS_OPTIONS = {"presolve": False}


def _as_system(elements, fulldim):
    """
    Stacks H-elements into (A, b), or (None, None) when there are none.
    """
    if 0 == len(elements):
        return None, None
    A = np.array([[float(x) for x in e.a] for e in elements]).reshape(
        len(elements), fulldim)
    b = np.array([float(e.beta) for e in elements])
    return A, b


def _checked(result, chatty=False):
    if chatty:
        print(f"linprog: status {result.status}, {result.message}")
    if result.status == _LINPROG_INFEASIBLE:
        raise NoFeasibleSolutions()
    if result.status not in (_LINPROG_OPTIMAL, _LINPROG_UNBOUNDED):
        raise ValueError(f"linprog failed: {result.message}")
    return result


def _unique_rows(rows, tol) -> List[np.ndarray]:
    kept = []
    for row in rows:
        if not any(np.max(np.abs(row - other)) <= tol for other in kept):
            kept.append(row)
    return kept


class SciPyBackend(Backend):
    coefficient_type = float

    def __init__(self, tol=epsilon):
        super().__init__()
        self.tol = tol

    def detect_hlinearities(self, hrep, chatty=False):
        """
        A halfspace <a, x> <= β is an implicit equality exactly when the
        minimum of <a, x> over the polyhedron is β; this costs one linear
        program per halfspace.
        """
        fulldim = hrep.fulldim
        hyperplanes = list(hrep.hyperplanes())
        halfspaces = list(hrep.halfspaces())
        A_eq, b_eq = _as_system(hyperplanes, fulldim)
        A_ub, b_ub = _as_system(halfspaces, fulldim)

        implicit, remaining = [], []
        for halfspace in halfspaces:
            result = _checked(linprog(
                c=np.array([float(x) for x in halfspace.a]),
                A_ub=A_ub, b_ub=b_ub,
                A_eq=A_eq, b_eq=b_eq,
                bounds=[(None, None)] * fulldim,
                method="highs", options=_HIGHS_OPTIONS,
            ), chatty=chatty)
            if result.status == _LINPROG_OPTIMAL and \
                    result.fun >= float(halfspace.beta) - self.tol:
                implicit.append(HyperPlane(halfspace.a, halfspace.beta))
            else:
                remaining.append(halfspace)

        return hyperplanes + implicit, remaining

    def detect_vlinearities(self, vrep, chatty=False):
        """
        A ray r is a linearity exactly when -r lies in the cone generated by
        the rays and lines; this costs one feasibility problem per ray.
        """
        points = list(vrep.points())
        rays = list(vrep.rays())
        lines = list(vrep.lines())
        if 0 == len(rays):
            return points, rays, lines

        generators = np.array([[float(x) for x in g.coord]
                               for g in rays + lines]).T
        bounds = [(0, None)] * len(rays) + [(None, None)] * len(lines)

        new_lines, remaining = [], []
        for ray in rays:
            target = -np.array([float(x) for x in ray.coord])
            if np.max(np.abs(target)) <= self.tol:
                # the zero ray contributes nothing
                continue
            result = linprog(
                c=np.zeros(generators.shape[1]),
                A_eq=generators, b_eq=target,
                bounds=bounds,
                method="highs", options=_HIGHS_OPTIONS,
            )
            if chatty:
                print(f"linprog: status {result.status}, {result.message}")
            if result.status == _LINPROG_OPTIMAL:
                new_lines.append(Line(ray.coord))
            elif result.status == _LINPROG_INFEASIBLE:
                remaining.append(ray)
            else:
                raise ValueError(f"linprog failed: {result.message}")

        return points, remaining, lines + new_lines

    def chebyshev_center(self, A, b, chatty=False):
        """
        Center and radius of the largest ball inside {x : A x <= b}.

        Raises ValueError when the polyhedron contains arbitrarily large balls.
        """
        fulldim = A.shape[1]
        norms = np.linalg.norm(A, axis=1).reshape(-1, 1)
        result = _checked(linprog(
            c=np.r_[np.zeros(fulldim), -1.0],
            A_ub=np.hstack([A, norms]), b_ub=b,
            bounds=[(None, None)] * fulldim + [(0, None)],
            method="highs", options=_HIGHS_OPTIONS,
        ), chatty=chatty)
        if result.status == _LINPROG_UNBOUNDED:
            raise ValueError("Polyhedron is not bounded.")
        return result.x[:-1], result.x[-1]

    def _check_bounded(self, A, b, chatty=False):
        fulldim = A.shape[1]
        for direction in np.vstack([np.eye(fulldim), -np.eye(fulldim)]):
            result = _checked(linprog(
                c=direction, A_ub=A, b_ub=b,
                bounds=[(None, None)] * fulldim,
                method="highs", options=_HIGHS_OPTIONS,
            ), chatty=chatty)
            if result.status == _LINPROG_UNBOUNDED:
                raise ValueError("Polyhedron is not bounded.")

    def hrep_to_vrep(self, hrep, chatty=False) -> DecomposedVRep:
        fulldim = hrep.fulldim
        if 0 < hrep.nhyperplanes():
            raise ValueError("SciPyBackend only converts H-representations "
                             "without hyperplanes.")
        A, b = _as_system(list(hrep.halfspaces()), fulldim)
        if A is None:
            raise ValueError("Polyhedron is not bounded.")
        self._check_bounded(A, b, chatty=chatty)

        if 1 == fulldim:
            # bounded and feasible, so both kinds of halfspace are present
            lower = max(b[i] / A[i, 0] for i in range(len(b)) if A[i, 0] < 0)
            upper = min(b[i] / A[i, 0] for i in range(len(b)) if A[i, 0] > 0)
            if lower > upper + self.tol:
                raise NoFeasibleSolutions()
            vertices = [[lower]] if upper - lower <= self.tol \
                else [[lower], [upper]]
        else:
            center, radius = self.chebyshev_center(A, b, chatty=chatty)
            if radius <= self.tol:
                raise ValueError("Polyhedron is not full-dimensional.")
            try:
                intersection = HalfspaceIntersection(
                    np.hstack([A, -b.reshape(-1, 1)]), center
                )
                hull = ConvexHull(intersection.intersections)
            except QhullError as err:
                raise ValueError("Computation of the V-representation "
                                 "failed.") from err
            vertices = intersection.intersections[hull.vertices]

        return DecomposedVRep(
            points=[Point([float(x) for x in v]) for v in vertices],
            fulldim=fulldim, coefficient_type=float,
        )

    def vrep_to_hrep(self, vrep, chatty=False) -> DecomposedHRep:
        fulldim = vrep.fulldim
        if 0 < vrep.nrays() or 0 < vrep.nlines():
            raise ValueError("SciPyBackend only converts V-representations "
                             "without rays or lines.")
        points = np.array([[float(x) for x in p.coord] for p in vrep.points()])
        if 0 == len(points):
            raise NoFeasibleSolutions()
        points = points.reshape(-1, fulldim)

        if 1 == fulldim:
            lower, upper = points.min(), points.max()
            if upper - lower <= self.tol:
                return DecomposedHRep(
                    hyperplanes=[HyperPlane([1.0], float(lower))],
                    fulldim=fulldim, coefficient_type=float,
                )
            return DecomposedHRep(
                halfspaces=[HalfSpace([-1.0], -float(lower)),
                            HalfSpace([1.0], float(upper))],
                fulldim=fulldim, coefficient_type=float,
            )

        try:
            hull = ConvexHull(points)
        except QhullError as err:
            raise ValueError("Computation of the H-representation failed; the "
                             "points may not be full-dimensional.") from err
        if chatty:
            print(f"qhull: {len(hull.equations)} facets")

        # qhull reports facets as <n, x> + c <= 0, split into simplices
        halfspaces = [HalfSpace([float(x) for x in row[:-1]], -float(row[-1]))
                      for row in _unique_rows(hull.equations, self.tol)]
        return DecomposedHRep(halfspaces=halfspaces, fulldim=fulldim,
                              coefficient_type=float)
