"""
polyrep/__init__.py

Top-level imports for `polyrep`.
"""

from polyrep.elements import HalfSpace, HyperPlane, Line, Point, Ray
from polyrep.representation import DecomposedHRep, DecomposedVRep, \
    HRepresentation, MixedHRep, MixedVRep, VRepresentation, hrep, vrep
from polyrep.affine import HAffineSpace, HAffineSpaceBuilder, VAffineSpace, \
    VAffineSpaceBuilder, affine_hull, dim, line_space, remove_duplicates, \
    remproj
from polyrep.polyhedron import Polyhedron, polyhedron
from polyrep.operators import cartesian_product, convexhull, intersect, \
    inverse_linear_map, left_divide, linear_map, minkowski_sum

from polyrep.backend.lrs import LRSBackend, check_for_lrs
from polyrep.backend.scipy import SciPyBackend
import polyrep.backend

polyrep.backend.backend = LRSBackend() if check_for_lrs() else SciPyBackend()
