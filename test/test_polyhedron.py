"""
test/test_polyhedron.py

Tests for polyrep/polyhedron.py .
"""

import ddt
import unittest

from collections import Counter
from fractions import Fraction

from polyrep.affine import affine_hull, dim, line_space
from polyrep.backend.backend_abc import Backend
from polyrep.elements import HalfSpace, HyperPlane, Line, Point, Ray
from polyrep.exceptions import IncompatibleKind, NoFeasibleSolutions
from polyrep.operators import cartesian_product, intersect, use_hrep
from polyrep.polyhedron import *
from polyrep.representation import DecomposedHRep, DecomposedVRep, \
    MixedHRep, MixedVRep
import polyrep.backend


class RecordingBackend(Backend):
    """
    Exact backend for tests: a halfspace is implicit when its opposite is
    present, a ray is a line when its opposite is present, and the conversions
    produce fixed answers.  A halfspace 0 <= beta with beta < 0, or a
    V-representation without points, is infeasible.  Records every call.
    """

    coefficient_type = Fraction

    def __init__(self):
        self.calls = Counter()

    def detect_hlinearities(self, hrep):
        self.calls["detect_hlinearities"] += 1
        halfspaces = list(hrep.halfspaces())
        if any(all(x == 0 for x in h.a) and h.beta < 0 for h in halfspaces):
            raise NoFeasibleSolutions()
        implicit = [HyperPlane(h.a, h.beta) for h in halfspaces
                    if -h in halfspaces]
        remaining = [h for h in halfspaces if -h not in halfspaces]
        return list(hrep.hyperplanes()) + implicit, remaining

    def detect_vlinearities(self, vrep):
        self.calls["detect_vlinearities"] += 1
        if 0 == vrep.npoints():
            raise NoFeasibleSolutions()
        rays = list(vrep.rays())
        return (list(vrep.points()),
                [r for r in rays if -r not in rays],
                list(vrep.lines()) + [Line(r.coord) for r in rays if -r in rays])

    def hrep_to_vrep(self, hrep):
        self.calls["hrep_to_vrep"] += 1
        return DecomposedVRep([Point((0,) * hrep.fulldim)])

    def vrep_to_hrep(self, vrep):
        self.calls["vrep_to_hrep"] += 1
        if 0 == vrep.npoints():
            raise NoFeasibleSolutions()
        return DecomposedHRep(fulldim=vrep.fulldim)


@ddt.ddt
class TestPolyrepPolyhedron(unittest.TestCase):
    """Check the backend-bound polyhedron."""

    def setUp(self):
        self.backend = RecordingBackend()
        self.strip = Polyhedron(hrep=MixedHRep([
            HalfSpace([1, 0], 0), HalfSpace([-1, 0], 0), HalfSpace([0, 1], 1),
        ]), backend=self.backend)

    def test_construction(self):
        with self.assertRaises(ValueError):
            Polyhedron(backend=self.backend)
        with self.assertRaises(IncompatibleKind):
            Polyhedron(hrep=MixedVRep([Point([0])]), backend=self.backend)
        self.assertIs(Polyhedron(hrep=MixedHRep([HalfSpace([1], 0)])).backend,
                      polyrep.backend.backend)

    def test_coefficient_type(self):
        """The backend's coefficient type takes part in the promotion."""
        self.assertIs(self.strip.coefficient_type, Fraction)
        for halfspace in self.strip.halfspaces():
            self.assertTrue(all(isinstance(x, Fraction)
                                for x in halfspace.parts))

    def test_linearity_detection(self):
        self.assertEqual(dim(self.strip), 1)
        self.assertEqual(self.backend.calls["detect_hlinearities"], 1)
        self.assertTrue(self.strip.decomposed_h)
        self.assertEqual(self.strip.nhyperplanes(), 2)
        self.assertEqual(list(self.strip.halfspaces()),
                         [HalfSpace((0, 1), 1)])
        # idempotent, and not repeated
        self.assertEqual(dim(self.strip), 1)
        self.assertEqual(self.backend.calls["detect_hlinearities"], 1)

    def test_line_space(self):
        cone = polyhedron(MixedVRep([Point([0, 0]), Ray([1, 0]),
                                     Ray([-1, 0]), Ray([0, 1])]),
                          backend=self.backend)
        self.assertTrue(cone.vrep_is_computed())
        self.assertFalse(cone.hrep_is_computed())
        lines = line_space(cone)
        self.assertEqual(len(lines), 1)
        self.assertEqual(cone.nlines(), 2)
        self.assertEqual(list(cone.rays()), [Ray((0, 1))])

    def test_lazy_conversion(self):
        self.assertFalse(self.strip.vrep_is_computed())
        self.assertEqual(self.strip.npoints(), 1)
        self.assertTrue(self.strip.vrep_is_computed())
        self.strip.points()
        self.assertEqual(self.backend.calls["hrep_to_vrep"], 1)

    def test_empty_conversion(self):
        empty = Polyhedron(vrep=DecomposedVRep(fulldim=2),
                           backend=self.backend)
        self.assertFalse(empty.has_element([0, 0]))
        self.assertEqual(self.backend.calls["vrep_to_hrep"], 1)

    def test_infeasible_linearity_detection(self):
        empty = Polyhedron(hrep=MixedHRep([HalfSpace([1, 0], 1),
                                           HalfSpace([0, 0], -1)]),
                           backend=self.backend)
        self.assertEqual(dim(empty), -1)
        self.assertEqual(len(affine_hull(empty)), 3)
        self.assertFalse(empty.has_element([0, 0]))

        empty = Polyhedron(vrep=DecomposedVRep(fulldim=2),
                           backend=self.backend)
        self.assertEqual(len(line_space(empty)), 0)
        self.assertEqual(empty.npoints(), 0)
        self.assertEqual(self.backend.calls["detect_vlinearities"], 1)

    def test_result_follows_first_operand(self):
        halfspace = MixedHRep([HalfSpace([0, -1], 0)])
        result = intersect(self.strip, halfspace)
        self.assertIsInstance(result, Polyhedron)
        self.assertIs(result.backend, self.backend)
        self.assertEqual(result.nhalfspaces(), 4)
        self.assertIsInstance(self.strip & halfspace, Polyhedron)

        result = intersect(halfspace, self.strip)
        self.assertIsInstance(result, MixedHRep)
        self.assertIs(result.coefficient_type, Fraction)
        self.assertEqual(result.nhalfspaces(), 4)

    def test_use_hrep(self):
        hpoly = self.strip
        vpoly = Polyhedron(vrep=DecomposedVRep([Point([0, 0])]),
                           backend=self.backend)
        self.assertTrue(use_hrep(hpoly, vpoly))
        self.assertFalse(use_hrep(vpoly, hpoly))
        self.assertFalse(use_hrep(vpoly, vpoly))

        both = Polyhedron(hrep=MixedHRep([HalfSpace([1, 0], 0)]),
                          vrep=DecomposedVRep([Point([0, 0])]),
                          backend=self.backend)
        self.assertTrue(use_hrep(both, hpoly))
        self.assertFalse(use_hrep(both, vpoly))

    def test_cartesian_product(self):
        product = cartesian_product(self.strip, self.strip)
        self.assertIsInstance(product, Polyhedron)
        self.assertEqual(product.fulldim, 4)
        self.assertTrue(product.hrep_is_computed())
        self.assertFalse(product.vrep_is_computed())
        self.assertEqual(product.nhalfspaces(), 6)

        vpoly = Polyhedron(vrep=DecomposedVRep([Point([1]), Point([2])]),
                           backend=self.backend)
        product = vpoly * vpoly
        self.assertIsInstance(product, Polyhedron)
        self.assertTrue(product.vrep_is_computed())
        self.assertEqual(Counter(product.points()), Counter(
            [Point((x, y)) for x in [1, 2] for y in [1, 2]]
        ))

    def test_materialize(self):
        materialized = intersect(self.strip, self.strip).materialize()
        self.assertIs(materialized.backend, self.backend)
        self.assertEqual(materialized.nhalfspaces(), 6)

    def test_polyhedron_factory(self):
        copy = polyhedron(self.strip)
        self.assertIs(copy.backend, self.backend)
        self.assertTrue(copy.hrep_is_computed())
        with self.assertRaises(IncompatibleKind):
            polyhedron([HalfSpace([1], 0)], backend=self.backend)

    def test_str(self):
        self.assertTrue(str(self.strip).startswith(
            "# Polyhedron in dimension 2: \n"))
