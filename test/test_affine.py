"""
test/test_affine.py

Tests for polyrep/affine.py .
"""

import ddt
import unittest

from fractions import Fraction

from polyrep.affine import *
from polyrep.elements import HalfSpace, HyperPlane, Line, Point, Ray, is_zero
from polyrep.exceptions import DimensionMismatch, IncompatibleKind, \
    LinearityDetectionNotImplemented
from polyrep.representation import MixedHRep, MixedVRep


@ddt.ddt
class TestPolyrepAffineSpaces(unittest.TestCase):
    """Check membership, projection and dimension of affine spaces."""

    # the line {(t, 1, 0)} of 3-space
    line = HAffineSpace([HyperPlane([0, 1, 0], 1), HyperPlane([0, 0, 1], 0)])
    # the x_1-axis of 3-space
    axis = HAffineSpace([HyperPlane([0, 1, 0], 0), HyperPlane([0, 0, 1], 0)])
    # the x_1 x_2-plane of 3-space
    plane = VAffineSpace([Line([1, 0, 0]), Line([0, 1, 0])])

    def test_line_in_three_space(self):
        self.assertEqual(dim(self.line), 1)
        self.assertIn(Point([5, 1, 0]), self.line)
        self.assertNotIn(Point([5, 0, 0]), self.line)
        self.assertEqual(dim(self.axis), 1)
        self.assertIn(Point([5, 0, 0]), self.axis)
        self.assertNotIn(Point([5, 1, 0]), self.axis)

    def test_point_in_the_plane(self):
        """Two independent hyperplanes of the plane cut out a single point."""
        space = HAffineSpace([HyperPlane([1, 1], 1), HyperPlane([1, 0], 0)])
        self.assertEqual(dim(space), 0)
        self.assertIn(Point([0, 1]), space)
        self.assertNotIn(Point([1, 0]), space)

    def test_span_of_lines(self):
        self.assertIn(Point([3, -2, 0]), self.plane)
        self.assertNotIn(Point([3, -2, 1]), self.plane)
        self.assertIn(Line([1, 1, 0]), self.plane)
        self.assertIn(Ray([-1, 4, 0]), self.plane)
        self.assertNotIn(Ray([0, 0, 1]), self.plane)

    def test_hyperplanes_as_members(self):
        """Check that implied hyperplanes and halfspaces are members."""
        self.assertIn(HyperPlane([0, 2, 1], 2), self.line)
        self.assertIn(HalfSpace([0, 1, 5], 1), self.line)
        self.assertNotIn(HyperPlane([1, 0, 0], 0), self.line)

    @ddt.data(2, -1, Fraction(1, 3), 0.5)
    def test_affine_closure(self, weight):
        """Check closure under affine (not only convex) combinations."""
        x, y = Point([5, 1, 0]), Point([-2, 1, 0])
        self.assertIn(x * weight + y * (1 - weight), self.line)
        x, y = Point([3, -2, 0]), Point([1, 1, 0])
        self.assertIn(x * weight + y * (1 - weight), self.plane)

    @ddt.data(HyperPlane([0, 1, 0], 1),
              HyperPlane([Fraction(1, 2), 1, 0], 3),
              Line([0.5, 0.25, 0.0]),
              Line([0, 3, -1]))
    def test_remproj_of_itself(self, element):
        self.assertTrue(is_zero(remproj(element, element)))

    def test_remproj_integer_path(self):
        """Check the integral formula x <l, l> - l <x, l>."""
        self.assertEqual(remproj(Line([1, 1]), Line([1, 0])), Line((0, 1)))
        self.assertEqual(remproj(Line([1, 1]), Line([2, 0])), Line((0, 4)))
        self.assertEqual(remproj(Line([0, 1]), Line([1, 0])), Line((0, 1)))

    def test_remproj_rational_path(self):
        residual = remproj(Line([1, Fraction(1, 2)]), Line([1, 0]))
        self.assertEqual(residual, Line((0, 1)))
        self.assertIs(residual.coefficient_type, Fraction)

    def test_remproj_errors(self):
        with self.assertRaises(IncompatibleKind):
            remproj(Line([1, 0]), HyperPlane([1, 0], 0))
        with self.assertRaises(DimensionMismatch):
            remproj(Line([1, 0]), Line([1, 0, 0]))

    def test_membership_errors(self):
        with self.assertRaises(IncompatibleKind):
            Ray([1, 0, 0]) in self.line
        with self.assertRaises(IncompatibleKind):
            HalfSpace([1, 0, 0], 0) in self.plane
        with self.assertRaises(DimensionMismatch):
            Point([1, 0]) in self.plane

    def test_element_kinds(self):
        with self.assertRaises(IncompatibleKind):
            HAffineSpace([HalfSpace([1, 0], 0)])
        with self.assertRaises(IncompatibleKind):
            VAffineSpace([Ray([1, 0])])

    def test_tolerance(self):
        """Check that floating point residuals are compared exactly by
        default and up to `tol` on request."""
        space = VAffineSpace([Line([1.0, 0.0])])
        self.assertFalse(space.contains(Point([1.0, 1e-9])))
        self.assertTrue(space.contains(Point([1.0, 1e-9]), tol=1e-6))

    def test_remove_duplicates(self):
        space = HAffineSpace([HyperPlane([1, 0], 1), HyperPlane([2, 0], 2),
                              HyperPlane([0, 1], 0), HyperPlane([1, 1], 1)])
        reduced = remove_duplicates(space)
        self.assertIsInstance(reduced, HAffineSpace)
        self.assertEqual(list(reduced.hyperplanes()),
                         [HyperPlane((1, 0), 1), HyperPlane((0, 1), 0)])
        self.assertEqual(dim(space), 0)

        # idempotent, and describing the same space
        twice = remove_duplicates(reduced)
        self.assertEqual(len(twice), len(reduced))
        for hyperplane in space.hyperplanes():
            self.assertIn(hyperplane, twice)
        for hyperplane in twice.hyperplanes():
            self.assertIn(hyperplane, space)

    def test_remove_duplicate_lines(self):
        space = VAffineSpace([Line([1, 1, 0]), Line([-2, -2, 0]),
                              Line([1, 0, 0]), Line([0, 1, 0])])
        reduced = remove_duplicates(space)
        self.assertEqual(len(reduced), 2)
        self.assertIn(Line([0, 5, 0]), reduced)

    def test_float_multiples_up_to_tolerance(self):
        space = HAffineSpace([HyperPlane([0.1, 0.2], 0.3),
                              HyperPlane([-0.3, -0.6], -0.9)])
        self.assertEqual(dim(space, tol=1e-9), 1)
        self.assertEqual(len(affine_hull(space, tol=1e-9)), 1)

        lines = VAffineSpace([Line([0.1, 0.2, 0]), Line([0.3, 0.6, 0])])
        self.assertEqual(len(remove_duplicates(lines, tol=1e-9)), 1)
        self.assertEqual(len(line_space(lines, tol=1e-9)), 1)

    def test_inconsistent_space(self):
        """x = 0 and x = 1 have no common point: both hyperplanes count, and
        every hyperplane is implied."""
        space = HAffineSpace([HyperPlane([1], 0), HyperPlane([1], 1)])
        self.assertEqual(len(remove_duplicates(space)), 2)
        self.assertEqual(dim(space), -1)
        self.assertNotIn(Point([0]), space)
        self.assertIn(HyperPlane([3], 7), space)
        self.assertIn(HyperPlane([0], 5), space)

    def test_builder_states(self):
        builder = HAffineSpaceBuilder(2)
        self.assertEqual(builder.state, "empty")
        builder.insert(HyperPlane([1, 0], 1))
        self.assertEqual(builder.state, "growing")
        self.assertIn(HyperPlane([2, 0], 2), builder)
        self.assertIn(Point([1, 7]), builder)
        self.assertNotIn(Point([0, 7]), builder)

        space = builder.finalize()
        self.assertEqual(builder.state, "closed")
        self.assertIsInstance(space, HAffineSpace)
        self.assertEqual(list(space.hyperplanes()), [HyperPlane((1, 0), 1)])
        with self.assertRaises(ValueError):
            builder.insert(HyperPlane([0, 1], 0))

    def test_builder_kinds(self):
        with self.assertRaises(IncompatibleKind):
            HAffineSpaceBuilder(2).insert(HalfSpace([1, 0], 1))
        with self.assertRaises(IncompatibleKind):
            VAffineSpaceBuilder(2).insert(Ray([1, 0]))
        with self.assertRaises(DimensionMismatch):
            VAffineSpaceBuilder(2).insert(Line([1, 0, 0]))

    def test_builder_coefficient_type(self):
        builder = VAffineSpaceBuilder(2, Fraction)
        builder.insert(Line([1, 2]))
        space = builder.finalize()
        self.assertIs(space.coefficient_type, Fraction)
        self.assertTrue(all(isinstance(x, Fraction)
                            for line in space.lines() for x in line.coord))

    def test_vaffine_space_is_a_cone(self):
        self.assertEqual(list(self.plane.points()), [Point((0, 0, 0))])
        self.assertEqual(self.plane.nrays(), 0)
        self.assertEqual(len(self.plane), 2)

    def test_affine_hull_of_mixed_hrep(self):
        mixed = MixedHRep([HalfSpace([1, 0], 1), HyperPlane([0, 1], 0)])
        with self.assertRaises(LinearityDetectionNotImplemented):
            affine_hull(mixed)
        with self.assertRaises(LinearityDetectionNotImplemented):
            dim(mixed)
        hull = affine_hull(mixed, current=True)
        self.assertIsInstance(hull, HAffineSpace)
        self.assertEqual(list(hull.hyperplanes()), [HyperPlane((0, 1), 0)])
        self.assertEqual(dim(mixed, current=True), 1)

    def test_line_space_of_mixed_vrep(self):
        mixed = MixedVRep([Point([0, 0]), Ray([1, 0]), Line([0, 1])])
        with self.assertRaises(LinearityDetectionNotImplemented):
            line_space(mixed)
        with self.assertRaises(LinearityDetectionNotImplemented):
            detect_linearities(mixed)
        lines = line_space(mixed, current=True)
        self.assertIsInstance(lines, VAffineSpace)
        self.assertEqual(list(lines.lines()), [Line((0, 1))])

    def test_linearity_detection_of_affine_spaces(self):
        """Affine spaces consist of linearities only."""
        self.assertIs(detect_linearities(self.line), self.line)
        self.assertIs(detect_linearities(self.plane), self.plane)
        self.assertEqual(len(affine_hull(self.line)), 2)
        self.assertEqual(len(line_space(self.plane)), 2)
