"""
polyrep/iterators.py

Lazy views over the elements of one or more representations.

A view holds references to its operand representations and nothing else: each
call to `iter()` starts a fresh traversal, so a view (and a representation
built on top of it) may be traversed any number of times, and views may be
nested inside one another.  Elements are transformed by the optional callback
`f(operand_index, element)` and then cast to the view's coefficient type.
"""

from itertools import chain

from .elements import Line, Point, Ray, convert


class LazyView:
    """Common base of the re-iterable element views."""

    def __init__(self, fulldim, coefficient_type):
        self.fulldim = fulldim
        self.coefficient_type = coefficient_type

    def __iter__(self):
        raise NotImplementedError()

    def __repr__(self):
        return f"{type(self).__name__}(fulldim={self.fulldim}, " \
               f"coefficient_type={self.coefficient_type.__name__})"


class RepIterator(LazyView):
    """
    Concatenates one stream of each of `reps`, selected by `_stream`.
    """

    def __init__(self, reps, fulldim, coefficient_type, f=None):
        super().__init__(fulldim, coefficient_type)
        self.reps = tuple(reps)
        self.f = f

    @staticmethod
    def _stream(rep):
        raise NotImplementedError()

    def __iter__(self):
        for index, rep in enumerate(self.reps):
            for element in self._stream(rep):
                if self.f is not None:
                    element = self.f(index, element)
                yield convert(element, self.coefficient_type)


class HRepIterator(RepIterator):
    @staticmethod
    def _stream(rep):
        return rep.hrep_elements()


class HyperPlaneIterator(RepIterator):
    @staticmethod
    def _stream(rep):
        return rep.hyperplanes()


class HalfSpaceIterator(RepIterator):
    @staticmethod
    def _stream(rep):
        return rep.halfspaces()


class VRepIterator(RepIterator):
    @staticmethod
    def _stream(rep):
        return rep.vrep_elements()


class PointIterator(RepIterator):
    @staticmethod
    def _stream(rep):
        return rep.points()


class RayIterator(RepIterator):
    @staticmethod
    def _stream(rep):
        return rep.rays()


class LineIterator(RepIterator):
    @staticmethod
    def _stream(rep):
        return rep.lines()


def summand_points(rep):
    """
    The points of `rep` as a Minkowski summand.  A V-representation with rays
    or lines but without points is a cone, whose only point is the origin.
    """
    points = list(rep.points())
    if 0 == len(points) and (any(True for _ in rep.rays()) or
                             any(True for _ in rep.lines())):
        points = [Point((0,) * rep.fulldim)]
    return points


class MinkowskiIterator(LazyView):
    """
    The V-elements of the Minkowski sum of two V-representations: the
    |points(left)| * |points(right)| pairwise sums of their points, followed by
    their lines and their rays.

    Each operand is traversed once per traversal of the view; an operand with
    rays or lines but no points contributes the origin as its only point.
    """

    def __init__(self, left, right, fulldim, coefficient_type):
        super().__init__(fulldim, coefficient_type)
        self.left = left
        self.right = right

    def _collect(self, rep):
        collected = {Point: [], Ray: [], Line: []}
        for element in rep.vrep_elements():
            collected[type(element)].append(
                convert(element, self.coefficient_type))
        points, rays, lines = collected[Point], collected[Ray], collected[Line]
        if 0 == len(points) and (rays or lines):
            points.append(Point((self.coefficient_type(0),) * self.fulldim))
        return points, rays, lines

    def __iter__(self):
        left_points, left_rays, left_lines = self._collect(self.left)
        right_points, right_rays, right_lines = self._collect(self.right)
        for left_point in left_points:
            for right_point in right_points:
                yield left_point + right_point
        yield from chain(left_lines, right_lines, left_rays, right_rays)


class ChainView(LazyView):
    """Concatenation of several views, e.g. to undecompose a representation."""

    def __init__(self, views, fulldim, coefficient_type):
        super().__init__(fulldim, coefficient_type)
        self.views = tuple(views)

    def __iter__(self):
        return chain.from_iterable(self.views)


class KindFilterView(LazyView):
    """The elements of `view` which are instances of `kinds`."""

    def __init__(self, view, kinds):
        super().__init__(view.fulldim, view.coefficient_type)
        self.view = view
        self.kinds = kinds

    def __iter__(self):
        return (element for element in self.view
                if isinstance(element, self.kinds))


class ConvertView(LazyView):
    """The elements of `view` cast to a wider coefficient type."""

    def __init__(self, view, coefficient_type):
        super().__init__(view.fulldim, coefficient_type)
        self.view = view

    def __iter__(self):
        return (convert(element, self.coefficient_type) for element in self.view)


def shared_source(*views):
    """
    The view underlying `views` when all of them are `KindFilterView`s over one
    and the same view, and None otherwise.
    """
    if not all(isinstance(view, KindFilterView) for view in views):
        return None
    sources = {id(view.view) for view in views}
    return views[0].view if 1 == len(sources) else None


def grouped(view, kinds):
    """
    The elements of `view` ordered by kind, following `kinds`, in a single
    traversal: elements of the first kind are yielded as they come, the others
    are held back until the traversal ends.
    """
    held = [[] for _ in kinds[1:]]
    for element in view:
        if isinstance(element, kinds[0]):
            yield element
            continue
        for kind, bucket in zip(kinds[1:], held):
            if isinstance(element, kind):
                bucket.append(element)
                break
    for bucket in held:
        yield from bucket
