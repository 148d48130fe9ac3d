"""
polyrep/polyhedron.py

A polyhedron bound to a backend, which exposes both an H- and a
V-representation and converts between them on demand.
"""

from .elements import HyperPlane, convert
from .exceptions import IncompatibleKind, NoFeasibleSolutions
from .promotion import common_fulldim, promote_types
from .representation import DecomposedHRep, DecomposedVRep, HRepresentation, \
    MixedHRep, MixedVRep, VRepresentation
import polyrep.backend


class Polyhedron(HRepresentation, VRepresentation):
    """
    Houses an H-representation, a V-representation, or both, together with the
    backend used to compute whichever is missing and to detect linearities.

    The coefficient type of a polyhedron covers both that of the
    representation(s) it was built from and that of its backend, since
    conversions produce coefficients of the latter.

    NOTE: This object is meant to be read-only after instantiation, apart from
          the memoized conversions and linearity detections.
    """

    def __init__(self, hrep=None, vrep=None, backend=None):
        if hrep is None and vrep is None:
            raise ValueError("A Polyhedron needs an H- or a V-representation.")
        if hrep is not None and (not isinstance(hrep, HRepresentation) or
                                 isinstance(hrep, Polyhedron)):
            raise IncompatibleKind(f"Expected an H-representation, got a "
                                   f"{type(hrep).__name__}.")
        if vrep is not None and (not isinstance(vrep, VRepresentation) or
                                 isinstance(vrep, Polyhedron)):
            raise IncompatibleKind(f"Expected a V-representation, got a "
                                   f"{type(vrep).__name__}.")

        self.backend = backend if backend is not None \
            else polyrep.backend.backend
        if self.backend is None:
            raise ValueError("No backend is configured; set "
                             "`polyrep.backend.backend`.")

        reps = [rep for rep in (hrep, vrep) if rep is not None]
        self.fulldim = common_fulldim(*reps)
        self.coefficient_type = promote_types(
            *[rep.coefficient_type for rep in reps],
            self.backend.coefficient_type,
        )
        self._hrep = hrep
        self._vrep = vrep
        self._hlinearities_detected = False
        self._vlinearities_detected = False

    # conversions

    def hrep_is_computed(self) -> bool:
        return self._hrep is not None

    def vrep_is_computed(self) -> bool:
        return self._vrep is not None

    def hrep(self) -> HRepresentation:
        """
        The H-representation of this polyhedron, computed by the backend if
        needed.
        """
        if self._hrep is None:
            try:
                self._hrep = self.backend.vrep_to_hrep(self._vrep)
            except NoFeasibleSolutions:
                self._hrep = _empty_hrep(self.fulldim)
        return self._hrep

    def vrep(self) -> VRepresentation:
        """
        The V-representation of this polyhedron, computed by the backend if
        needed.
        """
        if self._vrep is None:
            try:
                self._vrep = self.backend.hrep_to_vrep(self._hrep)
            except NoFeasibleSolutions:
                self._vrep = DecomposedVRep(fulldim=self.fulldim)
        return self._vrep

    @property
    def decomposed_h(self):
        if self._hrep is None:
            return True
        return self._hrep.decomposed_h

    @property
    def decomposed_v(self):
        if self._vrep is None:
            return True
        return self._vrep.decomposed_v

    # element streams

    def _cast(self, elements):
        return (convert(e, self.coefficient_type) for e in elements)

    def hyperplanes(self):
        return self._cast(self.hrep().hyperplanes())

    def halfspaces(self):
        return self._cast(self.hrep().halfspaces())

    def hrep_elements(self):
        return self._cast(self.hrep().hrep_elements())

    def points(self):
        return self._cast(self.vrep().points())

    def rays(self):
        return self._cast(self.vrep().rays())

    def lines(self):
        return self._cast(self.vrep().lines())

    def vrep_elements(self):
        return self._cast(self.vrep().vrep_elements())

    # linearities

    @property
    def tol(self):
        return self.backend.tol

    def detect_hlinearities(self):
        """
        Replaces the H-representation by the backend's split into the
        hyperplanes it implies and its remaining halfspaces.  An infeasible
        H-representation is replaced by an inconsistent family of hyperplanes.
        Idempotent.
        """
        if self._hlinearities_detected:
            return
        try:
            hyperplanes, halfspaces = \
                self.backend.detect_hlinearities(self.hrep())
        except NoFeasibleSolutions:
            self._hrep = _empty_hrep(self.fulldim)
        else:
            self._hrep = DecomposedHRep(hyperplanes, halfspaces,
                                        fulldim=self.fulldim)
        self._hlinearities_detected = True

    def detect_vlinearities(self):
        """
        Replaces the V-representation by the backend's split into points, rays
        and the lines it contains.  Idempotent.
        """
        if self._vlinearities_detected:
            return
        try:
            points, rays, lines = self.backend.detect_vlinearities(self.vrep())
        except NoFeasibleSolutions:
            self._vrep = DecomposedVRep(fulldim=self.fulldim)
        else:
            self._vrep = DecomposedVRep(points, rays, lines,
                                        fulldim=self.fulldim)
        self._vlinearities_detected = True

    # results of operations whose first operand is a polyhedron

    def hresult_type(self, linearities_only=False):
        return Polyhedron

    def vresult_type(self, linearities_only=False):
        return Polyhedron

    @staticmethod
    def _backend_of(like):
        return like.backend if isinstance(like, Polyhedron) else None

    @classmethod
    def from_hrep_stream(cls, elements, fulldim, coefficient_type, like=None):
        rep_type = DecomposedHRep \
            if like is not None and like.decomposed_h else MixedHRep
        return cls(hrep=rep_type.from_hrep_stream(elements, fulldim,
                                                  coefficient_type),
                   backend=cls._backend_of(like))

    @classmethod
    def from_hrep_streams(cls, hyperplanes, halfspaces, fulldim,
                          coefficient_type, like=None):
        return cls(hrep=DecomposedHRep(hyperplanes, halfspaces, fulldim,
                                       coefficient_type),
                   backend=cls._backend_of(like))

    @classmethod
    def from_vrep_stream(cls, elements, fulldim, coefficient_type, like=None):
        rep_type = DecomposedVRep \
            if like is not None and like.decomposed_v else MixedVRep
        return cls(vrep=rep_type.from_vrep_stream(elements, fulldim,
                                                  coefficient_type),
                   backend=cls._backend_of(like))

    @classmethod
    def from_vrep_streams(cls, points, rays, lines, fulldim, coefficient_type,
                          like=None):
        return cls(vrep=DecomposedVRep(points, rays, lines, fulldim,
                                       coefficient_type),
                   backend=cls._backend_of(like))

    def materialize(self):
        return Polyhedron(
            hrep=self._hrep.materialize() if self._hrep is not None else None,
            vrep=self._vrep.materialize() if self._vrep is not None else None,
            backend=self.backend,
        )

    def __str__(self) -> str:
        output = f"# Polyhedron in dimension {self.fulldim}: \n"
        if self.hrep_is_computed():
            for element in self._hrep.hrep_elements():
                output += f"{element}\n"
        if self.vrep_is_computed():
            for element in self._vrep.vrep_elements():
                output += f"{element}\n"
        return output


def _empty_hrep(fulldim):
    """
    Hyperplanes describing the empty set: x_i = 0 for every coordinate, and
    the contradiction 0 = 1.  They are independent, so the dimension is -1.
    """
    hyperplanes = [HyperPlane(tuple(int(i == j) for j in range(fulldim)), 0)
                   for i in range(fulldim)]
    hyperplanes.append(HyperPlane((0,) * fulldim, 1))
    return DecomposedHRep(hyperplanes, fulldim=fulldim, coefficient_type=int)


def polyhedron(rep, backend=None):
    """
    Wraps the (possibly lazy) representation `rep` in a `Polyhedron` handled by
    `backend`, or by the globally configured backend when none is given.
    """
    if isinstance(rep, Polyhedron):
        return Polyhedron(
            hrep=rep._hrep, vrep=rep._vrep,
            backend=backend if backend is not None else rep.backend,
        )
    if isinstance(rep, HRepresentation):
        return Polyhedron(hrep=rep, backend=backend)
    if isinstance(rep, VRepresentation):
        return Polyhedron(vrep=rep, backend=backend)
    raise IncompatibleKind(f"Cannot build a Polyhedron from a "
                           f"{type(rep).__name__}.")
