"""
polyrep/backend/backend_abc.py

A generic backend specification for the conversions and linearity detections
which `Polyhedron` delegates.
"""

from abc import ABC, abstractmethod


class Backend(ABC):
    """
    Generic backend interface for polyhedral procedures.
    """

    coefficient_type = None
    """Coefficient type of the representations the backend produces."""

    tol = 0
    """Absolute tolerance the backend applies to its own comparisons."""

    @staticmethod
    @abstractmethod
    def detect_hlinearities(hrep):  # HRep -> (List[HyperPlane], List[HalfSpace])
        """
        Splits the H-representation into the hyperplanes its points all satisfy
        (its given hyperplanes together with its implicit equalities) and the
        halfspaces which remain.

        Signals `NoFeasibleSolutions` if the H-representation has no solutions.
        """
        pass

    @staticmethod
    @abstractmethod
    def detect_vlinearities(vrep):  # VRep -> (List[Point], List[Ray], List[Line])
        """
        Splits the V-representation into points, the rays whose opposites are
        not in its recession cone, and lines (its given lines together with the
        rays whose opposites are).
        """
        pass

    @staticmethod
    @abstractmethod
    def hrep_to_vrep(hrep):  # HRep -> DecomposedVRep
        """
        Calculates a V-representation of the H-representation.

        Signals `NoFeasibleSolutions` if the H-representation has no solutions.
        """
        pass

    @staticmethod
    @abstractmethod
    def vrep_to_hrep(vrep):  # VRep -> DecomposedHRep
        """
        Calculates an H-representation of the V-representation.

        Signals `NoFeasibleSolutions` if the V-representation is empty.
        """
        pass
