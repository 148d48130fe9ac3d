"""
polyrep/exceptions.py

Exception classes used throughout the project.
"""


class DimensionMismatch(ValueError):
    """
    Signaled when the ambient dimensions of two operands disagree, or when a
    transformation matrix has the wrong shape for its operand.
    """
    pass


class IncompatibleKind(TypeError):
    """
    Signaled when a representation is asked to hold (or is combined with) an
    element kind outside of its capability set, e.g. a halfspace in an
    `HAffineSpace`.
    """
    pass


class TypeMismatch(TypeError):
    """
    Signaled when two coefficient types have no common promoted type.
    """
    pass


class LinearityDetectionNotImplemented(NotImplementedError):
    """
    Signaled when a representation kind supplies no strategy for detecting the
    hyperplanes / lines implied by its elements.
    """
    pass


class NoFeasibleSolutions(Exception):
    """Emitted by a backend when asked to process an empty polyhedron."""
    pass
