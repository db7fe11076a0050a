"""Exception types raised by the triangulation engine."""
from __future__ import annotations

__all__ = ['TriangulationError', 'DegenerateGeometryError', 'MeshInvariantError']


class TriangulationError(Exception):
    """Base class; also raised when constraint recovery cannot make progress."""


class DegenerateGeometryError(TriangulationError, ValueError):
    """Input geometry the triangulation cannot represent.

    Duplicate coordinates, coincident triangle corners, collinear corners where
    a circumcircle is requested, or zero-area triangles left in the output.
    """


class MeshInvariantError(TriangulationError, AssertionError):
    """A structural invariant of the mesh arena was violated.

    This signals a bug in the mesh surgery, not bad input.
    """
