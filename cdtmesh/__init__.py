"""Public package API for the cdtmesh constrained Delaunay triangulator.

This facade provides a flat import surface on top of the implementation
package ``cdtmesh.core``.

Example
-------
    from cdtmesh import triangulate_polygon

    result = triangulate_polygon([(0, 0), (2, 0), (2, 1), (1, 1), (1, 2), (0, 2)])
    result.triangles   # (M,3) clockwise corner indices

The deeper modules (``cdtmesh.core.*``) are considered internal and may
change; rely on this layer for public symbols.
"""
from importlib import import_module as _imp
import logging as _logging

try:  # Python 3.8+ runtime version export
    from importlib.metadata import version as _pkg_version, PackageNotFoundError as _NotFound
    __version__ = _pkg_version("cdtmesh")  # populated when installed
except _NotFound:  # pragma: no cover - source checkout without metadata
    __version__ = "0.0.0+dev"

_logging.getLogger(__name__).addHandler(_logging.NullHandler())

_geom = _imp('cdtmesh.core.geometry')
_const = _imp('cdtmesh.core.constants')
_conf = _imp('cdtmesh.core.conformity')
_tri = _imp('cdtmesh.core.triangulation')
_stats = _imp('cdtmesh.core.stats')

from .core.config import TriangulationConfig
from .core.errors import TriangulationError, DegenerateGeometryError, MeshInvariantError
from .core.logging_utils import configure_logging, get_logger

# Public entry points
triangulate = _tri.triangulate
triangulate_constrained = _tri.triangulate_constrained
triangulate_polygon = _tri.triangulate_polygon
ConstrainedDelaunayTriangulator = _tri.ConstrainedDelaunayTriangulator
TriangulationResult = _tri.TriangulationResult
TriangulationStats = _stats.TriangulationStats
print_stats = _stats.print_stats

# Fine-grained geometry exports
triangle_area = _geom.triangle_area
is_clockwise = _geom.is_clockwise
circumcircle = _geom.circumcircle
EPS_AREA = _const.EPS_AREA

# Namespace submodules for exploratory users
geometry = _geom
conformity = _conf
triangulation = _tri
stats = _stats
constants = _const

__all__ = [
    '__version__',
    # entry points
    'triangulate', 'triangulate_constrained', 'triangulate_polygon',
    'ConstrainedDelaunayTriangulator', 'TriangulationResult',
    # configuration / stats / logging
    'TriangulationConfig', 'TriangulationStats', 'print_stats', 'configure_logging', 'get_logger',
    # errors
    'TriangulationError', 'DegenerateGeometryError', 'MeshInvariantError',
    # geometry primitives
    'triangle_area', 'is_clockwise', 'circumcircle', 'EPS_AREA',
    # submodules / namespaces
    'geometry', 'conformity', 'triangulation', 'stats', 'constants',
]
