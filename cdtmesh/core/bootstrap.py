"""Super-triangle construction.

Three synthetic boundary points are appended after the input points so that
one clockwise triangle over them encloses every input point; every input
vertex then starts out registered as remaining inside that triangle. This
lets each insertion locate a containing triangle without a hull step.
"""
from __future__ import annotations

import numpy as np

from .constants import BOUNDARY_SCALE, BOUNDARY_EPSILON, MIN_EXTENT
from .mesh_store import MeshStore

__all__ = ['boundary_positions', 'bootstrap_mesh']


def boundary_positions(points) -> np.ndarray:
    """Return the (3,2) clockwise boundary points enclosing `points`."""
    pts = np.asarray(points, dtype=np.float64).reshape(-1, 2)
    extent = MIN_EXTENT
    if pts.size:
        extent = max(extent, float(np.max(np.abs(pts))))
    s = BOUNDARY_SCALE * extent
    e = BOUNDARY_EPSILON
    return np.array([
        [e, s - e],
        [s + e, -e],
        [-s - e, -s + e],
    ], dtype=np.float64)


def bootstrap_mesh(points):
    """Build the arena over `points` plus the three boundary points.

    Returns (mesh, boundary_vertices, root) where `boundary_vertices` is the
    tuple of synthetic vertex indices (N, N+1, N+2) and `root` the handle of
    the enclosing triangle.
    """
    pts = np.asarray(points, dtype=np.float64).reshape(-1, 2)
    n = pts.shape[0]
    mesh = MeshStore(np.vstack([pts, boundary_positions(pts)]), capacity=2 * n + 8)
    boundary = (n, n + 1, n + 2)
    root = mesh.insert_triangle(*boundary)
    for v in range(n):
        mesh.add_vertex(root, v)
    return mesh, boundary, root
