"""Removal of the triangles outside the region of interest.

A flood fill starts at a triangle touching the synthetic boundary and walks
across every edge that is not a barrier; everything it reaches is removed.
Barriers are the constrained polygon edges (polygon mode) or the convex hull
edges (hull mode).
"""
from __future__ import annotations

from typing import Container, Iterable, Optional, Tuple

from .errors import MeshInvariantError
from .logging_utils import get_logger
from .mesh_store import MeshStore

__all__ = ['find_outer_triangle', 'trim_outer_triangles']

logger = get_logger('cdtmesh.trim')


def find_outer_triangle(mesh: MeshStore, boundary: Iterable[int]) -> Optional[int]:
    """Any live triangle with a boundary corner, or None."""
    boundary = tuple(boundary)
    for h in mesh.live_handles():
        if any(mesh.has_corner(h, b) for b in boundary):
            return h
    return None


def trim_outer_triangles(mesh: MeshStore, boundary: Tuple[int, int, int],
                         barrier: Container[Tuple[int, int]]) -> int:
    """Remove every triangle reachable from the boundary without crossing a barrier.

    Returns the number of removed triangles. Raises MeshInvariantError when a
    triangle with a boundary corner survives, i.e. the barrier edges leak or
    enclose part of the synthetic boundary.
    """
    start = find_outer_triangle(mesh, boundary)
    if start is None:
        return 0
    pending = [start]
    while pending:
        h = pending.pop()
        if mesh.is_condemned(h):
            continue
        mesh.condemn(h)
        cs = mesh.corners_of(h)
        for i in range(3):
            if (cs[(i + 1) % 3], cs[(i + 2) % 3]) in barrier:
                continue
            other = mesh.get_adjacent(h, i)
            if other is not None:
                pending.append(other)

    for h in list(mesh.live_handles()):
        if not mesh.is_condemned(h):
            continue
        for i in range(3):
            other = mesh.get_adjacent(h, i)
            if other is not None and not mesh.is_condemned(other):
                mesh.replace_back_reference(h, None, other)
    removed = mesh.sweep()

    leftover = find_outer_triangle(mesh, boundary)
    if leftover is not None:
        raise MeshInvariantError(
            f"triangle {leftover} {mesh.corners_of(leftover)} still touches the synthetic boundary after trimming")
    logger.debug("trimmed %d outer triangles", removed)
    return removed
