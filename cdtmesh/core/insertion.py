"""Point insertion: the 1 -> 3 split of the triangle containing a vertex."""
from __future__ import annotations

from typing import List

from .errors import DegenerateGeometryError, MeshInvariantError
from .geometry import point_in_wedge
from .logging_utils import get_logger
from .repair import RepairContext, ensure_local_delaunay

__all__ = ['insert_point']

logger = get_logger('cdtmesh.insertion')


def _redistribute(ctx: RepairContext, old: int, children: List[int], vertex: int):
    mesh = ctx.mesh
    P = mesh.points
    pv = P[vertex]
    c0, c1, c2 = (mesh.corner_position(old, k) for k in range(3))
    wedges = ((c0, c1), (c1, c2), (c2, c0))
    for v in mesh.remaining_vertices(old):
        p = P[v]
        if p[0] == pv[0] and p[1] == pv[1]:
            raise DegenerateGeometryError(f"points {vertex} and {v} coincide at ({pv[0]}, {pv[1]})")
        for child, (a, b) in zip(children, wedges):
            if point_in_wedge(p, pv, a, b):
                mesh.transfer_vertex(old, v, child)
                break
        else:
            raise MeshInvariantError(f"remaining vertex {v} fits no wedge around vertex {vertex}")


def insert_point(ctx: RepairContext, vertex: int) -> List[int]:
    """Insert a remaining vertex into the triangle that currently holds it.

    The containing triangle T = (t0, t1, t2) is replaced by the clockwise
    children (t0, t1, v), (t1, t2, v), (t2, t0, v). Child i links to child
    i+1 at slot 0, to child i+2 at slot 1, and inherits T's neighbour across
    (t_i, t_i+1) at slot 2. Every child is then repaired against that
    inherited neighbour. Returns the child handles; some may have been
    flipped away (and swept) by the repair.
    """
    mesh = ctx.mesh
    old = int(mesh.container[vertex])
    if not mesh.is_live(old):
        raise MeshInvariantError(f"vertex {vertex} is not remaining in any live triangle")
    t0, t1, t2 = mesh.corners_of(old)
    children = [
        mesh.insert_triangle(t0, t1, vertex),
        mesh.insert_triangle(t1, t2, vertex),
        mesh.insert_triangle(t2, t0, vertex),
    ]
    for i, child in enumerate(children):
        mesh.set_adjacent(child, 0, children[(i + 1) % 3])
        mesh.set_adjacent(child, 1, children[(i + 2) % 3])
        other = mesh.get_adjacent(old, (i + 2) % 3)
        mesh.set_adjacent(child, 2, other)
        mesh.replace_back_reference(old, child, other)

    mesh.remove_vertex(old, vertex)
    _redistribute(ctx, old, children, vertex)
    mesh.erase(old)

    for child in children:
        if mesh.is_condemned(child):
            continue
        adjacent = mesh.get_adjacent(child, 2)
        if adjacent is not None:
            ensure_local_delaunay(ctx, child, adjacent)
    mesh.sweep()
    ctx.stats.points_inserted += 1
    logger.debug("inserted vertex %d into triangle %d", vertex, old)
    return children
