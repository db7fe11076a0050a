"""Constrained edge recovery and global Delaunay legalization.

Insertion-time repair keeps the mesh locally Delaunay but only inspects the
edges a split or flip touches, so a constrained edge can still be missing
once every point is in. Recovery restores each missing edge by flipping the
edges that cross it (Sloan's queue method); legalization then sweeps all
adjacent pairs until no flip is needed.
"""
from __future__ import annotations

from collections import deque
from typing import Dict, List, Tuple

import numpy as np

from .errors import DegenerateGeometryError, MeshInvariantError, TriangulationError
from .geometry import segments_intersect, vectorized_seg_intersect
from .logging_utils import get_logger
from .mesh_store import MeshStore
from .repair import RepairContext, arrange_corners, ensure_local_delaunay, flip_pair, quad_is_convex

__all__ = ['mesh_edge_owners', 'crossing_edges', 'recover_edge', 'recover_constraints', 'legalize']

logger = get_logger('cdtmesh.recovery')

EdgeOwners = Dict[Tuple[int, int], int]


def mesh_edge_owners(mesh: MeshStore) -> EdgeOwners:
    """Map every directed edge (u, v) of a live, uncondemned triangle to that triangle."""
    owners: EdgeOwners = {}
    for h in mesh.live_handles():
        if mesh.is_condemned(h):
            continue
        for e in mesh.directed_edges(h):
            owners[e] = h
    return owners


def _retarget(mesh: MeshStore, owners: EdgeOwners, old, new):
    for h in old:
        for e in mesh.directed_edges(h):
            if owners.get(e) == h:
                del owners[e]
    for h in new:
        for e in mesh.directed_edges(h):
            owners[e] = h


def crossing_edges(mesh: MeshStore, owners: EdgeOwners, u: int, v: int) -> List[Tuple[int, int]]:
    """Mesh edges (one direction each) that properly cross the segment u-v."""
    keys = [e for e in owners if e[0] < e[1] or (e[1], e[0]) not in owners]
    if not keys:
        return []
    idx = np.asarray(keys, dtype=np.int64)
    P = mesh.points
    hits = vectorized_seg_intersect(P[idx[:, 0]], P[idx[:, 1]], P[u], P[v])
    return [keys[i] for i in np.flatnonzero(hits)]


def recover_edge(ctx: RepairContext, owners: EdgeOwners, u: int, v: int) -> int:
    """Flip edges crossing u-v until u-v is a mesh edge; returns the number of flips.

    An edge whose surrounding quadrilateral is not convex is re-queued; the
    queue always contains a convex one, so a full pass over the queue
    without a flip means the mesh is inconsistent.
    """
    if (u, v) in owners or (v, u) in owners:
        return 0
    mesh = ctx.mesh
    P = mesh.points
    pending = deque(crossing_edges(mesh, owners, u, v))
    if not pending:
        raise DegenerateGeometryError(f"constrained edge ({u}, {v}) passes through another input point")

    flips = 0
    stalled = 0
    while pending:
        a, b = pending.popleft()
        if (a, b) in ctx.constraints:
            raise TriangulationError(f"constrained edges ({a}, {b}) and ({u}, {v}) cross")
        h = owners.get((a, b), owners.get((b, a)))
        if h is None:
            raise MeshInvariantError(f"crossing edge ({a}, {b}) is not owned by any triangle")
        other = mesh.get_adjacent(h, mesh.slot_of_edge(h, a, b))
        if other is None:
            raise MeshInvariantError(f"outer edge ({a}, {b}) crosses constrained edge ({u}, {v})")
        arr = arrange_corners(mesh, h, other)
        if not quad_is_convex(mesh, h, other, arr):
            pending.append((a, b))
            stalled += 1
            if stalled > len(pending):
                raise TriangulationError(f"constraint recovery for ({u}, {v}) made no progress")
            continue
        stalled = 0
        new_first, new_second = flip_pair(mesh, h, other, arr)
        _retarget(mesh, owners, (h, other), (new_first, new_second))
        flips += 1
        # new_first is (s1, dB, dA)
        da, db = mesh.corner(new_first, 2), mesh.corner(new_first, 1)
        if segments_intersect(P[da], P[db], P[u], P[v]):
            pending.append((da, db))
    mesh.sweep()
    return flips


def recover_constraints(ctx: RepairContext) -> int:
    """Make every constrained edge a mesh edge; returns the total number of flips."""
    owners = mesh_edge_owners(ctx.mesh)
    total = 0
    for u, v in ctx.constraints:
        flips = recover_edge(ctx, owners, u, v)
        if flips:
            logger.debug("recovered constrained edge (%d, %d) with %d flips", u, v, flips)
        total += flips
    ctx.stats.recovery_flips += total
    ctx.stats.flips += total
    return total


def legalize(ctx: RepairContext, max_passes: int) -> int:
    """Sweep every adjacent pair through the local repair until a pass flips nothing.

    Returns the number of passes run.
    """
    mesh = ctx.mesh
    stats = ctx.stats
    for n in range(max_passes):
        before = stats.flips
        for h in list(mesh.live_handles()):
            for slot in range(3):
                if mesh.is_condemned(h):
                    break
                other = mesh.get_adjacent(h, slot)
                if other is not None and other > h:
                    ensure_local_delaunay(ctx, h, other)
        mesh.sweep()
        stats.legalize_passes += 1
        if stats.flips == before:
            return n + 1
    if max_passes:
        logger.warning("legalization stopped after %d passes with flips still pending", max_passes)
    return max_passes
