"""Local Delaunay repair: corner arrangement, edge flips and the repair worklist.

Two adjacent triangles form a quadrilateral; repairing them means deciding
whether their shared edge must be replaced by the other diagonal (the
*disjoint* edge) and, if so, flipping it and re-checking the four outer
edges of the quadrilateral. The re-checks run from an explicit worklist;
pairs that reference a condemned triangle are stale and skipped.

Decision rules, in order:

1. coincident corners are a DegenerateGeometryError;
2. a zero-area triangle (a point inserted exactly on an existing edge) is
   flipped away whenever the quadrilateral is convex and neither the shared
   edge nor the new diagonal conflicts with a constrained edge;
3. an edge is *enforced* if it touches a boundary vertex or properly
   crosses a constrained edge. Enforced disjoint edge only: keep. New
   diagonal crossing a constrained edge: keep. Enforced shared edge only:
   flip if the quadrilateral is convex;
4. otherwise flip when each disjoint corner lies strictly inside the other
   triangle's circumcircle (checked both ways against rounding).
"""
from __future__ import annotations

from dataclasses import dataclass, field
from typing import FrozenSet, NamedTuple, Optional, Tuple

from .constraints import ConstraintSet
from .errors import DegenerateGeometryError, MeshInvariantError
from .geometry import (orient, is_clockwise, is_collinear, has_coincident_corners, circumcircle,
                       squared_distance, point_left_of)
from .mesh_store import MeshStore
from .stats import TriangulationStats

__all__ = ['RepairContext', 'CornerArrangement', 'arrange_corners', 'quad_is_convex',
           'flip_pair', 'ensure_local_delaunay']


@dataclass
class RepairContext:
    """Everything the repair step reads besides the two triangles."""
    mesh: MeshStore
    boundary: FrozenSet[int]
    constraints: ConstraintSet
    stats: TriangulationStats = field(default_factory=TriangulationStats)


class CornerArrangement(NamedTuple):
    """Corner slots of two adjacent triangles as (slot in first, slot in second).

    The first triangle reads shared1 -> shared2 -> disjoint clockwise.
    """
    shared1: Tuple[int, int]
    shared2: Tuple[int, int]
    disjoint: Tuple[int, int]


def arrange_corners(mesh: MeshStore, first: int, second: int) -> CornerArrangement:
    """Match the corners of two adjacent triangles.

    Both triangles are clockwise, so a shared edge appears in opposite
    directions: rotate the first corner sequence against the reversed
    second one until exactly two positions agree.
    """
    ca = mesh.corners_of(first)
    cb = mesh.corners_of(second)
    for j in range(3):
        match = [ca[(j + i) % 3] == cb[2 - i] for i in range(3)]
        if sum(match) != 2:
            continue
        shared = []
        disjoint = None
        for i in range(3):
            slots = ((j + i) % 3, 2 - i)
            if match[i]:
                shared.append(slots)
            else:
                disjoint = slots
        s1, s2 = shared
        P = mesh.points
        p1, p2 = P[ca[s1[0]]], P[ca[s2[0]]]
        turn = orient(p1, p2, P[ca[disjoint[0]]])
        if turn == 0.0:
            # first triangle is flat: the second one's disjoint corner lies on the other side
            turn = -orient(p1, p2, P[cb[disjoint[1]]])
        if turn > 0.0:
            s1, s2 = s2, s1
        return CornerArrangement(s1, s2, disjoint)
    raise MeshInvariantError(f"triangles {first} {ca} and {second} {cb} are not adjacent")


def quad_is_convex(mesh: MeshStore, first: int, second: int, arr: CornerArrangement) -> bool:
    """True if replacing the shared edge by the disjoint one yields two proper triangles."""
    P = mesh.points
    da = P[mesh.corner(first, arr.disjoint[0])]
    db = P[mesh.corner(second, arr.disjoint[1])]
    s1 = P[mesh.corner(first, arr.shared1[0])]
    s2 = P[mesh.corner(first, arr.shared2[0])]
    return not (is_clockwise(da, db, s1) or is_clockwise(db, da, s2))


def _move_adjacent(mesh: MeshStore, old: int, old_slot: int, new: int, new_slot: int):
    other = mesh.get_adjacent(old, old_slot)
    mesh.set_adjacent(new, new_slot, other)
    mesh.replace_back_reference(old, new, other)


def flip_pair(mesh: MeshStore, first: int, second: int, arr: CornerArrangement) -> Tuple[int, int]:
    r"""Replace the shared edge of `first` and `second` by the other diagonal.

    Creates (s1, dB, dA) and (s2, dA, dB), moves the remaining vertices of
    both old triangles to the side of the new edge they lie on, rewires the
    four outer links plus the link between the new triangles, and condemns
    the old pair. Returns the two new handles.

                dA                          dA
               /  \                        / | \
      first   /    \                      /  |  \
            s2 ---- s1        ->        s2 2 | 1 s1
      second  \    /              second  \ 1|2 / first
               \  /                        \ | /
                dB                          dB

    Slot 0 of each new triangle faces the other across dA-dB.
    """
    ca = mesh.corners_of(first)
    cb = mesh.corners_of(second)
    s1 = ca[arr.shared1[0]]
    s2 = cb[arr.shared2[1]]
    da = ca[arr.disjoint[0]]
    db = cb[arr.disjoint[1]]

    new_first = mesh.insert_triangle(s1, db, da)
    new_second = mesh.insert_triangle(s2, da, db)

    P = mesh.points
    pa, pb = P[da], P[db]
    for old in (first, second):
        for v in mesh.remaining_vertices(old):
            dest = new_first if point_left_of(P[v], pa, pb) else new_second
            mesh.transfer_vertex(old, v, dest)

    _move_adjacent(mesh, first, arr.shared1[0], new_second, 2)
    _move_adjacent(mesh, first, arr.shared2[0], new_first, 1)
    _move_adjacent(mesh, second, arr.shared1[1], new_second, 1)
    _move_adjacent(mesh, second, arr.shared2[1], new_first, 2)
    mesh.set_adjacent(new_first, 0, new_second)
    mesh.set_adjacent(new_second, 0, new_first)

    mesh.condemn(first)
    mesh.condemn(second)
    return new_first, new_second


def _flip_reason(ctx: RepairContext, first: int, second: int, arr: CornerArrangement) -> Optional[str]:
    mesh = ctx.mesh
    P = mesh.points
    ca = mesh.corners_of(first)
    cb = mesh.corners_of(second)
    for cs in (ca, cb):
        if has_coincident_corners(P[cs[0]], P[cs[1]], P[cs[2]]):
            raise DegenerateGeometryError(
                f"triangle {cs} has coincident corners; duplicate points are not supported")

    s1 = ca[arr.shared1[0]]
    s2 = ca[arr.shared2[0]]
    da = ca[arr.disjoint[0]]
    db = cb[arr.disjoint[1]]
    disjoint_blocking = ctx.constraints.crosses(da, db)

    if is_collinear(P[ca[0]], P[ca[1]], P[ca[2]]) or is_collinear(P[cb[0]], P[cb[1]], P[cb[2]]):
        if (s1, s2) in ctx.constraints or disjoint_blocking:
            return None
        return 'degenerate' if quad_is_convex(mesh, first, second, arr) else None

    boundary = ctx.boundary
    shared_enforced = s1 in boundary or s2 in boundary or ctx.constraints.crosses(s1, s2)
    disjoint_enforced = da in boundary or db in boundary or disjoint_blocking

    if disjoint_enforced and not shared_enforced:
        return None
    if disjoint_blocking:
        return None
    if shared_enforced and not disjoint_enforced:
        return 'forced' if quad_is_convex(mesh, first, second, arr) else None

    center1, r1 = circumcircle(P[ca[0]], P[ca[1]], P[ca[2]])
    center2, r2 = circumcircle(P[cb[0]], P[cb[1]], P[cb[2]])
    if squared_distance(P[db], center1) < r1 and squared_distance(P[da], center2) < r2:
        return 'delaunay'
    return None


def _repair_pair(ctx: RepairContext, first: int, second: int) -> Optional[Tuple[int, int]]:
    mesh = ctx.mesh
    if mesh.is_condemned(first) or mesh.is_condemned(second):
        return None
    arr = arrange_corners(mesh, first, second)
    reason = _flip_reason(ctx, first, second, arr)
    if reason is None:
        return None
    stats = ctx.stats
    stats.flips += 1
    if reason == 'forced':
        stats.forced_flips += 1
    elif reason == 'degenerate':
        stats.degenerate_flips += 1
    return flip_pair(mesh, first, second, arr)


def ensure_local_delaunay(ctx: RepairContext, first: int, second: int) -> bool:
    """Repair the pair (first, second) and every pair a flip makes suspect.

    Returns True if the initial pair was flipped. Flipped triangles are only
    condemned; the caller sweeps them once the worklist is drained.
    """
    mesh = ctx.mesh
    pending = [(first, second)]
    flipped = False
    initial = True
    while pending:
        a, b = pending.pop()
        result = _repair_pair(ctx, a, b)
        if result is not None:
            flipped = flipped or initial
            new_first, new_second = result
            # LIFO: pushed in reverse so new_first's slot 1 is checked first
            for h, slot in ((new_second, 2), (new_second, 1), (new_first, 2), (new_first, 1)):
                other = mesh.get_adjacent(h, slot)
                if other is not None:
                    pending.append((h, other))
        initial = False
    return flipped
