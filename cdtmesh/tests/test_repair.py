import numpy as np
import pytest

from cdtmesh.core.conformity import check_adjacency
from cdtmesh.core.constraints import ConstraintSet
from cdtmesh.core.errors import DegenerateGeometryError, MeshInvariantError
from cdtmesh.core.geometry import is_clockwise
from cdtmesh.core.mesh_store import MeshStore
from cdtmesh.core.repair import (RepairContext, arrange_corners, ensure_local_delaunay,
                                 flip_pair, quad_is_convex)
from cdtmesh.core.stats import TriangulationStats


def _thin_quad(points=None):
    """Two clockwise triangles sharing the long edge (0,1); the short diagonal (2,3) is Delaunay."""
    if points is None:
        points = [[-1.0, 0.0], [1.0, 0.0], [0.0, 0.3], [0.0, -0.3], [3.0, 0.0]]
    mesh = MeshStore(np.asarray(points, dtype=float))
    a = mesh.insert_triangle(0, 2, 1)
    b = mesh.insert_triangle(1, 3, 0)
    mesh.set_adjacent(a, 1, b)
    mesh.set_adjacent(b, 1, a)
    return mesh, a, b


def _ctx(mesh, edges=(), boundary=()):
    return RepairContext(mesh, frozenset(boundary), ConstraintSet(mesh.points, edges), TriangulationStats())


def test_arrange_corners():
    mesh, a, b = _thin_quad()
    arr = arrange_corners(mesh, a, b)
    ca, cb = mesh.corners_of(a), mesh.corners_of(b)
    assert arr.disjoint == (1, 1)
    assert ca[arr.shared1[0]] == cb[arr.shared1[1]]
    assert ca[arr.shared2[0]] == cb[arr.shared2[1]]
    P = mesh.points
    assert is_clockwise(P[ca[arr.shared1[0]]], P[ca[arr.shared2[0]]], P[ca[arr.disjoint[0]]])
    assert quad_is_convex(mesh, a, b, arr)


def test_arrange_corners_rejects_non_adjacent():
    mesh, a, b = _thin_quad()
    c = mesh.insert_triangle(1, 4, 3)
    with pytest.raises(MeshInvariantError):
        arrange_corners(mesh, a, c)


def test_flip_pair_rewires_and_moves_remaining():
    mesh, a, b = _thin_quad([[-1.0, 0.0], [1.0, 0.0], [0.0, 0.3], [0.0, -0.3], [0.5, 0.05], [-0.5, -0.05]])
    mesh.add_vertex(a, 4)
    mesh.add_vertex(b, 5)
    arr = arrange_corners(mesh, a, b)
    new_first, new_second = flip_pair(mesh, a, b, arr)
    assert mesh.is_condemned(a) and mesh.is_condemned(b)
    assert mesh.get_adjacent(new_first, 0) == new_second
    assert mesh.get_adjacent(new_second, 0) == new_first
    P = mesh.points
    for h in (new_first, new_second):
        c = mesh.corners_of(h)
        assert is_clockwise(P[c[0]], P[c[1]], P[c[2]])
        assert {2, 3} <= set(c)
    # (0.5, 0.05) is on the x > 0 side of the new diagonal, (-0.5, -0.05) on the other
    assert mesh.container[4] != mesh.container[5]
    assert mesh.remaining_vertices(a) == [] and mesh.remaining_vertices(b) == []
    assert 1 in mesh.corners_of(int(mesh.container[4]))
    assert 0 in mesh.corners_of(int(mesh.container[5]))
    mesh.sweep()
    check_adjacency(mesh)


def test_ensure_local_delaunay_flips_bad_pair():
    mesh, a, b = _thin_quad()
    ctx = _ctx(mesh)
    assert ensure_local_delaunay(ctx, a, b) is True
    mesh.sweep()
    assert len(mesh) == 2
    edges = {tuple(sorted(e)) for h in mesh.live_handles() for e in mesh.directed_edges(h)}
    assert (2, 3) in edges and (0, 1) not in edges
    assert ctx.stats.flips == 1
    check_adjacency(mesh)


def test_delaunay_pair_is_kept():
    mesh, a, b = _thin_quad([[-1.0, 0.0], [1.0, 0.0], [0.0, 2.0], [0.0, -2.0]])
    ctx = _ctx(mesh)
    assert ensure_local_delaunay(ctx, a, b) is False
    assert ctx.stats.flips == 0


def test_constrained_edge_is_not_flipped():
    mesh, a, b = _thin_quad()
    ctx = _ctx(mesh, edges=[(0, 1)])
    assert ensure_local_delaunay(ctx, a, b) is False
    assert not mesh.is_condemned(a)


def test_boundary_edge_forced_flip():
    # vertex 0 stands in for a synthetic boundary corner: the shared edge touches it, the diagonal does not
    mesh, a, b = _thin_quad([[-1.0, 0.0], [1.0, 0.0], [0.0, 2.0], [0.0, -2.0]])
    ctx = _ctx(mesh, boundary=[0])
    assert ensure_local_delaunay(ctx, a, b) is True
    assert ctx.stats.forced_flips == 1


def test_boundary_diagonal_is_never_created():
    mesh, a, b = _thin_quad()
    ctx = _ctx(mesh, boundary=[2])
    assert ensure_local_delaunay(ctx, a, b) is False


def test_degenerate_triangle_is_flipped_away():
    # vertex 4 lies on the shared edge of (0,4,1)/(1,3,0); triangle (0,4,1) has zero area
    pts = [[-1.0, 0.0], [1.0, 0.0], [0.0, 0.3], [0.0, -0.3], [0.0, 0.0]]
    mesh = MeshStore(np.asarray(pts))
    a = mesh.insert_triangle(0, 4, 1)
    b = mesh.insert_triangle(1, 3, 0)
    mesh.set_adjacent(a, 1, b)
    mesh.set_adjacent(b, 1, a)
    ctx = _ctx(mesh)
    assert ensure_local_delaunay(ctx, a, b) is True
    assert ctx.stats.degenerate_flips == 1
    mesh.sweep()
    edges = {tuple(sorted(e)) for h in mesh.live_handles() for e in mesh.directed_edges(h)}
    assert (3, 4) in edges


def test_coincident_corners_raise():
    pts = [[-1.0, 0.0], [1.0, 0.0], [0.0, 0.3], [0.0, -0.3], [-1.0, 0.0]]
    mesh = MeshStore(np.asarray(pts))
    a = mesh.insert_triangle(0, 4, 1)
    b = mesh.insert_triangle(1, 3, 0)
    mesh.set_adjacent(a, 1, b)
    mesh.set_adjacent(b, 1, a)
    with pytest.raises(DegenerateGeometryError):
        ensure_local_delaunay(_ctx(mesh), a, b)


def test_module_source_compiles_without_warnings():
    import warnings
    import cdtmesh.core.repair as repair_mod
    with open(repair_mod.__file__, encoding='utf-8') as fh:
        source = fh.read()
    with warnings.catch_warnings():
        warnings.simplefilter('error')
        compile(source, repair_mod.__file__, 'exec')
