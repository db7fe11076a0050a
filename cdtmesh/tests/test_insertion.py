"""Tests for the super-triangle bootstrap and the 1 -> 3 point insertion."""
import numpy as np
import pytest

from cdtmesh.core.bootstrap import boundary_positions, bootstrap_mesh
from cdtmesh.core.conformity import check_adjacency, check_containment
from cdtmesh.core.constants import BOUNDARY_EPSILON
from cdtmesh.core.constraints import ConstraintSet
from cdtmesh.core.geometry import is_clockwise, orient, triangles_signed_areas
from cdtmesh.core.insertion import insert_point
from cdtmesh.core.repair import RepairContext
from cdtmesh.core.stats import TriangulationStats


def _context(points):
    mesh, boundary, root = bootstrap_mesh(points)
    ctx = RepairContext(mesh, frozenset(boundary), ConstraintSet(mesh.points), TriangulationStats())
    return ctx, boundary, root


class TestBootstrap:
    def test_boundary_clockwise_and_enclosing(self):
        rng = np.random.RandomState(7)
        pts = rng.uniform(-10.0, 10.0, size=(200, 2))
        pts = np.vstack([pts, [[10, 10], [10, -10], [-10, 10], [-10, -10]]])
        b = boundary_positions(pts)
        assert is_clockwise(b[0], b[1], b[2])
        for p in pts:
            for i in range(3):
                assert orient(b[i], b[(i + 1) % 3], p) < 0

    def test_boundary_placement(self):
        b = boundary_positions([[3.0, -5.0], [1.0, 2.0]])
        s = 20.0
        e = BOUNDARY_EPSILON
        np.testing.assert_allclose(b, [[e, s - e], [s + e, -e], [-s - e, -s + e]])

    def test_extent_floor(self):
        b = boundary_positions([[0.0, 0.0]])
        assert b[1, 0] == pytest.approx(4.0 + BOUNDARY_EPSILON)

    def test_root_holds_every_point(self):
        pts = np.array([[0.0, 0.0], [1.0, 0.0], [0.0, 1.0]])
        ctx, boundary, root = _context(pts)
        mesh = ctx.mesh
        assert boundary == (3, 4, 5)
        assert len(mesh) == 1
        assert mesh.corners_of(root) == boundary
        assert sorted(mesh.remaining_vertices(root)) == [0, 1, 2]
        assert mesh.container.tolist()[:3] == [root] * 3
        check_containment(mesh)


class TestInsertPoint:
    def test_first_split(self):
        pts = np.array([[0.0, 0.0], [1.0, 0.2], [0.3, 1.0]])
        ctx, boundary, root = _context(pts)
        mesh = ctx.mesh
        children = insert_point(ctx, 0)
        assert len(mesh) == 3
        assert not mesh.is_live(root)
        assert [mesh.corners_of(c)[:2] for c in children] == [
            (boundary[0], boundary[1]), (boundary[1], boundary[2]), (boundary[2], boundary[0])]
        assert all(mesh.corner(c, 2) == 0 for c in children)
        for i, c in enumerate(children):
            assert mesh.get_adjacent(c, 0) == children[(i + 1) % 3]
            assert mesh.get_adjacent(c, 1) == children[(i + 2) % 3]
            assert mesh.get_adjacent(c, 2) is None
        check_adjacency(mesh)
        check_containment(mesh)
        assert mesh.container[0] == -1
        assert ctx.stats.points_inserted == 1

    def test_all_points_keep_invariants(self):
        rng = np.random.RandomState(11)
        pts = rng.rand(40, 2)
        ctx, boundary, _ = _context(pts)
        mesh = ctx.mesh
        for v in range(len(pts)):
            insert_point(ctx, v)
            check_adjacency(mesh)
            check_containment(mesh)
        # Euler: N points inside the super-triangle give 2N + 1 triangles
        assert len(mesh) == 2 * len(pts) + 1
        _, corners, _ = mesh.live_arrays()
        assert np.all(triangles_signed_areas(mesh.points, corners) < 0)
        assert np.all(mesh.container[:len(pts)] == -1)
