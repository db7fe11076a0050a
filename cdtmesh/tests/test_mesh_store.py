import numpy as np
import pytest

from cdtmesh.core.errors import MeshInvariantError
from cdtmesh.core.mesh_store import MeshStore


def _quad_store():
    pts = np.array([[-1.0, 0.0], [1.0, 0.0], [0.0, 0.3], [0.0, -0.3]])
    mesh = MeshStore(pts)
    a = mesh.insert_triangle(0, 2, 1)
    b = mesh.insert_triangle(1, 3, 0)
    # edge (0,1) is opposite corner slot 1 in both
    mesh.set_adjacent(a, 1, b)
    mesh.set_adjacent(b, 1, a)
    return mesh, a, b


def test_rejects_bad_shape():
    with pytest.raises(ValueError):
        MeshStore(np.zeros((3, 3)))


def test_insert_and_corner_access():
    mesh, a, b = _quad_store()
    assert len(mesh) == 2 and mesh.size == 2
    assert mesh.corners_of(a) == (0, 2, 1)
    assert mesh.corner(b, 1) == 3
    assert mesh.has_corner(a, 2) and not mesh.has_corner(a, 3)
    assert mesh.directed_edges(a) == ((0, 2), (2, 1), (1, 0))
    assert mesh.slot_of_edge(a, 0, 1) == 1
    assert mesh.slot_of_edge(a, 1, 0) == 1
    with pytest.raises(MeshInvariantError):
        mesh.slot_of_edge(a, 0, 3)
    assert mesh.corner_position(a, 1).tolist() == [0.0, 0.3]


def test_adjacency_and_back_reference():
    mesh, a, b = _quad_store()
    assert mesh.get_adjacent(a, 1) == b
    assert mesh.get_adjacent(a, 0) is None
    c = mesh.insert_triangle(1, 3, 0)
    mesh.replace_back_reference(a, c, b)
    assert mesh.get_adjacent(b, 1) == c
    with pytest.raises(MeshInvariantError):
        mesh.replace_back_reference(a, c, b)
    # None neighbour is a no-op
    mesh.replace_back_reference(a, c, None)


def test_handles_stable_across_growth():
    mesh = MeshStore(np.zeros((3, 2)), capacity=4)
    handles = [mesh.insert_triangle(0, 1, 2) for _ in range(20)]
    assert handles == list(range(20))
    assert mesh.corners.shape[0] >= 20
    assert all(mesh.is_live(h) for h in handles)


def test_condemn_and_sweep():
    mesh, a, b = _quad_store()
    mesh.set_adjacent(b, 1, None)
    mesh.condemn(a)
    assert mesh.is_condemned(a) and mesh.is_live(a)
    assert mesh.sweep() == 1
    assert not mesh.is_live(a)
    assert mesh.is_live(b) and mesh.corners_of(b) == (1, 3, 0)
    assert len(mesh) == 1
    assert list(mesh.live_handles()) == [b]
    with pytest.raises(MeshInvariantError):
        mesh.erase(a)


def test_remaining_vertices_and_container():
    mesh, a, b = _quad_store()
    mesh.add_vertex(a, 3)
    assert mesh.container[3] == a
    with pytest.raises(MeshInvariantError):
        mesh.erase(a)
    mesh.transfer_vertex(a, 3, b)
    assert mesh.remaining_vertices(a) == []
    assert mesh.remaining_vertices(b) == [3]
    assert mesh.container[3] == b
    mesh.remove_vertex(b, 3)
    assert mesh.container[3] == -1
    with pytest.raises(MeshInvariantError):
        mesh.remove_vertex(b, 3)


def test_live_arrays_compacts_neighbors():
    mesh, a, b = _quad_store()
    spare = mesh.insert_triangle(0, 1, 2)
    mesh.erase(spare)
    c = mesh.insert_triangle(2, 1, 0)
    handles, corners, neighbors = mesh.live_arrays()
    assert handles.tolist() == [a, b, c]
    assert corners.tolist() == [[0, 2, 1], [1, 3, 0], [2, 1, 0]]
    assert neighbors.tolist() == [[-1, 1, -1], [-1, 0, -1], [-1, -1, -1]]
