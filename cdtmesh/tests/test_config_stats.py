import io
import logging

import numpy as np
import pytest

import cdtmesh
from cdtmesh.core.config import TriangulationConfig
from cdtmesh.core.conformity import (build_edge_to_tri_map, boundary_edges_from_map, count_boundary_loops,
                                     check_mesh_conformity, check_delaunay, missing_constraints)
from cdtmesh.core.logging_utils import get_logger, configure_logging
from cdtmesh.core.stats import TriangulationStats, format_stats_table, print_stats


class TestConfig:
    def test_defaults(self):
        cfg = TriangulationConfig()
        assert cfg.insertion_order == 'input'
        assert cfg.trim == 'auto'
        assert cfg.check_duplicates and not cfg.validate_constraints
        assert cfg.recover_constraints
        assert cfg.max_legalize_passes > 0

    @pytest.mark.parametrize("kwargs", [
        {'insertion_order': 'random'},
        {'trim': 'outer'},
        {'max_legalize_passes': -1},
    ])
    def test_rejects_bad_values(self, kwargs):
        with pytest.raises(ValueError):
            TriangulationConfig(**kwargs)


class TestStats:
    def test_to_dict_and_table(self):
        s = TriangulationStats(points_inserted=4, flips=2)
        s.record_time('insert', 0.001)
        s.record_time('insert', 0.002)
        d = s.to_dict()
        assert d['flips_per_point'] == pytest.approx(0.5)
        assert d['phase_times']['insert'] == pytest.approx(0.003)
        table = format_stats_table(s)
        assert 'flips' in table
        assert 'time[insert]' in table

    def test_print_stats(self):
        buf = io.StringIO()
        print_stats(TriangulationStats(), file=buf)
        assert 'points_inserted' in buf.getvalue()
        buf = io.StringIO()
        print_stats(TriangulationStats(), file=buf, pretty=False)
        assert buf.getvalue().startswith('{')


class TestLogging:
    def test_namespace(self):
        assert get_logger('demo').name == 'cdtmesh.demo'
        assert get_logger('cdtmesh.trim').name == 'cdtmesh.trim'
        assert logging.getLogger('cdtmesh').propagate is False

    def test_configure_level(self):
        pkg = logging.getLogger('cdtmesh')
        prev = pkg.level
        try:
            configure_logging('WARNING')
            assert pkg.level == logging.WARNING
            configure_logging(logging.DEBUG)
            assert pkg.level == logging.DEBUG
        finally:
            pkg.setLevel(prev)

    def test_driver_logs_phases(self):
        buf = io.StringIO()
        handler = logging.StreamHandler(buf)
        pkg = logging.getLogger('cdtmesh')
        pkg.addHandler(handler)
        try:
            cdtmesh.triangulate([(0, 0), (1, 0), (0, 1)])
        finally:
            pkg.removeHandler(handler)
        assert 'triangulation done' in buf.getvalue()


class TestConformity:
    def test_edge_maps(self):
        tris = np.array([[0, 2, 1], [0, 3, 2]])
        emap = build_edge_to_tri_map(tris)
        assert emap[(0, 2)] == {0, 1}
        assert boundary_edges_from_map(emap) == {(1, 2), (0, 1), (0, 3), (2, 3)}
        assert count_boundary_loops(boundary_edges_from_map(emap)) == 1

    def test_flags_problems(self):
        pts = np.array([[0, 0], [1, 0], [1, 1], [0, 1], [2, 2]], dtype=float)
        ok, _ = check_mesh_conformity(pts, [[0, 2, 1], [0, 3, 2]], reject_counter_clockwise=True)
        assert ok
        ok, msgs = check_mesh_conformity(pts, [[0, 2, 1], [0, 2, 1]])
        assert not ok and any('Duplicate' in m for m in msgs)
        ok, msgs = check_mesh_conformity(pts, [[0, 2, 4]])
        assert not ok and any('near-zero' in m for m in msgs)
        ok, msgs = check_mesh_conformity(pts, [[0, 1, 2]], reject_counter_clockwise=True)
        assert not ok
        ok, msgs = check_mesh_conformity(pts, [[0, 1, 9]])
        assert not ok
        assert check_mesh_conformity(pts, np.empty((0, 3)))[0] is False

    def test_delaunay_and_constraints(self):
        pts = np.array([[-1.0, 0.0], [1.0, 0.0], [0.0, 0.3], [0.0, -0.3]])
        tris = np.array([[0, 2, 1], [1, 3, 0]])
        nbrs = np.array([[-1, 1, -1], [-1, 0, -1]])
        assert check_delaunay(pts, tris, nbrs) == [(0, 1)]
        assert check_delaunay(pts, tris, nbrs, [(1, 0)]) == []
        assert missing_constraints(tris, [(2, 3), (1, 0)]) == [(2, 3)]


def test_public_api():
    for name in cdtmesh.__all__:
        assert hasattr(cdtmesh, name), name
    assert isinstance(cdtmesh.__version__, str)
    assert issubclass(cdtmesh.DegenerateGeometryError, cdtmesh.TriangulationError)
    assert issubclass(cdtmesh.MeshInvariantError, AssertionError)
