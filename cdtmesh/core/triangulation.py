"""Constrained Delaunay triangulation driver and public entry points.

Pipeline of a run:

1. validate the input and pick the trim mode;
2. bootstrap the super-triangle and insert every point (1 -> 3 split plus
   local repair);
3. recover constrained edges still missing from the mesh and legalize;
4. trim the triangles outside the polygon or the convex hull;
5. compact the survivors into a TriangulationResult.
"""
from __future__ import annotations

import dataclasses
import time
from dataclasses import dataclass, field
from typing import Iterable, Optional, Set, Tuple

import numpy as np

from .bootstrap import bootstrap_mesh
from .config import TriangulationConfig
from .conformity import check_adjacency, check_containment
from .constraints import ConstraintSet
from .errors import DegenerateGeometryError
from .geometry import (compute_triangulation_area, ensure_positive_orientation, normalize_edge,
                       triangles_signed_areas)
from .hull import hull_edges, points_collinear
from .insertion import insert_point
from .logging_utils import get_logger
from .recovery import legalize, recover_constraints
from .repair import RepairContext
from .stats import TriangulationStats
from .trim import trim_outer_triangles

__all__ = ['TriangulationResult', 'ConstrainedDelaunayTriangulator', 'triangulate',
           'triangulate_constrained', 'triangulate_polygon']

logger = get_logger('cdtmesh.triangulation')


@dataclass
class TriangulationResult:
    """Compact output of a triangulation.

    Attributes
    ----------
    points : ndarray (N,2)
        float64 copy of the input coordinates.
    triangles : ndarray (M,3) int32
        clockwise corner indices into ``points``.
    neighbors : ndarray (M,3) int32
        row index of the triangle across the edge opposite each corner, -1 if none.
    constrained_edges : set of (int, int)
        normalized constrained edges, all present in ``triangles``.
    stats : TriangulationStats
    """
    points: np.ndarray
    triangles: np.ndarray
    neighbors: np.ndarray
    constrained_edges: Set[Tuple[int, int]] = field(default_factory=set)
    stats: TriangulationStats = field(default_factory=TriangulationStats)

    def __len__(self):
        return int(self.triangles.shape[0])

    def edges(self) -> np.ndarray:
        """Unique undirected edges as a sorted (E,2) int array."""
        if len(self) == 0:
            return np.empty((0, 2), dtype=np.int32)
        t = self.triangles
        e = np.vstack((t[:, [0, 1]], t[:, [1, 2]], t[:, [2, 0]]))
        e.sort(axis=1)
        return np.unique(e, axis=0)

    def ccw_triangles(self) -> np.ndarray:
        """Triangles reordered counter-clockwise (the matplotlib/scipy convention)."""
        return ensure_positive_orientation(self.points, self.triangles)

    def area(self) -> float:
        return compute_triangulation_area(self.points, self.triangles)


def _as_points(points) -> np.ndarray:
    pts = np.asarray(points, dtype=np.float64)
    if pts.size == 0:
        return np.empty((0, 2), dtype=np.float64)
    if pts.ndim != 2 or pts.shape[1] != 2:
        raise ValueError(f"points must have shape (N,2), got {pts.shape}")
    if not np.all(np.isfinite(pts)):
        raise ValueError("points must be finite")
    return pts.copy()


def _check_duplicates(pts: np.ndarray):
    order = np.lexsort((pts[:, 1], pts[:, 0]))
    s = pts[order]
    same = np.flatnonzero(np.all(s[1:] == s[:-1], axis=1))
    if same.size:
        i, j = sorted((int(order[same[0]]), int(order[same[0] + 1])))
        raise DegenerateGeometryError(f"points {i} and {j} coincide at ({pts[i, 0]}, {pts[i, 1]})")


class ConstrainedDelaunayTriangulator:
    """One triangulation run over fixed input.

    Parameters
    ----------
    points : array-like (N,2)
    edges : iterable of (int, int), optional
        Constrained edges as index pairs into ``points``.
    config : TriangulationConfig, optional
    """

    def __init__(self, points, edges: Optional[Iterable[Tuple[int, int]]] = None,
                 config: Optional[TriangulationConfig] = None):
        self.points = _as_points(points)
        self.config = config or TriangulationConfig()
        self.constraints = ConstraintSet(self.points, edges or ())
        self.stats = TriangulationStats()

    def _empty_result(self) -> TriangulationResult:
        return TriangulationResult(
            points=self.points,
            triangles=np.empty((0, 3), dtype=np.int32),
            neighbors=np.empty((0, 3), dtype=np.int32),
            constrained_edges=set(self.constraints.pairs),
            stats=self.stats,
        )

    def insertion_order(self) -> np.ndarray:
        n = self.points.shape[0]
        if self.config.insertion_order == 'sorted':
            return np.lexsort((self.points[:, 1], self.points[:, 0]))
        return np.arange(n)

    def trim_mode(self) -> str:
        mode = self.config.trim
        if mode == 'auto':
            mode = 'polygon' if self.constraints.has_cycle() else 'hull'
        if mode == 'polygon' and not self.constraints.has_cycle():
            raise ValueError("polygon trimming requires constrained edges that form a closed loop")
        return mode

    def _validate(self):
        cfg = self.config
        if cfg.check_duplicates:
            _check_duplicates(self.points)
        if points_collinear(self.points):
            raise DegenerateGeometryError("input points are collinear; no triangle can be formed")
        if cfg.validate_constraints:
            crossing = self.constraints.crossing_pairs()
            if crossing:
                a, b = crossing[0]
                raise ValueError(f"constrained edges {a} and {b} cross ({len(crossing)} crossing pairs)")

    def run(self) -> TriangulationResult:
        cfg = self.config
        stats = self.stats
        start = time.perf_counter()
        n = self.points.shape[0]
        if n < 3:
            logger.debug("fewer than three points (%d): empty triangulation", n)
            return self._empty_result()

        t0 = time.perf_counter()
        self._validate()
        mode = self.trim_mode()
        stats.trim_mode = mode
        user_edges = list(self.constraints)
        if mode == 'hull':
            hedges = hull_edges(self.points)
            barrier = ConstraintSet(self.points, hedges)
            engine_edges = user_edges + hedges
        else:
            barrier = self.constraints
            engine_edges = user_edges
        mesh, boundary, _ = bootstrap_mesh(self.points)
        ctx = RepairContext(mesh, frozenset(boundary), ConstraintSet(mesh.points, engine_edges), stats)
        stats.record_time('setup', time.perf_counter() - t0)
        logger.debug("triangulating %d points, %d constrained edges, trim mode %s", n, len(user_edges), mode)

        t0 = time.perf_counter()
        for v in self.insertion_order():
            insert_point(ctx, int(v))
            if cfg.debug:
                logger.debug("vertex %d inserted; %d live triangles", int(v), len(mesh))
            if cfg.check_invariants:
                check_adjacency(mesh)
                check_containment(mesh)
        stats.triangles_before_trim = len(mesh)
        stats.record_time('insert', time.perf_counter() - t0)

        if cfg.recover_constraints and ctx.constraints:
            t0 = time.perf_counter()
            recover_constraints(ctx)
            stats.record_time('recover', time.perf_counter() - t0)
        if cfg.max_legalize_passes:
            t0 = time.perf_counter()
            legalize(ctx, cfg.max_legalize_passes)
            stats.record_time('legalize', time.perf_counter() - t0)
        if cfg.check_invariants:
            check_adjacency(mesh)

        t0 = time.perf_counter()
        stats.triangles_trimmed = trim_outer_triangles(mesh, boundary, barrier)
        stats.record_time('trim', time.perf_counter() - t0)

        _, corners, neighbors = mesh.live_arrays()
        areas = triangles_signed_areas(mesh.points, corners)
        flat = np.flatnonzero(areas == 0.0)
        if flat.size:
            tri = tuple(int(c) for c in corners[flat[0]])
            raise DegenerateGeometryError(
                f"zero-area triangle {tri} in the result; a point lies on a constrained edge or duplicates another")
        stats.triangles_out = int(corners.shape[0])
        stats.time_total = time.perf_counter() - start
        logger.debug("triangulation done: %d triangles, %d flips (%d recovery), %.3f ms",
                     stats.triangles_out, stats.flips, stats.recovery_flips, stats.time_total * 1000.0)
        return TriangulationResult(
            points=self.points,
            triangles=corners.astype(np.int32),
            neighbors=neighbors,
            constrained_edges={normalize_edge(u, v) for u, v in user_edges},
            stats=stats,
        )


def triangulate(points, config: Optional[TriangulationConfig] = None) -> TriangulationResult:
    """Delaunay triangulation of the convex hull of `points`."""
    return ConstrainedDelaunayTriangulator(points, None, config).run()


def triangulate_constrained(points, edges, config: Optional[TriangulationConfig] = None) -> TriangulationResult:
    """Constrained Delaunay triangulation; `edges` are index pairs into `points`.

    With the default ``trim='auto'`` the result covers the region enclosed by
    the constrained edges when they form a closed loop, otherwise the convex hull.
    """
    return ConstrainedDelaunayTriangulator(points, edges, config).run()


def triangulate_polygon(points, config: Optional[TriangulationConfig] = None) -> TriangulationResult:
    """Triangulate the simple polygon whose vertices are `points`, in order."""
    pts = _as_points(points)
    n = pts.shape[0]
    edges = [(i, (i + 1) % n) for i in range(n)] if n >= 3 else []
    config = dataclasses.replace(config or TriangulationConfig(), trim='polygon')
    return ConstrainedDelaunayTriangulator(pts, edges, config).run()
