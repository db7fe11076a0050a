"""Convex hull edges of the input, split at points lying on a hull edge.

Qhull prunes the clearly interior points; the final hull is decided with
``orient``, the same predicate the engine uses, so points within qhull's
tolerance of a hull edge are classified exactly.
"""
from __future__ import annotations

from typing import List, Tuple

import numpy as np
from scipy.spatial import ConvexHull, QhullError

from .errors import DegenerateGeometryError
from .geometry import orient

__all__ = ['points_collinear', 'hull_candidates', 'hull_edges']


def points_collinear(points) -> bool:
    """True if all points lie on one line (or coincide)."""
    pts = np.asarray(points, dtype=np.float64).reshape(-1, 2)
    if pts.shape[0] < 3:
        return True
    rel = pts - pts[0]
    distinct = np.flatnonzero(np.any(rel != 0.0, axis=1))
    if distinct.size == 0:
        return True
    d = rel[distinct[0]]
    return bool(np.all(d[0] * rel[:, 1] - d[1] * rel[:, 0] == 0.0))


def hull_candidates(pts: np.ndarray) -> np.ndarray:
    """Indices of qhull's hull vertices plus the points it found coplanar with a hull edge."""
    try:
        hull = ConvexHull(pts, qhull_options='Qc')
    except QhullError as exc:
        raise DegenerateGeometryError(f"convex hull computation failed: {exc}") from exc
    idx = np.concatenate([hull.vertices, hull.coplanar[:, 0]]).astype(np.int64)
    return np.unique(idx)


def _chain(pts: np.ndarray, order) -> List[int]:
    # collinear points stay on the chain; only strict right turns are popped
    chain: List[int] = []
    for i in order:
        while len(chain) >= 2 and orient(pts[chain[-2]], pts[chain[-1]], pts[i]) < 0.0:
            chain.pop()
        chain.append(int(i))
    return chain


def hull_edges(points) -> List[Tuple[int, int]]:
    """Directed edges of the convex hull in counter-clockwise order.

    Input points lying exactly on a hull edge become hull vertices, so each
    returned edge contains no other input point.
    """
    pts = np.asarray(points, dtype=np.float64).reshape(-1, 2)
    if points_collinear(pts):
        raise DegenerateGeometryError("input points are collinear; no triangle can be formed")
    cand = hull_candidates(pts)
    order = cand[np.lexsort((pts[cand, 1], pts[cand, 0]))]
    lower = _chain(pts, order)
    upper = _chain(pts, order[::-1])
    cycle = lower[:-1] + upper[:-1]
    return list(zip(cycle, cycle[1:] + cycle[:1]))
