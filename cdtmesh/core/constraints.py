"""Constrained edge set with a coordinate cache for crossing queries."""
from __future__ import annotations

from typing import Iterable, Iterator, Set, Tuple

import numpy as np

from .geometry import normalize_edge, vectorized_seg_intersect

__all__ = ['ConstraintSet']


class ConstraintSet:
    """Undirected vertex-index pairs that must appear as mesh edges.

    Membership is by vertex identity (index); crossing tests use the
    coordinates of `points`.
    """

    def __init__(self, points, edges: Iterable[Tuple[int, int]] = ()):
        self.points = np.asarray(points, dtype=np.float64)
        self.pairs: Set[Tuple[int, int]] = set()
        n = self.points.shape[0]
        for e in edges:
            u, v = int(e[0]), int(e[1])
            if u == v:
                raise ValueError(f"constrained edge ({u}, {v}) connects a point to itself")
            if not (0 <= u < n and 0 <= v < n):
                raise ValueError(f"constrained edge ({u}, {v}) references a point outside [0, {n})")
            self.pairs.add(normalize_edge(u, v))
        self._refresh()

    def _refresh(self):
        ordered = sorted(self.pairs)
        idx = np.asarray(ordered, dtype=np.int64).reshape(-1, 2)
        self._ordered = ordered
        self._a = self.points[idx[:, 0]]
        self._b = self.points[idx[:, 1]]

    def add(self, u: int, v: int):
        self.pairs.add(normalize_edge(u, v))
        self._refresh()

    def __len__(self):
        return len(self.pairs)

    def __bool__(self):
        return bool(self.pairs)

    def __iter__(self) -> Iterator[Tuple[int, int]]:
        return iter(self._ordered)

    def __contains__(self, edge) -> bool:
        return normalize_edge(edge[0], edge[1]) in self.pairs

    def crosses(self, u: int, v: int) -> bool:
        """True if the segment between vertices u and v properly crosses any constrained edge."""
        if not self.pairs:
            return False
        p = self.points[u]; q = self.points[v]
        return bool(np.any(vectorized_seg_intersect(p, q, self._a, self._b)))

    def crossing_pairs(self):
        """All pairs of constrained edges that properly cross each other."""
        out = []
        for i, (u, v) in enumerate(self._ordered):
            hits = vectorized_seg_intersect(self.points[u], self.points[v], self._a[i + 1:], self._b[i + 1:])
            for j in np.flatnonzero(hits):
                out.append(((u, v), self._ordered[i + 1 + int(j)]))
        return out

    def has_cycle(self) -> bool:
        """True if the edges contain a closed loop (union-find over endpoints)."""
        parent = {}

        def find(x):
            root = x
            while parent.setdefault(root, root) != root:
                root = parent[root]
            while parent[x] != root:
                parent[x], x = root, parent[x]
            return root

        for u, v in self._ordered:
            ru, rv = find(u), find(v)
            if ru == rv:
                return True
            parent[ru] = rv
        return False
