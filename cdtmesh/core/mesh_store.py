"""Triangle arena used while the triangulation is being built.

Triangles live in rows of growable numpy arrays. A row index is the
triangle's handle: rows are appended, never reused, and erased rows are
tombstoned (``[-1, -1, -1]``), so a handle stays valid across insertions of
other triangles and becomes invalid only through ``erase``.

Per row the store keeps
- ``corners``   (int32, 3): vertex indices into ``points``, clockwise;
- ``adjacent``  (int32, 3): neighbour handle opposite each corner, ``-1`` for none;
- ``condemned`` (bool): superseded by a split or flip, pending ``sweep``;
- a set of *remaining* vertices (not yet inserted, geometrically inside).

Per vertex it keeps ``container``: the handle whose remaining set holds the
vertex, or ``-1``.
"""
from __future__ import annotations

from typing import Iterator, List, Optional, Set, Tuple

import numpy as np

from .errors import MeshInvariantError

__all__ = ['MeshStore']


class MeshStore:
    def __init__(self, points, capacity: int = 64):
        pts = np.asarray(points, dtype=np.float64)
        if pts.ndim != 2 or pts.shape[1] != 2:
            raise ValueError("points must have shape (N,2)")
        self.points = np.ascontiguousarray(pts)
        capacity = max(4, int(capacity))
        self.corners = np.full((capacity, 3), -1, dtype=np.int32)
        self.adjacent = np.full((capacity, 3), -1, dtype=np.int32)
        self.condemned = np.zeros(capacity, dtype=bool)
        self.remaining: List[Optional[Set[int]]] = []
        self.container = np.full(self.points.shape[0], -1, dtype=np.int32)
        self._size = 0
        self._live = 0

    # --- capacity ---
    def _grow(self):
        cap = self.corners.shape[0] * 2
        corners = np.full((cap, 3), -1, dtype=np.int32)
        adjacent = np.full((cap, 3), -1, dtype=np.int32)
        condemned = np.zeros(cap, dtype=bool)
        corners[:self._size] = self.corners[:self._size]
        adjacent[:self._size] = self.adjacent[:self._size]
        condemned[:self._size] = self.condemned[:self._size]
        self.corners, self.adjacent, self.condemned = corners, adjacent, condemned

    def __len__(self):
        return self._live

    @property
    def size(self) -> int:
        """Number of rows ever allocated (live + tombstoned)."""
        return self._size

    # --- triangle lifecycle ---
    def insert_triangle(self, c0: int, c1: int, c2: int) -> int:
        if self._size == self.corners.shape[0]:
            self._grow()
        h = self._size
        self.corners[h] = (c0, c1, c2)
        self.adjacent[h] = -1
        self.condemned[h] = False
        self.remaining.append(set())
        self._size += 1
        self._live += 1
        return h

    def erase(self, handle: int):
        """Tombstone a triangle. Callers must have rewired all adjacency first."""
        self._check_live(handle)
        if self.remaining[handle]:
            raise MeshInvariantError(
                f"erasing triangle {handle} that still holds {len(self.remaining[handle])} remaining vertices")
        self.corners[handle] = -1
        self.adjacent[handle] = -1
        self.condemned[handle] = False
        self.remaining[handle] = None
        self._live -= 1

    def is_live(self, handle: int) -> bool:
        return 0 <= handle < self._size and self.corners[handle, 0] != -1

    def _check_live(self, handle: int):
        if not self.is_live(handle):
            raise MeshInvariantError(f"triangle handle {handle} is not live")

    def condemn(self, handle: int):
        self.condemned[handle] = True

    def is_condemned(self, handle: int) -> bool:
        return bool(self.condemned[handle])

    def sweep(self) -> int:
        """Erase every condemned triangle; returns how many were erased."""
        doomed = np.flatnonzero(self.condemned[:self._size])
        for h in doomed:
            self.erase(int(h))
        return int(doomed.size)

    def live_handles(self) -> Iterator[int]:
        """Live (possibly condemned) handles in allocation order."""
        for h in np.flatnonzero(self.corners[:self._size, 0] != -1):
            yield int(h)

    # --- corners ---
    def corners_of(self, handle: int) -> Tuple[int, int, int]:
        c = self.corners[handle]
        return int(c[0]), int(c[1]), int(c[2])

    def corner(self, handle: int, index: int) -> int:
        return int(self.corners[handle, index])

    def position(self, vertex: int):
        return self.points[vertex]

    def corner_position(self, handle: int, index: int):
        return self.points[self.corners[handle, index]]

    def has_corner(self, handle: int, vertex: int) -> bool:
        return bool(np.any(self.corners[handle] == vertex))

    def directed_edges(self, handle: int):
        a, b, c = self.corners_of(handle)
        return ((a, b), (b, c), (c, a))

    def slot_of_edge(self, handle: int, u: int, v: int) -> int:
        """Slot (opposite corner index) of the edge {u, v} in a triangle."""
        cs = self.corners_of(handle)
        for i in range(3):
            if {cs[(i + 1) % 3], cs[(i + 2) % 3]} == {u, v}:
                return i
        raise MeshInvariantError(f"triangle {handle} {cs} has no edge ({u}, {v})")

    # --- adjacency ---
    def get_adjacent(self, handle: int, slot: int) -> Optional[int]:
        other = int(self.adjacent[handle, slot])
        return other if other >= 0 else None

    def set_adjacent(self, handle: int, slot: int, other: Optional[int]):
        self.adjacent[handle, slot] = -1 if other is None else other

    def replace_back_reference(self, old: int, new: Optional[int], other: Optional[int]):
        """Make `other` reference `new` wherever it referenced `old`."""
        if other is None:
            return
        for i in range(3):
            if self.adjacent[other, i] == old:
                self.set_adjacent(other, i, new)
                return
        raise MeshInvariantError(f"triangle {other} is not adjacent to {old}")

    # --- remaining vertices ---
    def add_vertex(self, handle: int, vertex: int):
        self.remaining[handle].add(vertex)
        self.container[vertex] = handle

    def remove_vertex(self, handle: int, vertex: int):
        try:
            self.remaining[handle].remove(vertex)
        except KeyError:
            raise MeshInvariantError(f"vertex {vertex} is not remaining in triangle {handle}") from None
        self.container[vertex] = -1

    def transfer_vertex(self, source: int, vertex: int, dest: int):
        self.remaining[source].discard(vertex)
        self.remaining[dest].add(vertex)
        self.container[vertex] = dest

    def remaining_vertices(self, handle: int) -> List[int]:
        """Snapshot of the remaining set (safe to iterate while transferring)."""
        return list(self.remaining[handle])

    # --- export ---
    def live_arrays(self):
        """Compact the live triangles.

        Returns (handles, corners, neighbors) where `neighbors` is expressed
        in compacted row indices (-1 where the neighbour is absent or not live).
        """
        handles = np.flatnonzero(self.corners[:self._size, 0] != -1)
        remap = np.full(self._size + 1, -1, dtype=np.int64)
        remap[handles] = np.arange(handles.size)
        corners = self.corners[handles].copy()
        adj = self.adjacent[handles].astype(np.int64)
        # index -1 maps to the sentinel slot at the end, which stays -1
        neighbors = remap[np.where(adj >= 0, adj, self._size)].astype(np.int32)
        return handles, corners, neighbors
