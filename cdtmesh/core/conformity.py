"""Conformity and structural checks for triangulations and the build arena."""
from __future__ import annotations
import numpy as np
from collections import defaultdict, deque
from .geometry import triangles_signed_areas, circumcircle, squared_distance, normalize_edge
from .constants import EPS_AREA, EPS_INCIRCLE_REL
from .errors import MeshInvariantError

__all__ = [
	'build_edge_to_tri_map','boundary_edges_from_map','count_boundary_loops','check_mesh_conformity',
	'check_adjacency','check_containment','check_delaunay','missing_constraints'
]

def build_edge_to_tri_map(triangles):
	edge_map = {}
	for t_idx, tri in enumerate(triangles):
		arr = np.asarray(tri)
		if np.all(arr == -1):
			continue
		for i in range(3):
			key = normalize_edge(arr[i], arr[(i+1)%3])
			edge_map.setdefault(key, set()).add(t_idx)
	return edge_map

def boundary_edges_from_map(edge_map):
	return {e for e, s in edge_map.items() if len(s) == 1}

def count_boundary_loops(boundary_edges):
	"""Number of connected components formed by the boundary edges."""
	adj = defaultdict(list)
	for a, b in boundary_edges:
		adj[int(a)].append(int(b)); adj[int(b)].append(int(a))
	visited = set(); loops = 0
	for v in adj:
		if v in visited: continue
		loops += 1
		dq = deque([v]); visited.add(v)
		while dq:
			u = dq.popleft()
			for w in adj[u]:
				if w not in visited:
					visited.add(w); dq.append(w)
	return loops

def check_mesh_conformity(points, triangles, verbose=False, reject_boundary_loops=False,
						  reject_counter_clockwise=False):
	"""Structural sanity of a compact triangle array.

	Flags out-of-range indices, near-zero areas, duplicate triangles and
	non-manifold edges; optionally counter-clockwise rows and more than one
	boundary loop. Returns (ok, messages).
	"""
	triangles = np.ascontiguousarray(np.asarray(triangles, dtype=np.int32)).reshape(-1, 3)
	if triangles.size == 0:
		return False, ["No active triangles."]
	msgs = []
	ok = True
	points = np.ascontiguousarray(np.asarray(points, dtype=np.float64))
	npts = len(points)
	if triangles.max() >= npts or triangles.min() < 0:
		return False, ["Triangle indices out of range."]
	areas = triangles_signed_areas(points, triangles)
	abs_areas = np.abs(areas)
	zero_mask = abs_areas < EPS_AREA
	if np.any(zero_mask):
		for i in np.nonzero(zero_mask)[0][:50]:
			msgs.append(f"Triangle {int(i)} has near-zero area ({abs_areas[i]:.3e}).")
		ok = False
	if reject_counter_clockwise:
		ccw_mask = areas >= EPS_AREA
		if np.any(ccw_mask):
			for i in np.nonzero(ccw_mask)[0][:50]:
				msgs.append(f"Triangle {int(i)} is counter-clockwise (signed area {areas[i]:.3e}).")
			ok = False
	sorted_tris = np.sort(triangles, axis=1)
	_, tri_counts = np.unique(sorted_tris, axis=0, return_counts=True)
	if np.any(tri_counts > 1):
		msgs.append("Duplicate triangles detected.")
		ok = False
	edges = np.vstack((triangles[:, [0, 1]], triangles[:, [1, 2]], triangles[:, [2, 0]])).astype(int)
	edges.sort(axis=1)
	uniq_edges, counts = np.unique(edges, axis=0, return_counts=True)
	nm_mask = counts > 2
	if np.any(nm_mask):
		for e, c in zip(uniq_edges[nm_mask][:10], counts[nm_mask][:10]):
			msgs.append(f"Non-manifold edge ({int(e[0])}, {int(e[1])}) shared by >2 triangles (count={int(c)}).")
		ok = False
	if reject_boundary_loops:
		loops = count_boundary_loops(uniq_edges[counts == 1])
		if loops > 1:
			msgs.append(f"Boundary loops detected: {loops} (boundary edges={int(np.sum(counts == 1))})")
			ok = False
	if verbose:
		from .logging_utils import get_logger
		logger = get_logger('cdtmesh.conformity')
		for m in msgs:
			logger.info("Conformity: %s", m)
	return ok, msgs

def check_adjacency(mesh):
	"""Raise MeshInvariantError unless live arena links are mutual and share an edge.

	The neighbour at slot i must hold the edge opposite corner i, in the
	reverse direction, and must point back at the triangle.
	"""
	for h in mesh.live_handles():
		cs = mesh.corners_of(h)
		for i in range(3):
			other = mesh.get_adjacent(h, i)
			if other is None:
				continue
			if not mesh.is_live(other):
				raise MeshInvariantError(f"triangle {h} links to dead handle {other}")
			u, v = cs[(i+1)%3], cs[(i+2)%3]
			if (v, u) not in mesh.directed_edges(other):
				raise MeshInvariantError(f"triangle {h} and its neighbour {other} do not share edge ({u}, {v})")
			j = mesh.slot_of_edge(other, u, v)
			if mesh.get_adjacent(other, j) != h:
				raise MeshInvariantError(f"triangle {other} does not link back to {h}")

def check_containment(mesh):
	"""Raise MeshInvariantError unless every remaining vertex is held by the triangle it lies in."""
	P = mesh.points
	for h in mesh.live_handles():
		a, b, c = (P[v] for v in mesh.corners_of(h))
		for v in mesh.remaining_vertices(h):
			if int(mesh.container[v]) != h:
				raise MeshInvariantError(f"vertex {v} is held by {h} but its container is {int(mesh.container[v])}")
			p = P[v]
			tri = np.array([a, b, c])
			# clockwise triangle: p is inside when every turn corner -> corner -> p is clockwise or flat
			for k in range(3):
				e0 = tri[k]; e1 = tri[(k+1)%3]
				if (e1[0]-e0[0])*(p[1]-e0[1]) - (e1[1]-e0[1])*(p[0]-e0[0]) > 0.0:
					raise MeshInvariantError(f"remaining vertex {v} lies outside triangle {h}")

def check_delaunay(points, triangles, neighbors, constrained_edges=(), rel_tol=EPS_INCIRCLE_REL):
	"""Adjacent pairs violating the empty-circumcircle property across an unconstrained edge.

	Returns a list of (triangle, neighbour) index pairs; a point counts as
	inside only when it is inside by more than `rel_tol` of the squared radius.
	"""
	pts = np.asarray(points, dtype=np.float64)
	tris = np.asarray(triangles, dtype=np.int64).reshape(-1, 3)
	nbrs = np.asarray(neighbors, dtype=np.int64).reshape(-1, 3)
	constrained = {normalize_edge(u, v) for u, v in constrained_edges}
	bad = []
	for i, tri in enumerate(tris):
		center, r2 = circumcircle(pts[tri[0]], pts[tri[1]], pts[tri[2]])
		for slot in range(3):
			k = int(nbrs[i, slot])
			if k < 0 or k < i:
				continue
			if normalize_edge(tri[(slot+1)%3], tri[(slot+2)%3]) in constrained:
				continue
			opposite = [int(v) for v in tris[k] if v not in tri]
			if not opposite:
				continue
			if squared_distance(pts[opposite[0]], center) < r2 * (1.0 - rel_tol):
				bad.append((i, k))
	return bad

def missing_constraints(triangles, constrained_edges):
	"""Constrained edges (normalized) that are not edges of any triangle."""
	edge_map = build_edge_to_tri_map(np.asarray(triangles, dtype=np.int64).reshape(-1, 3))
	return sorted({normalize_edge(u, v) for u, v in constrained_edges} - set(edge_map))
