"""Geometry primitives and predicates for the triangulation engine.

Scalar predicates take array-like 2D points and work on their float values;
the vectorized variants operate on (M,2) arrays. Orientation convention:
``orient(a, b, c) > 0`` for counter-clockwise turns, so a triangle is
*clockwise* when ``orient <= 0`` (collinear triples count as clockwise).
"""
from __future__ import annotations
import numpy as np

from .errors import DegenerateGeometryError

__all__ = [
	'cross2','orient','is_clockwise','is_collinear','has_coincident_corners',
	'circumcircle','squared_distance','segments_intersect','vectorized_seg_intersect',
	'orient_vectorized','point_in_wedge','point_left_of','triangle_area',
	'triangles_signed_areas','ensure_positive_orientation','compute_triangulation_area',
	'normalize_edge','point_in_polygon','polygon_signed_area'
]


def cross2(ux, uy, vx, vy):
	"""z-component of the cross product of (ux,uy) and (vx,vy)."""
	return ux * vy - uy * vx


def orient(a, b, c):
	"""2D orientation (signed area * 2) for points a,b,c.

	Returns a positive value when (a,b,c) are counter-clockwise, negative when clockwise,
	and zero when colinear.
	"""
	ax, ay = float(a[0]), float(a[1])
	return cross2(float(b[0]) - ax, float(b[1]) - ay, float(c[0]) - ax, float(c[1]) - ay)


def is_clockwise(a, b, c):
	"""True when the turn a -> b -> c is clockwise or degenerate (collinear)."""
	return orient(a, b, c) <= 0.0


def is_collinear(a, b, c):
	return orient(a, b, c) == 0.0


def has_coincident_corners(a, b, c):
	pa = (float(a[0]), float(a[1])); pb = (float(b[0]), float(b[1])); pc = (float(c[0]), float(c[1]))
	return pa == pb or pa == pc or pb == pc


def circumcircle(a, b, c):
	"""Center and squared radius of the circle through a, b and c.

	Raises DegenerateGeometryError when two corners coincide or the corners are
	collinear (no finite circumcircle exists).
	"""
	if has_coincident_corners(a, b, c):
		raise DegenerateGeometryError(
			f"coincident triangle corners {tuple(a)}, {tuple(b)}, {tuple(c)}; duplicate points are not supported")
	ax, ay = float(a[0]), float(a[1])
	bx, by = float(b[0]) - ax, float(b[1]) - ay
	cx, cy = float(c[0]) - ax, float(c[1]) - ay
	d = 2.0 * cross2(bx, by, cx, cy)
	if d == 0.0:
		raise DegenerateGeometryError(f"collinear triangle corners {tuple(a)}, {tuple(b)}, {tuple(c)}")
	b2 = bx * bx + by * by
	c2 = cx * cx + cy * cy
	ux = (cy * b2 - by * c2) / d
	uy = (bx * c2 - cx * b2) / d
	return (ax + ux, ay + uy), ux * ux + uy * uy


def squared_distance(p, q):
	dx = float(p[0]) - float(q[0]); dy = float(p[1]) - float(q[1])
	return dx * dx + dy * dy


def segments_intersect(p1, p2, p3, p4):
	"""Return True if segment p1-p2 strictly intersects p3-p4 (excluding shared endpoints and colinear overlaps).

	Parameters accept array-like 2D points.
	"""
	p1 = np.asarray(p1); p2 = np.asarray(p2); p3 = np.asarray(p3); p4 = np.asarray(p4)
	# Exclude shared endpoints
	if (p1 == p3).all() or (p1 == p4).all() or (p2 == p3).all() or (p2 == p4).all():
		return False
	o1 = orient(p1, p2, p3); o2 = orient(p1, p2, p4)
	o3 = orient(p3, p4, p1); o4 = orient(p3, p4, p2)
	# Colinear overlapping segments are ignored (shared endpoints represent adjacency)
	if o1 == 0 and o2 == 0 and o3 == 0 and o4 == 0:
		return False
	return (o1*o2 < 0) and (o3*o4 < 0)


def orient_vectorized(a_pts, b_pts, c_pt):
	"""Compute orientation for arrays of segment endpoints a_pts,b_pts against a single point c_pt.

	a_pts, b_pts : arrays of shape (M,2)
	c_pt : single point-like (2,)
	Returns array of shape (M,) of orientation scalars.
	"""
	a = np.asarray(a_pts, dtype=np.float64); b = np.asarray(b_pts, dtype=np.float64); c = np.asarray(c_pt, dtype=np.float64)
	return (b[:,0]-a[:,0])*(c[1]-a[:,1]) - (b[:,1]-a[:,1])*(c[0]-a[:,0])


def vectorized_seg_intersect(a_pts, b_pts, c_pts, d_pts):
	"""Vectorized segment intersection test for broadcastable arrays of segments.

	a_pts, b_pts, c_pts, d_pts are arrays of shape (M,2) (or (2,) to broadcast a single
	segment). Returns boolean array (M,) where each element indicates whether segment
	a_pts[i]-b_pts[i] strictly intersects c_pts[i]-d_pts[i]. Shared endpoints and
	colinear overlapping are treated as non-intersecting (False).
	"""
	a = np.atleast_2d(np.asarray(a_pts, dtype=np.float64))
	b = np.atleast_2d(np.asarray(b_pts, dtype=np.float64))
	c = np.atleast_2d(np.asarray(c_pts, dtype=np.float64))
	d = np.atleast_2d(np.asarray(d_pts, dtype=np.float64))
	a, b, c, d = np.broadcast_arrays(a, b, c, d)
	if a.shape[0] == 0:
		return np.zeros((0,), dtype=bool)
	o1 = (b[:,0]-a[:,0])*(c[:,1]-a[:,1]) - (b[:,1]-a[:,1])*(c[:,0]-a[:,0])
	o2 = (b[:,0]-a[:,0])*(d[:,1]-a[:,1]) - (b[:,1]-a[:,1])*(d[:,0]-a[:,0])
	o3 = (d[:,0]-c[:,0])*(a[:,1]-c[:,1]) - (d[:,1]-c[:,1])*(a[:,0]-c[:,0])
	o4 = (d[:,0]-c[:,0])*(b[:,1]-c[:,1]) - (d[:,1]-c[:,1])*(b[:,0]-c[:,0])
	# exclude shared endpoints: compare coordinates exactly (points originate from the same array)
	shared = np.all(a == c, axis=1) | np.all(a == d, axis=1) | np.all(b == c, axis=1) | np.all(b == d, axis=1)
	colinear = (o1 == 0) & (o2 == 0) & (o3 == 0) & (o4 == 0)
	# Proper crossings only; a T-intersection has one orientation equal to zero
	proper_cross = (o1*o2 < 0) & (o3*o4 < 0)
	return proper_cross & (~shared) & (~colinear)


def point_in_wedge(p, apex, corner1, corner2):
	"""True if p lies in the wedge at apex spanned clockwise from corner1 to corner2.
	                                                                           c2
	The ray apex->corner1 is excluded and the ray apex->corner2 included, so    /
	the three wedges around a freshly inserted vertex partition the      p   /
	plane. Assumes the wedge is convex (< 180 degrees).             c1-----apex
	"""
	qx, qy = float(apex[0]), float(apex[1])
	px, py = float(p[0]) - qx, float(p[1]) - qy
	return (cross2(float(corner1[0]) - qx, float(corner1[1]) - qy, px, py) < 0.0
		and cross2(float(corner2[0]) - qx, float(corner2[1]) - qy, px, py) >= 0.0)


def point_left_of(p, corner1, corner2):
	"""True if p lies on the left of (or on) the directed line corner1 -> corner2."""
	ax, ay = float(corner1[0]), float(corner1[1])
	return cross2(float(corner2[0]) - ax, float(corner2[1]) - ay, float(p[0]) - ax, float(p[1]) - ay) >= 0.0


def triangle_area(p0, p1, p2):
	"""Signed area; negative for clockwise corners."""
	return 0.5 * orient(p0, p1, p2)


def triangles_signed_areas(points, tris):
	"""Vectorized signed area for a batch of triangles.

	points: (N,2) float array
	tris:   (M,3) int array
	Returns: (M,) float64 array of signed areas (0.5 * cross).
	"""
	pts = np.asarray(points, dtype=np.float64)
	T = np.asarray(tris, dtype=np.int64).reshape(-1, 3)
	if T.size == 0:
		return np.empty((0,), dtype=float)
	p0 = pts[T[:, 0]]; p1 = pts[T[:, 1]]; p2 = pts[T[:, 2]]
	e1 = p1 - p0; e2 = p2 - p0
	return 0.5 * (e1[:, 0] * e2[:, 1] - e1[:, 1] * e2[:, 0])


def ensure_positive_orientation(points, triangles):
	"""Return a copy of triangles with every row reordered counter-clockwise."""
	tris = np.asarray(triangles, dtype=np.int32).reshape(-1, 3).copy()
	if tris.size == 0:
		return tris
	areas = triangles_signed_areas(points, tris)
	flip = areas < 0.0
	if np.any(flip):
		tris[flip, 1], tris[flip, 2] = tris[flip, 2].copy(), tris[flip, 1].copy()
	return tris


def compute_triangulation_area(points, triangles, indices=None):
	"""
	Compute the total area of a set of triangles.

	Args:
		points: (N, 2) array of point coordinates
		triangles: (M, 3) array of triangle vertex indices
		indices: optional list of triangle indices to sum over (all when None)

	Returns:
		float: Total area (sum of absolute areas)
	"""
	tris = np.asarray(triangles, dtype=np.int64).reshape(-1, 3)
	if indices is not None:
		if len(indices) == 0:
			return 0.0
		tris = tris[np.asarray(indices, dtype=np.int64)]
	if tris.size == 0:
		return 0.0
	return float(np.sum(np.abs(triangles_signed_areas(points, tris))))


def normalize_edge(u, v):
	"""
	Return a normalized edge representation as (min, max).

	This ensures that edges (u, v) and (v, u) are represented
	the same way, useful for edge-based data structures.
	"""
	u = int(u); v = int(v)
	return (min(u, v), max(u, v))


def point_in_polygon(x, y, poly):
	inside = False
	n = len(poly)
	for i in range(n):
		x0, y0 = poly[i]
		x1, y1 = poly[(i+1) % n]
		if ((y0 > y) != (y1 > y)):
			xint = (x1 - x0) * (y - y0) / (y1 - y0) + x0
			if x < xint:
				inside = not inside
	return inside


def polygon_signed_area(poly):
	"""Shoelace area; positive for counter-clockwise vertex order."""
	P = np.asarray(poly, dtype=np.float64).reshape(-1, 2)
	if P.shape[0] < 3:
		return 0.0
	x = P[:, 0]; y = P[:, 1]
	return 0.5 * float(np.dot(x, np.roll(y, -1)) - np.dot(np.roll(x, -1), y))
