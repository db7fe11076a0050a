"""
cdtmesh Example 1: Basic Triangulation

This example demonstrates the most basic usage of cdtmesh:
1. Triangulate a small point set (Delaunay over the convex hull)
2. Force an edge into the mesh with a constraint
3. Inspect the result arrays and run statistics

Perfect for: First-time users, quick start guide
"""

import numpy as np
from cdtmesh import triangulate, triangulate_constrained, print_stats
from cdtmesh.core.conformity import check_delaunay


def main():
    print("=" * 60)
    print("cdtmesh Example 1: Basic Triangulation")
    print("=" * 60)

    # Step 1: Unit square with a point in the middle
    print("\n[1] Triangulating a square with a center point...")
    points = np.array([
        [0.0, 0.0],  # Bottom-left
        [1.0, 0.0],  # Bottom-right
        [1.0, 1.0],  # Top-right
        [0.0, 1.0],  # Top-left
        [0.5, 0.5],  # Center
    ], dtype=float)
    result = triangulate(points)
    print(f"    Triangles: {len(result)}")
    for t in result.triangles:
        print(f"      {t.tolist()}")
    print(f"    Covered area: {result.area():.6f}")

    # Step 2: Random points with one long constrained edge
    print("\n[2] Random points with a constrained edge...")
    rng = np.random.RandomState(0)
    pts = rng.rand(200, 2)
    u, v = int(np.argmin(pts[:, 0])), int(np.argmax(pts[:, 0]))
    result = triangulate_constrained(pts, [(u, v)])
    edges = result.edges().tolist()
    print(f"    Constrained edge ({u}, {v}) present: {sorted((u, v)) in edges}")
    bad = check_delaunay(result.points, result.triangles, result.neighbors, result.constrained_edges)
    print(f"    Non-Delaunay unconstrained edges: {len(bad)}")

    # Step 3: Statistics of the last run
    print("\n[3] Run statistics")
    print_stats(result.stats)


if __name__ == "__main__":
    main()
