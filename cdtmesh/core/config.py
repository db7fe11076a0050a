"""Configuration object for the triangulation driver."""
from __future__ import annotations

from dataclasses import dataclass

from .constants import DEFAULT_LEGALIZE_PASSES

INSERTION_ORDERS = ('input', 'sorted')
TRIM_MODES = ('auto', 'polygon', 'hull')


@dataclass
class TriangulationConfig:
    """Knobs of a single triangulation run.

    Attributes
    ----------
    insertion_order : str
        'input' inserts points in caller order; 'sorted' inserts them
        lexicographically by (x, y).
    trim : str
        'auto' trims to the constrained polygon when the constrained edges
        contain a closed loop and to the convex hull otherwise; 'polygon'
        and 'hull' force a mode.
    check_duplicates : bool
        Reject coincident input points up front with DegenerateGeometryError.
    validate_constraints : bool
        Reject constrained edges that cross each other (O(C^2)).
    recover_constraints : bool
        Run the constraint recovery pass after insertion.
    max_legalize_passes : int
        Upper bound of full Delaunay sweeps after recovery (0 disables).
    check_invariants : bool
        Validate arena adjacency and containment after every insertion.
    debug : bool
        Emit per-point debug logging.
    """
    insertion_order: str = 'input'
    trim: str = 'auto'
    check_duplicates: bool = True
    validate_constraints: bool = False
    recover_constraints: bool = True
    max_legalize_passes: int = DEFAULT_LEGALIZE_PASSES
    check_invariants: bool = False
    debug: bool = False

    def __post_init__(self):
        if self.insertion_order not in INSERTION_ORDERS:
            raise ValueError(f"insertion_order must be one of {INSERTION_ORDERS}, got {self.insertion_order!r}")
        if self.trim not in TRIM_MODES:
            raise ValueError(f"trim must be one of {TRIM_MODES}, got {self.trim!r}")
        if self.max_legalize_passes < 0:
            raise ValueError("max_legalize_passes must be non-negative")


__all__ = ['TriangulationConfig', 'INSERTION_ORDERS', 'TRIM_MODES']
