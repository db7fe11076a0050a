"""Central numeric constants for the triangulation engine.

Keeps the few magic numbers of the algorithm in one place so they can be
referenced (and tuned) without scattering literals across modules.
"""
from __future__ import annotations

# Super-triangle placement
BOUNDARY_SCALE: float = 4.0          # boundary points sit at this multiple of the max coordinate
BOUNDARY_EPSILON: float = 0.000372   # perturbation against exact collinearity with input points
MIN_EXTENT: float = 1.0              # floor for the max coordinate magnitude

# Geometry tolerances (checks and tests only; the predicates themselves are exact-sign)
EPS_AREA: float = 1e-12              # minimum positive (absolute) triangle area
EPS_INCIRCLE_REL: float = 1e-9       # relative slack for circumcircle checks in validators

# Driver limits
DEFAULT_LEGALIZE_PASSES: int = 32

__all__ = [
    'BOUNDARY_SCALE',
    'BOUNDARY_EPSILON',
    'MIN_EXTENT',
    'EPS_AREA',
    'EPS_INCIRCLE_REL',
    'DEFAULT_LEGALIZE_PASSES',
]
