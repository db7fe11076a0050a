"""Run statistics of a triangulation and their presentation.

Mirrors the operation-stats pattern of the driver: a plain dataclass of
counters that the engine increments in place, plus formatting helpers.
"""
from __future__ import annotations

import sys
from dataclasses import dataclass, field
from typing import Dict, Any


@dataclass
class TriangulationStats:
    points_inserted: int = 0
    flips: int = 0
    # Subsets of `flips` by trigger
    forced_flips: int = 0
    degenerate_flips: int = 0
    # Flips performed while restoring missing constrained edges
    recovery_flips: int = 0
    legalize_passes: int = 0
    triangles_before_trim: int = 0
    triangles_trimmed: int = 0
    triangles_out: int = 0
    trim_mode: str = ''
    # Timing (seconds)
    time_total: float = 0.0
    phase_times: Dict[str, float] = field(default_factory=dict)

    def record_time(self, phase: str, duration: float):
        self.phase_times[phase] = self.phase_times.get(phase, 0.0) + duration

    def to_dict(self) -> Dict[str, Any]:  # pragma: no cover - simple mapping
        return {
            'points_inserted': self.points_inserted,
            'flips': self.flips,
            'forced_flips': self.forced_flips,
            'degenerate_flips': self.degenerate_flips,
            'recovery_flips': self.recovery_flips,
            'legalize_passes': self.legalize_passes,
            'triangles_before_trim': self.triangles_before_trim,
            'triangles_trimmed': self.triangles_trimmed,
            'triangles_out': self.triangles_out,
            'trim_mode': self.trim_mode,
            'flips_per_point': (self.flips / self.points_inserted) if self.points_inserted else 0.0,
            'time_total': self.time_total,
            'phase_times': dict(self.phase_times),
        }


def format_stats_table(stats: TriangulationStats) -> str:
    """Return a human readable two-column table of the counters and phase timings."""
    data = stats.to_dict()
    phases = data.pop('phase_times')
    rows = []
    for key, value in data.items():
        if isinstance(value, float):
            rows.append([key, f"{value:.6f}"])
        else:
            rows.append([key, str(value)])
    for phase in sorted(phases):
        rows.append([f"time[{phase}]", f"{phases[phase] * 1000.0:.3f} ms"])
    col_w = [max(len(r[0]) for r in rows), max(len(r[1]) for r in rows)]
    lines = [f"{'stat'.ljust(col_w[0])} {'value'.rjust(col_w[1])}", "-" * (sum(col_w) + 1)]
    lines.extend(f"{k.ljust(col_w[0])} {v.rjust(col_w[1])}" for k, v in rows)
    return "\n".join(lines)


def print_stats(stats: TriangulationStats, file=None, pretty: bool = True):  # pragma: no cover - formatting wrapper
    out = file or sys.stdout
    if not pretty:
        print(stats.to_dict(), file=out)
        return
    print(format_stats_table(stats), file=out)


__all__ = ['TriangulationStats', 'format_stats_table', 'print_stats']
