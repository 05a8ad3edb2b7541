"""Circular interpolation (G2/G3) to polyline conversion.

Arcs are approximated by a fixed number of chords so downstream consumers
only ever deal with straight segments.  The sweep is forced into the
commanded direction: a clockwise arc always decreases its angle, a
counter-clockwise arc always increases it, even when the raw start and end
angles straddle the +/-pi branch cut.  A zero sweep (end == start) becomes
a full circle.
"""

from __future__ import annotations

import math

import numpy as np

from .base import Point3

TWO_PI = 2.0 * math.pi


def sweep_angles(
    start_angle: float,
    end_angle: float,
    clockwise: bool,
) -> tuple[float, float]:
    """Return (start, end) with *end* unwrapped in the commanded direction."""
    if clockwise:
        if end_angle >= start_angle:
            end_angle -= TWO_PI
    else:
        if end_angle <= start_angle:
            end_angle += TWO_PI
    return start_angle, end_angle


def linearize_arc(
    start: Point3,
    end: Point3,
    i: float,
    j: float,
    clockwise: bool,
    segments: int = 32,
) -> list[Point3]:
    """Approximate an XY-plane arc (optionally helical in Z) by a polyline.

    Parameters
    ----------
    start, end:
        Absolute arc start and commanded end point.
    i, j:
        Center offset from *start* (always incremental).
    clockwise:
        True for G2, False for G3.
    segments:
        Number of chords to emit.

    Returns
    -------
    ``segments + 1`` vertices, the first being *start*.  The final vertex
    lies on the circle and may differ from *end* by rounding.
    """
    cx = start[0] + i
    cy = start[1] + j
    radius = math.hypot(i, j)

    a0, a1 = sweep_angles(
        math.atan2(start[1] - cy, start[0] - cx),
        math.atan2(end[1] - cy, end[0] - cx),
        clockwise,
    )

    t = np.arange(1, segments + 1, dtype=np.float64) / segments
    angles = a0 + (a1 - a0) * t
    xs = cx + radius * np.cos(angles)
    ys = cy + radius * np.sin(angles)
    zs = start[2] + (end[2] - start[2]) * t

    vertices: list[Point3] = [tuple(start)]
    vertices.extend(
        (float(x), float(y), float(z)) for x, y, z in zip(xs, ys, zs)
    )
    return vertices
