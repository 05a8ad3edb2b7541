"""Post-processing helpers that operate on a finished segment list."""

from __future__ import annotations

import numpy as np
from shapely.geometry import Point, Polygon, box

from .base import Bounds, MoveType, Segment


def compute_bounds(segments: list[Segment]) -> Bounds:
    """Fold every segment endpoint into a fresh Bounds."""
    bounds = Bounds()
    if not segments:
        return bounds
    pts = np.array(
        [seg.start for seg in segments] + [seg.end for seg in segments],
        dtype=np.float64,
    )
    bounds.min = [float(v) for v in pts.min(axis=0)]
    bounds.max = [float(v) for v in pts.max(axis=0)]
    return bounds


def cut_envelope(
    segments: list[Segment],
    margin_fraction: float = 0.1,
    min_margin: float = 5.0,
) -> Polygon:
    """XY rectangle around all cut moves, grown by the park margin.

    The margin is ``max(margin_fraction * x_extent, min_margin)``.  Returns
    an empty Polygon when there are no cut moves.
    """
    cuts = [seg for seg in segments if seg.move_type is MoveType.CUT]
    if not cuts:
        return Polygon()

    xy = np.array(
        [seg.start[:2] for seg in cuts] + [seg.end[:2] for seg in cuts],
        dtype=np.float64,
    )
    xmin, ymin = xy.min(axis=0)
    xmax, ymax = xy.max(axis=0)
    margin = max((xmax - xmin) * margin_fraction, min_margin)
    return box(xmin - margin, ymin - margin, xmax + margin, ymax + margin)


def trim_park_moves(
    segments: list[Segment],
    margin_fraction: float = 0.1,
    min_margin: float = 5.0,
) -> list[Segment]:
    """Drop trailing rapid moves that park the tool outside the cut area.

    Only rapids at the tail of the list are candidates; scanning stops at
    the first cut move or the first rapid ending inside the envelope.  With no cut moves the
    envelope is empty, so every trailing rapid is dropped.
    """
    envelope = cut_envelope(segments, margin_fraction, min_margin)

    end = len(segments)
    while end > 0:
        last = segments[end - 1]
        if last.move_type is not MoveType.RAPID:
            break
        # covers() keeps points lying exactly on the envelope edge
        if envelope.covers(Point(last.end[0], last.end[1])):
            break
        end -= 1
    return list(segments[:end])
