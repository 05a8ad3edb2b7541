"""Core toolpath data structures."""

from __future__ import annotations

import math
from dataclasses import dataclass, field
from enum import Enum
from typing import Optional

Point3 = tuple[float, float, float]


class MoveType(Enum):
    """Type of CNC motion emitted into the toolpath."""
    RAPID = "rapid"          # G0, no cutting, full speed
    CUT = "cut"              # G1 and linearized G2/G3


class MotionMode(Enum):
    """Modal motion word resolved for a block (G0-G3)."""
    RAPID = "rapid"
    LINEAR = "cut"
    CW_ARC = "cw_arc"
    CCW_ARC = "ccw_arc"

    @property
    def is_arc(self) -> bool:
        return self in (MotionMode.CW_ARC, MotionMode.CCW_ARC)

    @property
    def move_type(self) -> MoveType:
        return MoveType.RAPID if self is MotionMode.RAPID else MoveType.CUT


@dataclass(frozen=True)
class Segment:
    """A single straight move between two machine positions."""
    move_type: MoveType
    start: Point3
    end: Point3
    line: int                    # 1-based source line
    tool: Optional[int] = None

    @property
    def length(self) -> float:
        return math.dist(self.start, self.end)

    def to_dict(self) -> dict:
        return {
            "type": self.move_type.value,
            "from": _point_dict(self.start),
            "to": _point_dict(self.end),
            "line": self.line,
            "tool": self.tool,
        }


@dataclass
class Bounds:
    """Axis-aligned bounding box; empty until the first point is included."""
    min: list[float] = field(default_factory=lambda: [math.inf] * 3)
    max: list[float] = field(default_factory=lambda: [-math.inf] * 3)

    def include(self, point: Point3) -> None:
        for axis in range(3):
            self.min[axis] = min(self.min[axis], point[axis])
            self.max[axis] = max(self.max[axis], point[axis])

    @property
    def is_empty(self) -> bool:
        return any(lo > hi for lo, hi in zip(self.min, self.max))

    @property
    def size(self) -> Point3:
        """(dx, dy, dz) extents; zeros when empty."""
        if self.is_empty:
            return (0.0, 0.0, 0.0)
        return tuple(hi - lo for lo, hi in zip(self.min, self.max))

    def to_dict(self) -> dict:
        return {"min": _point_dict(self.min), "max": _point_dict(self.max)}


def _point_dict(p) -> dict:
    return {"x": p[0], "y": p[1], "z": p[2]}
