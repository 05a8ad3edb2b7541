"""Modal machine state carried from block to block during a parse."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Optional

from .toolpath.base import MotionMode, Point3


class PositioningMode(Enum):
    ABSOLUTE = "absolute"        # G90
    INCREMENTAL = "incremental"  # G91


@dataclass
class MachineState:
    """Everything the interpreter remembers between lines.

    A fresh instance is built for every parse: position at the origin,
    absolute positioning, no tool, no feed.
    """

    x: float = 0.0
    y: float = 0.0
    z: float = 0.0
    positioning: PositioningMode = PositioningMode.ABSOLUTE
    feed_rate: float = 0.0
    motion: Optional[MotionMode] = None
    tool: Optional[int] = None
    spindle_speed: float = 0.0
    program_ended: bool = False

    @property
    def position(self) -> Point3:
        return (self.x, self.y, self.z)

    @property
    def is_absolute(self) -> bool:
        return self.positioning is PositioningMode.ABSOLUTE

    def move_to(self, point: Point3) -> None:
        self.x, self.y, self.z = point

    def resolve_target(
        self,
        x: Optional[float],
        y: Optional[float],
        z: Optional[float],
    ) -> Point3:
        """Target position for the given axis words under the current mode.

        Absolute mode replaces the given axes, incremental mode adds them.
        Axes without a word keep their current value.
        """
        if self.is_absolute:
            return (
                self.x if x is None else x,
                self.y if y is None else y,
                self.z if z is None else z,
            )
        return (
            self.x if x is None else self.x + x,
            self.y if y is None else self.y + y,
            self.z if z is None else self.z + z,
        )
