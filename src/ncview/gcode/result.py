"""Parse result handed to rendering and reporting collaborators."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Optional

from ..core.cycle_time import CycleTimeEstimate
from ..core.sheet import SheetInfo
from ..core.tool import ToolRecord
from ..core.toolpath.base import Bounds, Segment


@dataclass
class ParseStats:
    line_count: int
    move_count: int
    bounds: Bounds

    def to_dict(self) -> dict:
        return {
            "lineCount": self.line_count,
            "moveCount": self.move_count,
            "bounds": self.bounds.to_dict(),
        }


@dataclass
class ParseResult:
    """Toolpath plus the summary data derived from one program."""

    segments: list[Segment]
    bounds: Bounds
    stats: ParseStats
    sheet: SheetInfo
    cycle_time: CycleTimeEstimate
    tools: dict[int, ToolRecord] = field(default_factory=dict)
    material: Optional[str] = None
    job_name: Optional[str] = None

    @property
    def is_empty(self) -> bool:
        return len(self.segments) == 0

    def to_dict(self) -> dict:
        """Plain-data form with the camelCase keys the viewer expects."""
        return {
            "segments": [seg.to_dict() for seg in self.segments],
            "bounds": self.bounds.to_dict(),
            "stats": self.stats.to_dict(),
            "sheet": self.sheet.to_dict(),
            "material": self.material,
            "jobName": self.job_name,
            "tools": {num: t.to_dict() for num, t in sorted(self.tools.items())},
            "cycleTime": self.cycle_time.to_dict(),
        }
