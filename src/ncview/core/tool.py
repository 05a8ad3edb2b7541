"""Tool records discovered while reading a program."""

from __future__ import annotations

from dataclasses import dataclass, asdict
from typing import Optional


@dataclass
class ToolRecord:
    """A cutting tool referenced by the program.

    Created on first reference, either by a ``(TOOL:n ...)`` metadata
    comment or by a ``T`` word, and updated by later metadata or ``S`` words.
    """
    number: int
    name: str = ""
    diameter: Optional[float] = None
    spindle_speed: Optional[float] = None

    def __post_init__(self) -> None:
        if not self.name:
            self.name = f"Tool {self.number}"

    def to_dict(self) -> dict:
        d = asdict(self)
        d["spindleSpeed"] = d.pop("spindle_speed")
        return d


class ToolTable:
    """Tools keyed by tool number (one record per number)."""

    def __init__(self):
        self._tools: dict[int, ToolRecord] = {}

    def __len__(self) -> int:
        return len(self._tools)

    def get(self, number: int) -> Optional[ToolRecord]:
        return self._tools.get(number)

    def ensure(self, number: int) -> ToolRecord:
        """Return the record for *number*, creating a default one if unseen."""
        tool = self._tools.get(number)
        if tool is None:
            tool = ToolRecord(number=number)
            self._tools[number] = tool
        return tool

    def define(self, number: int, name: str, diameter: Optional[float]) -> ToolRecord:
        """Create or overwrite name/diameter for *number*."""
        tool = self.ensure(number)
        tool.name = name
        if diameter is not None:
            tool.diameter = diameter
        return tool

    def list_tools(self) -> list[ToolRecord]:
        return sorted(self._tools.values(), key=lambda t: t.number)

    def as_dict(self) -> dict[int, ToolRecord]:
        return dict(self._tools)
