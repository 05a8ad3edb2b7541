"""Plain-text summary of a ParseResult."""

from __future__ import annotations

from typing import Optional

from ..core.cycle_time import format_duration
from ..core.sheet import SheetInfo
from ..core.tool import ToolRecord
from .result import ParseResult


def fmt(value: float, decimals: int = 4) -> str:
    """Format a float, stripping trailing zeros."""
    return f"{value:.{decimals}f}".rstrip("0").rstrip(".")


def format_size(result: ParseResult) -> str:
    """Bounding-box extents as ``"X x Y x Z"`` with two decimals."""
    dx, dy, dz = result.bounds.size
    return f"{dx:.2f} x {dy:.2f} x {dz:.2f}"


def format_cycle_detail(result: ParseResult) -> str:
    ct = result.cycle_time
    parts = []
    if ct.cut_time > 0:
        parts.append(f"Cut: {format_duration(ct.cut_time)}")
    if ct.rapid_time > 0:
        parts.append(f"Rapid: {format_duration(ct.rapid_time)}")
    if ct.tool_change_time > 0:
        parts.append(f"Tool changes: {format_duration(ct.tool_change_time)}")
    parts.append(f"Total: {ct.formatted}")
    return " | ".join(parts)


def format_sheet(sheet: SheetInfo) -> Optional[str]:
    """``L" x W" [x T"]``, or None without a width."""
    if sheet.width is None:
        return None
    length = "?" if sheet.length is None else fmt(sheet.length)
    text = f'{length}" x {fmt(sheet.width)}"'
    if sheet.thickness:
        text += f' x {fmt(sheet.thickness)}"'
    return text


def format_tool(tool: ToolRecord) -> str:
    text = f"T{tool.number}"
    if tool.name:
        text += f" - {tool.name}"
    if tool.diameter:
        text += f" (dia {fmt(tool.diameter)})"
    if tool.spindle_speed:
        text += f" @ {tool.spindle_speed:,.0f} RPM"
    return text


def format_report(result: ParseResult, name: Optional[str] = None) -> list[str]:
    """Human-readable summary lines for *result*."""
    lines = [
        f"File: {name or 'Pasted G-code'}",
        f"  Lines: {result.stats.line_count:,}",
        f"  Moves: {result.stats.move_count:,}",
        f"  Size: {format_size(result)}",
    ]
    if result.cycle_time.total_time > 0:
        lines.append(f"  Cycle time: {format_cycle_detail(result)}")
    if result.job_name:
        lines.append(f"  Job: {result.job_name}")
    if result.material:
        lines.append(f"  Material: {result.material}")
    sheet = format_sheet(result.sheet)
    if sheet:
        lines.append(f"  Sheet: {sheet}")
    if result.tools:
        lines.append("Tools:")
        for number in sorted(result.tools):
            lines.append(f"  {format_tool(result.tools[number])}")
    return lines
