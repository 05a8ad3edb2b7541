"""Job metadata carried in parenthetical comments.

Cabinet Vision style posts (``.anc``) and several router posts describe
the job in comments at the top of the file, e.g.::

    (JOB_NAME: KITCHEN UPPERS)
    (Material name: 3/4 MELAMINE)
    (Sheet Width [X]: 49.0)
    (Sheet Length [Y]: 97.0)
    (Sheet Thickness: 0.75)
    (TOOL:2, OFFSET:2, TNM:2 - 1/2 DOWN SHEER, TD:0.4975)

Each comment is tried against the patterns below in order and the first
match wins.  Unrecognised comments are ignored.
"""

from __future__ import annotations

import math
import re
from dataclasses import dataclass, field
from typing import Callable, Iterable, Optional

from ..core.sheet import SheetInfo
from ..core.tool import ToolTable

COMMENT_PATTERN = re.compile(r"\(([^)]*)\)")

TOOL_PATTERN = re.compile(
    r"TOOL\s*:\s*(\d+).*?TNM\s*:\s*\d+\s*-\s*(.+?),\s*TD\s*:\s*([\d.]+)",
    re.IGNORECASE,
)
SHEET_WIDTH_PATTERN = re.compile(r"Sheet Width.*?:\s*([\d.]+)", re.IGNORECASE)
SHEET_LENGTH_PATTERN = re.compile(r"Sheet Length.*?:\s*([\d.]+)", re.IGNORECASE)
SHEET_THICKNESS_PATTERN = re.compile(r"Sheet Thickness.*?:\s*([\d.]+)", re.IGNORECASE)
MATERIAL_PATTERN = re.compile(r"Material name\s*:\s*(.+)", re.IGNORECASE)
JOB_NAME_PATTERN = re.compile(r"JOB_NAME\s*:\s*(.+)", re.IGNORECASE)
OUTPUT_DATE_PATTERN = re.compile(r"Output ON\s+(.+?)\s+from", re.IGNORECASE)


@dataclass
class JobMetadata:
    """Everything the metadata pass found."""

    sheet: SheetInfo = field(default_factory=SheetInfo)
    material: Optional[str] = None
    job_name: Optional[str] = None
    output_date: Optional[str] = None


def _number(text: str) -> Optional[float]:
    try:
        value = float(text)
    except ValueError:
        return None
    return value if math.isfinite(value) else None


def iter_comments(raw_line: str) -> list[str]:
    """Trimmed contents of every ``( ... )`` on *raw_line*."""
    return [c.strip() for c in COMMENT_PATTERN.findall(raw_line)]


class MetadataExtractor:
    """Applies the metadata patterns to raw program lines."""

    def __init__(self, tools: ToolTable, meta: Optional[JobMetadata] = None):
        self.tools = tools
        self.meta = meta if meta is not None else JobMetadata()
        # Checked in order; first match wins
        self._rules: list[tuple[re.Pattern, Callable[[re.Match], None]]] = [
            (TOOL_PATTERN, self._tool),
            (SHEET_WIDTH_PATTERN, self._sheet_width),
            (SHEET_LENGTH_PATTERN, self._sheet_length),
            (SHEET_THICKNESS_PATTERN, self._sheet_thickness),
            (MATERIAL_PATTERN, self._material),
            (JOB_NAME_PATTERN, self._job_name),
            (OUTPUT_DATE_PATTERN, self._output_date),
        ]

    def feed_line(self, raw_line: str) -> None:
        for comment in iter_comments(raw_line):
            self.feed_comment(comment)

    def feed_comment(self, comment: str) -> bool:
        """Apply the first matching rule; return False if none matched."""
        for pattern, handler in self._rules:
            m = pattern.search(comment)
            if m:
                handler(m)
                return True
        return False

    # -- handlers ------------------------------------------------------------

    def _tool(self, m: re.Match) -> None:
        try:
            number = int(m.group(1))
        except ValueError:
            # Beyond int's digit limit
            return
        self.tools.define(
            number=number,
            name=m.group(2).strip(),
            diameter=_number(m.group(3)),
        )

    def _sheet_width(self, m: re.Match) -> None:
        value = _number(m.group(1))
        if value is not None:
            self.meta.sheet.width = value

    def _sheet_length(self, m: re.Match) -> None:
        value = _number(m.group(1))
        if value is not None:
            self.meta.sheet.length = value

    def _sheet_thickness(self, m: re.Match) -> None:
        value = _number(m.group(1))
        if value is not None:
            self.meta.sheet.thickness = value

    def _material(self, m: re.Match) -> None:
        self.meta.material = m.group(1).strip()

    def _job_name(self, m: re.Match) -> None:
        self.meta.job_name = m.group(1).strip()

    def _output_date(self, m: re.Match) -> None:
        self.meta.output_date = m.group(1).strip()


def extract_metadata(lines: Iterable[str], tools: ToolTable) -> JobMetadata:
    """Run the metadata pass over every raw line, filling *tools* in place."""
    extractor = MetadataExtractor(tools)
    for raw in lines:
        extractor.feed_line(raw)
    return extractor.meta
