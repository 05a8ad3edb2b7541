"""Modal G-code interpreter: program text -> toolpath segments.

Handles Fanuc-style, LinuxCNC and Cabinet Vision ``.anc`` output.  The
interpreter is deliberately lenient: unknown codes and malformed words are
ignored, never reported.

Per parse
---------
1. Metadata pass over the raw lines (tools, sheet, material, job name).
2. Motion pass: each line is cleaned, tokenized into a Block, and run
   through the modal state machine, which emits Segments.
3. Trailing park rapids outside the cut envelope are trimmed and the
   bounds recomputed from the surviving segments.
4. Cycle time is estimated from the accumulated distances.
"""

from __future__ import annotations

import math
from dataclasses import dataclass, field
from typing import Optional

from ..config.defaults import ParserConfig
from ..core.cycle_time import FeedSample, estimate_cycle_time
from ..core.machine_state import MachineState, PositioningMode
from ..core.tool import ToolTable
from ..core.toolpath.arcs import linearize_arc
from ..core.toolpath.base import Bounds, MotionMode, MoveType, Point3, Segment
from ..core.toolpath.utils import compute_bounds, trim_park_moves
from .metadata import JobMetadata, extract_metadata
from .result import ParseResult, ParseStats
from .tokenizer import Word, strip_comments, tokenize

MOTION_CODES = {
    0: MotionMode.RAPID,
    1: MotionMode.LINEAR,
    2: MotionMode.CW_ARC,
    3: MotionMode.CCW_ARC,
}

# G28 home, G30 second home / tool change position, G399 vendor cycle.
# These blocks are machine moves with no place in the part toolpath.
SKIP_BLOCK_CODES = {28, 30, 399}

PROGRAM_END_CODES = {2, 30}


def _finite(point: Point3) -> bool:
    return all(math.isfinite(c) for c in point)


@dataclass
class AxisWords:
    """Parameter words of one block; the last occurrence of a letter wins."""
    x: Optional[float] = None
    y: Optional[float] = None
    z: Optional[float] = None
    i: Optional[float] = None
    j: Optional[float] = None
    f: Optional[float] = None

    @property
    def has_axis(self) -> bool:
        return self.x is not None or self.y is not None or self.z is not None


@dataclass
class Block:
    """One cleaned program line split into its word groups."""
    line_number: int
    g_codes: list[float] = field(default_factory=list)
    m_codes: list[float] = field(default_factory=list)
    params: AxisWords = field(default_factory=AxisWords)

    @property
    def motion(self) -> Optional[MotionMode]:
        mode = None
        for g in self.g_codes:
            if g in MOTION_CODES:
                mode = MOTION_CODES[g]
        return mode

    @property
    def ends_program(self) -> bool:
        return any(m in PROGRAM_END_CODES for m in self.m_codes)


class GCodeParser:
    """Converts G-code text into a ParseResult.

    One instance can be reused; every call to :meth:`parse` starts from a
    fresh machine state, tool table and set of accumulators.
    """

    def __init__(self, config: Optional[ParserConfig] = None):
        self.config = config or ParserConfig()
        self.reset()

    def reset(self) -> None:
        self.state = MachineState()
        self.tools = ToolTable()
        self.meta = JobMetadata()
        self.segments: list[Segment] = []
        self.bounds = Bounds()
        self.line_count = 0
        self.rapid_distance = 0.0
        self.feed_samples: list[FeedSample] = []
        self.tool_changes = 0

    # -- entry point -----------------------------------------------------------

    def parse(self, text: str) -> ParseResult:
        self.reset()
        lines = text.split("\n")
        self.line_count = len(lines)

        self.meta = extract_metadata(lines, self.tools)

        for number, raw in enumerate(lines, start=1):
            self.parse_line(raw, number)

        cfg = self.config
        if cfg.trim_park_moves:
            self.segments = trim_park_moves(
                self.segments,
                margin_fraction=cfg.park_margin_fraction,
                min_margin=cfg.park_margin_min,
            )
        self.bounds = compute_bounds(self.segments)

        # Trimmed park moves still ran on the machine, so the distance
        # totals keep them.
        cycle = estimate_cycle_time(
            self.rapid_distance,
            self.feed_samples,
            self.tool_changes,
            rapid_rate=cfg.rapid_rate,
            tool_change_seconds=cfg.tool_change_seconds,
            fallback_feed=cfg.fallback_feed,
        )

        return ParseResult(
            segments=self.segments,
            bounds=self.bounds,
            stats=ParseStats(
                line_count=self.line_count,
                move_count=len(self.segments),
                bounds=self.bounds,
            ),
            sheet=self.meta.sheet,
            cycle_time=cycle,
            tools=self.tools.as_dict(),
            material=self.meta.material,
            job_name=self.meta.job_name,
        )

    # -- per line ----------------------------------------------------------------

    def parse_line(self, raw_line: str, line_number: int) -> None:
        """Run one raw program line through the state machine."""
        state = self.state
        if state.program_ended:
            return

        line = strip_comments(raw_line)
        if not line or line.startswith("%") or line.startswith("O"):
            return

        words = tokenize(line)
        if not words:
            return

        block = self._read_block(words, line_number)

        # Planes, units, cutter comp, tool length offset, G80 and work
        # offsets do not change the toolpath shape and fall through.
        for g in block.g_codes:
            if g in SKIP_BLOCK_CODES:
                return
            if g == 90:
                state.positioning = PositioningMode.ABSOLUTE
            elif g == 91:
                state.positioning = PositioningMode.INCREMENTAL

        mode = block.motion
        if mode is None and block.params.has_axis:
            mode = state.motion or MotionMode.LINEAR

        if mode is not None:
            state.motion = mode
            if mode.is_arc:
                self._arc_move(mode, block)
            else:
                self._linear_move(mode.move_type, block)

        if block.params.f is not None:
            state.feed_rate = block.params.f

        if block.ends_program:
            state.program_ended = True

    def _read_block(self, words: list[Word], line_number: int) -> Block:
        """Group words into a Block, applying T and S words as they appear."""
        block = Block(line_number=line_number)
        params = block.params
        for word in words:
            if not word.is_valid:
                continue
            letter, value = word.letter, word.value
            if letter == "G":
                block.g_codes.append(value)
            elif letter == "M":
                block.m_codes.append(value)
            elif letter == "N":
                continue
            elif letter == "T":
                self._change_tool(int(value))
            elif letter == "S":
                self._set_spindle(value)
            elif letter == "X":
                params.x = value
            elif letter == "Y":
                params.y = value
            elif letter == "Z":
                params.z = value
            elif letter == "I":
                params.i = value
            elif letter == "J":
                params.j = value
            elif letter == "F":
                params.f = value
        return block

    def _change_tool(self, number: int) -> None:
        self.state.tool = number
        self.tools.ensure(number)
        self.tool_changes += 1

    def _set_spindle(self, speed: float) -> None:
        self.state.spindle_speed = speed
        if self.state.tool:
            self.tools.ensure(self.state.tool).spindle_speed = speed

    # -- move handlers -----------------------------------------------------------

    def _linear_move(self, move_type: MoveType, block: Block) -> None:
        state = self.state
        p = block.params
        start = state.position
        end = state.resolve_target(p.x, p.y, p.z)
        if end == start or not _finite(end):
            return
        state.move_to(end)
        self._emit(move_type, start, end, block.line_number)

    def _arc_move(self, mode: MotionMode, block: Block) -> None:
        state = self.state
        p = block.params
        i = p.i or 0.0
        j = p.j or 0.0
        if i == 0.0 and j == 0.0:
            # No center offset: cut straight to the end point instead of
            # sweeping 32 zero-length chords (DESIGN.md decision 4)
            self._linear_move(MoveType.CUT, block)
            return

        start = state.position
        end = state.resolve_target(p.x, p.y, p.z)
        if not _finite(end):
            return
        vertices = linearize_arc(
            start, end, i, j,
            clockwise=mode is MotionMode.CW_ARC,
            segments=self.config.arc_segments,
        )
        for a, b in zip(vertices, vertices[1:]):
            self._emit(MoveType.CUT, a, b, block.line_number)

        # Land on the commanded point, not the last chord vertex
        state.move_to(end)

    def _emit(self, move_type: MoveType, start: Point3, end: Point3, line: int) -> None:
        seg = Segment(
            move_type=move_type,
            start=start,
            end=end,
            line=line,
            tool=self.state.tool,
        )
        if move_type is MoveType.RAPID:
            self.rapid_distance += seg.length
        else:
            self.feed_samples.append(FeedSample(seg.length, self.state.feed_rate))
        self.bounds.include(end)
        self.segments.append(seg)


def parse_gcode(text: str, config: Optional[ParserConfig] = None) -> ParseResult:
    """Parse *text* with a throwaway GCodeParser."""
    return GCodeParser(config).parse(text)
