"""Tests for the modal G-code interpreter."""

import math

import pytest

from ncview.config.defaults import ParserConfig
from ncview.core.toolpath.base import MoveType
from ncview.gcode.interpreter import GCodeParser, parse_gcode


# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------


def _types(result) -> list[str]:
    return [seg.move_type.value for seg in result.segments]


ROUTER_PROGRAM = """%
O1001
(JOB_NAME: TEST PANEL)
(Material name: 3/4 PLY)
(Sheet Width [X]: 48)
(Sheet Length [Y]: 96)
(TOOL:1 OFFSET:1 TNM:1 - 1/4 UPCUT, TD:0.25)
N10 G90 G20 G17
N20 T1 M6
N30 S18000 M3
N40 G0 X1 Y1 Z0.5
N50 G1 Z-0.75 F60
N60 X11 F200
N70 Y11
N80 X1
N90 Y1
N100 G0 Z0.5
N110 G0 X120 Y60
N120 M5
N130 M30
G0 X0 Y0
%
"""


@pytest.fixture
def parser() -> GCodeParser:
    return GCodeParser()


@pytest.fixture
def untrimmed() -> GCodeParser:
    """Keeps trailing rapids, so rapid-only programs show their moves."""
    return GCodeParser(ParserConfig(trim_park_moves=False))


# ---------------------------------------------------------------------------
# End-to-end scenarios
# ---------------------------------------------------------------------------


class TestScenarios:
    def test_rapid_then_cut(self, parser):
        result = parser.parse("G90\nG0 X10 Y0\nG1 X10 Y10 F100\n")
        assert _types(result) == ["rapid", "cut"]
        rapid, cut = result.segments
        assert rapid.start == (0, 0, 0) and rapid.end == (10, 0, 0)
        assert cut.start == (10, 0, 0) and cut.end == (10, 10, 0)
        assert rapid.line == 2 and cut.line == 3
        assert result.bounds.min == [0, 0, 0]
        assert result.bounds.max == [10, 10, 0]
        assert result.stats.move_count == 2
        assert result.stats.line_count == 4

    def test_incremental_mode(self, parser):
        result = parser.parse("G91\nG1 X5\nG1 X5\n")
        assert _types(result) == ["cut", "cut"]
        assert all(seg.length == pytest.approx(5.0) for seg in result.segments)
        assert result.segments[-1].end == (10, 0, 0)

    def test_tool_from_metadata(self, parser):
        result = parser.parse(
            "(TOOL:1 OFFSET:1 TNM:1 - 1/4 UPCUT, TD:0.25)\nT1 M6\nG1 X5\n"
        )
        t1 = result.tools[1]
        assert (t1.number, t1.name, t1.diameter) == (1, "1/4 UPCUT", 0.25)
        assert result.segments[0].tool == 1

    def test_program_end_only(self, parser):
        result = parser.parse("G90\nM30\n")
        assert result.segments == []
        assert result.is_empty
        assert result.stats.move_count == 0
        assert result.bounds.min == [math.inf] * 3
        assert result.bounds.max == [-math.inf] * 3

    def test_rapid_only_program_trims_to_nothing(self, parser):
        result = parser.parse("G0 X1 Y1\nG0 X50 Y50\n")
        assert result.segments == []
        assert result.is_empty
        assert result.cycle_time.rapid_distance > 0


# ---------------------------------------------------------------------------
# Modal behaviour
# ---------------------------------------------------------------------------


class TestModalState:
    def test_motion_mode_inherited(self, parser):
        result = parser.parse("G0 X1\nX2\nG1 X3\nY1\n")
        assert _types(result) == ["rapid", "rapid", "cut", "cut"]

    def test_default_motion_is_cut(self, parser):
        assert _types(parser.parse("X5 Y5\n")) == ["cut"]

    def test_last_motion_word_on_line_wins(self, untrimmed):
        assert _types(untrimmed.parse("G1 G0 X5\n")) == ["rapid"]

    def test_zero_length_moves_dropped(self, parser):
        result = parser.parse("G1 X0 Y0 Z0\nG1 X5\nG1 X5\nG91\nG1 X0\n")
        assert len(result.segments) == 1
        assert result.cycle_time.cut_distance == pytest.approx(5.0)

    def test_unspecified_axes_unchanged(self, parser):
        result = parser.parse("G0 X1 Y2 Z3\nG1 Y7\n")
        assert result.segments[-1].end == (1, 7, 3)

    def test_g91_then_g90(self, untrimmed):
        result = untrimmed.parse("G91\nG0 X2\nG0 X2\nG90\nG0 X1\n")
        assert [s.end[0] for s in result.segments] == [2, 4, 1]

    def test_segment_chains_from_previous_position(self, parser):
        result = parser.parse("G0 X1 Y1\nG1 X4 Y5\nG1 Z-1\n")
        for prev, seg in zip(result.segments, result.segments[1:]):
            assert seg.start == prev.end

    def test_unit_and_offset_codes_are_noops(self, untrimmed):
        result = untrimmed.parse("G20 G17 G40 G49 G80 G54\nG0 X1\n")
        assert len(result.segments) == 1

    def test_line_numbers_ignored(self, untrimmed):
        result = untrimmed.parse("N10 G0 X1\n")
        assert result.segments[0].end == (1, 0, 0)


class TestSkippedBlocks:
    def test_home_block_skipped(self, parser):
        result = parser.parse("G1 X5\nG28 X0 Y0\nG1 Y5\n")
        assert len(result.segments) == 2
        assert result.segments[1].start == (5, 0, 0)

    @pytest.mark.parametrize("code", ["G28", "G30", "G399"])
    def test_skip_codes(self, parser, code):
        result = parser.parse(f"{code} X50 Y50\n")
        assert result.segments == []

    def test_skip_stops_rest_of_line(self, parser):
        # M30 on a skipped line does not end the program
        result = parser.parse("G28 M30\nG1 X1\n")
        assert len(result.segments) == 1

    def test_codes_before_skip_still_apply(self, parser):
        result = parser.parse("G91 G28 Z0\nG1 X1\nG1 X1\n")
        assert result.segments[-1].end == (2, 0, 0)

    def test_codes_after_skip_ignored(self, parser):
        result = parser.parse("G28 G91\nG1 X1\nG1 X1\n")
        assert result.segments[-1].end == (1, 0, 0)

    def test_program_markers_skipped(self, untrimmed):
        result = untrimmed.parse("%\nO1000\nG0 X1\n%\n")
        assert len(result.segments) == 1


class TestProgramEnd:
    @pytest.mark.parametrize("code", ["M30", "M02", "M2"])
    def test_lines_after_end_ignored(self, parser, code):
        result = parser.parse(f"G1 X1\n{code}\nG0 X100 Y100\n")
        assert len(result.segments) == 1

    def test_move_on_end_line_still_runs(self, parser):
        result = parser.parse("G1 X1 M30\nG1 X2\n")
        assert [s.end[0] for s in result.segments] == [1]


class TestComments:
    def test_comment_words_not_applied(self, untrimmed):
        result = untrimmed.parse("G0 X1 (X99)\nG0 X2 ; Y50\n")
        assert [s.end for s in result.segments] == [(1, 0, 0), (2, 0, 0)]

    def test_blank_and_comment_lines(self, untrimmed):
        result = untrimmed.parse("\n   \n(NOTE)\n; note\nG0 X1\n")
        assert result.segments[0].line == 5


class TestMalformedInput:
    def test_nan_axis_not_applied(self, parser):
        result = parser.parse("G1 X- Y2\n")
        assert result.segments[0].end == (0, 2, 0)

    def test_nan_gcode_ignored(self, parser):
        result = parser.parse("G- X3\n")
        assert _types(result) == ["cut"]

    def test_garbage_never_raises(self, parser):
        result = parser.parse("@@@\nG1 X1..2 Y\n#<_x>=5\n(unclosed\n")
        for seg in result.segments:
            assert not any(math.isnan(v) for v in seg.end)

    def test_overlong_tool_number_ignored(self, parser):
        result = parser.parse(f"T{'9' * 400}\nG1 X1\n")
        assert result.tools == {}
        assert result.segments[0].tool is None

    def test_overlong_coordinate_ignored(self, parser):
        result = parser.parse(f"G1 X{'9' * 400}\nG1 X2\n")
        assert [s.end for s in result.segments] == [(2, 0, 0)]
        assert result.cycle_time.formatted == "1s"

    def test_incremental_overflow_dropped(self, parser):
        big = "9" * 308
        result = parser.parse(f"G91\nG1 X{big}\nG1 X{big}\nG90\nG1 Y1\n")
        for seg in result.segments:
            assert all(math.isfinite(v) for v in seg.end)

    def test_empty_text(self, parser):
        result = parser.parse("")
        assert result.is_empty
        assert result.stats.line_count == 1


# ---------------------------------------------------------------------------
# Arcs
# ---------------------------------------------------------------------------


class TestArcs:
    def test_full_circle_emits_32_cuts(self, parser):
        result = parser.parse("G0 X10 Y0\nG3 X10 Y0 I-5 J0 F50\n")
        arc = result.segments[1:]
        assert len(arc) == 32
        assert all(s.move_type is MoveType.CUT and s.line == 2 for s in arc)
        assert math.dist(arc[0].start, arc[-1].end) == pytest.approx(0.0, abs=1e-9)

    def test_arc_chain_is_continuous(self, parser):
        result = parser.parse("G2 X10 Y0 I5 J0\n")
        for prev, seg in zip(result.segments, result.segments[1:]):
            assert seg.start == prev.end

    def test_position_snaps_to_commanded_end(self, parser):
        result = parser.parse("G0 X5\nG2 X0 Y5 I-5 J0\nG1 X0 Y10\n")
        assert result.segments[-1].start == (0, 5, 0)

    def test_incremental_arc_end(self, parser):
        result = parser.parse("G91\nG3 X-5 Y5 I-5 J0\nG1 X1\n")
        assert result.segments[-1].start == (-5, 5, 0)

    def test_arc_mode_is_modal(self, parser):
        result = parser.parse("G3 X0 Y0 I1 J0\nX0 Y0 I-1 J0\n")
        assert len(result.segments) == 64

    def test_arc_without_offsets_is_linear(self, parser):
        result = parser.parse("G2 X5 Y5\n")
        assert len(result.segments) == 1
        assert result.segments[0].end == (5, 5, 0)

    def test_arc_length_counts_as_cut(self, parser):
        result = parser.parse("G3 X0 Y0 I5 J0\n")
        circumference = 2 * math.pi * 5
        assert result.cycle_time.cut_distance == pytest.approx(circumference, rel=1e-2)

    def test_arc_segment_count_configurable(self):
        result = GCodeParser(ParserConfig(arc_segments=8)).parse("G3 X0 Y0 I5 J0\n")
        assert len(result.segments) == 8


# ---------------------------------------------------------------------------
# Tools, spindle, feed
# ---------------------------------------------------------------------------


class TestToolsAndFeed:
    def test_tool_changes_and_spindle(self, parser):
        result = parser.parse("T1 M6\nS18000 M3\nG0 X1\nT2 M6\nG1 X2\n")
        assert sorted(result.tools) == [1, 2]
        assert result.tools[1].spindle_speed == 18000
        assert result.tools[2].spindle_speed is None
        assert result.tools[2].name == "Tool 2"
        assert [s.tool for s in result.segments] == [1, 2]
        assert result.cycle_time.tool_change_time == pytest.approx(8.0)

    def test_tool_applies_to_move_on_same_line(self, untrimmed):
        result = untrimmed.parse("T3 G0 X1\n")
        assert result.segments[0].tool == 3

    def test_spindle_not_stamped_on_tool_zero(self, parser):
        result = parser.parse("T0\nS12000\nG1 X1\n")
        assert result.tools[0].spindle_speed is None

    def test_no_tool(self, untrimmed):
        result = untrimmed.parse("G0 X1\n")
        assert result.segments[0].tool is None
        assert result.tools == {}

    def test_feed_applies_from_next_move(self, parser):
        result = parser.parse("G1 X10 F50\nG1 X20\n")
        # First move runs at the fallback F100, second at F50
        assert result.cycle_time.cut_time == pytest.approx(6.0 + 12.0)

    def test_rapid_distance(self, parser):
        result = parser.parse("G0 X3 Y4\n")
        assert result.cycle_time.rapid_distance == pytest.approx(5.0)
        assert result.cycle_time.rapid_time == pytest.approx(5.0 / 400 * 60)

    def test_config_rates_used(self):
        cfg = ParserConfig(rapid_rate=100.0, tool_change_seconds=30.0)
        result = GCodeParser(cfg).parse("T1\nG0 X100\nT2\nT3\n")
        assert result.cycle_time.rapid_time == pytest.approx(60.0)
        assert result.cycle_time.tool_change_time == pytest.approx(60.0)


# ---------------------------------------------------------------------------
# Whole programs
# ---------------------------------------------------------------------------


class TestRouterProgram:
    def test_metadata(self, parser):
        result = parser.parse(ROUTER_PROGRAM)
        assert result.job_name == "TEST PANEL"
        assert result.material == "3/4 PLY"
        assert result.sheet.width == 48
        assert result.sheet.length == 96
        assert result.sheet.thickness is None
        assert result.tools[1].spindle_speed == 18000

    def test_park_move_trimmed(self, parser):
        result = parser.parse(ROUTER_PROGRAM)
        assert result.segments[-1].end == (1, 1, 0.5)
        assert result.bounds.max[0] == pytest.approx(11.0)
        assert result.stats.move_count == len(result.segments)

    def test_park_move_kept_when_disabled(self):
        result = GCodeParser(ParserConfig(trim_park_moves=False)).parse(ROUTER_PROGRAM)
        assert result.segments[-1].end == (120, 60, 0.5)
        assert result.bounds.max[0] == pytest.approx(120.0)

    def test_trimmed_park_move_still_timed(self, parser):
        trimmed = parser.parse(ROUTER_PROGRAM)
        kept = GCodeParser(ParserConfig(trim_park_moves=False)).parse(ROUTER_PROGRAM)
        assert trimmed.cycle_time.total_time == kept.cycle_time.total_time

    def test_nothing_after_m30(self, parser):
        result = parser.parse(ROUTER_PROGRAM)
        assert all(s.line < 22 for s in result.segments)

    def test_bounds_ordered(self, parser):
        b = parser.parse(ROUTER_PROGRAM).bounds
        assert all(lo <= hi for lo, hi in zip(b.min, b.max))

    def test_reparse_is_identical(self, parser):
        first = parser.parse(ROUTER_PROGRAM)
        second = parser.parse(ROUTER_PROGRAM)
        assert first.segments == second.segments
        assert first.to_dict() == second.to_dict()
        assert parse_gcode(ROUTER_PROGRAM).segments == first.segments

    def test_state_reset_between_parses(self, parser):
        parser.parse("G91\nT7\nG1 X5\nM30\n")
        result = parser.parse("G1 X1\n")
        assert result.segments[0].end == (1, 0, 0)
        assert result.segments[0].tool is None
        assert 7 not in result.tools

    def test_to_dict_shape(self, parser):
        d = parser.parse(ROUTER_PROGRAM).to_dict()
        assert set(d) == {
            "segments", "bounds", "stats", "sheet", "material", "jobName",
            "tools", "cycleTime",
        }
        assert set(d["segments"][0]) == {"type", "from", "to", "line", "tool"}
        assert set(d["stats"]) == {"lineCount", "moveCount", "bounds"}
        assert d["sheet"] == {"width": 48.0, "length": 96.0, "thickness": None}
        assert d["tools"][1]["name"] == "1/4 UPCUT"
