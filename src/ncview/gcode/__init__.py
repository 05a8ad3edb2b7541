"""G-code reading package."""

from .interpreter import GCodeParser, parse_gcode
from .result import ParseResult, ParseStats

__all__ = ["GCodeParser", "ParseResult", "ParseStats", "parse_gcode"]
