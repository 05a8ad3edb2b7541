"""Default interpreter constants.

These are typical CNC router figures; users should adjust the rapid rate
and tool-change time to their machine for a closer cycle-time estimate.
"""

from dataclasses import dataclass

RAPID_RATE_IPM = 400.0       # typical router rapid traverse
TOOL_CHANGE_SECONDS = 8.0    # ATC swap, per change after the first load
DEFAULT_FEED_IPM = 100.0     # used when a cut runs with no F word yet
ARC_SEGMENTS = 32            # chords per G2/G3
PARK_MARGIN_FRACTION = 0.1   # of the cut X extent
PARK_MARGIN_MIN = 5.0        # program units


@dataclass
class ParserConfig:
    """Tunables for one GCodeParser."""

    rapid_rate: float = RAPID_RATE_IPM
    tool_change_seconds: float = TOOL_CHANGE_SECONDS
    fallback_feed: float = DEFAULT_FEED_IPM
    arc_segments: int = ARC_SEGMENTS
    park_margin_fraction: float = PARK_MARGIN_FRACTION
    park_margin_min: float = PARK_MARGIN_MIN
    trim_park_moves: bool = True
