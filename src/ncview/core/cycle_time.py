"""Cycle-time estimate from accumulated move distances.

Distances are in program units and rates in units per minute, so inch
programs use IPM and metric programs mm/min.  The result is an estimate:
acceleration, dwell and spindle ramp are not modelled.
"""

from __future__ import annotations

import math
from dataclasses import dataclass
from typing import Sequence

from ..config.defaults import DEFAULT_FEED_IPM, RAPID_RATE_IPM, TOOL_CHANGE_SECONDS


@dataclass(frozen=True)
class FeedSample:
    """Length of one cut move and the feed rate it ran at."""
    distance: float
    feed: float


@dataclass(frozen=True)
class CycleTimeEstimate:
    rapid_distance: float
    cut_distance: float
    rapid_time: float        # seconds
    cut_time: float          # seconds
    tool_change_time: float  # seconds
    total_time: float        # seconds
    formatted: str

    def to_dict(self) -> dict:
        return {
            "rapidTime": self.rapid_time,
            "cutTime": self.cut_time,
            "toolChangeTime": self.tool_change_time,
            "totalTime": self.total_time,
            "totalCutDist": self.cut_distance,
            "totalRapidDist": self.rapid_distance,
            "formatted": self.formatted,
        }


def format_duration(seconds: float) -> str:
    """``"3m 7s"``, or ``"42s"`` when under a minute."""
    if not math.isfinite(seconds):
        return "--"
    total = int(math.floor(seconds + 0.5))
    minutes, secs = divmod(total, 60)
    if minutes == 0:
        return f"{secs}s"
    return f"{minutes}m {secs}s"


def estimate_cycle_time(
    rapid_distance: float,
    feed_samples: Sequence[FeedSample],
    tool_changes: int,
    rapid_rate: float = RAPID_RATE_IPM,
    tool_change_seconds: float = TOOL_CHANGE_SECONDS,
    fallback_feed: float = DEFAULT_FEED_IPM,
) -> CycleTimeEstimate:
    """Estimate machine run time.

    Cut time is summed per sample so mid-program feed changes are
    respected.  The first tool load is not counted as a change.
    """
    rapid_time = rapid_distance / rapid_rate * 60.0

    cut_time = 0.0
    cut_distance = 0.0
    for sample in feed_samples:
        feed = sample.feed if sample.feed > 0 else fallback_feed
        cut_time += sample.distance / feed * 60.0
        cut_distance += sample.distance

    tc_time = max(0, tool_changes - 1) * tool_change_seconds
    total = rapid_time + cut_time + tc_time

    return CycleTimeEstimate(
        rapid_distance=rapid_distance,
        cut_distance=cut_distance,
        rapid_time=rapid_time,
        cut_time=cut_time,
        tool_change_time=tc_time,
        total_time=total,
        formatted=format_duration(total),
    )
