"""Machine profiles for cycle-time estimation.

Rates are in program units per minute (IPM for the inch machines listed
here).
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum

from .defaults import ParserConfig


@dataclass
class MachineProfile:
    """Motion figures for a specific machine class."""

    model: str
    rapid_rate: float           # IPM
    tool_change_seconds: float  # per change, 0 for manual-change machines

    def __str__(self) -> str:
        return (
            f"{self.model}  rapid {self.rapid_rate:g} IPM  "
            f"tool change {self.tool_change_seconds:g}s"
        )

    def parser_config(self, **overrides) -> ParserConfig:
        """ParserConfig seeded from this profile, with optional overrides."""
        cfg = ParserConfig(
            rapid_rate=self.rapid_rate,
            tool_change_seconds=self.tool_change_seconds,
        )
        for key, value in overrides.items():
            if value is not None:
                setattr(cfg, key, value)
        return cfg


class MachineModel(Enum):
    ROUTER = "router"
    ROUTER_ATC = "router-atc"
    HOBBY = "hobby"
    PCNC_1100 = "pcnc-1100"


_PROFILES: dict[MachineModel, MachineProfile] = {
    MachineModel.ROUTER: MachineProfile(
        model="CNC router",
        rapid_rate=400.0,
        tool_change_seconds=8.0,
    ),
    MachineModel.ROUTER_ATC: MachineProfile(
        model="CNC router, fast linear ATC",
        rapid_rate=1000.0,
        tool_change_seconds=6.0,
    ),
    MachineModel.HOBBY: MachineProfile(
        model="Hobby gantry router",
        rapid_rate=200.0,
        tool_change_seconds=60.0,
    ),
    MachineModel.PCNC_1100: MachineProfile(
        model="Tormach PCNC 1100",
        rapid_rate=135.0,
        tool_change_seconds=12.0,
    ),
}


def get_profile(model: MachineModel) -> MachineProfile:
    return _PROFILES[model]


def list_profiles() -> list[MachineProfile]:
    return list(_PROFILES.values())
