"""Application preferences (persisted to disk)."""

from __future__ import annotations

import json
from dataclasses import dataclass, asdict
from pathlib import Path
from typing import Optional

from .machine_profiles import MachineModel


@dataclass
class AppSettings:
    """User preferences, serialized to ~/.ncview/settings.json."""

    default_machine: str = MachineModel.ROUTER.value
    rapid_rate: Optional[float] = None
    tool_change_seconds: Optional[float] = None

    @staticmethod
    def _path() -> Path:
        return Path.home() / ".ncview" / "settings.json"

    @property
    def machine(self) -> MachineModel:
        try:
            return MachineModel(self.default_machine)
        except ValueError:
            return MachineModel.ROUTER

    def save(self) -> None:
        p = self._path()
        p.parent.mkdir(parents=True, exist_ok=True)
        p.write_text(json.dumps(asdict(self), indent=2))

    @classmethod
    def load(cls) -> "AppSettings":
        p = cls._path()
        if p.exists():
            data = json.loads(p.read_text())
            return cls(**{k: v for k, v in data.items() if k in cls.__dataclass_fields__})
        return cls()
