"""Sheet (nested-panel blank) dimensions read from program metadata."""

from __future__ import annotations

from dataclasses import dataclass, asdict
from typing import Optional


@dataclass
class SheetInfo:
    """Sheet dimensions declared by the CAM post-processor.

    Each value is ``None`` when the program never states it; unknown is not
    the same as zero.  Width runs along X and length along Y, matching the
    Cabinet Vision convention.
    """

    width: Optional[float] = None
    length: Optional[float] = None
    thickness: Optional[float] = None

    def to_dict(self) -> dict:
        return asdict(self)
