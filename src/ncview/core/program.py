"""Reading G-code program files from disk.

The interpreter itself only ever sees a string; this module is the thin
loading layer used by the CLI.
"""

from __future__ import annotations

import warnings
from pathlib import Path

# Extensions emitted by the post-processors we have seen in the wild
SUPPORTED_EXTENSIONS = {
    ".nc", ".ngc", ".gcode", ".gc", ".tap", ".cnc", ".anc", ".txt",
}


def load_program(path: Path) -> str:
    """Read the program at *path* as text.

    Undecodable bytes are replaced rather than rejected, with a warning;
    post-processors occasionally write Latin-1 degree signs or diameter
    symbols into comments.

    Raises FileNotFoundError if *path* does not exist.
    """
    path = Path(path)
    if not path.exists():
        raise FileNotFoundError(f"G-code file not found: {path}")

    if path.suffix.lower() not in SUPPORTED_EXTENSIONS:
        warnings.warn(
            f"'{path.name}' does not have a known G-code extension; "
            "parsing it anyway.",
            UserWarning,
            stacklevel=2,
        )

    raw = path.read_bytes()
    try:
        return raw.decode("utf-8")
    except UnicodeDecodeError:
        warnings.warn(
            f"'{path.name}' is not valid UTF-8; undecodable bytes were replaced.",
            UserWarning,
            stacklevel=2,
        )
        return raw.decode("utf-8", errors="replace")
