"""Lenient G-code word lexer.

Every letter starts a word; the optional signed decimal that follows is its
value.  Anything else on the line is skipped, so the lexer never fails.  A
letter with a missing or malformed number (``G-``, ``X.``) gets the value
NaN, which the interpreter treats as "not given".
"""

from __future__ import annotations

import math
import re
from dataclasses import dataclass

WORD_PATTERN = re.compile(r"([A-Z])([+-]?[0-9]*\.?[0-9]*)")
LINE_COMMENT_PATTERN = re.compile(r";.*$")
PAREN_COMMENT_PATTERN = re.compile(r"\(.*?\)")


@dataclass(frozen=True)
class Word:
    """One letter/value pair, e.g. ``X-1.25``."""
    letter: str
    value: float

    @property
    def is_valid(self) -> bool:
        return not math.isnan(self.value)


def _to_float(text: str) -> float:
    try:
        value = float(text)
    except ValueError:
        return math.nan
    # Overlong digit runs parse as inf rather than failing
    return value if math.isfinite(value) else math.nan


def strip_comments(line: str) -> str:
    """Remove ``;`` and ``( )`` comments, then trim and uppercase."""
    line = LINE_COMMENT_PATTERN.sub("", line)
    line = PAREN_COMMENT_PATTERN.sub("", line)
    return line.strip().upper()


def tokenize(line: str) -> list[Word]:
    """Split a cleaned, uppercased line into words, left to right."""
    return [
        Word(letter, _to_float(number))
        for letter, number in WORD_PATTERN.findall(line)
    ]
