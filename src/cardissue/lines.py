"""Line splitting and blank-line trimming for card notes.

Only lines equal to the empty string count as blank; a line holding
spaces is content and survives trimming. Internal blank lines are never
touched.
"""

from __future__ import annotations

import re
from collections.abc import Sequence

LINE_BREAK_RE = re.compile(r"\r?\n")


def split_lines(text: str) -> list[str]:
    return LINE_BREAK_RE.split(text)


def trim_leading_empty(lines: Sequence[str]) -> list[str]:
    start = 0
    while start < len(lines) and lines[start] == "":
        start += 1
    return list(lines[start:])


def trim_trailing_empty(lines: Sequence[str]) -> list[str]:
    end = len(lines)
    while end > 0 and lines[end - 1] == "":
        end -= 1
    return list(lines[:end])


def trim_empty(lines: Sequence[str]) -> list[str]:
    return trim_trailing_empty(trim_leading_empty(lines))


__all__ = [
    "LINE_BREAK_RE",
    "split_lines",
    "trim_leading_empty",
    "trim_trailing_empty",
    "trim_empty",
]
