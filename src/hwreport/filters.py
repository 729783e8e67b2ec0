"""Line-oriented regular expression filters over byte streams."""

from __future__ import annotations

import re
from typing import BinaryIO, Iterator, List, Pattern, Union

from .exceptions import NotFoundError

PatternLike = Union[str, Pattern[str]]


def _compile(pattern: PatternLike) -> Pattern[str]:
    if isinstance(pattern, str):
        return re.compile(pattern)
    return pattern


def _iter_lines(stream: BinaryIO) -> Iterator[str]:
    for raw in stream:
        line = raw.decode("utf-8", errors="replace")
        yield line.removesuffix("\n").removesuffix("\r")


def _capture(match: re.Match[str], line: str) -> str:
    if not match.re.groups:
        return line
    for group in match.groups():
        if group is not None:
            return group
    return match.group(0)


def filter_first(stream: BinaryIO, pattern: PatternLike, anchor: bool = False) -> str:
    """Return the capture of the first matching line.

    With ``anchor`` set, only matches starting at column 0 are considered.
    Raises :class:`NotFoundError` when the stream ends without a match; read
    errors from the stream propagate unchanged.
    """
    regex = _compile(pattern)
    for line in _iter_lines(stream):
        match = regex.search(line)
        if match is None:
            continue
        if anchor and match.start() != 0:
            continue
        return _capture(match, line)
    raise NotFoundError(f"no line matching {regex.pattern!r}")


def filter_all(stream: BinaryIO, pattern: PatternLike) -> List[str]:
    """Return the capture of every matching line, in stream order."""
    regex = _compile(pattern)
    results: List[str] = []
    for line in _iter_lines(stream):
        match = regex.search(line)
        if match is not None:
            results.append(_capture(match, line))
    return results
