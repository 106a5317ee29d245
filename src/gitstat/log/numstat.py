"""
Parsing of ``git log --numstat`` file lines.

A numstat line normally looks like ``<added>\\t<deleted>\\t<path>``. Some
producers collapse the tabs into spaces, so a whitespace-separated form
is accepted as a fallback. Binary files are reported with ``-`` in both
count columns; those map to zero counts.

Each supported shape is a small splitter in :data:`LINE_SHAPES`. They are
tried in order and the first one that yields three fields wins.
"""

from __future__ import annotations

import re
from typing import Callable, Optional, Sequence, Tuple

from .models import FileChange


BINARY_SENTINEL = "-"

_WHITESPACE_LINE = re.compile(r"^(\S+)\s+(\S+)\s+(.+)$")
_DIGITS = re.compile(r"[0-9]+")

Fields = Tuple[str, str, str]


def _split_tabbed(line: str) -> Optional[Fields]:
    """Split ``added<TAB>deleted<TAB>path``; tabs inside the path are kept."""
    parts = line.split("\t")
    if len(parts) < 3:
        return None
    return parts[0], parts[1], "\t".join(parts[2:])


def _split_whitespace(line: str) -> Optional[Fields]:
    """Split ``added deleted path`` where the path is the remainder."""
    match = _WHITESPACE_LINE.match(line)
    if match is None:
        return None
    return match.group(1), match.group(2), match.group(3)


LINE_SHAPES: Sequence[Callable[[str], Optional[Fields]]] = (
    _split_tabbed,
    _split_whitespace,
)


def parse_count(token: str) -> Optional[int]:
    """Convert a numstat count column to an int.

    ``-`` (binary file) becomes 0. Anything that is not a plain base-10
    number of ASCII digits yields ``None``. This is stricter than
    prefix-parsing conversions: ``"12abc"``, ``" 5"`` and ``"-1"`` are all
    rejected instead of being read as 12, 5 or -1, so a malformed line is
    dropped rather than producing a wrong or negative count.
    """
    if token == BINARY_SENTINEL:
        return 0
    if not _DIGITS.fullmatch(token):
        return None
    return int(token, 10)


def split_numstat_line(line: str) -> Optional[Fields]:
    """Return ``(added, deleted, path)`` from the first matching shape."""
    for shape in LINE_SHAPES:
        fields = shape(line)
        if fields is not None:
            return fields
    return None


def parse_numstat_line(line: str) -> Optional[FileChange]:
    """Parse one numstat line into a :class:`FileChange`.

    Returns ``None`` for lines that do not look like numstat output, have
    an empty field, or carry a count that is not a number. Callers are
    expected to drop such lines.
    """
    fields = split_numstat_line(line)
    if fields is None:
        return None
    additions_raw, deletions_raw, filepath = fields
    if not additions_raw or not deletions_raw or not filepath:
        return None

    additions = parse_count(additions_raw)
    deletions = parse_count(deletions_raw)
    if additions is None or deletions is None:
        return None

    return FileChange(
        filepath=filepath,
        additions=additions,
        deletions=deletions,
        raw_additions=additions,
        raw_deletions=deletions,
    )
