"""
Parsing of a single ``git log`` record into a :class:`Commit`.

A record consists of ``label: value`` header lines written by our
``--format`` string followed by the numstat lines git appends for the
commit. Parsing is best effort: unknown lines are treated as numstat
candidates and dropped when they do not parse, and missing headers leave
the corresponding field empty.
"""

from __future__ import annotations

from typing import Dict, List, Tuple

from .models import Commit, FileChange, Signature
from .numstat import parse_numstat_line


# (line prefix, field key). Prefixes are case sensitive.
HEADER_FIELDS: Tuple[Tuple[str, str], ...] = (
    ("hash:", "hash"),
    ("parents:", "parents"),
    ("subject:", "subject"),
    ("author name:", "author_name"),
    ("author date:", "author_time"),
    ("committer name:", "committer_name"),
    ("committer date:", "committer_time"),
)


def _match_header(line: str) -> Tuple[str, str]:
    """Return ``(key, value)`` for a header line or ``("", "")``."""
    for prefix, key in HEADER_FIELDS:
        if line.startswith(prefix):
            return key, line[len(prefix):].strip()
    return "", ""


def count_parents(parents_line: str) -> int:
    return len([token for token in parents_line.split() if token])


def parse_commit_chunk(chunk: str) -> Commit:
    """Build a :class:`Commit` from one record of ``git log`` output.

    Parameters
    ----------
    chunk : str
        The text between two record separators.

    Returns
    -------
    Commit
        Always returns a commit. A header that appears twice keeps its
        last value.
    """
    headers: Dict[str, str] = {key: "" for _, key in HEADER_FIELDS}
    files: List[FileChange] = []

    for raw_line in chunk.split("\n"):
        line = raw_line.rstrip()
        if not line:
            continue

        key, value = _match_header(line)
        if key:
            headers[key] = value
            continue

        change = parse_numstat_line(line)
        if change is not None:
            files.append(change)

    return Commit(
        hash=headers["hash"],
        author=Signature(name=headers["author_name"], time=headers["author_time"]),
        committer=Signature(name=headers["committer_name"], time=headers["committer_time"]),
        message=headers["subject"],
        files=tuple(files),
        is_merge=count_parents(headers["parents"]) > 1,
    )
