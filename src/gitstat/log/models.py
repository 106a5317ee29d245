"""
Data models for parsed commit history.

A :class:`Commit` is built once per ``git log`` record and serialized
straight away. The ``to_dict`` methods produce the exact key names and
key order of the output document, which downstream consumers rely on.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Dict, Tuple


@dataclass(frozen=True)
class FileChange:
    """Line statistics for one file within one commit.

    Attributes
    ----------
    filepath : str
        Repository-relative path exactly as git reported it.
    additions : int
        Added lines (0 when git reports ``-``).
    deletions : int
        Deleted lines (0 when git reports ``-``).
    raw_additions : int
        Mirror of ``additions``.
    raw_deletions : int
        Mirror of ``deletions``.
    is_binary : bool
        Always False for now, including ``-``/``-`` binary entries.
    """

    filepath: str
    additions: int
    deletions: int
    raw_additions: int
    raw_deletions: int
    is_binary: bool = False

    def to_dict(self) -> Dict[str, Any]:
        return {
            "filepath": self.filepath,
            "isBinary": self.is_binary,
            "additions": self.additions,
            "deletions": self.deletions,
            "rawAdditions": self.raw_additions,
            "rawDeletions": self.raw_deletions,
        }


@dataclass(frozen=True)
class Signature:
    """Who did something and when (ISO-8601 with offset)."""

    name: str = ""
    time: str = ""

    def to_dict(self) -> Dict[str, Any]:
        return {"name": self.name, "time": self.time}


@dataclass(frozen=True)
class Commit:
    """One revision as read from ``git log``.

    ``message`` holds the subject line only. ``files`` keeps the order in
    which git listed the files and is empty for merges without direct
    changes.
    """

    hash: str = ""
    author: Signature = field(default_factory=Signature)
    committer: Signature = field(default_factory=Signature)
    message: str = ""
    files: Tuple[FileChange, ...] = ()
    is_merge: bool = False

    def to_dict(self) -> Dict[str, Any]:
        return {
            "hash": self.hash,
            "author": self.author.to_dict(),
            "committer": self.committer.to_dict(),
            "message": self.message,
            "files": [change.to_dict() for change in self.files],
            "isMerge": self.is_merge,
        }
