"""
Streaming JSON output for commit history.

The document has a fixed shape with a single project::

    {"version": "1.0.0", "projects": [{"name": ..., "commits": [...]}]}

The brackets around the commit list are written up front and at the end,
and every commit is written as soon as it is received. Nothing but the
"first record" flag is kept between commits, so a repository with a
very long history does not need more memory than one with a short one.
"""

from __future__ import annotations

import json
import logging
from typing import AsyncIterable, Optional, TextIO

from gitstat.log.models import Commit


logger = logging.getLogger(__name__)
if not logger.handlers:
    logger.addHandler(logging.NullHandler())


DOCUMENT_VERSION = "1.0.0"

_FOOTER = "\n      ]\n    }\n  ]\n}\n"


def _header(project_name: str) -> str:
    return (
        "{\n"
        f'  "version": {json.dumps(DOCUMENT_VERSION)},\n'
        '  "projects": [\n'
        "    {\n"
        f'      "name": {json.dumps(project_name, ensure_ascii=False)},\n'
        '      "commits": [\n'
    )


class SerializerError(Exception):
    """Raised when the serializer is used out of order."""

    pass


class CommitLogSerializer:
    """Write one project's commits to ``sink`` as a JSON document.

    Usage::

        with CommitLogSerializer(sys.stdout, "my-repo") as serializer:
            for commit in commits:
                serializer.write_commit(commit)

    When the ``with`` block raises, the closing brackets are not written;
    the output is then incomplete, mirroring the failed run.
    """

    def __init__(self, sink: TextIO, project_name: str, indent: Optional[int] = 2) -> None:
        self.sink = sink
        self.project_name = project_name
        self.indent = indent
        self.count = 0
        self._first = True
        self._started = False
        self._finished = False

    def __enter__(self) -> "CommitLogSerializer":
        self.begin()
        return self

    def __exit__(self, exc_type, exc_val, exc_tb) -> bool:
        if exc_type is None:
            self.finish()
        return False

    def begin(self) -> None:
        """Write everything up to the opening bracket of the commit list."""
        if self._started:
            raise SerializerError("document already started")
        self._started = True
        self.sink.write(_header(self.project_name))

    def write_commit(self, commit: Commit) -> None:
        """Append one commit to the commit list."""
        if not self._started or self._finished:
            raise SerializerError("write_commit() called outside of begin()/finish()")
        separator = "" if self._first else ",\n"
        self.sink.write(separator + json.dumps(commit.to_dict(), indent=self.indent, ensure_ascii=False))
        self._first = False
        self.count += 1

    def finish(self) -> None:
        """Close the commit list and the document."""
        if not self._started:
            raise SerializerError("finish() called before begin()")
        if self._finished:
            return
        self._finished = True
        self.sink.write(_FOOTER)
        self.sink.flush()
        logger.debug("Serialized %d commit(s) for project %s", self.count, self.project_name)

    async def write_commits(self, commits: AsyncIterable[Commit]) -> int:
        """Write every commit from ``commits`` in arrival order.

        Returns the number of commits written by this call.
        """
        written = 0
        async for commit in commits:
            self.write_commit(commit)
            written += 1
        return written


async def write_project(sink: TextIO, project_name: str, commits: AsyncIterable[Commit]) -> int:
    """Write a complete document for ``commits`` and return the commit count."""
    with CommitLogSerializer(sink, project_name) as serializer:
        return await serializer.write_commits(commits)
