"""
End-to-end export of one repository's history.

``git log`` output flows through the record extractor and the commit
parser into the serializer one commit at a time, in the order git
emits them (newest first).
"""

from __future__ import annotations

import logging
from typing import AsyncIterable, AsyncIterator, TextIO

from gitstat.log.commit_parser import parse_commit_chunk
from gitstat.log.extractor import SCISSOR, extract_chunks
from gitstat.log.models import Commit
from gitstat.output.serializer import write_project
from gitstat.vcs.git_client import GitClient


logger = logging.getLogger(__name__)
if not logger.handlers:
    logger.addHandler(logging.NullHandler())


async def iter_commits(text_stream: AsyncIterable[str], sentinel: str = SCISSOR) -> AsyncIterator[Commit]:
    """Yield a :class:`Commit` for each record in ``text_stream``."""
    async for chunk in extract_chunks(text_stream, sentinel):
        yield parse_commit_chunk(chunk)


async def export_commit_log(client: GitClient, sink: TextIO, project_name: str) -> int:
    """Write the history of ``client``'s repository to ``sink`` as JSON.

    Returns the number of commits written. A :class:`GitError` from the
    log stream propagates; the document in ``sink`` is then incomplete.
    """
    logger.info("Reading history of %s", client.repo_root)
    count = await write_project(sink, project_name, iter_commits(client.stream_log()))
    logger.info("Exported %d commit(s) for project %s", count, project_name)
    return count
