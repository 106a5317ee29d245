"""
Splitting of a live ``git log`` text stream into per-commit records.

Our ``--format`` string starts every commit with :data:`SCISSOR` on a line
of its own. The functions here consume the stream piece by piece as it
arrives from the subprocess and hand out one record at a time, so memory
use stays bounded by the size of a single commit.
"""

from __future__ import annotations

import logging
from typing import AsyncIterable, AsyncIterator


logger = logging.getLogger(__name__)
if not logger.handlers:
    logger.addHandler(logging.NullHandler())


# Cannot occur in numstat lines (digits and tabs) and is very unlikely in
# a subject line.
SCISSOR = "------------------------ >8 ------------------------"


async def split_stream(source: AsyncIterable[str], separator: str) -> AsyncIterator[str]:
    """Yield the pieces of ``source`` between occurrences of ``separator``.

    A piece is yielded as soon as the separator that ends it has been
    read. Whatever follows the last separator is yielded once the stream
    ends, provided it is not empty.
    """
    if not separator:
        raise ValueError("separator must not be empty")

    buffer = ""
    async for data in source:
        if not data:
            continue
        # Only a separator that ends in the new data can be new; the
        # buffered text before that has already been searched.
        search_from = max(0, len(buffer) - len(separator) + 1)
        buffer += data
        start = 0
        index = buffer.find(separator, search_from)
        while index != -1:
            yield buffer[start:index]
            start = index + len(separator)
            index = buffer.find(separator, start)
        if start:
            buffer = buffer[start:]

    if buffer:
        yield buffer


async def extract_chunks(source: AsyncIterable[str], sentinel: str = SCISSOR) -> AsyncIterator[str]:
    """Yield the stripped text of each record in ``source``.

    Records are separated by ``sentinel`` followed by a newline. Blank
    records, such as the empty text before the very first sentinel, are
    skipped.
    """
    count = 0
    async for chunk in split_stream(source, sentinel + "\n"):
        chunk = chunk.strip()
        if not chunk:
            continue
        count += 1
        yield chunk
    logger.debug("Extracted %d record(s) from log stream", count)
