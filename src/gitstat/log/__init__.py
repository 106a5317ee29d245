"""
Parsing of ``git log --numstat`` output.

The stream is split into per-commit records by
:mod:`gitstat.log.extractor`, each record is turned into a
:class:`~gitstat.log.models.Commit` by :mod:`gitstat.log.commit_parser`,
which in turn uses :mod:`gitstat.log.numstat` for the file lines.
"""

from .commit_parser import parse_commit_chunk  # noqa: F401
from .extractor import SCISSOR, extract_chunks, split_stream  # noqa: F401
from .models import Commit, FileChange, Signature  # noqa: F401
from .numstat import parse_numstat_line  # noqa: F401
