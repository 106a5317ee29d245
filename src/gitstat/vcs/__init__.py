"""
Version control system (VCS) integration.

Only Git is supported. The client detects repository roots and streams
``git log`` output for the parsers in :mod:`gitstat.log`.
"""

from .git_client import GitClient, GitError  # noqa: F401
