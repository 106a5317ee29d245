"""
Git client implementation for gitstat.

This module asks git where the repository is and runs ``git log`` for
it. The log is read through an asyncio subprocess pipe so that records
can be parsed and written while git is still producing output. All
failures of the git process are reported as :class:`GitError`.
"""

from __future__ import annotations

import asyncio
import codecs
import logging
import subprocess
from pathlib import Path
from typing import AsyncIterator, List, Optional

from gitstat.log.extractor import SCISSOR


logger = logging.getLogger(__name__)
# Attach a null handler to avoid logging errors when the root logger is not
# configured. Logs will propagate to the root when configured by the CLI.
if not logger.handlers:
    logger.addHandler(logging.NullHandler())


# One header per line, in this order, after the record separator.
LOG_FORMAT = "%n".join(
    [
        SCISSOR,
        "hash: %H",
        "parents: %P",
        "subject: %s",
        "author name: %an",
        "author date: %aI",
        "committer name: %cn",
        "committer date: %cI",
    ]
)

READ_SIZE = 64 * 1024


class GitError(Exception):
    """Raised when a Git command fails."""

    pass


class GitClient:
    """Client for reading the history of a Git repository."""

    def __init__(self, repo_root: Path, git_executable: str = "git") -> None:
        self.repo_root = repo_root
        self.git_executable = git_executable

    # ------------------------------------------------------------------
    # Repository detection
    # ------------------------------------------------------------------
    @staticmethod
    def find_repo_root(start: Path, git_executable: str = "git") -> Optional[Path]:
        """Find the root of the Git repository containing ``start``.

        Git does the lookup, so worktrees, submodules and bare repositories
        are all recognised. The root is the top of the working tree, or the
        git directory itself for a bare repository. Returns ``None`` when
        ``start`` is not inside a repository.

        Raises
        ------
        GitError
            If git cannot be started.
        """
        return GitClient(start, git_executable).locate_root()

    def locate_root(self) -> Optional[Path]:
        """Ask git for the repository that contains ``repo_root``."""
        result = self._run(["rev-parse", "--absolute-git-dir"])
        if result.returncode != 0:
            logger.debug("Not a Git repository: %s", result.stderr.strip())
            return None
        git_dir = Path(result.stdout.strip())

        # Bare repositories and the inside of a .git directory have no
        # working tree; git fails or prints nothing there.
        result = self._run(["rev-parse", "--show-toplevel"])
        toplevel = result.stdout.strip()
        if result.returncode == 0 and toplevel:
            return Path(toplevel)
        return git_dir

    @staticmethod
    def log_args() -> List[str]:
        """Arguments for ``git log`` producing the parseable record format."""
        return ["log", "--numstat", f"--format={LOG_FORMAT}"]

    def _run(self, args: List[str]) -> subprocess.CompletedProcess:
        """Run a Git command in ``repo_root`` and return the finished process.

        The exit status is left to the caller.

        Raises
        ------
        GitError
            If git cannot be started.
        """
        full_cmd = [self.git_executable] + args
        logger.debug("Executing Git command: %s", " ".join(full_cmd))
        try:
            result = subprocess.run(
                full_cmd,
                cwd=self.repo_root,
                stdin=subprocess.DEVNULL,
                stdout=subprocess.PIPE,
                stderr=subprocess.PIPE,
                text=True,
                encoding="utf-8",
                errors="replace",
            )
        except OSError as e:
            logger.error("Failed to start git: %s", e)
            raise GitError(f"Failed to run {self.git_executable}: {e}") from e

        return result

    # ------------------------------------------------------------------
    # History
    # ------------------------------------------------------------------
    async def stream_log(self, read_size: int = READ_SIZE) -> AsyncIterator[str]:
        """Run ``git log`` and yield its standard output as text.

        Output is decoded incrementally as UTF-8, replacing invalid bytes,
        and yielded in pieces as it arrives. Standard error is collected
        in the background.

        Raises
        ------
        GitError
            If git cannot be started or exits with a non-zero status.
        """
        full_cmd = [self.git_executable] + self.log_args()
        logger.debug("Streaming Git command: %s", " ".join(full_cmd))
        try:
            proc = await asyncio.create_subprocess_exec(
                *full_cmd,
                cwd=str(self.repo_root),
                stdin=asyncio.subprocess.DEVNULL,
                stdout=asyncio.subprocess.PIPE,
                stderr=asyncio.subprocess.PIPE,
            )
        except OSError as e:
            logger.error("Failed to start git: %s", e)
            raise GitError(f"Failed to run {self.git_executable}: {e}") from e

        stderr_task = asyncio.ensure_future(proc.stderr.read())
        decoder = codecs.getincrementaldecoder("utf-8")(errors="replace")
        completed = False
        try:
            while True:
                data = await proc.stdout.read(read_size)
                if not data:
                    break
                text = decoder.decode(data)
                if text:
                    yield text
            tail = decoder.decode(b"", final=True)
            if tail:
                yield tail

            returncode = await proc.wait()
            stderr = (await stderr_task).decode("utf-8", errors="replace").strip()
            completed = True
            if returncode != 0:
                logger.error(
                    "Git command failed with exit code %d: %s\nSTDERR: %s",
                    returncode,
                    " ".join(full_cmd),
                    stderr,
                )
                raise GitError(stderr or f"git log exited with status {returncode}")
        finally:
            if not completed:
                # Consumer stopped early or the pipe failed.
                if proc.returncode is None:
                    try:
                        proc.kill()
                    except ProcessLookupError:
                        pass
                    await proc.wait()
                if not stderr_task.done():
                    stderr_task.cancel()
