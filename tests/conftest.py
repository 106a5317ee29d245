import logging
import os
import shutil
import subprocess
from pathlib import Path

import pytest


GIT_ENV = {
    "GIT_AUTHOR_NAME": "Ada Lovelace",
    "GIT_AUTHOR_EMAIL": "ada@example.com",
    "GIT_COMMITTER_NAME": "Charles Babbage",
    "GIT_COMMITTER_EMAIL": "charles@example.com",
    "GIT_CONFIG_NOSYSTEM": "1",
}


@pytest.fixture(autouse=True)
def drop_cli_log_handlers():
    """Remove the stderr handler the CLI installs on the root logger.

    CliRunner closes its captured stderr after each invocation; a handler
    left pointing at it would fail on the next log record.
    """
    yield
    root = logging.getLogger()
    for handler in [h for h in root.handlers if type(h) is logging.StreamHandler]:
        root.removeHandler(handler)


@pytest.fixture
def git_repo(tmp_path, monkeypatch):
    """Create a small repository with a binary file and a merge commit.

    History, newest first: merge of ``feature`` into ``main``, a text change
    on ``main``, the binary file on ``feature``, the initial commit.
    """
    if shutil.which("git") is None:
        pytest.skip("git is not installed")

    monkeypatch.setenv("HOME", str(tmp_path))
    for key, value in GIT_ENV.items():
        monkeypatch.setenv(key, value)

    repo = tmp_path / "sample-repo"
    repo.mkdir()

    def git(*args, date=None):
        env = os.environ.copy()
        if date is not None:
            env["GIT_AUTHOR_DATE"] = date
            env["GIT_COMMITTER_DATE"] = date
        subprocess.run(["git", *args], cwd=repo, check=True, capture_output=True, env=env)

    git("init", "-q")
    git("checkout", "-q", "-b", "main")

    (repo / "README.md").write_text("hello\nworld\n", encoding="utf-8")
    git("add", "README.md")
    git("commit", "-q", "-m", "Initial commit", date="2024-01-01T10:00:00+00:00")

    git("checkout", "-q", "-b", "feature")
    (repo / "logo.bin").write_bytes(bytes(range(256)))
    git("add", "logo.bin")
    git("commit", "-q", "-m", "Add logo", date="2024-01-02T10:00:00+00:00")

    git("checkout", "-q", "main")
    (repo / "README.md").write_text("hello\nthere\nworld\n", encoding="utf-8")
    (repo / "notes with spaces.txt").write_text("a\n", encoding="utf-8")
    git("add", "README.md", "notes with spaces.txt")
    git("commit", "-q", "-m", "Update readme", date="2024-01-03T10:00:00+00:00")

    git("merge", "-q", "--no-ff", "-m", "Merge branch 'feature'", "feature", date="2024-01-04T10:00:00+00:00")
    return Path(repo)


@pytest.fixture
def bare_repo(git_repo, tmp_path):
    """Bare clone of ``git_repo``, with no working tree and no ``.git`` entry."""
    bare = tmp_path / "sample-repo.git"
    subprocess.run(
        ["git", "clone", "-q", "--bare", str(git_repo), str(bare)],
        check=True,
        capture_output=True,
    )
    return bare
