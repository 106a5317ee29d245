"""
Command line interface for gitstat.

This module defines the ``main`` function which is used as the entry
point when executing the ``gitstat`` command. It locates the repository,
loads the optional configuration, chooses the output sink and runs the
export pipeline. Status messages go to stderr because stdout may carry
the JSON document.
"""

from __future__ import annotations

import asyncio
import io
import logging
import time
from pathlib import Path
from typing import Any, Dict, Optional, TextIO

import click
from click.core import ParameterSource

from gitstat import __version__
from gitstat.config.loader import ConfigError, load_config
from gitstat.pipeline import export_commit_log
from gitstat.vcs.git_client import GitClient, GitError

logger = logging.getLogger(__name__)
if not logger.handlers:
    logger.addHandler(logging.NullHandler())


# ---------------------------------------------------------------------------
# Exit codes
# ---------------------------------------------------------------------------
EXIT_SUCCESS = 0
EXIT_GENERIC_ERROR = 1
EXIT_INVALID_USAGE = 2
EXIT_NO_REPO = 3
EXIT_CONFIG_ERROR = 4
EXIT_VCS_FAILURE = 5
EXIT_OUTPUT_ERROR = 6

DEFAULT_OUTPUT = "gitstat_result.json"


# ---------------------------------------------------------------------------
# Status display utilities
# ---------------------------------------------------------------------------

class ProgressIndicator:
    """Announce a step on stderr and report how long it took."""

    def __init__(self, message: str, enabled: bool = True):
        self.message = message
        self.enabled = enabled
        self.start_time = None

    def __enter__(self):
        self.start_time = time.time()
        if self.enabled:
            click.echo(f"→ {self.message}...", err=True)
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        if self.enabled and exc_type is None:
            elapsed = time.time() - self.start_time
            click.echo(f"  ✓ Done ({elapsed:.1f}s)", err=True)
        return False


def print_success(message: str, indent: int = 0):
    """Print a success message."""
    prefix = "  " * indent
    click.echo(f"{prefix}✓ {message}", err=True)


def print_error(message: str, indent: int = 0):
    """Print an error message."""
    prefix = "  " * indent
    click.echo(f"{prefix}✗ {message}", err=True)


# ---------------------------------------------------------------------------
# Core functionality
# ---------------------------------------------------------------------------

def resolve_output_path(out: str, out_source: Optional[ParameterSource], config: Dict[str, Any], repo_root: Path) -> Path:
    """Pick the output file.

    An ``--out`` given on the command line wins. Otherwise the config's
    ``output`` is used, relative to the repository root, and finally the
    built-in default relative to the working directory.
    """
    if out_source == ParameterSource.COMMANDLINE or "output" not in config:
        return Path(out)
    configured = Path(config["output"])
    if configured.is_absolute():
        return configured
    return repo_root / configured


def default_project_name(repo_root: Path) -> str:
    """Name a project after its repository directory.

    A bare repository directory such as ``project.git`` yields ``project``.
    """
    name = repo_root.name
    if name.endswith(".git") and len(name) > len(".git"):
        return name[: -len(".git")]
    return name


def run_export(client: GitClient, sink: TextIO, project_name: str) -> int:
    """Run the export pipeline on a fresh event loop."""
    return asyncio.run(export_commit_log(client, sink, project_name))


def run_export_to_stdout(client: GitClient, project_name: str) -> int:
    """Run the export with the document written to stdout as UTF-8.

    The locale encoding of ``sys.stdout`` is bypassed. The text layer is
    detached afterwards so stdout itself stays open.
    """
    sink = io.TextIOWrapper(click.get_binary_stream("stdout"), encoding="utf-8", newline="\n")
    try:
        return run_export(client, sink, project_name)
    finally:
        sink.detach()


@click.command(context_settings={"help_option_names": ["-h", "--help"]})
@click.option(
    "-o",
    "--out",
    "out",
    type=click.Path(dir_okay=False),
    default=DEFAULT_OUTPUT,
    show_default=True,
    help="Write the JSON document to this file.",
)
@click.option("--stdout", "to_stdout", is_flag=True, help="Write the JSON document to stdout instead of a file.")
@click.option("-n", "--name", "name", help="Project name in the document (defaults to the repository directory name).")
@click.option(
    "-C",
    "--repo",
    "repo",
    type=click.Path(exists=True, file_okay=False, path_type=Path),
    help="Start looking for the repository here instead of the current directory.",
)
@click.option("--verbose", is_flag=True, help="Enable verbose (debug) output.")
@click.version_option(version=__version__, prog_name="gitstat")
def main(out: str, to_stdout: bool, name: Optional[str], repo: Optional[Path], verbose: bool) -> None:
    """Export the commit history of a Git repository as JSON.

    Every commit is listed with its author, committer, subject and the
    per-file line statistics reported by ``git log --numstat``.
    """
    ctx = click.get_current_context()
    out_source = ctx.get_parameter_source("out")

    # Reject conflicting options before doing any work.
    if to_stdout and out_source == ParameterSource.COMMANDLINE:
        raise click.UsageError("--stdout cannot be combined with --out.", ctx=ctx)

    # Configure logging. Use force=True to ensure handlers are reconfigured
    # on subsequent invocations (important for tests).
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(levelname)s: %(message)s",
        force=True,
    )

    # The document owns stdout in --stdout mode; only errors are shown then.
    show_status = not to_stdout

    try:
        start_dir = repo if repo is not None else Path.cwd()
        try:
            repo_root = GitClient.find_repo_root(start_dir)
        except GitError as exc:
            print_error(f"Git error: {exc}")
            raise click.exceptions.Exit(EXIT_VCS_FAILURE)
        if repo_root is None:
            print_error(f"No Git repository found in {start_dir} or parent directories.")
            raise click.exceptions.Exit(EXIT_NO_REPO)
        logger.debug("Repository root: %s", repo_root)

        try:
            config = load_config(repo_root)
        except ConfigError as exc:
            print_error(f"Configuration error: {exc}")
            raise click.exceptions.Exit(EXIT_CONFIG_ERROR)

        project_name = name or config.get("project_name") or default_project_name(repo_root)
        client = GitClient(repo_root)

        try:
            if to_stdout:
                run_export_to_stdout(client, project_name)
            else:
                out_path = resolve_output_path(out, out_source, config, repo_root)
                with ProgressIndicator(f"Exporting history of {project_name}", enabled=show_status):
                    with open(out_path, "w", encoding="utf-8", newline="\n") as sink:
                        count = run_export(client, sink, project_name)
                print_success(f"Wrote {count} commit{'s' if count != 1 else ''} to {out_path}")
        except GitError as exc:
            print_error(f"Git error: {exc}")
            raise click.exceptions.Exit(EXIT_VCS_FAILURE)
        except OSError as exc:
            print_error(f"Cannot write output: {exc}")
            raise click.exceptions.Exit(EXIT_OUTPUT_ERROR)

        raise click.exceptions.Exit(EXIT_SUCCESS)

    except click.exceptions.Exit:
        # Click uses its own Exit exception; re-raise to let Click handle it
        raise
    except Exception as exc:
        # Catch any other unhandled errors
        logging.exception("Unhandled error: %s", exc)
        print_error(f"Unexpected error: {exc}")
        ctx.exit(EXIT_GENERIC_ERROR)
