"""
Git client implementation for commit_ai.

This module wraps the handful of Git operations required by the commit
assistant: checking that the working directory belongs to a repository,
marking untracked files as intent-to-add, computing a diff against a
revision, staging everything, and committing. All subprocess calls go
through :meth:`GitClient._run` so that unit tests can mock them easily.
"""

from __future__ import annotations

import logging
import subprocess
from pathlib import Path
from typing import List, Optional, Sequence


logger = logging.getLogger(__name__)
# Attach a null handler to avoid logging errors when the root logger is not
# configured. Logs will propagate to the root when configured by the CLI.
if not logger.handlers:
    logger.addHandler(logging.NullHandler())


class GitError(Exception):
    """Raised when a Git command fails."""

    pass


class GitClient:
    """Client for interacting with the Git working tree in ``cwd``."""

    def __init__(self, cwd: Optional[Path] = None) -> None:
        self.cwd = cwd if cwd is not None else Path.cwd()

    # ------------------------------------------------------------------
    # Basic Git commands
    # ------------------------------------------------------------------
    def _run(self, args: List[str], check: bool = True) -> subprocess.CompletedProcess:
        """Run a Git command in the working directory.

        Raises
        ------
        GitError
            If the command exits with a non-zero status when ``check`` is
            True, or if the ``git`` executable cannot be started.
        """
        full_cmd = ["git"] + args
        logger.debug("Executing Git command: %s", " ".join(full_cmd))
        try:
            result = subprocess.run(
                full_cmd,
                cwd=self.cwd,
                stdout=subprocess.PIPE,
                stderr=subprocess.PIPE,
                text=True,
                encoding="utf-8",
                errors="replace",  # diffs of binary-ish files must not crash us
            )
        except OSError as exc:
            logger.error("Failed to run git: %s", exc)
            raise GitError(f"Failed to run git: {exc}") from exc

        if check and result.returncode != 0:
            logger.debug(
                "Git command failed: %s\nSTDOUT: %s\nSTDERR: %s",
                " ".join(full_cmd),
                result.stdout,
                result.stderr,
            )
            raise GitError(result.stderr.strip() or result.stdout.strip())
        return result

    # ------------------------------------------------------------------
    # Repository inspection
    # ------------------------------------------------------------------
    def is_repo(self) -> bool:
        """Return True if the working directory is inside a Git work tree."""
        try:
            result = self._run(["rev-parse", "--is-inside-work-tree"], check=False)
        except GitError:
            return False
        return result.returncode == 0 and result.stdout.strip() == "true"

    def intent_to_add(self, path: str = ".") -> None:
        """Mark untracked files under ``path`` as intent-to-add.

        New files then show up in ``git diff`` without their content being
        staged.
        """
        self._run(["add", "--intent-to-add", path], check=True)

    def diff(self, revision: str, pathspecs: Sequence[str] = ()) -> str:
        """Return the diff between ``revision`` and the working tree.

        The diff is restricted to the current directory and further
        narrowed by ``pathspecs`` (typically ``:(exclude)...`` entries).

        Raises
        ------
        GitError
            If ``revision`` cannot be resolved or the diff fails.
        """
        result = self._run(["diff", revision, "--", ".", *pathspecs], check=True)
        return result.stdout

    # ------------------------------------------------------------------
    # Staging and committing
    # ------------------------------------------------------------------
    def stage_all(self) -> None:
        """Stage every change in the working directory."""
        self._run(["add", "."], check=True)

    def commit(self, subject: str, body: str = "") -> None:
        """Create a commit with ``subject`` as the title line.

        A non-empty ``body`` is passed as a second ``-m`` so Git separates it
        from the subject with a blank line.
        """
        args = ["commit", "-m", subject]
        if body.strip():
            args += ["-m", body]
        self._run(args, check=True)
