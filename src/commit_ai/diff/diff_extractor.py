"""
Diff extraction for commit_ai.

The diff is taken against ``HEAD`` when the repository has history and
against Git's empty tree otherwise, then capped to a fixed number of
characters before it is embedded in the model prompt.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Iterable

from commit_ai.vcs.git_client import GitClient, GitError
from commit_ai.vcs.ignore import to_pathspecs


logger = logging.getLogger(__name__)
if not logger.handlers:
    logger.addHandler(logging.NullHandler())


PRIMARY_BASELINE = "HEAD"
# Hash of the tree with no entries; present in every SHA-1 repository.
EMPTY_TREE_HASH = "4b825dc642cb6eb9a060e54bf8d69288fbee4904"

MAX_DIFF_CHARS = 5000
TRUNCATION_MARKER = "\n\n...[TRUNCATED]..."


@dataclass
class DiffResult:
    """Aggregate diff of the working tree against ``baseline``.

    Attributes
    ----------
    text : str
        The (possibly truncated) diff.
    baseline : str
        Revision the diff was computed against.
    truncated : bool
        True if ``text`` was cut and carries :data:`TRUNCATION_MARKER`.
    """

    text: str
    baseline: str
    truncated: bool = False

    @property
    def is_empty(self) -> bool:
        return not self.text.strip()


def truncate_diff(text: str, max_chars: int = MAX_DIFF_CHARS) -> str:
    """Cut ``text`` to ``max_chars`` characters and append a marker.

    Text that already fits is returned unchanged.
    """
    if len(text) <= max_chars:
        return text
    return text[:max_chars] + TRUNCATION_MARKER


def extract_diff(
    client: GitClient,
    exclusions: Iterable[str],
    max_chars: int = MAX_DIFF_CHARS,
) -> DiffResult:
    """Compute the working tree diff, honouring ``exclusions``.

    Untracked files are marked intent-to-add first so they appear in the
    diff. If diffing against ``HEAD`` fails (no commits yet) the empty tree
    is used instead; a failure there propagates as :class:`GitError`.
    """
    client.intent_to_add(".")
    pathspecs = to_pathspecs(exclusions)

    baseline = PRIMARY_BASELINE
    try:
        raw = client.diff(baseline, pathspecs)
    except GitError as exc:
        logger.debug("Diff against %s failed (%s); using the empty tree", baseline, exc)
        baseline = EMPTY_TREE_HASH
        raw = client.diff(baseline, pathspecs)

    text = truncate_diff(raw, max_chars)
    truncated = len(raw) > max_chars
    if truncated:
        logger.debug("Diff truncated from %d to %d characters", len(raw), max_chars)
    return DiffResult(text=text, baseline=baseline, truncated=truncated)
