"""
Exclusion patterns for the diff sent to the language model.

Lockfiles, build output and logs are noisy and rarely say anything about
the intent of a change, so they are always excluded. Patterns listed in
the repository's ``.gitignore`` are added on top of the defaults.
"""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Iterable, List, Tuple


logger = logging.getLogger(__name__)
if not logger.handlers:
    logger.addHandler(logging.NullHandler())


DEFAULT_EXCLUDES: Tuple[str, ...] = (
    "package-lock.json",
    "bun.lockb",
    "yarn.lock",
    "pnpm-lock.yaml",
    "node_modules",
    "dist",
    "*.log",
)

IGNORE_FILE_NAME = ".gitignore"
EXCLUDE_PREFIX = ":(exclude)"


def read_ignore_file(directory: Path) -> List[str]:
    """Return the usable patterns from ``directory/.gitignore``.

    Blank lines, ``#`` comments and ``!`` negations are dropped. A file that
    cannot be read is treated as empty.
    """
    ignore_path = directory / IGNORE_FILE_NAME
    try:
        content = ignore_path.read_text(encoding="utf-8")
    except (OSError, UnicodeDecodeError) as exc:
        logger.debug("Not using %s: %s", ignore_path, exc)
        return []

    patterns: List[str] = []
    for line in content.splitlines():
        stripped = line.strip()
        if not stripped or stripped.startswith("#"):
            continue
        if stripped.startswith("!"):
            # Re-inclusions cannot be expressed as an exclusion.
            continue
        patterns.append(stripped)
    return patterns


def resolve_exclusions(directory: Path) -> Tuple[str, ...]:
    """Build the exclusion set for ``directory``.

    The result always starts with :data:`DEFAULT_EXCLUDES`, followed by any
    new patterns from the ignore file. Duplicates are collapsed.
    """
    merged = dict.fromkeys(DEFAULT_EXCLUDES)
    merged.update(dict.fromkeys(read_ignore_file(directory)))
    return tuple(merged)


def to_pathspecs(patterns: Iterable[str]) -> List[str]:
    """Render ``patterns`` as Git exclusion pathspecs."""
    return [f"{EXCLUDE_PREFIX}{pattern}" for pattern in patterns]
