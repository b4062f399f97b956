"""
Version control system (VCS) integration.

This package contains the :class:`GitClient` used to inspect and commit
the working tree, and the helpers that decide which paths are left out of
the diff.
"""

from .git_client import GitClient, GitError  # noqa: F401
from .ignore import DEFAULT_EXCLUDES, resolve_exclusions, to_pathspecs  # noqa: F401
