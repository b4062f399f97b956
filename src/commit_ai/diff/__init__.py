"""
Diff extraction.

See :mod:`commit_ai.diff.diff_extractor` for the baseline selection and
truncation rules.
"""

from .diff_extractor import DiffResult, extract_diff, truncate_diff  # noqa: F401
