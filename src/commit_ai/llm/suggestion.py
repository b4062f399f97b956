"""
Data model for a generated commit suggestion.

A :class:`CommitSuggestion` is what the model reply is turned into: a
normalized ``type: description`` title, a human readable report of the
changes, and a short body derived from either.
"""

from __future__ import annotations

from dataclasses import dataclass


FALLBACK_TITLE = "feat: update files"
FALLBACK_REPORT = "Minor updates."


@dataclass
class CommitSuggestion:
    """Representation of a proposed commit.

    Attributes
    ----------
    title : str
        Single-line ``type: description`` commit subject.
    report : str
        Free-form summary of the changes; used as the commit body.
    body : str
        Short (1-3 line) description of the change.
    fallback : bool
        True if the title could not be taken from the model reply.
    """

    title: str
    report: str
    body: str = ""
    fallback: bool = False

    @classmethod
    def default(cls) -> "CommitSuggestion":
        """Return the suggestion used when a reply is unusable."""
        return cls(
            title=FALLBACK_TITLE,
            report=FALLBACK_REPORT,
            body=FALLBACK_REPORT,
            fallback=True,
        )
