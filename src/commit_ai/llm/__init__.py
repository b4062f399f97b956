"""
Language model integration for commit_ai.

This package contains the :class:`GroqClient` for talking to the model
service, the reply interpreters that turn its output into a
:class:`CommitSuggestion`, and the :class:`CommitMessageGenerator` tying
the two together.
"""

from .groq_client import GroqClient, LLMError  # noqa: F401
from .suggestion import CommitSuggestion  # noqa: F401
from .reply_parser import normalize_title, parse_reply  # noqa: F401
from .commit_message_generator import CommitMessageGenerator  # noqa: F401
