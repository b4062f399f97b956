"""
Commit suggestion generation using an LLM.

This module provides the :class:`CommitMessageGenerator` class, which
embeds the diff in a fixed instruction template, sends it to the model
(via :class:`GroqClient`) and hands the reply to
:func:`commit_ai.llm.reply_parser.parse_reply`. Two reply formats are
supported: labelled free text (the default) and a JSON object.

Transport failures propagate as :class:`LLMError`; a reply that cannot be
understood never raises and yields the fallback suggestion instead.
"""

from __future__ import annotations

import logging
from textwrap import dedent
from typing import Optional

from commit_ai.llm.groq_client import GroqClient
from commit_ai.llm.reply_parser import enrich_title, parse_reply
from commit_ai.llm.suggestion import CommitSuggestion


logger = logging.getLogger(__name__)
if not logger.handlers:
    logger.addHandler(logging.NullHandler())


REPLY_FORMAT_TEXT = "text"
REPLY_FORMAT_JSON = "json"

TEXT_TEMPERATURE = 0.1
JSON_TEMPERATURE = 0.2
DEFAULT_MAX_TOKENS = 512

TEXT_SYSTEM_PROMPT = (
    "You are commit-ai. Only return the requested REPORT, COMMIT_MESSAGE "
    "(single-line) and COMMIT_BODY (1-3 sentences)."
)
JSON_SYSTEM_PROMPT = (
    "You are commit-ai, a professional Git assistant. Reply with a single JSON "
    'object of the form {"report": string, "title": string} and nothing else.'
)

_TITLE_RULES = """
STRICT RULES:
- Format: type: description
- NO BRACKETS (e.g., use "feat: message" NOT "[feat]: message")
- NO SCOPES (e.g., use "feat: message" NOT "feat(scope): message")
- Use imperative mood ("add" not "added").
- No period at the end of the commit title.
"""


class CommitMessageGenerator:
    """Generate a :class:`CommitSuggestion` for a diff."""

    def __init__(
        self,
        client: GroqClient,
        reply_format: str = REPLY_FORMAT_TEXT,
        max_tokens: Optional[int] = DEFAULT_MAX_TOKENS,
        enrich: bool = True,
    ) -> None:
        if reply_format not in (REPLY_FORMAT_TEXT, REPLY_FORMAT_JSON):
            raise ValueError(f"Unknown reply format: {reply_format}")
        self.client = client
        self.reply_format = reply_format
        self.max_tokens = max_tokens
        self.enrich = enrich
        self.last_reply = ""

    def _build_prompt(self, diff: str) -> str:
        """Construct the user prompt around ``diff``."""
        if self.reply_format == REPLY_FORMAT_JSON:
            instructions = dedent(
                """
                Analyze this Git diff and describe it as JSON.
                - "report": a bulleted list of the technical changes, one "- " line each.
                - "title": a single-line commit message.
                """
            )
        else:
            instructions = dedent(
                """
                Analyze this Git diff and provide a professional report.
                1. Provide a bulleted "REPORT" of technical changes.
                2. Provide a single-line "COMMIT_MESSAGE" (type: description).
                3. Provide a concise "COMMIT_BODY" (1-3 sentences) suitable for the commit body.

                Response Format:
                REPORT:
                - detail
                COMMIT_MESSAGE:
                type: description
                COMMIT_BODY:
                Short explanation.
                """
            )
        return f"{instructions.strip()}\n{_TITLE_RULES}\nDiff:\n{diff}"

    def generate(self, diff: str) -> CommitSuggestion:
        """Ask the model about ``diff`` and parse its reply.

        Raises
        ------
        LLMError
            If the model service cannot be reached or answers with an error.
        """
        prompt = self._build_prompt(diff)
        if self.reply_format == REPLY_FORMAT_JSON:
            reply = self.client.complete(
                JSON_SYSTEM_PROMPT,
                prompt,
                temperature=JSON_TEMPERATURE,
                max_tokens=self.max_tokens,
                json_mode=True,
            )
        else:
            reply = self.client.complete(
                TEXT_SYSTEM_PROMPT,
                prompt,
                temperature=TEXT_TEMPERATURE,
            )
        self.last_reply = reply
        logger.debug("Raw model reply:\n%s", reply)

        suggestion = parse_reply(reply)
        if self.enrich and not suggestion.fallback:
            suggestion.title = enrich_title(suggestion.title, suggestion.body)
        return suggestion
