"""
Interpretation of model replies.

The model is asked either for labelled free text::

    REPORT:
    - bullet
    COMMIT_MESSAGE:
    type: description
    COMMIT_BODY:
    One to three sentences.

or for a JSON object with ``report`` and ``title`` fields. Replies are
untrusted: sections go missing, titles come back as ``[feat]: ...`` or
``feat(scope): ...``, and JSON is sometimes not JSON. Each shape has a
:class:`ReplyInterpreter`; :func:`parse_reply` picks one by looking at the
reply, and both funnel the title through :func:`normalize_title`.
"""

from __future__ import annotations

import json
import logging
import re
from abc import ABC, abstractmethod
from typing import Dict, Optional

from commit_ai.llm.suggestion import FALLBACK_REPORT, FALLBACK_TITLE, CommitSuggestion


logger = logging.getLogger(__name__)
if not logger.handlers:
    logger.addHandler(logging.NullHandler())


DEFAULT_TYPE = "feat"
FALLBACK_DESCRIPTION = "update files"
MIN_DESCRIPTION_LENGTH = 15
BODY_LINES_FROM_REPORT = 3

SHAPE_JSON = "json"
SHAPE_TEXT = "text"

# Section markers in the order they are expected in a free-text reply.
# A marker opens a line, optionally behind a markdown heading.
_SECTION_MARKERS = (
    ("report", r"^[ \t#]*REPORT:"),
    ("title", r"^[ \t#]*COMMIT_MESSAGE:"),
    ("body", r"^[ \t#]*COMMIT_BODY:"),
)
_STRAY_REPORT_LABEL = re.compile(r"^[ \t]*REPORT:[ \t]*", re.IGNORECASE | re.MULTILINE)

_CODE_FENCE = re.compile(r"^```[\w-]*\s*(.*?)\s*```$", re.DOTALL)
_BRACKETED_TYPE = re.compile(r"^\[\s*(\w+)\s*\]\s*:?\s*")
_SCOPED_TYPE = re.compile(r"^(\w+)\([^)]*\)!?:?\s*")
_TYPE_TOKEN = re.compile(r"^[a-z][\w-]*$")
_BULLET = re.compile(r"^\s*(?:[-*+•]|\d+[.)])\s+")
_SENTENCE_END = re.compile(r"\.(?:\s|$)")
_WRAPPERS = ("*", "_", "`", '"')


# ---------------------------------------------------------------------------
# Title normalization
# ---------------------------------------------------------------------------

def _strip_emphasis(text: str) -> str:
    text = text.replace("**", "").strip()
    for wrapper in _WRAPPERS:
        if len(text) > 1 and text.startswith(wrapper) and text.endswith(wrapper):
            text = text[1:-1].strip()
    return text


def _first_line(text: str) -> str:
    for line in text.splitlines():
        if line.strip():
            return line.strip()
    return ""


def _normalize_once(title: str) -> str:
    title = _strip_emphasis(title)
    title = _BULLET.sub("", title, count=1)
    title = _BRACKETED_TYPE.sub(r"\1: ", title, count=1)
    title = _SCOPED_TYPE.sub(r"\1: ", title, count=1)
    title = title.rstrip().rstrip(".")
    title = title.strip()
    if not title:
        return ""
    if ":" not in title:
        title = f"{DEFAULT_TYPE}: {title}"

    type_token, _, description = title.partition(":")
    type_token = type_token.strip().rstrip("!").lower()
    description = description.strip()
    if not type_token:
        type_token = DEFAULT_TYPE
    elif not _TYPE_TOKEN.match(type_token):
        # Prose before the first colon, not a commit type.
        type_token, description = DEFAULT_TYPE, title
    if not description:
        description = FALLBACK_DESCRIPTION
    return f"{type_token}: {description}"


def normalize_title(candidate: Optional[str]) -> str:
    """Force ``candidate`` into the ``type: description`` shape.

    Markdown emphasis, a leading list marker, bracketed types (``[fix]: x``), scopes
    (``fix(core): x``) and trailing periods are removed; a title without a
    type gets ``feat``. Empty input yields :data:`FALLBACK_TITLE`. Applying
    the function to its own output returns it unchanged.
    """
    if not candidate:
        return FALLBACK_TITLE
    title = _first_line(candidate)
    # Stripping one decoration can expose another (``"fix: x".``), so
    # repeat until nothing changes.
    for _ in range(5):
        normalized = _normalize_once(title)
        if not normalized:
            return FALLBACK_TITLE
        if normalized == title:
            break
        title = normalized
    return title


def _first_sentence(text: str) -> str:
    line = _first_line(text)
    line = _BULLET.sub("", line)
    return _SENTENCE_END.split(line, maxsplit=1)[0].strip()


def enrich_title(title: str, body: str, min_length: int = MIN_DESCRIPTION_LENGTH) -> str:
    """Lengthen a terse title with the first sentence of ``body``.

    Titles whose description is at least ``min_length`` characters long,
    or that already contain the excerpt, are returned unchanged.
    """
    type_token, _, description = title.partition(":")
    description = description.strip()
    if len(description) >= min_length:
        return title
    excerpt = _first_sentence(body)
    if not excerpt or excerpt.lower() in description.lower():
        return title
    joined = f"{description} - {excerpt}" if description else excerpt
    return normalize_title(f"{type_token}: {joined}")


def body_from_report(report: str, max_lines: int = BODY_LINES_FROM_REPORT) -> str:
    """Use the first ``max_lines`` non-empty lines of ``report`` as a body."""
    lines = [line.rstrip() for line in report.splitlines() if line.strip()]
    return "\n".join(lines[:max_lines]).strip()


# ---------------------------------------------------------------------------
# Interpreters
# ---------------------------------------------------------------------------

def _strip_code_fence(reply: str) -> str:
    stripped = reply.strip()
    match = _CODE_FENCE.match(stripped)
    return match.group(1) if match else stripped


class ReplyInterpreter(ABC):
    """Turns one shape of model reply into a :class:`CommitSuggestion`."""

    shape: str = ""

    @abstractmethod
    def interpret(self, reply: str) -> CommitSuggestion:
        pass


class StructuredReplyInterpreter(ReplyInterpreter):
    """Interpreter for ``{"report": ..., "title": ...}`` replies."""

    shape = SHAPE_JSON

    def interpret(self, reply: str) -> CommitSuggestion:
        try:
            payload = json.loads(_strip_code_fence(reply))
        except json.JSONDecodeError as exc:
            logger.warning("Model reply is not valid JSON (%s); using fallback.", exc)
            return CommitSuggestion.default()
        if not isinstance(payload, dict):
            logger.warning("Model reply is JSON but not an object; using fallback.")
            return CommitSuggestion.default()

        report = payload.get("report")
        if not isinstance(report, str) or not report.strip():
            report = FALLBACK_REPORT

        raw_title = payload.get("title")
        has_title = isinstance(raw_title, str) and bool(raw_title.strip())
        title = normalize_title(raw_title) if has_title else FALLBACK_TITLE

        body = payload.get("body")
        if not isinstance(body, str) or not body.strip():
            body = body_from_report(report)
        return CommitSuggestion(
            title=title,
            report=report,
            body=body.strip(),
            fallback=not has_title,
        )


class FreeTextReplyInterpreter(ReplyInterpreter):
    """Interpreter for replies with ``REPORT:``/``COMMIT_MESSAGE:`` sections."""

    shape = SHAPE_TEXT

    @staticmethod
    def extract_sections(reply: str) -> Dict[str, str]:
        """Return the trimmed text following each marker found in ``reply``.

        A section ends at the next marker that follows it in the expected
        order, or at the end of the reply.
        """
        sections: Dict[str, str] = {}
        for index, (name, marker) in enumerate(_SECTION_MARKERS):
            stops = [pattern for _, pattern in _SECTION_MARKERS[index + 1:]] + [r"\Z"]
            pattern = rf"{marker}(.*?)(?={'|'.join(stops)})"
            match = re.search(pattern, reply, re.IGNORECASE | re.DOTALL | re.MULTILINE)
            if match:
                sections[name] = match.group(1).strip()
        return sections

    def interpret(self, reply: str) -> CommitSuggestion:
        text = reply.replace("**", "")
        sections = self.extract_sections(text)

        report = _STRAY_REPORT_LABEL.sub("", sections.get("report", "")).strip()
        if not report:
            report = FALLBACK_REPORT

        title_candidate = _first_line(sections.get("title", ""))
        if title_candidate:
            title = normalize_title(title_candidate)
        else:
            logger.warning("No COMMIT_MESSAGE section in model reply; using fallback title.")
            title = FALLBACK_TITLE

        body = sections.get("body", "") or body_from_report(report)
        return CommitSuggestion(
            title=title,
            report=report,
            body=body,
            fallback=not title_candidate,
        )


INTERPRETERS: Dict[str, ReplyInterpreter] = {
    SHAPE_JSON: StructuredReplyInterpreter(),
    SHAPE_TEXT: FreeTextReplyInterpreter(),
}


def detect_reply_shape(reply: str) -> str:
    """Return :data:`SHAPE_JSON` for object-like replies, else :data:`SHAPE_TEXT`."""
    return SHAPE_JSON if _strip_code_fence(reply or "").startswith("{") else SHAPE_TEXT


def parse_reply(reply: Optional[str]) -> CommitSuggestion:
    """Convert a raw model reply into a :class:`CommitSuggestion`.

    Never raises on malformed input; unusable replies produce
    :meth:`CommitSuggestion.default`.
    """
    if not reply or not reply.strip():
        logger.warning("Empty model reply; using fallback suggestion.")
        return CommitSuggestion.default()
    shape = detect_reply_shape(reply)
    logger.debug("Interpreting model reply as %s", shape)
    return INTERPRETERS[shape].interpret(reply)
