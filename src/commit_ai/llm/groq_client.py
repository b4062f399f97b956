"""
Client for the Groq chat completions API.

This client wraps HTTP requests to Groq's OpenAI-compatible REST API. It
sends one system instruction and one user prompt and returns the text of
the first choice. On error conditions (HTTP errors, timeouts, unexpected
payloads), a :class:`LLMError` is raised.
"""

from __future__ import annotations

import json
import logging
import re
from dataclasses import dataclass
from typing import Any, Dict, Optional

import requests


logger = logging.getLogger(__name__)
if not logger.handlers:
    logger.addHandler(logging.NullHandler())


DEFAULT_BASE_URL = "https://api.groq.com/openai/v1"
DEFAULT_MODEL = "llama-3.1-8b-instant"


class LLMError(Exception):
    """Raised when communication with the model service fails."""

    pass


def strip_thinking_tags(text: str) -> str:
    """Remove reasoning blocks from a model reply.

    Reasoning models served by Groq may wrap their chain of thought in
    ``<think>``-style tags ahead of the actual answer.

    >>> strip_thinking_tags("<think>reasoning...</think>REPORT: done")
    'REPORT: done'
    """
    thinking_patterns = [
        r"<think>.*?</think>",
        r"<thinking>.*?</thinking>",
        r"<thought>.*?</thought>",
        r"<reasoning>.*?</reasoning>",
    ]

    result = text
    for pattern in thinking_patterns:
        result = re.sub(pattern, "", result, flags=re.DOTALL | re.IGNORECASE)
    return result.strip()


@dataclass
class GroqClient:
    """Client for a Groq (OpenAI-compatible) chat completions endpoint.

    Parameters
    ----------
    api_key : str
        Bearer token for the service.
    model : str, optional
        Model name, e.g. ``"llama-3.1-8b-instant"``.
    base_url : str, optional
        API root without the trailing ``/chat/completions``.
    request_timeout : float, optional
        Timeout in seconds for HTTP requests. Defaults to 60 seconds.
    """

    api_key: str
    model: str = DEFAULT_MODEL
    base_url: str = DEFAULT_BASE_URL
    request_timeout: float = 60.0

    def _endpoint(self) -> str:
        return f"{self.base_url.rstrip('/')}/chat/completions"

    def complete(
        self,
        system: str,
        prompt: str,
        temperature: float = 0.1,
        max_tokens: Optional[int] = None,
        json_mode: bool = False,
    ) -> str:
        """Request one completion and return its text content.

        Parameters
        ----------
        system : str
            The system instruction.
        prompt : str
            The user message.
        temperature : float, optional
            Sampling temperature; kept low for deterministic titles.
        max_tokens : int, optional
            Upper bound on the reply length.
        json_mode : bool, optional
            Ask the service to return a single JSON object.

        Raises
        ------
        LLMError
            If the request fails or the server returns an error.
        """
        payload: Dict[str, Any] = {
            "model": self.model,
            "messages": [
                {"role": "system", "content": system},
                {"role": "user", "content": prompt},
            ],
            "temperature": temperature,
        }
        if max_tokens is not None:
            payload["max_tokens"] = max_tokens
        if json_mode:
            payload["response_format"] = {"type": "json_object"}

        url = self._endpoint()
        logger.debug("Sending request to %s with model %s", url, self.model)
        try:
            response = requests.post(
                url,
                json=payload,
                headers={"Authorization": f"Bearer {self.api_key}"},
                timeout=self.request_timeout,
            )
        except requests.RequestException as exc:
            logger.error("Failed to connect to model service: %s", exc)
            raise LLMError(str(exc)) from exc
        if response.status_code != 200:
            logger.error(
                "Model service returned non-200 status %s: %s",
                response.status_code,
                response.text,
            )
            raise LLMError(
                f"Model service returned status {response.status_code}: {response.text}"
            )
        try:
            data = response.json()
        except (json.JSONDecodeError, ValueError) as exc:
            logger.error("Failed to parse model service response: %s", exc)
            raise LLMError("Failed to parse model service response") from exc

        try:
            content = data["choices"][0]["message"]["content"]
        except (KeyError, IndexError, TypeError) as exc:
            raise LLMError("Unexpected response structure from model service") from exc
        # An empty completion is a valid reply; the parser falls back.
        return strip_thinking_tags(content or "")
