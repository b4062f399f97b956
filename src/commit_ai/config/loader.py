"""
Configuration loader for commit_ai.

Settings come from the environment. A ``.env`` file in the working
directory is loaded first (values already exported win), which lets a
project keep its ``GROQ_API_KEY`` next to the code. The loader validates
the values and returns a plain dictionary.

If the API key is missing or a numeric setting is malformed, a
:class:`ConfigError` is raised.
"""

from __future__ import annotations

import logging
import os
from pathlib import Path
from typing import Any, Dict, Optional

from dotenv import load_dotenv

from commit_ai.llm.commit_message_generator import DEFAULT_MAX_TOKENS
from commit_ai.llm.groq_client import DEFAULT_BASE_URL, DEFAULT_MODEL


logger = logging.getLogger(__name__)
if not logger.handlers:
    logger.addHandler(logging.NullHandler())


API_KEY_VAR = "GROQ_API_KEY"
MODEL_VAR = "COMMIT_AI_MODEL"
BASE_URL_VAR = "COMMIT_AI_BASE_URL"
TIMEOUT_VAR = "COMMIT_AI_TIMEOUT"
MAX_TOKENS_VAR = "COMMIT_AI_MAX_TOKENS"

DEFAULT_REQUEST_TIMEOUT = 60.0


class ConfigError(Exception):
    """Raised when the configuration is missing or invalid."""

    pass


def _read_number(name: str, default: Any, cast: type) -> Any:
    raw = os.environ.get(name, "").strip()
    if not raw:
        return default
    try:
        value = cast(raw)
    except ValueError as exc:
        raise ConfigError(f"'{name}' must be a number, got {raw!r}") from exc
    if value <= 0:
        raise ConfigError(f"'{name}' must be positive, got {raw!r}")
    return value


def load_config(env_file: Optional[Path] = None) -> Dict[str, Any]:
    """Load the configuration from the environment and return it.

    Args:
        env_file: Optional ``.env`` file to load before reading the
                  environment. Defaults to ``.env`` in the current
                  working directory; a missing file is ignored.

    Returns:
        A dictionary with keys:
        - api_key (str): Credential for the model service
        - model (str): The model name
        - base_url (str): API root of the model service
        - request_timeout (float): Request timeout in seconds
        - max_tokens (int): Reply length bound for JSON replies

    Raises:
        ConfigError: If the API key is missing or a value is invalid.
    """
    dotenv_path = env_file if env_file is not None else Path.cwd() / ".env"
    if dotenv_path.is_file():
        load_dotenv(dotenv_path=dotenv_path, override=False)
        logger.debug("Loaded environment from %s", dotenv_path)

    api_key = os.environ.get(API_KEY_VAR, "").strip()
    if not api_key:
        raise ConfigError(f"{API_KEY_VAR} is missing.")

    config: Dict[str, Any] = {
        "api_key": api_key,
        "model": os.environ.get(MODEL_VAR, "").strip() or DEFAULT_MODEL,
        "base_url": os.environ.get(BASE_URL_VAR, "").strip() or DEFAULT_BASE_URL,
        "request_timeout": _read_number(TIMEOUT_VAR, DEFAULT_REQUEST_TIMEOUT, float),
        "max_tokens": _read_number(MAX_TOKENS_VAR, DEFAULT_MAX_TOKENS, int),
    }
    logger.debug(
        "Configuration: model=%s base_url=%s timeout=%s max_tokens=%s",
        config["model"],
        config["base_url"],
        config["request_timeout"],
        config["max_tokens"],
    )
    return config
