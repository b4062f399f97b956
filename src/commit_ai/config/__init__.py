"""
Configuration loading for commit_ai.

Reads the model credential and optional tuning values from the
environment. See :mod:`commit_ai.config.loader` for implementation
details.
"""

from .loader import ConfigError, load_config  # noqa: F401
