"""
Top-level package for commit_ai.

This package exposes the main CLI entry point via the
``commit_ai.cli`` module.
"""

__all__ = ["__version__"]

__version__ = "1.3.2"
