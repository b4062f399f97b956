"""
Command line interface for the commit_ai tool.

This module defines the ``main`` function which is used as the entry
point when executing the ``commit-ai`` command. It loads configuration,
builds the Git and model clients, and hands them to :func:`run`, which
sequences repository detection, diff extraction, suggestion generation,
confirmation and the actual commit.

Only a missing or invalid configuration produces a non-zero exit code.
Every other failure is reported on the console and ends the run without
committing.
"""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Optional

import click

from commit_ai import __version__
from commit_ai.config.loader import ConfigError, load_config
from commit_ai.diff.diff_extractor import extract_diff
from commit_ai.llm.commit_message_generator import (
    REPLY_FORMAT_JSON,
    REPLY_FORMAT_TEXT,
    CommitMessageGenerator,
)
from commit_ai.llm.groq_client import GroqClient, LLMError
from commit_ai.llm.suggestion import CommitSuggestion
from commit_ai.vcs.git_client import GitClient, GitError
from commit_ai.vcs.ignore import resolve_exclusions


logger = logging.getLogger(__name__)
if not logger.handlers:
    logger.addHandler(logging.NullHandler())


# ---------------------------------------------------------------------------
# Exit codes
# ---------------------------------------------------------------------------
EXIT_SUCCESS = 0
EXIT_CONFIG_ERROR = 1


# ---------------------------------------------------------------------------
# Console output
# ---------------------------------------------------------------------------
ORIGIN = "[Commit-AI]"


def _emit(label: str, color: str, message: str, err: bool = False) -> None:
    origin = click.style(ORIGIN, fg="magenta", bold=True)
    tag = click.style(f"[{label}]", fg=color)
    click.echo(f"{origin} {tag}: {message}", err=err)


def print_info(message: str) -> None:
    _emit("Info", "blue", message)


def print_success(message: str) -> None:
    _emit("Success", "green", message)


def print_warning(message: str) -> None:
    _emit("Warn", "yellow", message)


def print_error(message: str) -> None:
    _emit("Error", "red", message, err=True)


def print_ai(message: str) -> None:
    _emit("AI", "cyan", message)


def print_suggestion(suggestion: CommitSuggestion) -> None:
    """Show the report and title produced for the diff."""
    click.echo("\n" + click.style("─── AI SUGGESTION ───", fg="red", bold=True))
    click.echo(f"REPORT:\n{suggestion.report}")
    click.echo(f"\nCOMMIT_MESSAGE: {suggestion.title}")
    click.echo(click.style("─────────────────────", fg="red", bold=True) + "\n")


# ---------------------------------------------------------------------------
# Confirmation
# ---------------------------------------------------------------------------

def ask_confirmation(question: str) -> bool:
    """Ask ``question`` and read one line; only ``y`` counts as yes."""
    origin = click.style(ORIGIN, fg="magenta", bold=True)
    tag = click.style("[Prompt]", fg="yellow")
    try:
        answer = click.prompt(
            f"{origin} {tag}: {question} (y/n)",
            default="",
            show_default=False,
        )
    except click.Abort:
        # EOF or Ctrl-C before an answer.
        click.echo("")
        return False
    return answer.strip().lower() == "y"


# ---------------------------------------------------------------------------
# Core functionality
# ---------------------------------------------------------------------------

def commit_changes(git: GitClient, suggestion: CommitSuggestion) -> bool:
    """Stage everything and commit with the suggested title and report.

    Returns True on success. A failed commit after successful staging is
    reported separately so the user knows the index has changed.
    """
    try:
        git.stage_all()
    except GitError as exc:
        print_error(f"Failed to stage changes, nothing was committed: {exc}")
        return False

    try:
        git.commit(suggestion.title, suggestion.report)
    except GitError as exc:
        print_error(f"Changes were staged but the commit failed: {exc}")
        return False

    print_success(f"Changes committed: {click.style(suggestion.title, dim=True)}")
    return True


def run(
    git: GitClient,
    generator: CommitMessageGenerator,
    commit: bool = False,
    yes: bool = False,
) -> None:
    """Run the analysis pipeline once.

    Parameters
    ----------
    git : GitClient
        Client bound to the working directory.
    generator : CommitMessageGenerator
        Produces the suggestion from the diff.
    commit : bool
        Stage and commit after confirmation.
    yes : bool
        Skip the confirmation prompt.
    """
    if not git.is_repo():
        print_error("Not a Git repository.")
        return

    print_info("Analyzing modified files...")
    exclusions = resolve_exclusions(git.cwd)
    logger.debug("Excluding %d pattern(s) from the diff", len(exclusions))
    try:
        diff = extract_diff(git, exclusions)
    except GitError as exc:
        print_error(f"Could not compute the diff: {exc}")
        return

    if diff.is_empty:
        print_success("No changes detected.")
        return

    logger.debug(
        "Diff against %s: %d chars%s",
        diff.baseline,
        len(diff.text),
        " (truncated)" if diff.truncated else "",
    )

    print_ai("Generating commit suggestion...")
    try:
        suggestion = generator.generate(diff.text)
    except LLMError as exc:
        print_error(f"Model request failed: {exc}")
        return

    print_suggestion(suggestion)

    if not commit:
        print_info("Run with '-c' to perform the actual commit.")
        return

    if not yes and not ask_confirmation("Use this commit message?"):
        print_warning("Commit aborted.")
        return

    commit_changes(git, suggestion)


@click.command()
@click.option("-c", "--commit", "commit", is_flag=True, help="Enable commit mode (stage and commit all changes).")
@click.option("-y", "--yes", "yes", is_flag=True, help="Skip the confirmation prompt (requires -c).")
@click.option("--json", "json_reply", is_flag=True, help="Ask the model for a JSON reply instead of labelled text.")
@click.option("--model", default=None, help="Model to use (overrides COMMIT_AI_MODEL).")
@click.option("--no-enrich", is_flag=True, help="Keep short commit titles as the model wrote them.")
@click.option("--verbose", is_flag=True, help="Enable verbose (debug) output.")
@click.version_option(__version__, "-v", "--version", prog_name="commit-ai")
def main(
    commit: bool,
    yes: bool,
    json_reply: bool,
    model: Optional[str],
    no_enrich: bool,
    verbose: bool,
) -> None:
    """AI-powered git analysis and auto-committer.

    Sends the diff of the working tree to the model, shows the report and
    a commit title, and optionally commits with them.
    """
    # Use force=True to ensure handlers are reconfigured on subsequent
    # invocations (important for tests).
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(levelname)s: %(message)s",
        force=True,
    )

    try:
        config = load_config()
    except ConfigError as exc:
        print_error(str(exc))
        raise click.exceptions.Exit(EXIT_CONFIG_ERROR)

    git = GitClient(Path.cwd())
    client = GroqClient(
        api_key=config["api_key"],
        model=model or config["model"],
        base_url=config["base_url"],
        request_timeout=float(config["request_timeout"]),
    )
    generator = CommitMessageGenerator(
        client,
        reply_format=REPLY_FORMAT_JSON if json_reply else REPLY_FORMAT_TEXT,
        max_tokens=config["max_tokens"],
        enrich=not no_enrich,
    )

    try:
        run(git, generator, commit=commit, yes=yes)
    except Exception as exc:
        logger.exception("Unhandled error")
        print_error(f"Critical failure: {exc}")
