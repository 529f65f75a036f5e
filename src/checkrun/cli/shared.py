# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.

"""Shared CLI plumbing: the console reporter, exit errors and workflow commands."""

from __future__ import annotations

import logging
import os
from collections.abc import Mapping
from dataclasses import dataclass
from pathlib import Path
from typing import Final

import typer
from rich.logging import RichHandler

from ..core.models import Report
from ..logging import Tone, console_for, detect_tty, emit
from ..reporting import PublishResult

_ACTIONS_FLAG: Final[str] = "GITHUB_ACTIONS"
_PACKAGE_LOGGER: Final[str] = "checkrun"
_WORKFLOW_ESCAPES: Final[tuple[tuple[str, str], ...]] = (("%", "%25"), ("\r", "%0D"), ("\n", "%0A"))


class CLIError(RuntimeError):
    """Error raised when a CLI command fails and should exit with a status code."""

    def __init__(self, message: str, *, exit_code: int = 1) -> None:
        """Initialise the error with a message and exit code.

        Args:
            message: Human-readable error message shown to the user.
            exit_code: Exit status associated with the failure.
        """

        super().__init__(message)
        self.exit_code = exit_code


@dataclass(slots=True)
class ConsoleReporter:
    """Report parse and publish progress on the workflow log.

    Implements :class:`~checkrun.reporting.PublishObserver`, so a
    :class:`~checkrun.reporting.BatchPublisher` can report each batch and
    any partial publication through it.
    """

    use_emoji: bool
    use_color: bool | None = None

    def parsed(self, report: Report, source: Path, report_format: str) -> None:
        """Announce how many annotations were read from ``source``."""

        self._emit(Tone.INFO, f"Parsed {len(report.annotations)} {report_format} annotation(s) from {source}")

    def batch_sent(self, check_run_id: int, sent: int, total: int) -> None:
        """Report one create or fill call that succeeded."""

        self._emit(Tone.INFO, f"Check run {check_run_id}: {sent}/{total} annotation(s) sent")

    def publication_incomplete(self, check_run_id: int, sent: int, total: int, error: BaseException) -> None:
        """Warn that the run will be closed with only part of the annotations."""

        self._emit(
            Tone.WARN,
            f"Check run {check_run_id} is incomplete: {sent} of {total} annotation(s) were published ({error})",
        )

    def close_failed(self, check_run_id: int, error: BaseException) -> None:
        """Warn that the early close after a failed fill did not succeed."""

        self._emit(Tone.WARN, f"Unable to close check run {check_run_id}: {error}")

    def published(self, result: PublishResult) -> None:
        """Confirm a completed publication."""

        self._emit(
            Tone.OK,
            f"Published {result.annotations_sent} annotation(s) to check run {result.check_run_id}"
            f" in {result.calls} call(s)",
        )

    def failed(self, message: str, *, environ: Mapping[str, str] | None = None) -> None:
        """Print a failure and surface it on the workflow run.

        Args:
            message: Failure description.
            environ: Environment mapping; defaults to :data:`os.environ`.
        """

        self._emit(Tone.FAIL, message)
        workflow_error(message, environ=environ)

    def _emit(self, tone: Tone, message: str) -> None:
        emit(tone, message, use_emoji=self.use_emoji, use_color=self.use_color)


def build_reporter(*, emoji: bool, debug: bool = False) -> ConsoleReporter:
    """Return a :class:`ConsoleReporter`, routing package debug logs to the console when asked.

    Args:
        emoji: Whether status lines may include emoji glyphs.
        debug: Whether ``checkrun`` module loggers should print at DEBUG level.

    Returns:
        ConsoleReporter: Reporter for the current invocation.
    """

    if debug:
        tty = detect_tty()
        package_logger = logging.getLogger(_PACKAGE_LOGGER)
        package_logger.handlers = [RichHandler(console=console_for(color=tty, emoji=emoji, tty=tty), show_path=False)]
        package_logger.setLevel(logging.DEBUG)
    return ConsoleReporter(use_emoji=emoji)


def workflow_error(message: str, *, environ: Mapping[str, str] | None = None) -> None:
    """Emit an ``::error::`` workflow command when running inside GitHub Actions.

    Args:
        message: Failure description surfaced on the workflow run.
        environ: Environment mapping; defaults to :data:`os.environ`.
    """

    env = os.environ if environ is None else environ
    if env.get(_ACTIONS_FLAG) != "true":
        return
    escaped = message
    for raw, replacement in _WORKFLOW_ESCAPES:
        escaped = escaped.replace(raw, replacement)
    typer.echo(f"::error::{escaped}")


__all__ = ["CLIError", "ConsoleReporter", "build_reporter", "workflow_error"]
