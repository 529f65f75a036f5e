# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.
"""CLI command publishing a static-analysis report as a check run."""

from __future__ import annotations

import asyncio
import logging
import os
from pathlib import Path
from typing import Annotated

import typer

from ...config import ActionSettings, split_repository
from ...errors import CheckRunError
from ...github import GitHubCheckRunClient
from ...reporting import BatchPublisher, PublishResult, ReportMetadata, build_report
from ...streams import file_source
from ..shared import CLIError, ConsoleReporter, build_reporter

LOGGER = logging.getLogger(__name__)


async def run_publish(settings: ActionSettings, reporter: ConsoleReporter) -> PublishResult:
    """Parse the configured report and publish it as a check run.

    Args:
        settings: Resolved invocation settings.
        reporter: Console reporter receiving parse and publish progress.

    Returns:
        PublishResult: Remote identifier plus call and annotation counts.

    Raises:
        CLIError: If no API token is configured.
        CheckRunError: If parsing or publishing fails.
    """

    if not settings.token:
        raise CLIError("a GitHub token is required: set GITHUB_TOKEN or pass --token")
    metadata = ReportMetadata(
        owner=settings.owner,
        repo=settings.repo,
        head_sha=settings.head_sha,
        report_name=settings.effective_name,
        report_title=settings.effective_title,
    )
    report = await build_report(
        file_source(settings.report_path),
        settings.report_format,
        metadata,
        path_prefix=settings.path_prefix,
    )
    reporter.parsed(report, settings.report_path, settings.report_format.value)
    LOGGER.debug(
        "publishing %s report for %s/%s@%s",
        settings.report_format.value,
        settings.owner,
        settings.repo,
        settings.head_sha,
    )
    async with GitHubCheckRunClient(settings.token, api_url=settings.api_url) as client:
        return await BatchPublisher(client, observer=reporter).publish(report)


def publish(
    report_path: Annotated[Path | None, typer.Option("--report-path", help="Report file (INPUT_REPORT_PATH).")] = None,
    report_format: Annotated[
        str | None,
        typer.Option("--format", help="Report format: psalm, eslint, stylelint or tsc (INPUT_REPORT_FORMAT)."),
    ] = None,
    report_name: Annotated[str | None, typer.Option("--name", help="Check run name (INPUT_REPORT_NAME).")] = None,
    report_title: Annotated[str | None, typer.Option("--title", help="Check run title (INPUT_REPORT_TITLE).")] = None,
    repository: Annotated[str | None, typer.Option("--repository", help="owner/repo (GITHUB_REPOSITORY).")] = None,
    head_sha: Annotated[str | None, typer.Option("--sha", help="Commit to annotate (GITHUB_SHA).")] = None,
    workspace: Annotated[str | None, typer.Option("--workspace", help="Workspace root (GITHUB_WORKSPACE).")] = None,
    token: Annotated[str | None, typer.Option("--token", help="API token (GITHUB_TOKEN).")] = None,
    emoji: Annotated[bool, typer.Option("--emoji/--no-emoji", help="Decorate output with emoji.")] = True,
    debug: Annotated[bool, typer.Option("--debug", help="Print debug diagnostics.")] = False,
) -> None:
    """Parse a report and publish its annotations to a check run."""

    reporter = build_reporter(emoji=emoji, debug=debug)
    try:
        owner, repo = split_repository(repository) if repository is not None else (None, None)
        settings = ActionSettings.from_environ(
            os.environ,
            owner=owner,
            repo=repo,
            head_sha=head_sha,
            workspace=workspace,
            token=token,
            report_path=report_path,
            report_format=report_format,
            report_name=report_name,
            report_title=report_title,
        )
        result = asyncio.run(run_publish(settings, reporter))
    except (CheckRunError, CLIError) as exc:
        reporter.failed(str(exc))
        raise typer.Exit(code=getattr(exc, "exit_code", 1)) from exc
    reporter.published(result)


def register(app: typer.Typer) -> None:
    """Register the publish command on ``app``."""

    app.command(name="publish")(publish)


__all__ = ["publish", "register", "run_publish"]
