# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.
"""CLI command printing the report assembled from a file, without publishing it."""

from __future__ import annotations

import asyncio
import json
import os
from pathlib import Path
from typing import Annotated

import typer

from ...core.models import Report
from ...errors import CheckRunError
from ...parsers.registry import ReportFormat, format_entry, resolve_format
from ...paths import workspace_prefix
from ...reporting import ReportMetadata, build_report
from ...streams import file_source
from ..shared import build_reporter

_LOCAL_PLACEHOLDER = "local"


def parse(
    report_path: Annotated[Path, typer.Argument(help="Report file to parse.")],
    report_format: Annotated[str, typer.Option("--format", help="Report format: psalm, eslint, stylelint or tsc.")] = (
        ReportFormat.PSALM.value
    ),
    workspace: Annotated[
        str | None,
        typer.Option("--workspace", help="Workspace root stripped from paths (defaults to GITHUB_WORKSPACE)."),
    ] = None,
    report_name: Annotated[str | None, typer.Option("--name", help="Check run name.")] = None,
    report_title: Annotated[str | None, typer.Option("--title", help="Check run title.")] = None,
    emoji: Annotated[bool, typer.Option("--emoji/--no-emoji", help="Decorate output with emoji.")] = True,
) -> None:
    """Parse a report and print the resulting check run as JSON."""

    reporter = build_reporter(emoji=emoji)
    root = workspace if workspace is not None else os.environ.get("GITHUB_WORKSPACE")
    try:
        resolved = resolve_format(report_format)
        owner, _, repo = os.environ.get("GITHUB_REPOSITORY", "").partition("/")
        metadata = ReportMetadata(
            owner=owner or _LOCAL_PLACEHOLDER,
            repo=repo or _LOCAL_PLACEHOLDER,
            head_sha=os.environ.get("GITHUB_SHA", _LOCAL_PLACEHOLDER),
            report_name=report_name or resolved.value,
            report_title=report_title or f"{format_entry(resolved).default_title} report",
        )
        report: Report = asyncio.run(
            build_report(file_source(report_path), resolved, metadata, path_prefix=workspace_prefix(root)),
        )
    except CheckRunError as exc:
        reporter.failed(str(exc))
        raise typer.Exit(code=1) from exc
    typer.echo(json.dumps(report.model_dump(mode="json", exclude_none=True), indent=2))


def register(app: typer.Typer) -> None:
    """Register the parse command on ``app``."""

    app.command(name="parse")(parse)


__all__ = ["parse", "register"]
