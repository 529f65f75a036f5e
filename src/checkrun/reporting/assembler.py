# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.
"""Assemble parser output and invocation metadata into a check run report."""

from __future__ import annotations

from collections.abc import Sequence
from dataclasses import dataclass

from ..core.models import Annotation, CheckConclusion, CheckOutput, CheckStatus, Report
from ..parsers.registry import ReportFormat, format_entry, resolve_format
from ..streams import ByteSource


@dataclass(frozen=True, slots=True)
class ReportMetadata:
    """Invocation metadata attached to every report."""

    owner: str
    repo: str
    head_sha: str
    report_name: str
    report_title: str


def assemble_report(annotations: Sequence[Annotation], metadata: ReportMetadata, *, summary: str = "") -> Report:
    """Wrap ``annotations`` and ``metadata`` into a completed, neutral report.

    Args:
        annotations: Ordered annotations produced by a parser.
        metadata: Repository coordinates, commit and report naming.
        summary: Summary text shown on the check run.

    Returns:
        Report: Immutable report ready for publication.
    """

    return Report(
        owner=metadata.owner,
        repo=metadata.repo,
        head_sha=metadata.head_sha,
        name=metadata.report_name,
        status=CheckStatus.COMPLETED,
        conclusion=CheckConclusion.NEUTRAL,
        output=CheckOutput(
            title=metadata.report_title,
            summary=summary,
            annotations=tuple(annotations),
        ),
    )


async def build_report(
    source: ByteSource,
    report_format: str | ReportFormat,
    metadata: ReportMetadata,
    *,
    path_prefix: str = "",
) -> Report:
    """Parse ``source`` with the parser registered for ``report_format`` and assemble a report.

    Raises:
        UnknownFormatError: If ``report_format`` is not recognised.
        SourceReadError: If ``source`` fails before completion.
        MalformedReportError: If the report cannot be parsed.
    """

    entry = format_entry(resolve_format(report_format))
    annotations = await entry.factory().parse(source, path_prefix)
    return assemble_report(annotations, metadata, summary=entry.summary)


__all__ = ["ReportMetadata", "assemble_report", "build_report"]
