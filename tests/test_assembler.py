# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.
"""Tests for report assembly."""

from __future__ import annotations

import asyncio
from pathlib import Path

import pytest

from checkrun.core.models import CheckConclusion, CheckStatus
from checkrun.errors import UnknownFormatError
from checkrun.parsers.javascript import TSC_SUMMARY
from checkrun.parsers.php import PSALM_SUMMARY
from checkrun.reporting import ReportMetadata, assemble_report, build_report
from checkrun.streams import bytes_source, file_source

METADATA = ReportMetadata(
    owner="octo",
    repo="app",
    head_sha="0123456789abcdef",
    report_name="lint",
    report_title="Lint report",
)


def test_assemble_report_binds_metadata() -> None:
    report = assemble_report([], METADATA, summary="nothing found")
    assert (report.owner, report.repo, report.head_sha, report.name) == ("octo", "app", "0123456789abcdef", "lint")
    assert report.output.title == "Lint report"
    assert report.output.summary == "nothing found"
    assert report.status is CheckStatus.COMPLETED
    assert report.conclusion is CheckConclusion.NEUTRAL
    assert report.annotations == ()


def test_build_report_uses_psalm_summary(fixtures_dir: Path) -> None:
    report = asyncio.run(
        build_report(file_source(fixtures_dir / "psalm.json"), "psalm", METADATA, path_prefix="/github/workspace/"),
    )
    assert report.output.summary == PSALM_SUMMARY
    assert len(report.annotations) == 3
    assert report.annotations[0].path == "src/Hello.php"


@pytest.mark.parametrize(
    ("report_format", "data", "summary"),
    [
        ("eslint", b"[]", ""),
        ("stylelint", b"[]", ""),
        ("tsc", b"", TSC_SUMMARY),
        ("typescript", b"", TSC_SUMMARY),
    ],
)
def test_build_report_summary_per_format(report_format: str, data: bytes, summary: str) -> None:
    report = asyncio.run(build_report(bytes_source(data), report_format, METADATA))
    assert report.output.summary == summary
    assert report.annotations == ()


def test_build_report_rejects_unknown_format() -> None:
    with pytest.raises(UnknownFormatError):
        asyncio.run(build_report(bytes_source(b"[]"), "phpstan", METADATA))
