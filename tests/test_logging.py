# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.
"""Tests for status lines and the console reporter."""

from __future__ import annotations

import logging
from pathlib import Path

import pytest
from rich.logging import RichHandler

from checkrun.cli.shared import ConsoleReporter, build_reporter
from checkrun.logging import Tone, console_for, emit
from checkrun.reporting import PublishObserver, PublishResult, ReportMetadata, assemble_report


@pytest.mark.parametrize("tone", list(Tone))
def test_emit_prints_plain_text_without_emoji(tone: Tone, capsys: pytest.CaptureFixture[str]) -> None:
    emit(tone, "check run 12 created", use_emoji=False, use_color=False)
    assert capsys.readouterr().out == "check run 12 created\n"


def test_emit_prefixes_glyph_when_enabled(capsys: pytest.CaptureFixture[str]) -> None:
    emit(Tone.OK, "published", use_emoji=True, use_color=False)
    assert capsys.readouterr().out.startswith("✅ published")


def test_emit_does_not_interpret_markup(capsys: pytest.CaptureFixture[str]) -> None:
    emit(Tone.FAIL, "bad value [bold]x[/bold]", use_emoji=False, use_color=False)
    assert capsys.readouterr().out == "bad value [bold]x[/bold]\n"


def test_consoles_are_shared_per_flag_combination() -> None:
    assert console_for(color=False, emoji=False, tty=False) is console_for(color=False, emoji=False, tty=False)


def test_reporter_is_a_publish_observer() -> None:
    assert isinstance(ConsoleReporter(use_emoji=False), PublishObserver)


def test_reporter_describes_progress(capsys: pytest.CaptureFixture[str]) -> None:
    reporter = ConsoleReporter(use_emoji=False, use_color=False)
    metadata = ReportMetadata(owner="octo", repo="app", head_sha="abc", report_name="tsc", report_title="TypeScript report")
    reporter.parsed(assemble_report([], metadata), Path("build/tsc.log"), "tsc")
    reporter.batch_sent(7, 50, 120)
    reporter.publication_incomplete(7, 50, 120, TimeoutError("read timed out"))
    reporter.close_failed(7, RuntimeError("gone"))
    reporter.published(PublishResult(check_run_id=7, calls=4, annotations_sent=120))
    assert capsys.readouterr().out.splitlines() == [
        "Parsed 0 tsc annotation(s) from build/tsc.log",
        "Check run 7: 50/120 annotation(s) sent",
        "Check run 7 is incomplete: 50 of 120 annotation(s) were published (read timed out)",
        "Unable to close check run 7: gone",
        "Published 120 annotation(s) to check run 7 in 4 call(s)",
    ]


def test_reporter_failure_emits_workflow_command(capsys: pytest.CaptureFixture[str]) -> None:
    ConsoleReporter(use_emoji=False, use_color=False).failed("no report", environ={"GITHUB_ACTIONS": "true"})
    assert capsys.readouterr().out.splitlines() == ["no report", "::error::no report"]


def test_build_reporter_debug_routes_package_logs(monkeypatch: pytest.MonkeyPatch) -> None:
    package_logger = logging.getLogger("checkrun")
    monkeypatch.setattr(package_logger, "handlers", [])
    monkeypatch.setattr(package_logger, "level", logging.NOTSET)
    build_reporter(emoji=False, debug=True)
    assert package_logger.level == logging.DEBUG
    assert [type(handler) for handler in package_logger.handlers] == [RichHandler]
