# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.
"""Tests for settings resolution from the Actions environment."""

from __future__ import annotations

from pathlib import Path

import pytest

from checkrun.config import DEFAULT_API_URL, ActionSettings, split_repository
from checkrun.errors import ConfigError, UnknownFormatError
from checkrun.parsers import ReportFormat

BASE_ENV = {
    "GITHUB_REPOSITORY": "octo/app",
    "GITHUB_SHA": "abc123",
    "GITHUB_WORKSPACE": "/github/workspace",
    "GITHUB_TOKEN": "ghs_secret",
    "INPUT_REPORT_PATH": "build/psalm.json",
}


def test_from_environ_reads_actions_variables() -> None:
    settings = ActionSettings.from_environ(BASE_ENV)
    assert (settings.owner, settings.repo, settings.head_sha) == ("octo", "app", "abc123")
    assert settings.report_path == Path("build/psalm.json")
    assert settings.report_format is ReportFormat.PSALM
    assert settings.path_prefix == "/github/workspace/"
    assert settings.token == "ghs_secret"
    assert settings.api_url == DEFAULT_API_URL


def test_default_name_and_title_follow_format() -> None:
    settings = ActionSettings.from_environ({**BASE_ENV, "INPUT_REPORT_FORMAT": "TypeScript"})
    assert settings.report_format is ReportFormat.TSC
    assert settings.effective_name == "tsc"
    assert settings.effective_title == "TypeScript report"


def test_explicit_inputs_take_precedence() -> None:
    env = {
        **BASE_ENV,
        "INPUT_GITHUB_TOKEN": "input_token",
        "INPUT_REPORT_NAME": "Lint",
        "INPUT_REPORT_TITLE": "ESLint findings",
        "INPUT_REPORT_FORMAT": "eslint",
        "GITHUB_API_URL": "https://ghe.example.test/api/v3",
    }
    settings = ActionSettings.from_environ(env, head_sha="override", report_format=None)
    assert settings.token == "input_token"
    assert settings.effective_name == "Lint"
    assert settings.effective_title == "ESLint findings"
    assert settings.report_format is ReportFormat.ESLINT
    assert settings.api_url == "https://ghe.example.test/api/v3"
    assert settings.head_sha == "override"


def test_token_is_hidden_from_repr() -> None:
    assert "ghs_secret" not in repr(ActionSettings.from_environ(BASE_ENV))


def test_missing_settings_are_reported_once() -> None:
    with pytest.raises(ConfigError) as excinfo:
        ActionSettings.from_environ({"INPUT_REPORT_PATH": "r.json"})
    assert str(excinfo.value) == "missing required settings: GITHUB_REPOSITORY, GITHUB_SHA"


def test_unknown_format_is_config_error() -> None:
    with pytest.raises(UnknownFormatError):
        ActionSettings.from_environ({**BASE_ENV, "INPUT_REPORT_FORMAT": "checkstyle"})


def test_workspace_absent_means_no_prefix() -> None:
    env = {key: value for key, value in BASE_ENV.items() if key != "GITHUB_WORKSPACE"}
    assert ActionSettings.from_environ(env).path_prefix == ""


@pytest.mark.parametrize("repository", ["octo", "octo/", "/app", "octo/app/extra"])
def test_split_repository_rejects_bad_slugs(repository: str) -> None:
    with pytest.raises(ConfigError):
        split_repository(repository)
