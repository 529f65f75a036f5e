# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.
"""Settings resolved from the GitHub Actions environment."""

from __future__ import annotations

from collections.abc import Mapping
from pathlib import Path
from typing import Final

from pydantic import BaseModel, ConfigDict, Field, field_validator

from .errors import ConfigError
from .parsers.registry import ReportFormat, format_entry, resolve_format
from .paths import workspace_prefix

DEFAULT_API_URL: Final[str] = "https://api.github.com"
DEFAULT_REPORT_FORMAT: Final[ReportFormat] = ReportFormat.PSALM
_REPOSITORY_SEPARATOR: Final[str] = "/"


def split_repository(repository: str) -> tuple[str, str]:
    """Split an ``owner/repo`` slug into its coordinates.

    Raises:
        ConfigError: If ``repository`` is not of the form ``owner/repo``.
    """

    owner, separator, repo = repository.strip().partition(_REPOSITORY_SEPARATOR)
    if not separator or not owner or not repo or _REPOSITORY_SEPARATOR in repo:
        raise ConfigError(f"repository must look like 'owner/repo', got '{repository}'")
    return owner, repo


class ActionSettings(BaseModel):
    """Invocation settings for one report publication."""

    model_config = ConfigDict(frozen=True)

    owner: str
    repo: str
    head_sha: str
    report_path: Path
    report_format: ReportFormat = DEFAULT_REPORT_FORMAT
    report_name: str = ""
    report_title: str = ""
    workspace: str | None = None
    token: str | None = Field(default=None, repr=False)
    api_url: str = DEFAULT_API_URL

    @field_validator("report_format", mode="before")
    @classmethod
    def _coerce_format(cls, value: str | ReportFormat) -> ReportFormat:
        """Resolve format identifiers and aliases into :class:`ReportFormat`."""

        return resolve_format(value)

    @property
    def path_prefix(self) -> str:
        """Return the separator-terminated workspace prefix."""

        return workspace_prefix(self.workspace)

    @property
    def effective_name(self) -> str:
        """Return the check name, defaulting to the format identifier."""

        return self.report_name or self.report_format.value

    @property
    def effective_title(self) -> str:
        """Return the check title, defaulting to the format's display name."""

        return self.report_title or f"{format_entry(self.report_format).default_title} report"

    @classmethod
    def from_environ(cls, environ: Mapping[str, str], **overrides: object) -> ActionSettings:
        """Build settings from Actions environment variables.

        ``overrides`` take precedence over the environment; ``None`` values
        are ignored so unset CLI options fall back to the environment.

        Args:
            environ: Environment mapping, typically ``os.environ``.
            **overrides: Explicit setting values keyed by field name.

        Returns:
            ActionSettings: Validated settings.

        Raises:
            ConfigError: If a required value is missing or malformed.
        """

        values: dict[str, object] = {}
        repository = environ.get("GITHUB_REPOSITORY", "")
        if repository:
            values["owner"], values["repo"] = split_repository(repository)
        env_map = {
            "head_sha": environ.get("GITHUB_SHA"),
            "workspace": environ.get("GITHUB_WORKSPACE"),
            "token": environ.get("INPUT_GITHUB_TOKEN") or environ.get("GITHUB_TOKEN"),
            "api_url": environ.get("GITHUB_API_URL"),
            "report_path": environ.get("INPUT_REPORT_PATH"),
            "report_format": environ.get("INPUT_REPORT_FORMAT"),
            "report_name": environ.get("INPUT_REPORT_NAME"),
            "report_title": environ.get("INPUT_REPORT_TITLE"),
        }
        values.update({key: value for key, value in env_map.items() if value})
        values.update({key: value for key, value in overrides.items() if value is not None})
        missing = dict.fromkeys(label for name, label in _REQUIRED.items() if not values.get(name))
        if missing:
            raise ConfigError(f"missing required settings: {', '.join(missing)}")
        try:
            return cls.model_validate(values)
        except ConfigError:
            raise
        except ValueError as exc:
            raise ConfigError(f"invalid settings: {exc}") from exc


_REQUIRED: Final[dict[str, str]] = {
    "owner": "GITHUB_REPOSITORY",
    "repo": "GITHUB_REPOSITORY",
    "head_sha": "GITHUB_SHA",
    "report_path": "INPUT_REPORT_PATH",
}


__all__ = ["ActionSettings", "DEFAULT_API_URL", "DEFAULT_REPORT_FORMAT", "split_repository"]
