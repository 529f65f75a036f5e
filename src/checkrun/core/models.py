# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.
"""Core data models shared across the checkrun package."""

from __future__ import annotations

from enum import Enum
from typing import TypeAlias

from pydantic import BaseModel, ConfigDict, Field, model_validator

JsonScalar: TypeAlias = str | int | float | bool | None
JsonValue: TypeAlias = "JsonScalar | list[JsonValue] | dict[str, JsonValue]"


class AnnotationLevel(str, Enum):
    """Annotation levels accepted by the check run API."""

    NOTICE = "notice"
    WARNING = "warning"
    FAILURE = "failure"


class CheckStatus(str, Enum):
    """Lifecycle states of a check run."""

    IN_PROGRESS = "in_progress"
    COMPLETED = "completed"


class CheckConclusion(str, Enum):
    """Terminal conclusions reported when a check run is closed."""

    NEUTRAL = "neutral"


class Annotation(BaseModel):
    """Standardise one flagged file location into the check run annotation schema.

    Columns are only accepted as a pair and only when the annotation spans a
    single line; the remote rejects column ranges crossing lines.
    """

    model_config = ConfigDict(frozen=True)

    path: str
    annotation_level: AnnotationLevel
    start_line: int = Field(ge=1)
    end_line: int = Field(ge=1)
    start_column: int | None = Field(default=None, ge=1)
    end_column: int | None = Field(default=None, ge=1)
    title: str | None = None
    message: str
    raw_details: str | None = None

    @model_validator(mode="after")
    def _check_span(self) -> Annotation:
        """Validate the line and column span.

        Returns:
            Annotation: The validated annotation.

        Raises:
            ValueError: If the span is inverted or the columns are inconsistent.
        """

        if self.end_line < self.start_line:
            raise ValueError(f"end_line {self.end_line} precedes start_line {self.start_line}")
        if (self.start_column is None) != (self.end_column is None):
            raise ValueError("start_column and end_column must be provided together")
        if self.start_column is not None and self.start_line != self.end_line:
            raise ValueError("columns are only allowed on single-line annotations")
        return self

    def to_payload(self) -> dict[str, JsonValue]:
        """Return the wire representation with unset optional fields omitted.

        Returns:
            dict[str, JsonValue]: Mapping accepted by the check run API.
        """

        return self.model_dump(mode="json", exclude_none=True)


class CheckOutput(BaseModel):
    """Describe the ``output`` block of a check run."""

    model_config = ConfigDict(frozen=True)

    title: str
    summary: str = ""
    annotations: tuple[Annotation, ...] = Field(default_factory=tuple)


class Report(BaseModel):
    """Bind one parse result to one commit of one repository."""

    model_config = ConfigDict(frozen=True)

    owner: str
    repo: str
    head_sha: str
    name: str
    status: CheckStatus = CheckStatus.COMPLETED
    conclusion: CheckConclusion = CheckConclusion.NEUTRAL
    output: CheckOutput

    @property
    def annotations(self) -> tuple[Annotation, ...]:
        """Return the full ordered annotation list carried by the report."""

        return self.output.annotations


__all__ = [
    "Annotation",
    "AnnotationLevel",
    "CheckConclusion",
    "CheckOutput",
    "CheckStatus",
    "JsonScalar",
    "JsonValue",
    "Report",
]
