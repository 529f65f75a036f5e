# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.
"""Parsers for PHP static analysis tooling."""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass
from typing import Final

from ..core.models import Annotation, AnnotationLevel, JsonValue
from ..core.serialization import coerce_optional_int, coerce_optional_str
from ..paths import strip_prefix
from .base import JsonReportParser, build_annotation, column_pair, iter_records, map_level, require_int, require_str

PSALM_FORMAT: Final[str] = "psalm"
PSALM_SUMMARY: Final[str] = "PHP Static type Analysis by [Psalm](http://psalm.dev)"

_PSALM_LEVELS: Final[dict[str | int, AnnotationLevel]] = {
    "info": AnnotationLevel.WARNING,
    "error": AnnotationLevel.FAILURE,
}


@dataclass(slots=True)
class PsalmIssue:
    """Psalm issue fields consumed when building annotations."""

    file_path: str
    line_from: int
    line_to: int
    column_from: int | None
    column_to: int | None
    severity: JsonValue
    type: str | None
    message: str
    snippet: str | None


def _read_issue(record: Mapping[str, JsonValue], where: str) -> PsalmIssue:
    line_from = require_int(record, "line_from", PSALM_FORMAT, where)
    line_to = coerce_optional_int(record.get("line_to"))
    return PsalmIssue(
        file_path=require_str(record, "file_path", PSALM_FORMAT, where),
        line_from=line_from,
        line_to=line_from if line_to is None else line_to,
        column_from=coerce_optional_int(record.get("column_from")),
        column_to=coerce_optional_int(record.get("column_to")),
        severity=record.get("severity"),
        type=coerce_optional_str(record.get("type")),
        message=require_str(record, "message", PSALM_FORMAT, where),
        snippet=coerce_optional_str(record.get("snippet")),
    )


def parse_psalm(payload: JsonValue, path_prefix: str) -> list[Annotation]:
    """Parse a Psalm JSON report into annotations.

    Args:
        payload: JSON array produced by ``psalm --output-format=json``.
        path_prefix: Workspace prefix stripped from ``file_path``.

    Returns:
        list[Annotation]: One annotation per issue, in report order.

    Raises:
        MalformedReportError: If the payload is not an issue array or an issue
            lacks ``file_path``, ``line_from`` or ``message``.
    """

    annotations: list[Annotation] = []
    for index, record in iter_records(payload, PSALM_FORMAT):
        where = f"issue[{index}]"
        issue = _read_issue(record, where)
        start_column, end_column = column_pair(issue.line_from, issue.line_to, issue.column_from, issue.column_to)
        annotations.append(
            build_annotation(
                PSALM_FORMAT,
                where,
                path=strip_prefix(issue.file_path, path_prefix),
                annotation_level=map_level(issue.severity, _PSALM_LEVELS, AnnotationLevel.NOTICE),
                start_line=issue.line_from,
                end_line=issue.line_to,
                start_column=start_column,
                end_column=end_column,
                title=issue.type,
                message=issue.message,
                raw_details=issue.snippet,
            ),
        )
    return annotations


class PsalmParser(JsonReportParser):
    """Parse Psalm JSON issue lists."""

    def __init__(self) -> None:
        super().__init__(PSALM_FORMAT, parse_psalm)


__all__ = ["PSALM_FORMAT", "PSALM_SUMMARY", "PsalmIssue", "PsalmParser", "parse_psalm"]
