# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.
"""Parsers for JavaScript and TypeScript tooling."""

from __future__ import annotations

import json
import logging
import re
from collections.abc import Iterable
from dataclasses import dataclass, replace
from typing import Final

from ..core.models import Annotation, AnnotationLevel, JsonValue
from ..core.serialization import coerce_optional_int, coerce_optional_str
from ..errors import MalformedReportError
from ..paths import relative_log_path, strip_prefix
from .base import (
    JsonReportParser,
    LineFold,
    TextReportParser,
    build_annotation,
    column_pair,
    iter_records,
    map_level,
    require_int,
    require_str,
)

LOGGER = logging.getLogger(__name__)

ESLINT_FORMAT: Final[str] = "eslint"
STYLELINT_FORMAT: Final[str] = "stylelint"
TSC_FORMAT: Final[str] = "tsc"
TSC_SUMMARY: Final[str] = "TypeScript Report"

_ESLINT_ERROR_LEVEL: Final[int] = 2
_ESLINT_WARNING_LEVEL: Final[int] = 1
_FILE_LEVEL_LINE: Final[int] = 1
_ESLINT_LEVELS: Final[dict[str | int, AnnotationLevel]] = {
    _ESLINT_WARNING_LEVEL: AnnotationLevel.WARNING,
    _ESLINT_ERROR_LEVEL: AnnotationLevel.FAILURE,
}
_STYLELINT_LEVELS: Final[dict[str | int, AnnotationLevel]] = {
    "error": AnnotationLevel.FAILURE,
}
_COMPILER_LOG_PATTERN = re.compile(
    r"^(?P<file>[^(]+)\((?P<line>\d+),(?P<column>\d+)\):(?P<code>[^:]+):(?P<message>.*)$",
)


def parse_eslint(payload: JsonValue, path_prefix: str) -> list[Annotation]:
    """Parse ESLint JSON results into annotations.

    Messages without a ``line`` (ESLint's notice for an ignored file passed on
    the command line) become file-level annotations on line 1.

    Args:
        payload: JSON payload produced by ESLint when invoked with ``--format json``.
        path_prefix: Workspace prefix stripped from ``filePath``.

    Returns:
        list[Annotation]: Annotations for every message, file by file.

    Raises:
        MalformedReportError: If a result lacks ``filePath``/``messages`` or a
            message lacks ``message``.
    """

    annotations: list[Annotation] = []
    for file_index, entry in iter_records(payload, ESLINT_FORMAT):
        file_where = f"result[{file_index}]"
        path = strip_prefix(require_str(entry, "filePath", ESLINT_FORMAT, file_where), path_prefix)
        if "messages" not in entry:
            raise MalformedReportError(ESLINT_FORMAT, f"{file_where} is missing required field 'messages'")
        for index, message in iter_records(entry["messages"], ESLINT_FORMAT, where=f"{file_where}.messages"):
            where = f"{file_where}.messages[{index}]"
            start_line = coerce_optional_int(message.get("line"))
            if start_line is None:
                # Ignored-file notices carry no location; pin them to the top of the file.
                LOGGER.debug("%s has no line; annotating %s at line %d", where, path, _FILE_LEVEL_LINE)
                start_line = end_line = _FILE_LEVEL_LINE
                start_column = end_column = None
            else:
                end_line = coerce_optional_int(message.get("endLine"))
                end_line = start_line if end_line is None else end_line
                start_column, end_column = column_pair(
                    start_line,
                    end_line,
                    coerce_optional_int(message.get("column")),
                    coerce_optional_int(message.get("endColumn")),
                )
            annotations.append(
                build_annotation(
                    ESLINT_FORMAT,
                    where,
                    path=path,
                    annotation_level=map_level(message.get("severity"), _ESLINT_LEVELS, AnnotationLevel.NOTICE),
                    start_line=start_line,
                    end_line=end_line,
                    start_column=start_column,
                    end_column=end_column,
                    title=coerce_optional_str(message.get("ruleId")),
                    message=require_str(message, "message", ESLINT_FORMAT, where),
                    raw_details=json.dumps(message, indent=1),
                ),
            )
    return annotations


def parse_stylelint(payload: JsonValue, path_prefix: str) -> list[Annotation]:
    """Parse stylelint JSON results into annotations.

    Stylelint reports single-point warnings, so ``end_line`` repeats ``line``
    and ``end_column`` mirrors ``column``.

    Args:
        payload: JSON payload produced by ``stylelint --formatter json``.
        path_prefix: Workspace prefix stripped from ``source``.

    Returns:
        list[Annotation]: Annotations for every warning, file by file.

    Raises:
        MalformedReportError: If a result lacks ``source``/``warnings`` or a
            warning lacks ``line``/``text``.
    """

    annotations: list[Annotation] = []
    for file_index, entry in iter_records(payload, STYLELINT_FORMAT):
        file_where = f"result[{file_index}]"
        path = strip_prefix(require_str(entry, "source", STYLELINT_FORMAT, file_where), path_prefix)
        if "warnings" not in entry:
            raise MalformedReportError(STYLELINT_FORMAT, f"{file_where} is missing required field 'warnings'")
        for index, warning in iter_records(entry["warnings"], STYLELINT_FORMAT, where=f"{file_where}.warnings"):
            where = f"{file_where}.warnings[{index}]"
            line = require_int(warning, "line", STYLELINT_FORMAT, where)
            column = coerce_optional_int(warning.get("column"))
            annotations.append(
                build_annotation(
                    STYLELINT_FORMAT,
                    where,
                    path=path,
                    annotation_level=map_level(warning.get("severity"), _STYLELINT_LEVELS, AnnotationLevel.WARNING),
                    start_line=line,
                    end_line=line,
                    start_column=column,
                    end_column=column,
                    title=coerce_optional_str(warning.get("rule")),
                    message=require_str(warning, "text", STYLELINT_FORMAT, where),
                ),
            )
    return annotations


@dataclass(frozen=True, slots=True)
class CompilerIssue:
    """Diagnostic captured from a compiler log line plus its trailing context."""

    full: str
    path: str
    line: int
    column: int
    code: str
    message: str
    extra: tuple[str, ...] = ()

    def with_extra(self, line: str) -> CompilerIssue:
        """Return a copy with ``line`` appended to the trailing context."""

        return replace(self, extra=(*self.extra, line))

    def to_annotation(self) -> Annotation:
        """Finalise the issue into a failure annotation without a title."""

        return build_annotation(
            TSC_FORMAT,
            f"line '{self.full}'",
            path=self.path,
            annotation_level=AnnotationLevel.FAILURE,
            start_line=self.line,
            end_line=self.line,
            start_column=self.column,
            end_column=self.column,
            message=self.message,
            raw_details="\n".join((self.full, *self.extra)),
        )


def step_compiler_log(
    pending: CompilerIssue | None,
    line: str,
    path_prefix: str,
) -> tuple[CompilerIssue | None, Annotation | None]:
    """Advance the compiler log fold by one line.

    A diagnostic line finalises the pending issue and opens a new one. Any
    other line extends the pending issue, or is dropped when nothing is
    pending (compiler banners and summaries).

    Args:
        pending: Issue currently accumulating context lines, if any.
        line: Next log line without its terminator.
        path_prefix: Workspace prefix stripped from the file reference.

    Returns:
        tuple[CompilerIssue | None, Annotation | None]: Next pending issue and
        the annotation finalised by this line, if any.
    """

    match = _COMPILER_LOG_PATTERN.match(line)
    if match is None:
        if pending is None:
            return None, None
        return pending.with_extra(line), None
    issue = CompilerIssue(
        full=line,
        path=relative_log_path(match.group("file"), path_prefix),
        line=int(match.group("line")),
        column=int(match.group("column")),
        code=match.group("code").strip(),
        message=match.group("message").strip(),
    )
    emitted = pending.to_annotation() if pending is not None else None
    return issue, emitted


def finish_compiler_log(pending: CompilerIssue | None) -> Annotation | None:
    """Finalise the issue still pending at end of input."""

    return pending.to_annotation() if pending is not None else None


COMPILER_LOG_FOLD: Final[LineFold[CompilerIssue]] = LineFold(step=step_compiler_log, finish=finish_compiler_log)


def parse_compiler_log(lines: Iterable[str], path_prefix: str) -> list[Annotation]:
    """Parse an in-memory compiler log into annotations, in line order."""

    return COMPILER_LOG_FOLD.run(lines, path_prefix)


class EslintParser(JsonReportParser):
    """Parse ESLint JSON result arrays."""

    def __init__(self) -> None:
        super().__init__(ESLINT_FORMAT, parse_eslint)


class StylelintParser(JsonReportParser):
    """Parse stylelint JSON result arrays."""

    def __init__(self) -> None:
        super().__init__(STYLELINT_FORMAT, parse_stylelint)


class CompilerLogParser(TextReportParser[CompilerIssue]):
    """Parse free-text ``tsc`` style compiler logs line by line."""

    def __init__(self) -> None:
        super().__init__(TSC_FORMAT, COMPILER_LOG_FOLD)


__all__ = [
    "COMPILER_LOG_FOLD",
    "CompilerIssue",
    "CompilerLogParser",
    "ESLINT_FORMAT",
    "EslintParser",
    "STYLELINT_FORMAT",
    "StylelintParser",
    "TSC_FORMAT",
    "TSC_SUMMARY",
    "finish_compiler_log",
    "parse_compiler_log",
    "parse_eslint",
    "parse_stylelint",
    "step_compiler_log",
]
