# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.
"""Shared parser infrastructure and helper utilities."""

from __future__ import annotations

import logging
from collections.abc import Callable, Iterable, Iterator, Mapping
from contextlib import aclosing
from dataclasses import dataclass
from typing import Generic, Protocol, TypeVar, runtime_checkable

from pydantic import ValidationError

from ..core.models import Annotation, AnnotationLevel, JsonValue
from ..core.serialization import coerce_optional_int, coerce_optional_str
from ..errors import MalformedReportError
from ..streams import ByteSource, collect_bytes, iter_lines, load_json

LOGGER = logging.getLogger(__name__)

JsonTransform = Callable[[JsonValue, str], list[Annotation]]
StateT = TypeVar("StateT")


@runtime_checkable
class ReportParser(Protocol):
    """Protocol implemented by every report format parser."""

    report_format: str

    async def parse(self, source: ByteSource, path_prefix: str) -> list[Annotation]:
        """Parse ``source`` into annotations in source-document order.

        Args:
            source: Asynchronous iterable yielding the raw report bytes.
            path_prefix: Separator-terminated workspace prefix stripped from paths.

        Returns:
            list[Annotation]: Normalised annotations.
        """
        ...


@dataclass(frozen=True, slots=True)
class LineFold(Generic[StateT]):
    """Describe a left fold over report lines carrying an optional accumulator.

    ``step`` receives the pending state and one line and returns the next
    state plus an annotation finalised by that line, if any. ``finish``
    finalises whatever state remains at end of input.
    """

    step: Callable[[StateT | None, str, str], tuple[StateT | None, Annotation | None]]
    finish: Callable[[StateT | None], Annotation | None]

    def run(self, lines: Iterable[str], path_prefix: str) -> list[Annotation]:
        """Apply the fold to an in-memory sequence of lines.

        Args:
            lines: Report lines without terminators.
            path_prefix: Separator-terminated workspace prefix.

        Returns:
            list[Annotation]: Annotations in line order.
        """

        annotations: list[Annotation] = []
        state: StateT | None = None
        for line in lines:
            state, emitted = self.step(state, line, path_prefix)
            if emitted is not None:
                annotations.append(emitted)
        tail = self.finish(state)
        if tail is not None:
            annotations.append(tail)
        return annotations


@dataclass(slots=True)
class JsonReportParser:
    """Collect the whole report, decode it as JSON and delegate to a transform."""

    report_format: str
    transform: JsonTransform

    async def parse(self, source: ByteSource, path_prefix: str) -> list[Annotation]:
        """Collect ``source``, decode it and apply the JSON transform.

        Args:
            source: Asynchronous iterable yielding the raw report bytes.
            path_prefix: Separator-terminated workspace prefix stripped from paths.

        Returns:
            list[Annotation]: Annotations in report order.

        Raises:
            SourceReadError: If the source fails before completion.
            MalformedReportError: If the report is not valid JSON or a record is invalid.
        """

        buffer = await collect_bytes(source)
        payload = load_json(buffer, report_format=self.report_format)
        annotations = self.transform(payload, path_prefix)
        LOGGER.debug("parsed %d %s annotations", len(annotations), self.report_format)
        return annotations


@dataclass(slots=True)
class TextReportParser(Generic[StateT]):
    """Stream report lines through a :class:`LineFold` without buffering the input."""

    report_format: str
    fold: LineFold[StateT]

    async def parse(self, source: ByteSource, path_prefix: str) -> list[Annotation]:
        """Feed each line of ``source`` through the fold and collect its annotations.

        The line reader, and with it ``source``, is closed before returning,
        including when the fold rejects a line partway through.

        Args:
            source: Asynchronous iterable yielding the raw report bytes.
            path_prefix: Separator-terminated workspace prefix stripped from paths.

        Returns:
            list[Annotation]: Annotations in line order.

        Raises:
            SourceReadError: If the source fails before completion.
            MalformedReportError: If a finalised issue violates the annotation schema.
        """

        annotations: list[Annotation] = []
        state: StateT | None = None
        async with aclosing(iter_lines(source)) as lines:
            async for line in lines:
                state, emitted = self.fold.step(state, line, path_prefix)
                if emitted is not None:
                    annotations.append(emitted)
        tail = self.fold.finish(state)
        if tail is not None:
            annotations.append(tail)
        LOGGER.debug("parsed %d %s annotations", len(annotations), self.report_format)
        return annotations


def iter_records(payload: JsonValue, report_format: str, *, where: str = "report") -> Iterator[tuple[int, Mapping[str, JsonValue]]]:
    """Yield ``(index, record)`` pairs from a JSON array of objects.

    Args:
        payload: Decoded JSON value expected to be an array.
        report_format: Format identifier used in error messages.
        where: Human-readable location of ``payload`` within the report.

    Yields:
        tuple[int, Mapping[str, JsonValue]]: Position and object for each entry.

    Raises:
        MalformedReportError: If ``payload`` is not an array of objects.
    """

    if not isinstance(payload, list):
        raise MalformedReportError(report_format, f"{where} must be a JSON array")
    for index, item in enumerate(payload):
        if not isinstance(item, Mapping):
            raise MalformedReportError(report_format, f"{where}[{index}] must be a JSON object")
        yield index, item


def require_str(record: Mapping[str, JsonValue], key: str, report_format: str, where: str) -> str:
    """Return the string stored under ``key`` or raise when it is absent.

    Raises:
        MalformedReportError: If ``key`` is missing or null.
    """

    value = coerce_optional_str(record.get(key))
    if value is None:
        raise MalformedReportError(report_format, f"{where} is missing required field '{key}'")
    return value


def require_int(record: Mapping[str, JsonValue], key: str, report_format: str, where: str) -> int:
    """Return the integer stored under ``key`` or raise when it is absent or not numeric.

    Raises:
        MalformedReportError: If ``key`` is missing or not an integer.
    """

    value = coerce_optional_int(record.get(key))
    if value is None:
        raise MalformedReportError(report_format, f"{where} is missing integer field '{key}'")
    return value


def column_pair(
    start_line: int,
    end_line: int,
    start_column: int | None,
    end_column: int | None,
) -> tuple[int | None, int | None]:
    """Return the column span only when both ends exist on a single line."""

    if start_column is None or end_column is None or start_line != end_line:
        return None, None
    return start_column, end_column


def map_level(label: JsonValue, mapping: Mapping[str | int, AnnotationLevel], default: AnnotationLevel) -> AnnotationLevel:
    """Return the annotation level for a tool-native severity ``label``."""

    if isinstance(label, bool) or not isinstance(label, (str, int)):
        return default
    return mapping.get(label, default)


def build_annotation(report_format: str, where: str, **fields: object) -> Annotation:
    """Validate ``fields`` into an :class:`Annotation`.

    Args:
        report_format: Format identifier used in error messages.
        where: Location of the source record within the report.
        **fields: Annotation field values.

    Returns:
        Annotation: Validated, immutable annotation.

    Raises:
        MalformedReportError: If the values violate the annotation schema.
    """

    try:
        return Annotation.model_validate(fields)
    except ValidationError as exc:
        problems = "; ".join(f"{'.'.join(str(part) for part in error['loc']) or 'annotation'}: {error['msg']}" for error in exc.errors())
        raise MalformedReportError(report_format, f"{where} is invalid ({problems})") from exc


__all__ = [
    "JsonReportParser",
    "JsonTransform",
    "LineFold",
    "ReportParser",
    "TextReportParser",
    "build_annotation",
    "column_pair",
    "iter_records",
    "map_level",
    "require_int",
    "require_str",
]
