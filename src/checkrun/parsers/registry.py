# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.
"""Closed registry mapping report formats onto their parsers."""

from __future__ import annotations

from collections.abc import Callable
from dataclasses import dataclass
from enum import Enum
from types import MappingProxyType
from typing import Final

from ..errors import UnknownFormatError
from .base import ReportParser
from .javascript import TSC_SUMMARY, CompilerLogParser, EslintParser, StylelintParser
from .php import PSALM_SUMMARY, PsalmParser


class ReportFormat(str, Enum):
    """Report formats understood by checkrun."""

    PSALM = "psalm"
    ESLINT = "eslint"
    STYLELINT = "stylelint"
    TSC = "tsc"


@dataclass(frozen=True, slots=True)
class FormatEntry:
    """Bind a report format to its parser factory and default presentation."""

    factory: Callable[[], ReportParser]
    summary: str
    default_title: str


_ALIASES: Final[MappingProxyType[str, ReportFormat]] = MappingProxyType(
    {
        "typescript": ReportFormat.TSC,
    },
)

_REGISTRY: Final[MappingProxyType[ReportFormat, FormatEntry]] = MappingProxyType(
    {
        ReportFormat.PSALM: FormatEntry(PsalmParser, PSALM_SUMMARY, "Psalm"),
        ReportFormat.ESLINT: FormatEntry(EslintParser, "", "ESLint"),
        ReportFormat.STYLELINT: FormatEntry(StylelintParser, "", "Stylelint"),
        ReportFormat.TSC: FormatEntry(CompilerLogParser, TSC_SUMMARY, "TypeScript"),
    },
)


def resolve_format(raw: str | ReportFormat) -> ReportFormat:
    """Return the :class:`ReportFormat` named by ``raw``.

    Args:
        raw: Format identifier supplied by configuration (case-insensitive).

    Returns:
        ReportFormat: Matching report format.

    Raises:
        UnknownFormatError: If ``raw`` names no supported format.
    """

    if isinstance(raw, ReportFormat):
        return raw
    token = raw.strip().lower()
    if token in _ALIASES:
        return _ALIASES[token]
    try:
        return ReportFormat(token)
    except ValueError as exc:
        raise UnknownFormatError(raw, tuple(member.value for member in ReportFormat)) from exc


def format_entry(report_format: ReportFormat) -> FormatEntry:
    """Return the registry entry describing ``report_format``."""

    return _REGISTRY[report_format]


def parser_for(report_format: str | ReportFormat) -> ReportParser:
    """Instantiate the parser registered for ``report_format``.

    Raises:
        UnknownFormatError: If ``report_format`` is not recognised.
    """

    return format_entry(resolve_format(report_format)).factory()


__all__ = ["FormatEntry", "ReportFormat", "format_entry", "parser_for", "resolve_format"]
