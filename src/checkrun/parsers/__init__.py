# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.
"""Report format parsers producing normalised annotations."""

from __future__ import annotations

from .base import JsonReportParser, LineFold, ReportParser, TextReportParser
from .javascript import (
    CompilerLogParser,
    EslintParser,
    StylelintParser,
    parse_compiler_log,
    parse_eslint,
    parse_stylelint,
)
from .php import PsalmParser, parse_psalm
from .registry import FormatEntry, ReportFormat, format_entry, parser_for, resolve_format

__all__ = [
    "CompilerLogParser",
    "EslintParser",
    "FormatEntry",
    "JsonReportParser",
    "LineFold",
    "PsalmParser",
    "ReportFormat",
    "ReportParser",
    "StylelintParser",
    "TextReportParser",
    "format_entry",
    "parse_compiler_log",
    "parse_eslint",
    "parse_psalm",
    "parse_stylelint",
    "parser_for",
    "resolve_format",
]
