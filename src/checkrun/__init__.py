# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.
"""Normalise static-analysis reports into check run annotations and publish them."""

from __future__ import annotations

from .core.models import Annotation, AnnotationLevel, CheckOutput, Report
from .errors import (
    CheckRunError,
    ConfigError,
    MalformedReportError,
    PublishTransportError,
    SourceReadError,
    UnknownFormatError,
)
from .parsers import ReportFormat, parser_for
from .reporting import BatchPublisher, ReportMetadata, assemble_report, build_report

__all__ = [
    "Annotation",
    "AnnotationLevel",
    "BatchPublisher",
    "CheckOutput",
    "CheckRunError",
    "ConfigError",
    "MalformedReportError",
    "PublishTransportError",
    "Report",
    "ReportFormat",
    "ReportMetadata",
    "SourceReadError",
    "UnknownFormatError",
    "assemble_report",
    "build_report",
    "parser_for",
]
