# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.
"""Report assembly and check run publication."""

from __future__ import annotations

from .assembler import ReportMetadata, assemble_report, build_report
from .publisher import (
    MAX_ANNOTATIONS_PER_CALL,
    BatchPublisher,
    CheckRunClient,
    PublishObserver,
    PublishPhase,
    PublishResult,
    chunk_annotations,
)

__all__ = [
    "BatchPublisher",
    "CheckRunClient",
    "MAX_ANNOTATIONS_PER_CALL",
    "PublishObserver",
    "PublishPhase",
    "PublishResult",
    "ReportMetadata",
    "assemble_report",
    "build_report",
    "chunk_annotations",
]
