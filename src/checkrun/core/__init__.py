# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.
"""Core models and serialization helpers."""

from __future__ import annotations

from .models import (
    Annotation,
    AnnotationLevel,
    CheckConclusion,
    CheckOutput,
    CheckStatus,
    JsonValue,
    Report,
)

__all__ = [
    "Annotation",
    "AnnotationLevel",
    "CheckConclusion",
    "CheckOutput",
    "CheckStatus",
    "JsonValue",
    "Report",
]
