# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.
"""Helpers for coercing decoded JSON and building check run payloads."""

from __future__ import annotations

from collections.abc import Sequence

from .models import Annotation, CheckOutput, JsonValue


def coerce_optional_int(value: JsonValue) -> int | None:
    """Return an optional integer parsed from ``value`` when feasible."""
    if isinstance(value, bool):
        return None
    if isinstance(value, int):
        return value
    if isinstance(value, float) and value.is_integer():
        return int(value)
    if isinstance(value, str):
        try:
            return int(value)
        except ValueError:
            return None
    return None


def coerce_optional_str(value: JsonValue) -> str | None:
    """Return a string representation of ``value`` or ``None`` when unset."""
    if value is None:
        return None
    return str(value)


def serialize_output(output: CheckOutput, annotations: Sequence[Annotation]) -> dict[str, JsonValue]:
    """Build the ``output`` block of a check run payload.

    Args:
        output: Output metadata providing the title and summary.
        annotations: Annotation slice sent with this particular call.

    Returns:
        dict[str, JsonValue]: JSON-compatible ``output`` mapping.
    """

    return {
        "title": output.title,
        "summary": output.summary,
        "annotations": [annotation.to_payload() for annotation in annotations],
    }


__all__ = [
    "coerce_optional_int",
    "coerce_optional_str",
    "serialize_output",
]
