# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.
"""Tests for annotation and report models."""

from __future__ import annotations

import pytest
from pydantic import ValidationError

from checkrun.core.models import Annotation, AnnotationLevel, CheckConclusion, CheckOutput, CheckStatus, Report
from checkrun.core.serialization import coerce_optional_int, serialize_output


def _annotation(**overrides: object) -> Annotation:
    fields: dict[str, object] = {
        "path": "src/a.php",
        "annotation_level": AnnotationLevel.WARNING,
        "start_line": 3,
        "end_line": 3,
        "message": "something is off",
    }
    fields.update(overrides)
    return Annotation.model_validate(fields)


def test_payload_omits_unset_optional_fields() -> None:
    assert _annotation().to_payload() == {
        "path": "src/a.php",
        "annotation_level": "warning",
        "start_line": 3,
        "end_line": 3,
        "message": "something is off",
    }


def test_payload_includes_columns_and_details() -> None:
    payload = _annotation(start_column=2, end_column=9, title="Rule", raw_details="ctx").to_payload()
    assert payload["start_column"] == 2
    assert payload["end_column"] == 9
    assert payload["title"] == "Rule"
    assert payload["raw_details"] == "ctx"


@pytest.mark.parametrize(
    "overrides",
    [
        {"start_line": 5, "end_line": 4},
        {"start_line": 0, "end_line": 0},
        {"start_column": 1},
        {"end_line": 4, "start_column": 1, "end_column": 2},
        {"start_column": 0, "end_column": 1},
    ],
)
def test_invalid_spans_are_rejected(overrides: dict[str, object]) -> None:
    with pytest.raises(ValidationError):
        _annotation(**overrides)


def test_annotations_are_frozen() -> None:
    annotation = _annotation()
    with pytest.raises(ValidationError):
        annotation.message = "changed"  # type: ignore[misc]


def test_report_defaults_to_completed_neutral() -> None:
    report = Report(
        owner="octo",
        repo="app",
        head_sha="abc123",
        name="psalm",
        output=CheckOutput(title="Psalm report", annotations=(_annotation(),)),
    )
    assert report.status is CheckStatus.COMPLETED
    assert report.conclusion is CheckConclusion.NEUTRAL
    assert report.annotations == report.output.annotations
    assert report.output.summary == ""


def test_serialize_output_uses_batch_slice() -> None:
    output = CheckOutput(title="T", summary="S", annotations=(_annotation(), _annotation(start_line=4, end_line=4)))
    assert serialize_output(output, output.annotations[1:]) == {
        "title": "T",
        "summary": "S",
        "annotations": [output.annotations[1].to_payload()],
    }


@pytest.mark.parametrize(
    ("value", "expected"),
    [(7, 7), (7.0, 7), ("12", 12), (True, None), ("x", None), (None, None), (1.5, None)],
)
def test_coerce_optional_int(value, expected) -> None:
    assert coerce_optional_int(value) == expected
