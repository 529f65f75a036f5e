# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.

"""Shared pytest fixtures."""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

import pytest

from checkrun.errors import PublishTransportError


@pytest.fixture
def fixtures_dir() -> Path:
    """Return the directory holding sample tool reports."""
    return Path(__file__).resolve().parent / "fixtures"


@dataclass
class RecordingClient:
    """Check run client double recording every call in order."""

    check_run_id: int = 4242
    fail_on_call: int | None = None
    error: Exception | None = None
    calls: list[tuple[str, int | None, dict[str, Any]]] = field(default_factory=list)

    async def create(self, payload: Mapping[str, Any]) -> int:
        self._record("create", None, payload)
        return self.check_run_id

    async def update(self, check_run_id: int, payload: Mapping[str, Any]) -> None:
        self._record("update", check_run_id, payload)

    def _record(self, kind: str, check_run_id: int | None, payload: Mapping[str, Any]) -> None:
        self.calls.append((kind, check_run_id, dict(payload)))
        if self.fail_on_call is not None and len(self.calls) == self.fail_on_call:
            if self.error is not None:
                raise self.error
            raise PublishTransportError("create" if kind == "create" else "fill", "boom", status_code=502)

    @property
    def sent_annotations(self) -> list[dict[str, Any]]:
        return [annotation for _, _, payload in self.calls for annotation in payload["output"]["annotations"]]


@pytest.fixture
def recording_client() -> RecordingClient:
    """Return a fresh recording check run client."""
    return RecordingClient()


@pytest.fixture
def client_factory() -> type[RecordingClient]:
    """Return the recording client type for tests that configure failures."""
    return RecordingClient
