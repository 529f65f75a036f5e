# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.
"""Tests for the httpx-backed check run client."""

from __future__ import annotations

import asyncio
import json

import httpx
import pytest

from checkrun.core.models import Annotation, AnnotationLevel
from checkrun.errors import PublishTransportError
from checkrun.github import GitHubCheckRunClient
from checkrun.github.client import API_VERSION
from checkrun.reporting import BatchPublisher, ReportMetadata, assemble_report

API_URL = "https://api.example.test/"


def _run_with_transport(handler, operation):
    async def runner():
        async with httpx.AsyncClient(transport=httpx.MockTransport(handler)) as http:
            async with GitHubCheckRunClient("tok", api_url=API_URL, client=http) as client:
                return await operation(client)

    return asyncio.run(runner())


def test_create_posts_check_run_and_returns_id() -> None:
    seen: list[httpx.Request] = []

    def handler(request: httpx.Request) -> httpx.Response:
        seen.append(request)
        return httpx.Response(201, json={"id": 77})

    payload = {"owner": "octo", "repo": "app", "name": "psalm", "head_sha": "abc", "status": "in_progress"}
    check_run_id = _run_with_transport(handler, lambda client: client.create(payload))

    assert check_run_id == 77
    (request,) = seen
    assert request.method == "POST"
    assert request.url == httpx.URL("https://api.example.test/repos/octo/app/check-runs")
    assert request.headers["Authorization"] == "Bearer tok"
    assert request.headers["Accept"] == "application/vnd.github+json"
    assert request.headers["X-GitHub-Api-Version"] == API_VERSION
    assert json.loads(request.content) == {"name": "psalm", "head_sha": "abc", "status": "in_progress"}


def test_update_patches_check_run_without_routing_keys() -> None:
    seen: list[httpx.Request] = []

    def handler(request: httpx.Request) -> httpx.Response:
        seen.append(request)
        return httpx.Response(200, json={"id": 77})

    payload = {"owner": "octo", "repo": "app", "check_run_id": 77, "conclusion": "neutral"}
    _run_with_transport(handler, lambda client: client.update(77, payload))

    (request,) = seen
    assert request.method == "PATCH"
    assert request.url.path == "/repos/octo/app/check-runs/77"
    assert json.loads(request.content) == {"conclusion": "neutral"}


def test_error_status_becomes_transport_error() -> None:
    def handler(request: httpx.Request) -> httpx.Response:
        return httpx.Response(422, json={"message": "Validation Failed"})

    with pytest.raises(PublishTransportError) as excinfo:
        _run_with_transport(handler, lambda client: client.create({"owner": "octo", "repo": "app"}))
    assert excinfo.value.status_code == 422
    assert excinfo.value.phase == "create"
    assert "Validation Failed" in str(excinfo.value)


def test_close_phase_is_reported_on_failure() -> None:
    def handler(request: httpx.Request) -> httpx.Response:
        return httpx.Response(500, text="upstream exploded")

    payload = {"owner": "octo", "repo": "app", "conclusion": "neutral"}
    with pytest.raises(PublishTransportError) as excinfo:
        _run_with_transport(handler, lambda client: client.update(5, payload))
    assert excinfo.value.phase == "close"
    assert excinfo.value.detail == "upstream exploded"


def test_network_error_becomes_transport_error() -> None:
    def handler(request: httpx.Request) -> httpx.Response:
        raise httpx.ConnectError("connection refused", request=request)

    with pytest.raises(PublishTransportError) as excinfo:
        _run_with_transport(handler, lambda client: client.update(5, {"owner": "octo", "repo": "app"}))
    assert excinfo.value.status_code is None
    assert excinfo.value.phase == "fill"


def test_create_requires_identifier_in_response() -> None:
    def handler(request: httpx.Request) -> httpx.Response:
        return httpx.Response(201, json={"status": "queued"})

    with pytest.raises(PublishTransportError, match="check run id"):
        _run_with_transport(handler, lambda client: client.create({"owner": "octo", "repo": "app"}))


def test_client_requires_context_manager() -> None:
    client = GitHubCheckRunClient("tok")
    with pytest.raises(RuntimeError):
        asyncio.run(client.create({"owner": "octo", "repo": "app"}))


def test_publisher_drives_client_over_http() -> None:
    requests: list[tuple[str, str, dict]] = []

    def handler(request: httpx.Request) -> httpx.Response:
        requests.append((request.method, request.url.path, json.loads(request.content)))
        return httpx.Response(201 if request.method == "POST" else 200, json={"id": 9})

    annotations = [
        Annotation(path="a.js", annotation_level=AnnotationLevel.NOTICE, start_line=n, end_line=n, message="m")
        for n in range(1, 121)
    ]
    metadata = ReportMetadata(owner="octo", repo="app", head_sha="abc", report_name="eslint", report_title="ESLint report")
    report = assemble_report(annotations, metadata)

    result = _run_with_transport(handler, lambda client: BatchPublisher(client).publish(report))

    assert result.calls == 4
    assert [method for method, _, _ in requests] == ["POST", "PATCH", "PATCH", "PATCH"]
    assert {path for _, path, _ in requests[1:]} == {"/repos/octo/app/check-runs/9"}
    assert [len(body["output"]["annotations"]) for _, _, body in requests] == [50, 50, 20, 0]
    assert requests[-1][2]["conclusion"] == "neutral"
