# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.
"""GitHub check run client built on top of httpx."""

from __future__ import annotations

import logging
from collections.abc import Mapping
from types import TracebackType
from typing import Final

import httpx

from ..config import DEFAULT_API_URL
from ..core.models import JsonValue
from ..errors import PublishTransportError
from ..reporting.publisher import PublishPhase

LOGGER = logging.getLogger(__name__)

API_VERSION: Final[str] = "2022-11-28"
USER_AGENT: Final[str] = "checkrun"
DEFAULT_TIMEOUT: Final[float] = 30.0
_ROUTING_KEYS: Final[frozenset[str]] = frozenset({"owner", "repo", "check_run_id"})
_MAX_ERROR_DETAIL: Final[int] = 500


def _request_body(payload: Mapping[str, JsonValue]) -> dict[str, JsonValue]:
    """Drop the keys routed into the URL from ``payload``."""

    return {key: value for key, value in payload.items() if key not in _ROUTING_KEYS}


def _route(payload: Mapping[str, JsonValue], phase: PublishPhase) -> tuple[str, str]:
    owner = payload.get("owner")
    repo = payload.get("repo")
    if not isinstance(owner, str) or not isinstance(repo, str):
        raise PublishTransportError(phase.value, "payload is missing 'owner'/'repo'")
    return owner, repo


def _error_detail(response: httpx.Response) -> str:
    """Return the API error message, falling back to the raw body."""

    try:
        body = response.json()
    except ValueError:
        return response.text[:_MAX_ERROR_DETAIL] or response.reason_phrase
    if isinstance(body, dict) and isinstance(body.get("message"), str):
        return body["message"]
    return response.text[:_MAX_ERROR_DETAIL]


class GitHubCheckRunClient:
    """Create and update check runs through the GitHub REST API.

    The client is an async context manager. A caller-supplied
    :class:`httpx.AsyncClient` is used as-is and left open on exit; otherwise
    a client is created on entry and closed on exit.
    """

    def __init__(
        self,
        token: str,
        *,
        api_url: str = DEFAULT_API_URL,
        client: httpx.AsyncClient | None = None,
        timeout: float = DEFAULT_TIMEOUT,
    ) -> None:
        """Configure the client for one repository host.

        Args:
            token: Installation or personal access token sent as a bearer token.
            api_url: REST API root, e.g. a GitHub Enterprise ``/api/v3`` URL.
            client: Pre-configured HTTP client to reuse instead of creating one.
            timeout: Per-request timeout in seconds for a client created on entry.
        """

        self._token = token
        self._api_url = api_url.rstrip("/")
        self._client = client
        self._owns_client = client is None
        self._timeout = timeout

    @property
    def headers(self) -> dict[str, str]:
        """Return the headers sent with every request."""

        return {
            "Accept": "application/vnd.github+json",
            "Authorization": f"Bearer {self._token}",
            "User-Agent": USER_AGENT,
            "X-GitHub-Api-Version": API_VERSION,
        }

    async def __aenter__(self) -> GitHubCheckRunClient:
        if self._client is None:
            self._client = httpx.AsyncClient(timeout=self._timeout)
        return self

    async def __aexit__(
        self,
        exc_type: type[BaseException] | None,
        exc: BaseException | None,
        traceback: TracebackType | None,
    ) -> None:
        if self._owns_client and self._client is not None:
            await self._client.aclose()
            self._client = None

    async def create(self, payload: Mapping[str, JsonValue]) -> int:
        """Create a check run and return its identifier.

        Raises:
            PublishTransportError: If the request fails or the response lacks an ``id``.
        """

        owner, repo = _route(payload, PublishPhase.CREATE)
        response = await self._send(PublishPhase.CREATE, "POST", f"/repos/{owner}/{repo}/check-runs", payload)
        try:
            body = response.json()
        except ValueError as exc:
            raise PublishTransportError(PublishPhase.CREATE.value, "response is not JSON") from exc
        check_run_id = body.get("id") if isinstance(body, dict) else None
        if not isinstance(check_run_id, int) or isinstance(check_run_id, bool):
            raise PublishTransportError(PublishPhase.CREATE.value, "response does not carry a check run id")
        return check_run_id

    async def update(self, check_run_id: int, payload: Mapping[str, JsonValue]) -> None:
        """Update the check run identified by ``check_run_id``.

        Raises:
            PublishTransportError: If the request fails.
        """

        phase = PublishPhase.CLOSE if "conclusion" in payload else PublishPhase.FILL
        owner, repo = _route(payload, phase)
        await self._send(phase, "PATCH", f"/repos/{owner}/{repo}/check-runs/{check_run_id}", payload)

    async def _send(
        self,
        phase: PublishPhase,
        method: str,
        path: str,
        payload: Mapping[str, JsonValue],
    ) -> httpx.Response:
        if self._client is None:
            raise RuntimeError("GitHubCheckRunClient must be used as an async context manager")
        url = f"{self._api_url}{path}"
        LOGGER.debug("%s %s (%s)", method, url, phase.value)
        try:
            response = await self._client.request(method, url, json=_request_body(payload), headers=self.headers)
        except httpx.HTTPError as exc:
            raise PublishTransportError(phase.value, str(exc) or type(exc).__name__) from exc
        if response.is_error:
            raise PublishTransportError(phase.value, _error_detail(response), status_code=response.status_code)
        return response


__all__ = ["API_VERSION", "GitHubCheckRunClient"]
