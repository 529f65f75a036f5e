# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.
"""Exception hierarchy shared by parsers, the publisher and the CLI."""

from __future__ import annotations


class CheckRunError(Exception):
    """Base class for every failure surfaced by checkrun."""


class ConfigError(CheckRunError):
    """Raised when configuration input is invalid."""


class UnknownFormatError(ConfigError):
    """Raised when a report format identifier is not recognised."""

    def __init__(self, raw: str, known: tuple[str, ...]) -> None:
        """Record the rejected identifier together with the supported ones.

        Args:
            raw: Format identifier supplied by the caller.
            known: Supported format identifiers.
        """

        super().__init__(f"unknown report format '{raw}' (expected one of: {', '.join(known)})")
        self.raw = raw
        self.known = known


class SourceReadError(CheckRunError):
    """Raised when a report source fails before signalling completion."""


class MalformedReportError(CheckRunError):
    """Raised when a report cannot be decoded or lacks required fields."""

    def __init__(self, report_format: str, detail: str) -> None:
        """Initialise the error with the offending format and a description.

        Args:
            report_format: Identifier of the format being parsed.
            detail: Human-readable description of the defect.
        """

        super().__init__(f"malformed {report_format} report: {detail}")
        self.report_format = report_format
        self.detail = detail


class PublishTransportError(CheckRunError):
    """Raised when a create or update call against the check run fails."""

    def __init__(self, phase: str, detail: str, *, status_code: int | None = None) -> None:
        """Initialise the error with the publish phase and transport details.

        Args:
            phase: Publish phase that failed (``create``, ``fill`` or ``close``).
            detail: Description of the transport failure.
            status_code: HTTP status code returned by the remote, when known.
        """

        suffix = f" (HTTP {status_code})" if status_code is not None else ""
        super().__init__(f"check run {phase} failed{suffix}: {detail}")
        self.phase = phase
        self.detail = detail
        self.status_code = status_code


__all__ = [
    "CheckRunError",
    "ConfigError",
    "MalformedReportError",
    "PublishTransportError",
    "SourceReadError",
    "UnknownFormatError",
]
