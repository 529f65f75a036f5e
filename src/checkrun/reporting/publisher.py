# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.
"""Publish a report to a check run in annotation batches.

The check run API accepts at most fifty annotations per request, so a report
is streamed as one ``create`` call carrying the first batch, one ``update``
per further batch while the run stays ``in_progress``, and a final ``update``
that sets the conclusion with an empty annotation list. Calls are issued one
at a time; the next batch is only sent once the previous call returned, which
keeps annotations in report order on the remote side.
"""

from __future__ import annotations

import logging
from collections.abc import Mapping, Sequence
from dataclasses import dataclass
from enum import Enum
from typing import Final, Protocol, runtime_checkable

from ..core.models import Annotation, CheckStatus, JsonValue, Report
from ..core.serialization import serialize_output
from ..errors import ConfigError

LOGGER = logging.getLogger(__name__)

MAX_ANNOTATIONS_PER_CALL: Final[int] = 50


class PublishPhase(str, Enum):
    """Phases of the create, fill, close publish protocol."""

    CREATE = "create"
    FILL = "fill"
    CLOSE = "close"


@runtime_checkable
class CheckRunClient(Protocol):
    """Remote operations required to publish a check run."""

    async def create(self, payload: Mapping[str, JsonValue]) -> int:
        """Create a check run and return its identifier.

        Raises:
            PublishTransportError: If the remote call fails.
        """
        ...

    async def update(self, check_run_id: int, payload: Mapping[str, JsonValue]) -> None:
        """Apply ``payload`` to the check run identified by ``check_run_id``.

        Raises:
            PublishTransportError: If the remote call fails.
        """
        ...


@dataclass(frozen=True, slots=True)
class PublishResult:
    """Outcome of a completed publication."""

    check_run_id: int
    calls: int
    annotations_sent: int


def chunk_annotations(annotations: Sequence[Annotation], size: int) -> list[tuple[Annotation, ...]]:
    """Partition ``annotations`` into consecutive batches of at most ``size``.

    Args:
        annotations: Ordered annotations to partition.
        size: Maximum batch length.

    Returns:
        list[tuple[Annotation, ...]]: Order-preserving batches; empty when
        ``annotations`` is empty.

    Raises:
        ConfigError: If ``size`` is not positive.
    """

    if size < 1:
        raise ConfigError(f"batch size must be positive, got {size}")
    return [tuple(annotations[start : start + size]) for start in range(0, len(annotations), size)]


def create_payload(report: Report, annotations: Sequence[Annotation]) -> dict[str, JsonValue]:
    """Build the payload opening the check run with its first batch."""

    return {
        "owner": report.owner,
        "repo": report.repo,
        "name": report.name,
        "head_sha": report.head_sha,
        "status": CheckStatus.IN_PROGRESS.value,
        "output": serialize_output(report.output, annotations),
    }


def fill_payload(report: Report, check_run_id: int, annotations: Sequence[Annotation]) -> dict[str, JsonValue]:
    """Build the payload appending one further batch to an open check run."""

    return {
        "owner": report.owner,
        "repo": report.repo,
        "check_run_id": check_run_id,
        "status": CheckStatus.IN_PROGRESS.value,
        "output": serialize_output(report.output, annotations),
    }


def close_payload(report: Report, check_run_id: int) -> dict[str, JsonValue]:
    """Build the payload concluding the check run."""

    return {
        "owner": report.owner,
        "repo": report.repo,
        "check_run_id": check_run_id,
        "conclusion": report.conclusion.value,
        "output": serialize_output(report.output, ()),
    }


@runtime_checkable
class PublishObserver(Protocol):
    """Receives progress of a publication, e.g. to report it to the user."""

    def batch_sent(self, check_run_id: int, sent: int, total: int) -> None:
        """Called after each create or fill call succeeds."""
        ...

    def publication_incomplete(self, check_run_id: int, sent: int, total: int, error: BaseException) -> None:
        """Called when a fill call failed and the run is about to be closed early."""
        ...

    def close_failed(self, check_run_id: int, error: BaseException) -> None:
        """Called when closing the run after a failed fill also fails."""
        ...


@dataclass(slots=True)
class BatchPublisher:
    """Stream a :class:`Report` to a check run through an injected client."""

    client: CheckRunClient
    batch_size: int = MAX_ANNOTATIONS_PER_CALL
    observer: PublishObserver | None = None

    def __post_init__(self) -> None:
        if not 1 <= self.batch_size <= MAX_ANNOTATIONS_PER_CALL:
            raise ConfigError(
                f"batch size must be between 1 and {MAX_ANNOTATIONS_PER_CALL}, got {self.batch_size}",
            )

    async def publish(self, report: Report) -> PublishResult:
        """Create, fill and close a check run for ``report``.

        A failed create is raised immediately. Once the run exists, any
        failure during fill still leads to a close attempt before the fill
        error is raised, so the run does not stay ``in_progress`` with a
        partial annotation set.

        Args:
            report: Report whose annotations are published.

        Returns:
            PublishResult: Remote identifier plus call and annotation counts.

        Raises:
            PublishTransportError: If a remote call fails.
        """

        total = len(report.annotations)
        batches = chunk_annotations(report.annotations, self.batch_size)
        first: tuple[Annotation, ...] = batches[0] if batches else ()
        check_run_id = await self.client.create(create_payload(report, first))
        calls = 1
        sent = len(first)
        self._batch_sent(check_run_id, sent, total)
        try:
            for batch in batches[1:]:
                await self.client.update(check_run_id, fill_payload(report, check_run_id, batch))
                calls += 1
                sent += len(batch)
                self._batch_sent(check_run_id, sent, total)
        except Exception as exc:
            await self._close_after_failure(report, check_run_id, sent, exc)
            raise
        await self.client.update(check_run_id, close_payload(report, check_run_id))
        calls += 1
        LOGGER.debug("closed check run %s after %d calls", check_run_id, calls)
        return PublishResult(check_run_id=check_run_id, calls=calls, annotations_sent=sent)

    def _batch_sent(self, check_run_id: int, sent: int, total: int) -> None:
        LOGGER.debug("check run %s: sent %d/%d annotations", check_run_id, sent, total)
        if self.observer is not None:
            self.observer.batch_sent(check_run_id, sent, total)

    async def _close_after_failure(self, report: Report, check_run_id: int, sent: int, error: Exception) -> None:
        total = len(report.annotations)
        LOGGER.debug("check run %s failed after %d/%d annotations: %r", check_run_id, sent, total, error)
        if self.observer is not None:
            self.observer.publication_incomplete(check_run_id, sent, total, error)
        try:
            await self.client.update(check_run_id, close_payload(report, check_run_id))
        except Exception as close_error:
            # The fill error is re-raised by the caller; the close error is only reported.
            LOGGER.debug("closing check run %s failed: %r", check_run_id, close_error)
            if self.observer is not None:
                self.observer.close_failed(check_run_id, close_error)


__all__ = [
    "BatchPublisher",
    "CheckRunClient",
    "MAX_ANNOTATIONS_PER_CALL",
    "PublishObserver",
    "PublishPhase",
    "PublishResult",
    "chunk_annotations",
    "close_payload",
    "create_payload",
    "fill_payload",
]
