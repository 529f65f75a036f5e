# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.
"""Asynchronous byte sources, collectors and line readers for report input."""

from __future__ import annotations

import asyncio
import codecs
import json
from collections.abc import AsyncIterable, AsyncIterator
from pathlib import Path
from typing import Final, TypeAlias, cast

from .core.models import JsonValue
from .errors import MalformedReportError, SourceReadError

ByteSource: TypeAlias = AsyncIterable[bytes]

DEFAULT_CHUNK_SIZE: Final[int] = 64 * 1024
_ENCODING: Final[str] = "utf-8"
_LINE_FEED: Final[str] = "\n"
_CARRIAGE_RETURN: Final[str] = "\r"


async def file_source(path: Path, *, chunk_size: int = DEFAULT_CHUNK_SIZE) -> AsyncIterator[bytes]:
    """Yield the contents of ``path`` in chunks without blocking the event loop.

    Args:
        path: Report file to read.
        chunk_size: Maximum number of bytes yielded per chunk.

    Yields:
        bytes: Consecutive chunks of the file.

    Raises:
        OSError: If the file cannot be opened or read.
    """

    handle = await asyncio.to_thread(path.open, "rb")
    try:
        while chunk := await asyncio.to_thread(handle.read, chunk_size):
            yield chunk
    finally:
        await asyncio.to_thread(handle.close)


async def bytes_source(data: bytes, *, chunk_size: int = DEFAULT_CHUNK_SIZE) -> AsyncIterator[bytes]:
    """Yield ``data`` in chunks, mirroring :func:`file_source` for in-memory input."""

    for offset in range(0, len(data), chunk_size):
        yield data[offset : offset + chunk_size]


async def collect_bytes(source: ByteSource) -> bytes:
    """Drain ``source`` into a single contiguous buffer.

    Args:
        source: Asynchronous iterable of byte chunks.

    Returns:
        bytes: Every byte produced by ``source`` once it is exhausted.

    Raises:
        SourceReadError: If the source fails before completion.
    """

    buffers: list[bytes] = []
    try:
        async for chunk in source:
            buffers.append(chunk)
    except OSError as exc:
        raise SourceReadError(f"failed to read report source: {exc}") from exc
    finally:
        await close_source(source)
    return b"".join(buffers)


async def iter_lines(source: ByteSource) -> AsyncIterator[str]:
    """Incrementally decode ``source`` and yield lines without terminators.

    Multi-byte characters split across chunks are decoded correctly. A
    trailing line terminator does not produce an additional empty line. The
    source is closed as soon as the reader stops.

    Args:
        source: Asynchronous iterable of UTF-8 encoded chunks.

    Yields:
        str: Each decoded line with ``\\n`` or ``\\r\\n`` removed.

    Raises:
        SourceReadError: If the source fails before completion.
    """

    decoder = codecs.getincrementaldecoder(_ENCODING)(errors="replace")
    pending = ""
    try:
        async for chunk in source:
            pending += decoder.decode(chunk)
            *complete, pending = pending.split(_LINE_FEED)
            for line in complete:
                yield line.removesuffix(_CARRIAGE_RETURN)
    except OSError as exc:
        raise SourceReadError(f"failed to read report source: {exc}") from exc
    finally:
        await close_source(source)
    pending += decoder.decode(b"", final=True)
    if pending:
        yield pending.removesuffix(_CARRIAGE_RETURN)


async def close_source(source: ByteSource) -> None:
    """Close ``source`` when it is an async generator, releasing the file it reads."""

    aclose = getattr(source, "aclose", None)
    if aclose is not None:
        await aclose()


def load_json(buffer: bytes, *, report_format: str) -> JsonValue:
    """Decode a complete JSON document collected from a report source.

    Args:
        buffer: Raw bytes of the report.
        report_format: Format identifier used in error messages.

    Returns:
        JsonValue: Decoded JSON payload.

    Raises:
        MalformedReportError: If the buffer is not valid UTF-8 JSON.
    """

    try:
        text = buffer.decode("utf-8-sig")
        return cast(JsonValue, json.loads(text))
    except UnicodeDecodeError as exc:
        raise MalformedReportError(report_format, f"report is not valid UTF-8: {exc}") from exc
    except json.JSONDecodeError as exc:
        raise MalformedReportError(report_format, f"invalid JSON at line {exc.lineno} column {exc.colno}: {exc.msg}") from exc


__all__ = [
    "ByteSource",
    "DEFAULT_CHUNK_SIZE",
    "bytes_source",
    "close_source",
    "collect_bytes",
    "file_source",
    "iter_lines",
    "load_json",
]
