# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.

"""Helpers for mapping report paths onto repository-relative paths."""

from __future__ import annotations

from typing import Final

_POSIX_SEPARATOR: Final[str] = "/"
_WINDOWS_SEPARATOR: Final[str] = "\\"
_CURRENT_DIR_PREFIX: Final[str] = "./"


def workspace_prefix(root: str | None) -> str:
    """Return the prefix stripped from report paths for ``root``.

    Args:
        root: Workspace root supplied by the environment, if any.

    Returns:
        str: ``root`` terminated by a path separator, or an empty string
        when no workspace root is known.

    """

    if not root:
        return ""
    if root.endswith((_POSIX_SEPARATOR, _WINDOWS_SEPARATOR)):
        return root
    separator = _WINDOWS_SEPARATOR if _WINDOWS_SEPARATOR in root and _POSIX_SEPARATOR not in root else _POSIX_SEPARATOR
    return f"{root}{separator}"


def strip_prefix(path: str, prefix: str) -> str:
    """Return ``path`` without ``prefix`` when it starts with that exact prefix.

    Args:
        path: Absolute or repository-relative path taken from a report.
        prefix: Separator-terminated workspace prefix.

    Returns:
        str: Repository-relative path, or ``path`` unchanged when it does not
        start with ``prefix``.

    """

    if prefix and path.startswith(prefix):
        return path[len(prefix) :]
    return path


def relative_log_path(path: str, prefix: str) -> str:
    """Return a repository-relative path for a compiler log file reference.

    Compilers print paths relative to their working directory, which is the
    workspace root, so ``./`` segments are dropped after the prefix is removed.

    Args:
        path: File reference captured from the log line.
        prefix: Separator-terminated workspace prefix.

    Returns:
        str: Path relative to the workspace root.

    """

    candidate = strip_prefix(path.strip(), prefix)
    while candidate.startswith(_CURRENT_DIR_PREFIX):
        candidate = candidate[len(_CURRENT_DIR_PREFIX) :]
    return candidate


__all__ = ["relative_log_path", "strip_prefix", "workspace_prefix"]
