# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.
"""GitHub REST API integration."""

from __future__ import annotations

from .client import GitHubCheckRunClient

__all__ = ["GitHubCheckRunClient"]
