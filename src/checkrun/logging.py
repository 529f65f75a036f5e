# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.
"""Status lines printed to the workflow log through a rich console."""

from __future__ import annotations

import sys
from dataclasses import dataclass
from enum import Enum
from functools import lru_cache
from types import MappingProxyType
from typing import Final

from rich.console import Console
from rich.text import Text


class Tone(str, Enum):
    """Kinds of status line shown to the user."""

    INFO = "info"
    OK = "ok"
    WARN = "warn"
    FAIL = "fail"


@dataclass(frozen=True, slots=True)
class _ToneStyle:
    glyph: str
    style: str


_TONES: Final[MappingProxyType[Tone, _ToneStyle]] = MappingProxyType(
    {
        Tone.INFO: _ToneStyle("ℹ️ ", "cyan"),
        Tone.OK: _ToneStyle("✅ ", "green"),
        Tone.WARN: _ToneStyle("⚠️ ", "yellow"),
        Tone.FAIL: _ToneStyle("❌ ", "red"),
    },
)


def detect_tty() -> bool:
    """Return ``True`` when stdout appears to be backed by a terminal."""

    try:
        return sys.stdout.isatty()
    except (AttributeError, ValueError):
        return False


@lru_cache(maxsize=None)
def console_for(*, color: bool, emoji: bool, tty: bool) -> Console:
    """Return the shared console for one combination of presentation flags.

    Consoles write to whatever ``sys.stdout`` is at print time, so a cached
    console keeps working when the stream is swapped (test runners, CLI
    runners).

    Args:
        color: Whether ANSI styling is wanted.
        emoji: Whether rich may render emoji glyphs.
        tty: Whether stdout is a terminal.

    Returns:
        Console: Console configured for the flags.
    """

    styled = color and tty
    return Console(
        color_system="auto" if styled else None,
        force_terminal=tty,
        no_color=not styled,
        emoji=emoji,
        highlight=False,
        soft_wrap=True,
    )


def emit(tone: Tone, message: str, *, use_emoji: bool, use_color: bool | None = None) -> None:
    """Print ``message`` as one status line of the given ``tone``.

    Args:
        tone: Kind of status line, selecting glyph and colour.
        message: Text to print; rich markup is not interpreted.
        use_emoji: Whether the tone's glyph prefixes the line.
        use_color: Force colour on or off; defaults to colour on a terminal.
    """

    tty = detect_tty()
    color = tty if use_color is None else use_color
    spec = _TONES[tone]
    text = Text(f"{spec.glyph if use_emoji else ''}{message}")
    if color:
        text.stylize(spec.style)
    console_for(color=color, emoji=use_emoji, tty=tty).print(text)


__all__ = ["Tone", "console_for", "detect_tty", "emit"]
