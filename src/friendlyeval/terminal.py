"""ANSI styling for friendlyeval diagnostics.

Diagnostics go to stderr, so colour is on when stderr is a TTY. ``NO_COLOR``
turns it off and ``FORCE_COLOR`` turns it back on (https://no-color.org/).

Every styled fragment has a Role. Quoted source lines additionally get
their injection markers (``!!``, ``!!!``, ``:=``) picked out, since those
are what most rewrite diagnostics are about.
"""

from __future__ import annotations

import os
import re
import sys
from enum import Enum


class Role(Enum):
    """What a fragment of a diagnostic is. Values are SGR parameters."""

    CODE = "1;91"
    LOCATION = "36"
    GUTTER = "2"
    LINE_NUMBER = "33"
    SOURCE = "2"
    ERROR_SOURCE = "91"
    MARKER = "1;35"
    CARET = "1;91"
    HINT = "32"


_MARKERS = re.compile(r"!!!?|:=")

GUTTER = "     |"


def _should_use_colors() -> bool:
    if os.environ.get("FORCE_COLOR"):
        return True
    if os.environ.get("NO_COLOR"):
        return False
    return sys.stderr.isatty()


# Decided once at import; tests patch it.
_USE_COLORS = _should_use_colors()


def style(text: str, role: Role) -> str:
    """Wrap ``text`` in the SGR codes for ``role`` when colour is on."""
    if not _USE_COLORS or not text:
        return text
    return f"\033[{role.value}m{text}\033[0m"


def error_header(code: str | None, message: str) -> str:
    """``FE-REW-001: message``, or just the message without a code."""
    if code:
        return f"{style(code, Role.CODE)}: {message}"
    return message


def gutter() -> str:
    return style(GUTTER, Role.GUTTER)


def source_line(lineno: int, content: str, is_error: bool = False) -> str:
    """A numbered source line; the error line is marked with '>'.

    Example:
        >>> source_line(4, "  !!!value_as_name(x))", is_error=True)
        '>  4 |   !!!value_as_name(x))'  # without colour
    """
    number = style(f"{'>' if is_error else ' '}{lineno:>3}", Role.LINE_NUMBER)
    if not is_error:
        return f"{number} | {style(content, Role.SOURCE)}"
    parts: list[str] = []
    pos = 0
    for match in _MARKERS.finditer(content):
        parts.append(style(content[pos : match.start()], Role.ERROR_SOURCE))
        parts.append(style(match.group(), Role.MARKER))
        pos = match.end()
    parts.append(style(content[pos:], Role.ERROR_SOURCE))
    return f"{number} | {''.join(parts)}"


def caret_line(column: int, width: int = 1) -> str:
    """Gutter plus a ``^`` run under ``width`` characters from ``column``."""
    return f"{gutter()} {' ' * column}{style('^' * max(width, 1), Role.CARET)}"
