"""Terminal color helpers for diagnostics.

ANSI colors with TTY detection and NO_COLOR / FORCE_COLOR support.
"""

from __future__ import annotations

import os
import re
import sys
from typing import Literal

_COLORS = {
    "reset": "\033[0m",
    "bold": "\033[1m",
    "dim": "\033[2m",
    "red": "\033[31m",
    "green": "\033[32m",
    "yellow": "\033[33m",
    "cyan": "\033[36m",
    "bright_red": "\033[91m",
    "bright_yellow": "\033[93m",
}

ColorName = Literal[
    "reset", "bold", "dim", "red", "green", "yellow", "cyan", "bright_red", "bright_yellow"
]

_ANSI_ESCAPE = re.compile(r"\x1B(?:[@-Z\\-_]|\[[0-?]*[ -/]*[@-~])")


def _should_use_colors() -> bool:
    """Check if the terminal supports colors and the user allows them.

    Respects:
        - NO_COLOR environment variable (https://no-color.org/)
        - FORCE_COLOR environment variable (overrides NO_COLOR)
        - sys.stdout.isatty() for TTY detection
    """
    if os.environ.get("FORCE_COLOR"):
        return True
    if os.environ.get("NO_COLOR"):
        return False
    return sys.stdout.isatty()


_USE_COLORS = _should_use_colors()


def supports_color() -> bool:
    """Return True if color output is enabled."""
    return _USE_COLORS


def colorize(text: str, *colors: ColorName) -> str:
    """Wrap ``text`` in ANSI codes, or return it unchanged without color support.

    Example:
        >>> colorize("Error", "red", "bold")
        '\033[31m\033[1mError\033[0m'  # if colors supported
        'Error'  # if colors not supported
    """
    if not _USE_COLORS or not colors:
        return text
    prefix = "".join(_COLORS.get(color, "") for color in colors)
    if not prefix:
        return text
    return f"{prefix}{text}{_COLORS['reset']}"


def strip_colors(text: str) -> str:
    """Remove ANSI color codes from text."""
    return _ANSI_ESCAPE.sub("", text)


def error_code(text: str) -> str:
    """Color text as an error code (bright red + bold)."""
    return colorize(text, "bright_red", "bold")


def warning_code(text: str) -> str:
    """Color text as a warning code (bright yellow + bold)."""
    return colorize(text, "bright_yellow", "bold")


def line_number(text: str) -> str:
    return colorize(text, "yellow")


def error_line(text: str) -> str:
    return colorize(text, "bright_red")


def dim_text(text: str) -> str:
    return colorize(text, "dim")


def format_source_line(lineno: int, content: str, is_error: bool = False) -> str:
    """Format one source line for a snippet, marking the error line with '>'.

    Example:
        >>> format_source_line(42, "{% if x %}", is_error=True)
        '\033[33m> 42\033[0m | \033[91m{% if x %}\033[0m'
    """
    marker = ">" if is_error else " "
    num_colored = line_number(f"{marker}{lineno:>3}")
    content_colored = error_line(content) if is_error else dim_text(content)
    return f"{num_colored} | {content_colored}"
