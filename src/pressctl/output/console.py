"""Rich Console factory and theme for pressctl output.

Creates Console instances that render to a StringIO buffer, preserving
the ``format_result() -> str`` contract.  In non-TTY environments
(tests, pipes) Rich automatically disables color codes.
"""

from __future__ import annotations

from io import StringIO

from rich.console import Console
from rich.theme import Theme

PRESS_THEME = Theme(
    {
        "press.ok": "bold green",
        "press.error": "bold red",
        "press.warning": "bold yellow",
        "press.op": "bold cyan",
        "press.key": "dim",
        "press.id": "bold blue",
        "press.status.publish": "green",
        "press.status.draft": "yellow",
        "press.marker": "bold red",
    }
)

_STATUS_STYLES: dict[str, str] = {
    "publish": "press.status.publish",
    "draft": "press.status.draft",
}


def create_console(*, no_color: bool = False, width: int | None = None) -> Console:
    """Create a Console that renders to a StringIO buffer.

    Args:
        no_color: Disable ANSI escape codes (used in tests).
        width: Override terminal width (useful for consistent test output).
    """
    return Console(
        file=StringIO(),
        theme=PRESS_THEME,
        no_color=no_color,
        highlight=False,
        width=width or 120,
    )


def get_output(console: Console) -> str:
    """Extract rendered text from a StringIO-backed Console."""
    assert isinstance(console.file, StringIO)
    return console.file.getvalue()


def style_for_status(status: str) -> str:
    """Return the theme style name for a record status."""
    return _STATUS_STYLES.get(status, "")
