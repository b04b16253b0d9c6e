"""Theme system for podguid CLI.

Provides centralized color definitions with dark/light mode support.

Usage:
    from podguid.ui import get_theme

    theme = get_theme()
    console.print(theme.success_text("Copied to clipboard"))
"""

import os
from dataclasses import dataclass
from enum import Enum
from typing import Literal


class ThemeMode(str, Enum):
    """Available theme modes."""

    LIGHT = "light"
    DARK = "dark"
    AUTO = "auto"


@dataclass(frozen=True)
class Theme:
    """Color theme for terminal output.

    All colors are rich-compatible color names.
    """

    mode: str

    # Status colors
    success: str
    error: str
    warning: str
    info: str

    # Semantic colors
    primary: str  # Titles, selected items
    muted: str  # Hints, masked key

    # Data colors
    data_id: str
    data_title: str
    data_guid: str

    # Table styling
    table_header: str
    table_border: str

    def success_text(self, text: str) -> str:
        """Format text with success color and checkmark."""
        return f"[{self.success}]✓[/{self.success}] {text}"

    def error_text(self, text: str) -> str:
        """Format text with error color and X mark."""
        return f"[{self.error}]✗[/{self.error}] {text}"

    def warning_text(self, text: str) -> str:
        """Format text with warning color and warning symbol."""
        return f"[{self.warning}]⚠[/{self.warning}] {text}"

    def info_text(self, text: str) -> str:
        """Format text with info color and arrow."""
        return f"[{self.info}]→[/{self.info}] {text}"

    def muted_text(self, text: str) -> str:
        return f"[{self.muted}]{text}[/{self.muted}]"

    def primary_text(self, text: str) -> str:
        return f"[{self.primary}]{text}[/{self.primary}]"


DARK_THEME = Theme(
    mode="dark",
    success="green",
    error="red",
    warning="yellow",
    info="cyan",
    primary="cyan",
    muted="dim",
    data_id="white",
    data_title="cyan",
    data_guid="magenta",
    table_header="bold cyan",
    table_border="dim",
)

LIGHT_THEME = Theme(
    mode="light",
    success="green",
    error="red",
    warning="dark_orange",  # Better contrast on light bg
    info="dark_cyan",
    primary="dark_cyan",
    muted="grey50",
    data_id="black",
    data_title="dark_cyan",
    data_guid="dark_magenta",
    table_header="bold dark_cyan",
    table_border="grey50",
)


def detect_terminal_theme() -> Literal["light", "dark"]:
    """Attempt to detect if terminal has light or dark background.

    Defaults to dark.
    """
    colorfgbg = os.environ.get("COLORFGBG", "")
    if colorfgbg:
        # Format is "foreground;background" where 15=white bg, 0=black bg
        parts = colorfgbg.split(";")
        if len(parts) >= 2:
            try:
                return "light" if int(parts[-1]) >= 7 else "dark"
            except ValueError:
                pass

    if os.environ.get("TERM_PROGRAM", "").lower() == "apple_terminal":
        return "light"

    if os.environ.get("PODGUID_THEME", "").lower() == "light":
        return "light"

    return "dark"


_current_theme: Theme | None = None


def set_theme(mode: ThemeMode | str) -> Theme:
    """Set and cache the current theme.

    Args:
        mode: Theme mode ('light', 'dark', or 'auto')

    Returns:
        The active Theme instance
    """
    global _current_theme

    if isinstance(mode, str):
        mode = ThemeMode(mode.lower())

    if mode == ThemeMode.AUTO:
        _current_theme = LIGHT_THEME if detect_terminal_theme() == "light" else DARK_THEME
    elif mode == ThemeMode.LIGHT:
        _current_theme = LIGHT_THEME
    else:
        _current_theme = DARK_THEME

    return _current_theme


def get_theme() -> Theme:
    """Get the current theme, auto-detecting if none was set."""
    if _current_theme is None:
        return set_theme(ThemeMode.AUTO)
    return _current_theme


def reset_theme() -> None:
    """Reset the theme cache, forcing re-detection on next access."""
    global _current_theme
    _current_theme = None
