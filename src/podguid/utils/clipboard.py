"""Clipboard sinks.

The browser only needs one operation from a clipboard: write a string and
report whether that worked. ``SystemClipboard`` shells out to the platform's
clipboard tool; ``MemoryClipboard`` keeps the value in process for tests and
dry runs.
"""

import asyncio
import logging
import shutil
import sys
from typing import Protocol

from podguid.utils.errors import ClipboardError

logger = logging.getLogger(__name__)

# Candidate commands per platform, tried in order
CLIPBOARD_COMMANDS: dict[str, list[list[str]]] = {
    "darwin": [["pbcopy"]],
    "win32": [["clip"]],
    "linux": [
        ["wl-copy"],
        ["xclip", "-selection", "clipboard"],
        ["xsel", "--clipboard", "--input"],
    ],
}


class ClipboardSink(Protocol):
    """Anything that can receive text for the clipboard."""

    async def write_text(self, text: str) -> None:
        """Write text to the clipboard.

        Raises:
            ClipboardError: If the write did not complete
        """
        ...


def get_clipboard_command(platform: str | None = None) -> list[str] | None:
    """Find the clipboard command available on this machine.

    Args:
        platform: Platform identifier (defaults to ``sys.platform``)

    Returns:
        Command argv, or None if no supported tool is installed
    """
    platform = platform or sys.platform
    key = "linux" if platform.startswith("linux") else platform

    for command in CLIPBOARD_COMMANDS.get(key, []):
        if shutil.which(command[0]):
            return command
    return None


class SystemClipboard:
    """Clipboard backed by the platform's command-line clipboard tool."""

    def __init__(self, command: list[str] | None = None) -> None:
        """Initialize system clipboard.

        Args:
            command: Explicit command to pipe text into (default: auto-detect)
        """
        self.command = command

    async def write_text(self, text: str) -> None:
        command = self.command or get_clipboard_command()
        if command is None:
            raise ClipboardError(
                f"No clipboard tool found for platform '{sys.platform}'"
            )

        try:
            process = await asyncio.create_subprocess_exec(
                *command,
                stdin=asyncio.subprocess.PIPE,
                stdout=asyncio.subprocess.DEVNULL,
                stderr=asyncio.subprocess.PIPE,
            )
            _, stderr = await process.communicate(text.encode("utf-8"))
        except OSError as e:
            raise ClipboardError(f"Failed to run {command[0]}: {e}") from e

        if process.returncode != 0:
            detail = stderr.decode("utf-8", errors="replace").strip()
            raise ClipboardError(
                f"{command[0]} exited with status {process.returncode}: {detail}"
            )

        logger.debug(f"Copied {len(text)} characters with {command[0]}")


class MemoryClipboard:
    """In-process clipboard that remembers every value written to it."""

    def __init__(self) -> None:
        self.history: list[str] = []

    @property
    def text(self) -> str | None:
        """Most recently written value."""
        return self.history[-1] if self.history else None

    async def write_text(self, text: str) -> None:
        self.history.append(text)
