"""Input handling for the interactive browser.

Input is read synchronously; the browse loop runs these functions in a
worker thread so the event loop keeps serving timers and fetches.
"""

from __future__ import annotations

from rich.console import Console
from rich.prompt import Prompt

from podguid.browser.state import SelectionState, Unauthenticated

# Shared console instance
console = Console()


class UserCommand:
    """Single-letter commands in the browse loop."""

    BACK = "b"
    LOGOUT = "l"
    RELOAD = "r"
    QUIT = "q"

    ALL_COMMANDS = [BACK, LOGOUT, RELOAD, QUIT]


def prompt_command(state: SelectionState) -> str | None:
    """Ask the user for the next command.

    While unauthenticated the input is the API key and is not echoed.

    Args:
        state: Current selection state (decides what is asked)

    Returns:
        The stripped input, or None if the user aborted (Ctrl-C / Ctrl-D)
    """
    try:
        if isinstance(state, Unauthenticated):
            answer = Prompt.ask("[cyan]Podigee API Key[/cyan]", password=True, console=console)
        else:
            answer = Prompt.ask("[cyan]>[/cyan]", console=console)
    except (EOFError, KeyboardInterrupt):
        console.print()
        return None

    return answer.strip()


def parse_index(answer: str, count: int) -> int | None:
    """Parse a 1-based list position.

    Args:
        answer: User input
        count: Number of items in the list

    Returns:
        0-based index, or None if the input is not a valid position

    Example:
        >>> parse_index("2", 3)
        1
        >>> parse_index("7", 3) is None
        True
    """
    if not answer.isdecimal():
        return None
    position = int(answer)
    if not 1 <= position <= count:
        return None
    return position - 1
