"""Rich terminal rendering of the browser state.

All display functions use a shared Console instance for consistent output.
"""

from __future__ import annotations

from rich.console import Console
from rich.markup import escape
from rich.panel import Panel
from rich.table import Table

from podguid.api.errors import NetworkError
from podguid.api.models import ApiError, Episode, Err, Podcast, Result
from podguid.browser.notifications import Notification
from podguid.browser.state import (
    Authenticated,
    PodcastSelected,
    SelectionState,
    Unauthenticated,
)
from podguid.ui.theme import get_theme
from podguid.utils.display import mask_credential

# Shared console instance for all display functions
console = Console()


def describe_error(err: Err) -> str:
    """Render a failed result as one line of user-facing text.

    API errors are shown verbatim; network failures get a generic message.
    """
    error = err.error
    if isinstance(error, ApiError):
        text = f"API error {error.code}: {error.message}"
        if error.reason:
            text += f" ({error.reason})"
        return text
    if isinstance(error, NetworkError):
        return f"Could not reach the Podigee API: {error}"
    return str(error)


def display_header() -> None:
    """Display the application title."""
    theme = get_theme()
    console.print(
        Panel(
            theme.primary_text("[bold]Podigee GUID Browser[/bold]"),
            border_style=theme.table_border,
            expand=False,
        )
    )


def display_error(message: str) -> None:
    """Display an error line."""
    console.print(get_theme().error_text(escape(message)))


def display_selected(label: str, value: str) -> None:
    """Display a selected item with a hint that it can be reset."""
    theme = get_theme()
    console.print(f"[bold]{label}:[/bold] {escape(value)} {theme.muted_text('×')}")


def display_podcasts(result: Result[list[Podcast]] | None) -> None:
    """Display the podcast list, its loading state, or its error.

    Args:
        result: Podcast fetch result, or None while loading
    """
    theme = get_theme()

    if result is None:
        console.print(theme.muted_text("Loading podcasts…"))
        return
    if isinstance(result, Err):
        display_error(describe_error(result))
        return
    if not result.value:
        console.print(theme.warning_text("This account has no podcasts."))
        return

    table = Table(
        title="[bold]Podcasts[/bold]",
        header_style=theme.table_header,
        border_style=theme.table_border,
    )
    table.add_column("#", justify="right", style=theme.muted)
    table.add_column("ID", justify="right", style=theme.data_id)
    table.add_column("Title", style=theme.data_title)

    for index, podcast in enumerate(result.value, start=1):
        table.add_row(str(index), str(podcast.id), escape(podcast.title))

    console.print(table)


def display_episodes(result: Result[list[Episode]] | None) -> None:
    """Display the episode table (ID, Title, GUID), its loading state, or its error.

    Args:
        result: Episode fetch result, or None while loading
    """
    theme = get_theme()

    if result is None:
        console.print(theme.muted_text("Loading episodes…"))
        return
    if isinstance(result, Err):
        display_error(describe_error(result))
        return
    if not result.value:
        console.print(theme.warning_text("This podcast has no episodes."))
        return

    table = Table(
        title="[bold]Episodes[/bold]",
        header_style=theme.table_header,
        border_style=theme.table_border,
    )
    table.add_column("#", justify="right", style=theme.muted)
    table.add_column("ID", justify="right", style=theme.data_id)
    table.add_column("Title", style=theme.data_title)
    table.add_column("GUID", style=theme.data_guid, no_wrap=True)

    for index, episode in enumerate(result.value, start=1):
        table.add_row(str(index), str(episode.id), escape(episode.title), escape(episode.guid))

    console.print(table)


def display_notification(notification: Notification | None) -> None:
    """Display the live notification, if any."""
    if notification is None:
        return
    console.print(get_theme().success_text(escape(notification.text)))


def display_state(state: SelectionState, notification: Notification | None = None) -> None:
    """Render the full browser state.

    Args:
        state: Current selection state
        notification: Live notification to show below the state
    """
    if isinstance(state, Unauthenticated):
        console.print(get_theme().muted_text("Not authenticated."))
    elif isinstance(state, Authenticated):
        display_selected("API-Key", mask_credential(state.credential))
        display_podcasts(state.podcasts)
    elif isinstance(state, PodcastSelected):
        display_selected("API-Key", mask_credential(state.credential))
        display_selected("Podcast", state.podcast.title)
        display_episodes(state.episodes)

    display_notification(notification)


def display_commands(state: SelectionState) -> None:
    """Display the commands available in the current state."""
    theme = get_theme()
    if isinstance(state, PodcastSelected):
        hint = "number: copy GUID · b: back to podcasts · r: reload · l: log out · q: quit"
    elif isinstance(state, Authenticated):
        hint = "number: open podcast · l: log out · r: reload · q: quit"
    else:
        hint = "enter your Podigee API key · Ctrl-D: quit"
    console.print(theme.muted_text(hint))
