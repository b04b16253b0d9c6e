"""CLI entry point for podguid."""

import asyncio
import sys
from pathlib import Path
from typing import Annotated

import typer
from rich.console import Console
from rich.markup import escape
from rich.table import Table

from podguid import cli_list
from podguid.api.models import Ok
from podguid.browser.session import BrowserSession
from podguid.browser.state import Authenticated, PodcastSelected, Unauthenticated
from podguid.config.logging import setup_logging
from podguid.config.manager import ConfigManager
from podguid.config.schema import GlobalConfig
from podguid.ui import display, set_theme
from podguid.ui.prompts import UserCommand, parse_index, prompt_command
from podguid.utils.errors import PodguidError

app = typer.Typer(
    name="podguid",
    help="Browse Podigee podcasts and copy episode GUIDs",
    no_args_is_help=True,
)
app.add_typer(cli_list.app, name="list")
console = Console()


@app.callback()
def main(
    ctx: typer.Context,
    verbose: bool = typer.Option(
        False, "--verbose", "-v", help="Enable verbose (DEBUG) logging"
    ),
    log_file: Path | None = typer.Option(
        None, "--log-file", help="Write logs to file"
    ),
) -> None:
    """podguid - find the GUIDs of your Podigee episodes."""
    level = "WARNING"
    theme = "auto"
    try:
        config = ConfigManager().load_config()
        level = config.log_level
        theme = config.theme
    except PodguidError:
        # Reported by the command that needs the config
        pass

    setup_logging(verbose=verbose, log_file=log_file, level=level)
    set_theme(theme)


@app.command("version")
def show_version() -> None:
    """Show version information."""
    from podguid import __version__

    console.print(f"[bold cyan]podguid[/bold cyan] v{__version__}")


async def handle_browse_input(session: BrowserSession, answer: str) -> bool:
    """Apply one line of user input to the session.

    Args:
        session: Browser session
        answer: Stripped user input

    Returns:
        False when the user asked to quit, True otherwise
    """
    state = session.state
    command = answer.lower()

    if isinstance(state, Unauthenticated):
        # Every answer here is a key; Ctrl-D or Ctrl-C leaves the prompt
        if not answer:
            display.display_error("An API key is required.")
        else:
            session.submit_credential(answer)
        return True

    if command == UserCommand.QUIT:
        return False

    if command == UserCommand.LOGOUT:
        session.reset_credential()
        return True

    if command == UserCommand.RELOAD:
        if isinstance(state, PodcastSelected):
            session.select_podcast(state.podcast)
        else:
            session.submit_credential(state.credential)
        return True

    if command == UserCommand.BACK:
        if isinstance(state, PodcastSelected):
            session.reset_podcast()
        else:
            display.display_error("No podcast selected.")
        return True

    if isinstance(state, Authenticated) and isinstance(state.podcasts, Ok):
        index = parse_index(answer, len(state.podcasts.value))
        if index is not None:
            session.select_podcast(state.podcasts.value[index])
            return True

    if isinstance(state, PodcastSelected) and isinstance(state.episodes, Ok):
        index = parse_index(answer, len(state.episodes.value))
        if index is not None:
            await session.copy_guid(state.episodes.value[index])
            return True

    display.display_error(f"Unknown command: {answer}")
    return True


async def run_browser(session: BrowserSession, token: str | None = None) -> None:
    """Run the interactive browse loop until the user quits."""
    display.display_header()
    if token:
        session.submit_credential(token)

    while True:
        await session.settle()
        display.display_state(session.state, session.notification)
        display.display_commands(session.state)

        answer = await asyncio.to_thread(prompt_command, session.state)
        if answer is None:
            break
        if not await handle_browse_input(session, answer):
            break

    console.print("[dim]Bye.[/dim]")


@app.command("browse")
def browse_command(
    token: cli_list.TokenOption = None,
) -> None:
    """Browse podcasts and episodes interactively.

    Pick a podcast by its number, then pick an episode to copy its GUID.

    Examples:
        podguid browse

        podguid browse --token <key>
    """
    config = cli_list.load_config_or_exit()

    async def run() -> None:
        async with cli_list.create_client(config) as client:
            session = BrowserSession(client, notification_seconds=config.notification_seconds)
            await run_browser(session, token)

    try:
        asyncio.run(run())
    except KeyboardInterrupt:
        console.print("\n[dim]Bye.[/dim]")


@app.command("copy")
def copy_command(
    podcast_id: Annotated[int, typer.Argument(help="Podcast ID")],
    episode_id: Annotated[int, typer.Argument(help="Episode ID")],
    token: cli_list.TokenOption = None,
    print_only: Annotated[
        bool, typer.Option("--print", "-p", help="Print the GUID instead of copying it")
    ] = False,
) -> None:
    """Copy one episode's GUID to the clipboard.

    Examples:
        podguid copy 1234 98765 --token <key>

        podguid copy 1234 98765 --print
    """
    config = cli_list.load_config_or_exit()

    async def run_copy() -> None:
        async with cli_list.create_client(config) as client:
            session = BrowserSession(client, notification_seconds=config.notification_seconds)
            await cli_list.authenticate_or_exit(session, token, json_output=False)
            await cli_list.open_podcast_or_exit(session, podcast_id, json_output=False)

            episode = session.find_episode(episode_id)
            if episode is None:
                cli_list.fail(f"Episode {episode_id} not found in podcast {podcast_id}.", False)

            if print_only:
                print(episode.guid)
                return

            if not await session.copy_guid(episode):
                cli_list.fail("Could not copy to clipboard. Use --print instead.", False)

            display.display_notification(session.notification)
            console.print(f"[dim]{escape(episode.guid)}[/dim]", highlight=False)

    asyncio.run(run_copy())


@app.command("config")
def config_command(
    action: str = typer.Argument(..., help="Action: show or set <key> <value>"),
    key: str | None = typer.Argument(None, help="Config key (for 'set' action)"),
    value: str | None = typer.Argument(None, help="Config value (for 'set' action)"),
) -> None:
    """Manage podguid configuration.

    Actions:
        show: Display current configuration
        set:  Set a configuration value

    Examples:
        podguid config show

        podguid config set notification_seconds 5
    """
    try:
        manager = ConfigManager()

        if action == "show":
            config = manager.load_config()
            console.print("\n[bold]podguid Configuration[/bold]\n")

            table = Table(show_header=False, box=None)
            table.add_column("Key", style="cyan")
            table.add_column("Value", style="white")

            table.add_row("Config file", str(manager.config_file))
            table.add_row("", "")
            for field_name in GlobalConfig.model_fields:
                field_value = getattr(config, field_name)
                table.add_row(field_name, "—" if field_value is None else str(field_value))

            console.print(table)

        elif action == "set":
            if not key or value is None:
                console.print("[red]✗[/red] Usage: podguid config set <key> <value>")
                sys.exit(1)

            manager.set_value(key, value)
            console.print(
                f"[green]✓[/green] Set [cyan]{key}[/cyan] = [yellow]{value}[/yellow]"
            )

        else:
            console.print(f"[red]✗[/red] Unknown action: {action}")
            console.print("Valid actions: show, set")
            sys.exit(1)

    except PodguidError as e:
        console.print(f"[red]✗[/red] Error: {e}")
        sys.exit(1)


if __name__ == "__main__":
    app()
