"""CLI commands for listing resources.

This module provides the `podguid list` subcommand group for one-shot
listings of podcasts and episodes.
"""

import asyncio
import json
import logging
import sys
from typing import Annotated, NoReturn

import typer
from rich.console import Console
from rich.progress import Progress, SpinnerColumn, TextColumn

from podguid.api.client import PodigeeClient
from podguid.api.models import Err, Ok
from podguid.browser.session import BrowserSession
from podguid.browser.state import Authenticated, PodcastSelected, Unauthenticated
from podguid.config.manager import ConfigManager
from podguid.config.schema import GlobalConfig
from podguid.ui import display
from podguid.utils.errors import PodguidError

logger = logging.getLogger(__name__)

TOKEN_ENV_VAR = "PODIGEE_API_KEY"

app = typer.Typer(
    name="list",
    help="List podcasts and episodes of a Podigee account",
    no_args_is_help=True,
)
console = Console()

TokenOption = Annotated[
    str | None,
    typer.Option(
        "--token",
        "-t",
        envvar=TOKEN_ENV_VAR,
        help=f"Podigee API key (or set {TOKEN_ENV_VAR})",
        show_default=False,
    ),
]
JsonOption = Annotated[bool, typer.Option("--json", "-j", help="Output as JSON")]


def load_config_or_exit() -> GlobalConfig:
    """Load configuration, exiting with an error message if it is invalid."""
    try:
        return ConfigManager().load_config()
    except PodguidError as e:
        console.print(f"[red]✗[/red] {e}")
        sys.exit(1)


def create_client(config: GlobalConfig) -> PodigeeClient:
    """Build an API client from configuration."""
    return PodigeeClient(
        base_url=config.api_base_url,
        timeout=config.request_timeout_seconds,
    )


def fail(message: str, json_output: bool) -> NoReturn:
    """Report a failure and exit with status 1."""
    if json_output:
        print(json.dumps({"error": message}, indent=2))
    else:
        display.display_error(message)
    sys.exit(1)


async def authenticate_or_exit(
    session: BrowserSession, token: str | None, json_output: bool
) -> Authenticated:
    """Submit the API key and wait for podcasts, exiting on any failure."""
    if json_output:
        state = await session.authenticate(token or "")
    else:
        with Progress(
            SpinnerColumn(),
            TextColumn("[progress.description]{task.description}"),
            console=console,
            transient=True,
        ) as progress:
            progress.add_task("Loading podcasts...", total=None)
            state = await session.authenticate(token or "")

    if isinstance(state, Unauthenticated):
        fail(f"An API key is required. Use --token or set {TOKEN_ENV_VAR}.", json_output)
    assert isinstance(state, Authenticated)

    if isinstance(state.podcasts, Err):
        fail(display.describe_error(state.podcasts), json_output)
    return state


async def open_podcast_or_exit(
    session: BrowserSession, podcast_id: int, json_output: bool
) -> PodcastSelected:
    """Select a podcast by id and wait for its episodes, exiting on any failure."""
    podcast = session.find_podcast(podcast_id)
    if podcast is None:
        fail(f"Podcast {podcast_id} not found in this account.", json_output)

    if json_output:
        state = await session.open_podcast(podcast)
    else:
        with Progress(
            SpinnerColumn(),
            TextColumn("[progress.description]{task.description}"),
            console=console,
            transient=True,
        ) as progress:
            progress.add_task("Loading episodes...", total=None)
            state = await session.open_podcast(podcast)

    assert isinstance(state, PodcastSelected)
    if isinstance(state.episodes, Err):
        fail(display.describe_error(state.episodes), json_output)
    return state


@app.command("podcasts")
def list_podcasts(
    token: TokenOption = None,
    json_output: JsonOption = False,
) -> None:
    """List all podcasts of the account.

    Examples:
        podguid list podcasts --token <key>

        PODIGEE_API_KEY=<key> podguid list podcasts --json
    """
    config = load_config_or_exit()

    async def run_podcasts() -> None:
        async with create_client(config) as client:
            session = BrowserSession(client, notification_seconds=config.notification_seconds)
            state = await authenticate_or_exit(session, token, json_output)
            assert isinstance(state.podcasts, Ok)
            podcasts = state.podcasts.value

            if json_output:
                result = {
                    "podcasts": [podcast.model_dump() for podcast in podcasts],
                    "total": len(podcasts),
                }
                print(json.dumps(result, indent=2))
                return

            display.display_podcasts(state.podcasts)
            if podcasts:
                console.print(f"\n[dim]Total: {len(podcasts)} podcast(s)[/dim]")
                console.print("\n[bold]To list episodes:[/bold]")
                console.print(f"  podguid list episodes {podcasts[0].id}")

    asyncio.run(run_podcasts())


@app.command("episodes")
def list_episodes(
    podcast_id: Annotated[int, typer.Argument(help="Podcast ID (see `podguid list podcasts`)")],
    token: TokenOption = None,
    json_output: JsonOption = False,
) -> None:
    """List episodes of one podcast with their GUIDs.

    Examples:
        podguid list episodes 1234 --token <key>

        podguid list episodes 1234 --json
    """
    config = load_config_or_exit()

    async def run_episodes() -> None:
        async with create_client(config) as client:
            session = BrowserSession(client, notification_seconds=config.notification_seconds)
            await authenticate_or_exit(session, token, json_output)
            state = await open_podcast_or_exit(session, podcast_id, json_output)
            assert isinstance(state.episodes, Ok)
            episodes = state.episodes.value

            if json_output:
                result = {
                    "podcast": state.podcast.model_dump(),
                    "episodes": [episode.model_dump() for episode in episodes],
                    "total": len(episodes),
                }
                print(json.dumps(result, indent=2))
                return

            display.display_selected("Podcast", state.podcast.title)
            display.display_episodes(state.episodes)
            if episodes:
                console.print(f"\n[dim]Total: {len(episodes)} episode(s)[/dim]")

    asyncio.run(run_episodes())
