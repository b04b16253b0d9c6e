"""Browser session orchestrating state transitions, fetches and copying."""

import asyncio
import itertools
import logging
from collections.abc import Callable

from podguid.api.client import PodigeeClient
from podguid.api.errors import TransportError
from podguid.api.models import Episode, Err, Ok, Podcast
from podguid.browser.notifications import (
    DEFAULT_NOTIFICATION_SECONDS,
    Notification,
    NotificationController,
)
from podguid.browser.state import (
    Effect,
    EpisodesLoaded,
    Event,
    FetchEpisodes,
    FetchPodcasts,
    PodcastSelected,
    PodcastsLoaded,
    ResetCredential,
    ResetPodcast,
    SelectionState,
    SelectPodcast,
    SubmitCredential,
    Unauthenticated,
    transition,
)
from podguid.utils.clipboard import ClipboardSink, SystemClipboard
from podguid.utils.display import mask_credential
from podguid.utils.errors import ClipboardError

logger = logging.getLogger(__name__)

COPIED_MESSAGE = "Copied to clipboard"
COPY_FAILED_MESSAGE = "Could not copy to clipboard"

StateListener = Callable[[SelectionState, Notification | None], None]


class BrowserSession:
    """Owns the selection state of one browsing session.

    Handles:
    - Applying user intents through the pure ``transition`` function
    - Running the fetch each transition asks for as an asyncio task
    - Feeding fetch results back in as tagged "loaded" events
    - Copying GUIDs and showing the confirmation notification

    Every fetch resolves into a stored result; transport failures are kept
    as ``Err`` values instead of escaping the task.

    Example:
        >>> async with PodigeeClient() as client:
        ...     session = BrowserSession(client)
        ...     session.submit_credential(api_key)
        ...     await session.settle()
        ...     print(session.state.podcasts)
    """

    def __init__(
        self,
        client: PodigeeClient,
        clipboard: ClipboardSink | None = None,
        notifier: NotificationController | None = None,
        notification_seconds: float = DEFAULT_NOTIFICATION_SECONDS,
        on_change: StateListener | None = None,
    ) -> None:
        """Initialize session in the unauthenticated state.

        Args:
            client: API client used for fetches
            clipboard: Clipboard sink (default: SystemClipboard)
            notifier: Notification controller (default: new controller)
            notification_seconds: Notification lifetime for the default controller
            on_change: Called with (state, notification) after every change
        """
        self.client = client
        self.clipboard = clipboard or SystemClipboard()
        self.notifier = notifier or NotificationController(duration=notification_seconds)
        self.notifier.on_change = self._on_notification
        self.on_change = on_change

        self._state: SelectionState = Unauthenticated()
        self._tasks: set[asyncio.Task] = set()
        self._request_ids = itertools.count(1)

    @property
    def state(self) -> SelectionState:
        """Current selection state."""
        return self._state

    @property
    def notification(self) -> Notification | None:
        """Current notification, if any."""
        return self.notifier.current

    # Intents

    def submit_credential(self, token: str) -> asyncio.Task | None:
        """Enter an API key and start loading podcasts."""
        return self.dispatch(SubmitCredential(token, request_id=next(self._request_ids)))

    def select_podcast(self, podcast: Podcast) -> asyncio.Task | None:
        """Select a podcast and start loading its episodes."""
        return self.dispatch(SelectPodcast(podcast, request_id=next(self._request_ids)))

    def reset_podcast(self) -> None:
        """Go back to the podcast list."""
        self.dispatch(ResetPodcast())

    def reset_credential(self) -> None:
        """Forget the API key and everything loaded with it."""
        self.dispatch(ResetCredential())

    async def authenticate(self, token: str) -> SelectionState:
        """Enter an API key and wait for the podcast list."""
        self.submit_credential(token)
        await self.settle()
        return self._state

    async def open_podcast(self, podcast: Podcast) -> SelectionState:
        """Select a podcast and wait for its episodes."""
        self.select_podcast(podcast)
        await self.settle()
        return self._state

    async def copy_guid(self, episode: Episode) -> bool:
        """Copy an episode's GUID to the clipboard.

        Args:
            episode: Episode whose GUID to copy

        Returns:
            True if the clipboard write succeeded
        """
        try:
            await self.clipboard.write_text(episode.guid)
        except ClipboardError as e:
            logger.warning(f"Copy failed for episode {episode.id}: {e}")
            self.notifier.notify(COPY_FAILED_MESSAGE)
            return False

        logger.info(f"Copied GUID of episode {episode.id}")
        self.notifier.notify(COPIED_MESSAGE)
        return True

    # Lookups for the view

    def find_podcast(self, podcast_id: int) -> Podcast | None:
        """Find a loaded podcast by id."""
        state = self._state
        if isinstance(state, Unauthenticated) or not isinstance(state.podcasts, Ok):
            return None
        return next((p for p in state.podcasts.value if p.id == podcast_id), None)

    def find_episode(self, episode_id: int) -> Episode | None:
        """Find a loaded episode of the selected podcast by id."""
        state = self._state
        if not isinstance(state, PodcastSelected) or not isinstance(state.episodes, Ok):
            return None
        return next((e for e in state.episodes.value if e.id == episode_id), None)

    # Machinery

    def dispatch(self, event: Event) -> asyncio.Task | None:
        """Apply an event and start the fetch it calls for.

        The state is replaced in one step before any fetch is started.

        Returns:
            The fetch task, or None if the transition has no effect
        """
        previous = self._state
        self._state, effect = transition(previous, event)

        if self._state is not previous:
            logger.debug(f"{type(event).__name__}: {type(previous).__name__} -> {self._state!r}")
            self._emit()
        else:
            logger.debug(f"{type(event).__name__} ignored in {type(previous).__name__}")

        if effect is None:
            return None

        task = asyncio.get_running_loop().create_task(self._run(effect))
        self._tasks.add(task)
        task.add_done_callback(self._tasks.discard)
        return task

    async def settle(self) -> None:
        """Wait until no fetches are in flight."""
        while self._tasks:
            await asyncio.gather(*list(self._tasks))

    async def _run(self, effect: Effect) -> None:
        if isinstance(effect, FetchPodcasts):
            await self._fetch_podcasts(effect)
        elif isinstance(effect, FetchEpisodes):
            await self._fetch_episodes(effect)

    async def _fetch_podcasts(self, effect: FetchPodcasts) -> None:
        logger.info(f"Loading podcasts for key {mask_credential(effect.credential)}")
        try:
            result = await self.client.list_podcasts(effect.credential)
        except TransportError as e:
            logger.warning(f"Loading podcasts failed: {type(e).__name__}: {e}")
            result = Err(e)

        if isinstance(result, Err) and not isinstance(result.error, TransportError):
            logger.warning(f"API refused podcast list: {result.message}")

        self.dispatch(
            PodcastsLoaded(
                credential=effect.credential,
                result=result,
                request_id=effect.request_id,
            )
        )

    async def _fetch_episodes(self, effect: FetchEpisodes) -> None:
        logger.info(f"Loading episodes for podcast {effect.podcast_id}")
        try:
            result = await self.client.list_episodes(effect.credential, effect.podcast_id)
        except TransportError as e:
            logger.warning(f"Loading episodes failed: {type(e).__name__}: {e}")
            result = Err(e)

        if isinstance(result, Err) and not isinstance(result.error, TransportError):
            logger.warning(f"API refused episode list: {result.message}")

        self.dispatch(
            EpisodesLoaded(
                credential=effect.credential,
                podcast_id=effect.podcast_id,
                result=result,
                request_id=effect.request_id,
            )
        )

    def _on_notification(self, notification: Notification | None) -> None:
        self._emit()

    def _emit(self) -> None:
        if self.on_change:
            self.on_change(self._state, self.notifier.current)
