"""Selection flow state machine.

The browser moves through three stages:

    Unauthenticated -> Authenticated -> PodcastSelected

Each stage is its own immutable type carrying only the data that is valid
in it. ``transition`` is a pure function from ``(state, event)`` to the next
state plus an optional effect describing the fetch to start. Running the
effect and feeding its result back in as a ``*Loaded`` event is left to the
caller (see ``BrowserSession``).

Loaded events carry the credential, podcast id and request id they were
requested for. The caller hands out a fresh request id with every
``SubmitCredential`` and ``SelectPodcast``; the state remembers the id of the
fetch it is waiting on. A loaded event whose tag does not match the current
state is stale and is dropped, so a slow response can never overwrite data for
a newer selection, even one for the same key or podcast.
"""

import logging
from dataclasses import dataclass, replace
from typing import Union

from podguid.api.models import Episode, Podcast, Result
from podguid.utils.display import mask_credential

logger = logging.getLogger(__name__)


# States


@dataclass(frozen=True)
class Unauthenticated:
    """No API key entered yet."""


@dataclass(frozen=True)
class Authenticated:
    """API key entered; podcasts are loading (None) or loaded."""

    credential: str
    podcasts: Result[list[Podcast]] | None = None
    request_id: int = 0

    def __repr__(self) -> str:
        return (
            f"Authenticated(credential={mask_credential(self.credential)!r}, "
            f"podcasts={self.podcasts!r})"
        )


@dataclass(frozen=True)
class PodcastSelected:
    """A podcast is selected; episodes are loading (None) or loaded.

    The podcast list is kept so going back does not have to fetch it again.
    """

    credential: str
    podcasts: Result[list[Podcast]] | None
    podcast: Podcast
    episodes: Result[list[Episode]] | None = None
    request_id: int = 0

    def __repr__(self) -> str:
        return (
            f"PodcastSelected(credential={mask_credential(self.credential)!r}, "
            f"podcast={self.podcast!r}, episodes={self.episodes!r})"
        )


SelectionState = Union[Unauthenticated, Authenticated, PodcastSelected]


# Events


@dataclass(frozen=True)
class SubmitCredential:
    token: str
    request_id: int = 0


@dataclass(frozen=True)
class PodcastsLoaded:
    credential: str
    result: Result[list[Podcast]]
    request_id: int = 0


@dataclass(frozen=True)
class SelectPodcast:
    podcast: Podcast
    request_id: int = 0


@dataclass(frozen=True)
class EpisodesLoaded:
    credential: str
    podcast_id: int
    result: Result[list[Episode]]
    request_id: int = 0


@dataclass(frozen=True)
class ResetPodcast:
    pass


@dataclass(frozen=True)
class ResetCredential:
    pass


Event = Union[
    SubmitCredential,
    PodcastsLoaded,
    SelectPodcast,
    EpisodesLoaded,
    ResetPodcast,
    ResetCredential,
]


# Effects


@dataclass(frozen=True)
class FetchPodcasts:
    credential: str
    request_id: int = 0


@dataclass(frozen=True)
class FetchEpisodes:
    credential: str
    podcast_id: int
    request_id: int = 0


Effect = Union[FetchPodcasts, FetchEpisodes]


def transition(
    state: SelectionState, event: Event
) -> tuple[SelectionState, Effect | None]:
    """Compute the next state for an event.

    Args:
        state: Current selection state
        event: Event to apply

    Returns:
        Tuple of (next state, effect to run or None). Events that do not
        apply to the current state return the state unchanged.
    """
    if isinstance(event, ResetCredential):
        return Unauthenticated(), None

    if isinstance(event, SubmitCredential):
        token = event.token.strip()
        if not token:
            logger.debug("Ignoring empty API key")
            return state, None
        # A new key invalidates everything fetched with the old one
        return (
            Authenticated(credential=token, request_id=event.request_id),
            FetchPodcasts(credential=token, request_id=event.request_id),
        )

    if isinstance(state, Unauthenticated):
        logger.debug(f"Ignoring {type(event).__name__} while unauthenticated")
        return state, None

    if isinstance(event, PodcastsLoaded):
        if (
            not isinstance(state, Authenticated)
            or event.credential != state.credential
            or event.request_id != state.request_id
        ):
            logger.debug(f"Discarding stale podcasts (request {event.request_id})")
            return state, None
        return replace(state, podcasts=event.result), None

    if isinstance(event, SelectPodcast):
        return (
            PodcastSelected(
                credential=state.credential,
                podcasts=state.podcasts,
                podcast=event.podcast,
                request_id=event.request_id,
            ),
            FetchEpisodes(
                credential=state.credential,
                podcast_id=event.podcast.id,
                request_id=event.request_id,
            ),
        )

    if isinstance(event, EpisodesLoaded):
        if (
            not isinstance(state, PodcastSelected)
            or event.credential != state.credential
            or event.podcast_id != state.podcast.id
            or event.request_id != state.request_id
        ):
            logger.debug(f"Discarding stale episodes for podcast {event.podcast_id}")
            return state, None
        return replace(state, episodes=event.result), None

    if isinstance(event, ResetPodcast):
        if not isinstance(state, PodcastSelected):
            return state, None
        return (
            Authenticated(
                credential=state.credential,
                podcasts=state.podcasts,
                request_id=state.request_id,
            ),
            None,
        )

    logger.debug(f"Unhandled event {event!r}")
    return state, None


def credential_of(state: SelectionState) -> str | None:
    """Get the API key held by a state, if any."""
    if isinstance(state, Unauthenticated):
        return None
    return state.credential
