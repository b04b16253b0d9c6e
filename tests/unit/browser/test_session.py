"""Tests for BrowserSession orchestration."""

import asyncio

import httpx
import pytest
from conftest import API_KEY, EPISODES, FakePodigeeAPI, make_client

from podguid.api.errors import DecodeError, NetworkError
from podguid.api.models import ApiError, Episode, Err, Ok, Podcast
from podguid.browser.notifications import NotificationController
from podguid.browser.session import COPIED_MESSAGE, COPY_FAILED_MESSAGE, BrowserSession
from podguid.browser.state import Authenticated, PodcastSelected, Unauthenticated
from podguid.utils.clipboard import MemoryClipboard
from podguid.utils.errors import ClipboardError

MORNING = Podcast(id=1, title="Morning Show")
DEEP = Podcast(id=2, title="Deep Dives")


def make_session(api: FakePodigeeAPI, clipboard: MemoryClipboard | None = None) -> BrowserSession:
    return BrowserSession(
        make_client(api),
        clipboard=clipboard or MemoryClipboard(),
        notifier=NotificationController(duration=0.5),
    )


class FailingClipboard:
    """Clipboard whose writes always fail."""

    async def write_text(self, text: str) -> None:
        raise ClipboardError("no clipboard tool")


class TestAuthentication:
    """Tests for entering and dropping the API key."""

    @pytest.mark.asyncio
    async def test_submit_credential_fetches_podcasts_once(self, fake_api: FakePodigeeAPI) -> None:
        """Test that one key submission issues exactly one podcast request."""
        session = make_session(fake_api)

        session.submit_credential(API_KEY)
        assert isinstance(session.state, Authenticated)
        assert session.state.credential == API_KEY
        assert session.state.podcasts is None

        await session.settle()

        assert fake_api.paths() == ["/podcasts"]
        assert fake_api.requests[0].headers["Token"] == API_KEY
        assert isinstance(session.state, Authenticated)
        assert session.state.podcasts == Ok([MORNING, DEEP])

    @pytest.mark.asyncio
    async def test_blank_credential_makes_no_request(self, fake_api: FakePodigeeAPI) -> None:
        session = make_session(fake_api)

        task = session.submit_credential("   ")
        await session.settle()

        assert task is None
        assert session.state == Unauthenticated()
        assert fake_api.requests == []

    @pytest.mark.asyncio
    async def test_bad_token_is_stored_as_error(self, fake_api: FakePodigeeAPI) -> None:
        """Test that an error body is stored as an error, not an empty list."""
        session = make_session(fake_api)

        state = await session.authenticate("not-the-key")

        assert isinstance(state, Authenticated)
        assert isinstance(state.podcasts, Err)
        assert state.podcasts.error == ApiError(
            code=401, message="Unauthorized", reason="bad token"
        )

    @pytest.mark.asyncio
    async def test_network_failure_is_stored_as_error(self) -> None:
        """Test that transport failures end up in state instead of escaping."""

        def handler(request: httpx.Request) -> httpx.Response:
            raise httpx.ConnectError("dns failure", request=request)

        session = BrowserSession(make_client(handler), clipboard=MemoryClipboard())

        state = await session.authenticate(API_KEY)

        assert isinstance(state, Authenticated)
        assert isinstance(state.podcasts, Err)
        assert isinstance(state.podcasts.error, NetworkError)

    @pytest.mark.asyncio
    async def test_malformed_response_is_stored_as_error(self) -> None:
        def handler(request: httpx.Request) -> httpx.Response:
            return httpx.Response(200, text="not json")

        session = BrowserSession(make_client(handler), clipboard=MemoryClipboard())

        state = await session.authenticate(API_KEY)

        assert isinstance(state, Authenticated)
        assert isinstance(state.podcasts, Err)
        assert isinstance(state.podcasts.error, DecodeError)

    @pytest.mark.asyncio
    async def test_resubmitting_retries_after_error(self, fake_api: FakePodigeeAPI) -> None:
        """Test that re-issuing the same action retries the fetch."""
        fake_api.api_key = "rotated"
        session = make_session(fake_api)
        await session.authenticate(API_KEY)

        fake_api.api_key = API_KEY
        state = await session.authenticate(API_KEY)

        assert isinstance(state, Authenticated)
        assert state.podcasts == Ok([MORNING, DEEP])
        assert fake_api.paths() == ["/podcasts", "/podcasts"]

    @pytest.mark.asyncio
    async def test_reset_credential_clears_everything(self, fake_api: FakePodigeeAPI) -> None:
        session = make_session(fake_api)
        await session.authenticate(API_KEY)
        await session.open_podcast(MORNING)

        session.reset_credential()

        assert session.state == Unauthenticated()
        assert session.find_podcast(1) is None
        assert session.find_episode(11) is None

    @pytest.mark.asyncio
    async def test_logout_during_fetch_discards_late_podcasts(self) -> None:
        """Test that podcasts arriving after logout are dropped."""
        api = FakePodigeeAPI()
        release = asyncio.Event()

        async def slow_handler(request: httpx.Request) -> httpx.Response:
            await release.wait()
            return await api(request)

        session = BrowserSession(make_client(slow_handler), clipboard=MemoryClipboard())
        session.submit_credential(API_KEY)
        await asyncio.sleep(0)

        session.reset_credential()
        release.set()
        await session.settle()

        assert session.state == Unauthenticated()


class TestPodcastSelection:
    """Tests for selecting and deselecting podcasts."""

    @pytest.mark.asyncio
    async def test_select_podcast_loads_episodes(self, fake_api: FakePodigeeAPI) -> None:
        session = make_session(fake_api)
        await session.authenticate(API_KEY)

        state = await session.open_podcast(MORNING)

        assert isinstance(state, PodcastSelected)
        assert state.podcast == MORNING
        assert isinstance(state.episodes, Ok)
        assert [e.id for e in state.episodes.value] == [11, 12]
        assert fake_api.paths() == ["/podcasts", "/episodes?podcast_id=1"]

    @pytest.mark.asyncio
    async def test_reset_podcast_does_not_refetch_podcasts(
        self, fake_api: FakePodigeeAPI
    ) -> None:
        """Test that going back reuses the podcast list."""
        session = make_session(fake_api)
        await session.authenticate(API_KEY)
        await session.open_podcast(MORNING)

        session.reset_podcast()
        await session.settle()

        assert isinstance(session.state, Authenticated)
        assert session.state.podcasts == Ok([MORNING, DEEP])
        assert fake_api.paths().count("/podcasts") == 1

    @pytest.mark.asyncio
    async def test_late_response_for_previous_podcast_is_discarded(self) -> None:
        """Test that a slow episode list cannot overwrite a newer selection."""
        api = FakePodigeeAPI(delays={1: 0.5, 2: 0.05})
        session = make_session(api)
        await session.authenticate(API_KEY)

        session.select_podcast(MORNING)
        await asyncio.sleep(0.01)
        session.select_podcast(DEEP)

        await asyncio.sleep(0.2)
        state = session.state
        assert isinstance(state, PodcastSelected)
        assert state.podcast == DEEP
        assert isinstance(state.episodes, Ok)
        assert [e.id for e in state.episodes.value] == [21]

        # Let the slow podcast 1 response arrive
        await session.settle()

        state = session.state
        assert isinstance(state, PodcastSelected)
        assert state.podcast == DEEP
        assert isinstance(state.episodes, Ok)
        assert [e.id for e in state.episodes.value] == [21]

    @pytest.mark.asyncio
    async def test_late_response_for_reselected_podcast_is_discarded(self) -> None:
        """Test that selecting the same podcast again ignores the earlier request."""
        api = FakePodigeeAPI()
        episode_calls = 0

        async def handler(request: httpx.Request) -> httpx.Response:
            nonlocal episode_calls
            if request.url.path.endswith("/episodes"):
                episode_calls += 1
                if episode_calls == 1:
                    await asyncio.sleep(0.3)
                    raise httpx.ConnectError("late failure", request=request)
            return await api(request)

        session = BrowserSession(make_client(handler), clipboard=MemoryClipboard())
        await session.authenticate(API_KEY)

        session.select_podcast(MORNING)
        await asyncio.sleep(0.01)
        session.reset_podcast()
        session.select_podcast(MORNING)

        await asyncio.sleep(0.1)
        state = session.state
        assert isinstance(state, PodcastSelected)
        assert isinstance(state.episodes, Ok)

        await session.settle()

        state = session.state
        assert isinstance(state, PodcastSelected)
        assert isinstance(state.episodes, Ok)
        assert [e.id for e in state.episodes.value] == [11, 12]

    @pytest.mark.asyncio
    async def test_late_podcasts_for_resubmitted_key_are_discarded(self) -> None:
        """Test that resubmitting the same key ignores the earlier podcast request."""
        api = FakePodigeeAPI()
        podcast_calls = 0

        async def handler(request: httpx.Request) -> httpx.Response:
            nonlocal podcast_calls
            podcast_calls += 1
            if podcast_calls == 1:
                await asyncio.sleep(0.3)
                return httpx.Response(200, json=[])
            return await api(request)

        session = BrowserSession(make_client(handler), clipboard=MemoryClipboard())
        session.submit_credential(API_KEY)
        await asyncio.sleep(0.01)
        session.submit_credential(API_KEY)

        await session.settle()

        state = session.state
        assert isinstance(state, Authenticated)
        assert state.podcasts == Ok([MORNING, DEEP])

    @pytest.mark.asyncio
    async def test_find_helpers(self, fake_api: FakePodigeeAPI) -> None:
        session = make_session(fake_api)
        await session.authenticate(API_KEY)

        assert session.find_podcast(2) == DEEP
        assert session.find_podcast(99) is None
        assert session.find_episode(11) is None

        await session.open_podcast(MORNING)

        assert session.find_episode(12) == Episode(**EPISODES[1][1])
        assert session.find_episode(21) is None


class TestCopyGuid:
    """Tests for copying GUIDs."""

    @pytest.mark.asyncio
    async def test_copies_exact_guid_and_notifies(self, fake_api: FakePodigeeAPI) -> None:
        """Test that the clipboard receives the GUID unchanged."""
        clipboard = MemoryClipboard()
        session = make_session(fake_api, clipboard)
        await session.authenticate(API_KEY)
        state = await session.open_podcast(DEEP)
        assert isinstance(state, PodcastSelected) and isinstance(state.episodes, Ok)
        episode = state.episodes.value[0]

        copied = await session.copy_guid(episode)

        assert copied is True
        assert clipboard.history == ["urn:podigee:episode:21 [final]"]
        assert session.notification is not None
        assert session.notification.text == COPIED_MESSAGE

    @pytest.mark.asyncio
    async def test_clipboard_failure_reports_and_returns_false(self) -> None:
        session = BrowserSession(
            make_client(FakePodigeeAPI()),
            clipboard=FailingClipboard(),
            notifier=NotificationController(duration=0.5),
        )

        copied = await session.copy_guid(Episode(id=1, guid="g", title="t"))

        assert copied is False
        assert session.notification is not None
        assert session.notification.text == COPY_FAILED_MESSAGE

    @pytest.mark.asyncio
    async def test_notification_expires(self, fake_api: FakePodigeeAPI) -> None:
        session = BrowserSession(
            make_client(fake_api),
            clipboard=MemoryClipboard(),
            notification_seconds=0.05,
        )

        await session.copy_guid(Episode(id=1, guid="g", title="t"))
        await asyncio.sleep(0.15)

        assert session.notification is None


class TestListeners:
    """Tests for change notifications to the view."""

    @pytest.mark.asyncio
    async def test_listener_sees_every_state(self, fake_api: FakePodigeeAPI) -> None:
        seen: list[str] = []
        session = make_session(fake_api)
        session.on_change = lambda state, notification: seen.append(type(state).__name__)

        await session.authenticate(API_KEY)
        await session.open_podcast(MORNING)
        session.reset_credential()

        assert seen == [
            "Authenticated",  # pending
            "Authenticated",  # loaded
            "PodcastSelected",  # pending
            "PodcastSelected",  # loaded
            "Unauthenticated",
        ]

    @pytest.mark.asyncio
    async def test_listener_sees_notifications(self, fake_api: FakePodigeeAPI) -> None:
        notifications: list[object] = []
        session = make_session(fake_api)
        session.on_change = lambda state, notification: notifications.append(notification)

        await session.copy_guid(Episode(id=1, guid="g", title="t"))

        assert notifications[-1] is not None
