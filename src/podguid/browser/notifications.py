"""Transient notification slot with auto-dismiss."""

import asyncio
import logging
from collections.abc import Callable
from dataclasses import dataclass

logger = logging.getLogger(__name__)

DEFAULT_NOTIFICATION_SECONDS = 3.0


@dataclass(frozen=True)
class Notification:
    """A message shown until ``expires_at`` (event loop clock)."""

    text: str
    expires_at: float


class NotificationController:
    """Holds at most one notification and dismisses it after a fixed delay.

    A new ``notify`` replaces the current message and restarts the countdown.
    The previous dismissal is cancelled first, and every scheduled dismissal
    also checks a generation counter when it fires, so an older timer can
    never clear a newer message.

    Must be used from within a running event loop.
    """

    def __init__(
        self,
        duration: float = DEFAULT_NOTIFICATION_SECONDS,
        on_change: Callable[[Notification | None], None] | None = None,
    ) -> None:
        """Initialize controller.

        Args:
            duration: Seconds a notification stays visible
            on_change: Called with the new notification (or None) on every change
        """
        if duration <= 0:
            raise ValueError(f"duration must be positive, got {duration}")
        self.duration = duration
        self.on_change = on_change
        self._current: Notification | None = None
        self._handle: asyncio.TimerHandle | None = None
        self._generation = 0

    @property
    def current(self) -> Notification | None:
        """The live notification, if any."""
        return self._current

    def notify(self, text: str) -> Notification:
        """Show a notification, replacing any current one.

        Args:
            text: Message to show

        Returns:
            The new notification
        """
        loop = asyncio.get_running_loop()
        self._cancel_timer()

        self._generation += 1
        generation = self._generation
        self._current = Notification(text=text, expires_at=loop.time() + self.duration)
        self._handle = loop.call_later(self.duration, self._expire, generation)

        logger.debug(f"Notification shown for {self.duration}s: {text}")
        self._emit()
        return self._current

    def clear(self) -> None:
        """Dismiss the current notification."""
        self._cancel_timer()
        if self._current is None:
            return
        self._current = None
        self._emit()

    def _expire(self, generation: int) -> None:
        if generation != self._generation:
            return
        self._handle = None
        self.clear()

    def _cancel_timer(self) -> None:
        if self._handle is not None:
            self._handle.cancel()
            self._handle = None

    def _emit(self) -> None:
        if self.on_change:
            self.on_change(self._current)
