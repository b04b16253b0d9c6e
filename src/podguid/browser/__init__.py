"""Podcast/episode selection flow for podguid."""

from podguid.browser.notifications import Notification, NotificationController
from podguid.browser.session import BrowserSession
from podguid.browser.state import (
    Authenticated,
    PodcastSelected,
    SelectionState,
    Unauthenticated,
    transition,
)

__all__ = [
    "BrowserSession",
    "Notification",
    "NotificationController",
    "SelectionState",
    "Unauthenticated",
    "Authenticated",
    "PodcastSelected",
    "transition",
]
