"""Configuration schema models using Pydantic."""

from typing import Literal

from pydantic import BaseModel, Field

from podguid.api.client import DEFAULT_BASE_URL
from podguid.browser.notifications import DEFAULT_NOTIFICATION_SECONDS

LogLevel = Literal["DEBUG", "INFO", "WARNING", "ERROR"]
ThemeName = Literal["light", "dark", "auto"]


class GlobalConfig(BaseModel):
    """Global podguid configuration.

    The API key is deliberately not part of it; keys only live in memory.
    """

    version: str = "1"
    api_base_url: str = DEFAULT_BASE_URL
    request_timeout_seconds: float | None = Field(default=None, gt=0)
    notification_seconds: float = Field(default=DEFAULT_NOTIFICATION_SECONDS, gt=0)
    log_level: LogLevel = "WARNING"
    theme: ThemeName = "auto"
