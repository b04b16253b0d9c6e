"""Podigee API client built on httpx."""

import json
import logging
from types import TracebackType
from typing import Any

import httpx

from podguid.api.errors import DecodeError, MissingCredentialError, NetworkError
from podguid.api.models import Episode, Podcast, Result, decode_result
from podguid.utils.display import mask_credential

logger = logging.getLogger(__name__)

DEFAULT_BASE_URL = "https://app.podigee.com/api/v1"

# The API expects the key in a header literally named "Token"
AUTH_HEADER = "Token"


class PodigeeClient:
    """Async client for the Podigee REST API.

    ``request`` only deals with transport and JSON decoding; it does not look
    at what the payload means. The list operations decode the payload into an
    ``Ok``/``Err`` result, since the API reports domain errors with HTTP 200.

    Example:
        >>> async with PodigeeClient() as client:
        ...     result = await client.list_podcasts(api_key)
    """

    def __init__(
        self,
        base_url: str = DEFAULT_BASE_URL,
        timeout: float | None = None,
        http_client: httpx.AsyncClient | None = None,
    ) -> None:
        """Initialize the client.

        Args:
            base_url: API root; request paths are appended to it verbatim
            timeout: Request timeout in seconds (default: httpx's default)
            http_client: Pre-built httpx client (tests inject a mock transport)
        """
        self.base_url = base_url.rstrip("/")
        self._owns_client = http_client is None
        if http_client is None:
            if timeout is None:
                http_client = httpx.AsyncClient()
            else:
                http_client = httpx.AsyncClient(timeout=timeout)
        self._http = http_client

    async def __aenter__(self) -> "PodigeeClient":
        return self

    async def __aexit__(
        self,
        exc_type: type[BaseException] | None,
        exc_val: BaseException | None,
        exc_tb: TracebackType | None,
    ) -> None:
        await self.aclose()

    async def aclose(self) -> None:
        """Close the underlying HTTP client if this instance created it."""
        if self._owns_client:
            await self._http.aclose()

    async def request(self, path: str, credential: str | None) -> Any:
        """Send an authenticated GET request and decode the JSON body.

        Args:
            path: Path appended to the base URL (including any query string)
            credential: API key

        Returns:
            Decoded JSON value

        Raises:
            MissingCredentialError: If no credential was given (no I/O happens)
            NetworkError: If the HTTP exchange could not be completed
            DecodeError: If the body is not valid JSON
        """
        if not credential or not credential.strip():
            raise MissingCredentialError()

        url = f"{self.base_url}{path}"
        headers = {
            "Content-Type": "application/json",
            AUTH_HEADER: credential,
        }

        logger.debug(f"GET {url} (key {mask_credential(credential)})")

        try:
            response = await self._http.get(url, headers=headers)
        except httpx.TimeoutException as e:
            raise NetworkError(f"Request timed out: {e}", url=url) from e
        except httpx.HTTPError as e:
            raise NetworkError(f"Request failed: {e}", url=url) from e

        logger.debug(f"GET {url} -> HTTP {response.status_code}")

        try:
            return response.json()
        except (json.JSONDecodeError, UnicodeDecodeError) as e:
            raise DecodeError(
                f"Response from {path} is not valid JSON (HTTP {response.status_code})",
                body=response.text[:200],
            ) from e

    async def list_podcasts(self, credential: str | None) -> Result[list[Podcast]]:
        """Fetch all podcasts of the account.

        Raises:
            TransportError: See ``request``
        """
        payload = await self.request("/podcasts", credential)
        return decode_result(payload, Podcast)

    async def list_episodes(
        self, credential: str | None, podcast_id: int
    ) -> Result[list[Episode]]:
        """Fetch the episodes of one podcast.

        Raises:
            TransportError: See ``request``
        """
        payload = await self.request(f"/episodes?podcast_id={podcast_id}", credential)
        return decode_result(payload, Episode)
