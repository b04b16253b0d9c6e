"""Transport-level error classes for the Podigee API client.

Domain errors reported by the API itself are not exceptions; they come back
as ``ApiError`` values inside an ``Err`` result.
"""

from podguid.utils.errors import PodguidError


class TransportError(PodguidError):
    """Base error for requests that could not produce a usable payload."""

    pass


class MissingCredentialError(TransportError):
    """Request attempted without an API key."""

    def __init__(self, message: str = "An API key is required. Authenticate first.") -> None:
        super().__init__(message)


class NetworkError(TransportError):
    """The HTTP exchange could not be completed (DNS, TLS, reset, timeout)."""

    def __init__(self, message: str, url: str | None = None) -> None:
        super().__init__(message)
        self.url = url


class DecodeError(TransportError):
    """The response body was not valid JSON or not the expected shape."""

    def __init__(self, message: str, body: str | None = None) -> None:
        super().__init__(message)
        self.body = body
