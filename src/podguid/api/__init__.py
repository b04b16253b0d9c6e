"""Podigee API access for podguid."""

from podguid.api.client import DEFAULT_BASE_URL, PodigeeClient
from podguid.api.errors import (
    DecodeError,
    MissingCredentialError,
    NetworkError,
    TransportError,
)
from podguid.api.models import (
    ApiError,
    Episode,
    Err,
    Ok,
    Podcast,
    Result,
    decode_result,
    is_api_error,
)

__all__ = [
    "PodigeeClient",
    "DEFAULT_BASE_URL",
    "TransportError",
    "MissingCredentialError",
    "NetworkError",
    "DecodeError",
    "ApiError",
    "Podcast",
    "Episode",
    "Ok",
    "Err",
    "Result",
    "decode_result",
    "is_api_error",
]
