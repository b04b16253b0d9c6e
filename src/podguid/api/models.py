"""Data models for Podigee API payloads and request results."""

from dataclasses import dataclass
from typing import Any, Generic, TypeVar, Union

from pydantic import BaseModel, ConfigDict, TypeAdapter
from pydantic import ValidationError as PydanticValidationError

from podguid.api.errors import DecodeError, TransportError

T = TypeVar("T")
ModelT = TypeVar("ModelT", bound=BaseModel)


class Podcast(BaseModel):
    """A podcast belonging to the authenticated account."""

    model_config = ConfigDict(frozen=True)

    id: int
    title: str


class Episode(BaseModel):
    """An episode of a podcast.

    ``guid`` is the opaque identifier the user wants to copy; it is kept
    byte-for-byte as the API returned it.
    """

    model_config = ConfigDict(frozen=True)

    id: int
    guid: str
    title: str


class ApiError(BaseModel):
    """Error payload returned by the API in place of the requested data.

    The API signals these with HTTP 200, so they are recognised by shape.
    """

    model_config = ConfigDict(frozen=True)

    code: Any
    message: str
    reason: str | None = None

    def describe(self) -> str:
        """Human-readable one-line summary."""
        text = f"{self.code} {self.message}"
        if self.reason:
            text += f": {self.reason}"
        return text


@dataclass(frozen=True)
class Ok(Generic[T]):
    """Successful result carrying the decoded value."""

    value: T


@dataclass(frozen=True)
class Err:
    """Failed result carrying a domain or transport error."""

    error: ApiError | TransportError

    @property
    def message(self) -> str:
        if isinstance(self.error, ApiError):
            return self.error.describe()
        return str(self.error)


Result = Union[Ok[T], Err]

_list_adapters: dict[type, TypeAdapter] = {}


def is_api_error(payload: Any) -> bool:
    """Check whether a decoded JSON payload is an API error.

    A payload is an error when it is an object carrying both ``code`` and
    ``message``.
    """
    return isinstance(payload, dict) and "code" in payload and "message" in payload


def decode_result(payload: Any, model: type[ModelT]) -> Result[list[ModelT]]:
    """Turn a decoded JSON payload into a tagged result.

    The error check runs before the payload is iterated, so an error object
    is never mistaken for an (empty) list.

    Args:
        payload: Decoded JSON value
        model: Model type of the list items

    Returns:
        Ok with the parsed list, or Err with the ApiError

    Raises:
        DecodeError: If the payload is neither an error nor a list of ``model``
    """
    if is_api_error(payload):
        try:
            return Err(ApiError.model_validate(payload))
        except PydanticValidationError as e:
            raise DecodeError(f"Malformed error payload: {e}") from e

    adapter = _list_adapters.get(model)
    if adapter is None:
        adapter = _list_adapters[model] = TypeAdapter(list[model])  # type: ignore[valid-type]

    try:
        return Ok(adapter.validate_python(payload))
    except PydanticValidationError as e:
        raise DecodeError(
            f"Unexpected response shape for {model.__name__} list: {e.error_count()} error(s)"
        ) from e
