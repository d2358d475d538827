"""Error taxonomy and provider response type shared by the geocoder library."""

from dataclasses import dataclass
from typing import Any


class GeocodeError(Exception):
    """Base class for per-request lookup failures.

    Every subclass maps to an HTTP-style status code so the dispatcher can
    translate it into a response without inspecting the concrete type.

    Args:
        message: Human-readable error description.
        status_code: HTTP status code to report to the caller.
    """

    status_code: int = 500

    def __init__(self, message: str, status_code: int | None = None) -> None:
        self.message = message
        if status_code is not None:
            self.status_code = status_code
        super().__init__(message)

    @property
    def detail(self) -> Any:
        """Value surfaced to the caller as the ``detail`` of an error body."""
        return self.message


class CoordinateValidationError(GeocodeError, ValueError):
    """Raised when a request payload is not a valid latitude/longitude pair."""

    status_code = 400


class ProviderTransportError(GeocodeError):
    """Raised when a provider could not be reached or timed out."""

    status_code = 500


class UpstreamStatusError(GeocodeError):
    """Raised when a provider answered with a non-success status.

    Args:
        status_code: Status code returned by the provider.
        body: Upstream body (decoded JSON when possible, otherwise text).
    """

    def __init__(self, status_code: int, body: Any) -> None:
        self.body = body
        super().__init__(f"External API error: {body}", status_code=status_code)

    @property
    def detail(self) -> Any:
        return self.body


class ProviderDecodeError(GeocodeError):
    """Raised when a provider returned a body that is not valid JSON."""

    status_code = 500


class RandomSourceError(RuntimeError):
    """Raised when the OS entropy source is unavailable.

    Not a ``GeocodeError``: a broken entropy source means a broken execution
    environment, so it must never be turned into a per-request response.
    """


@dataclass(frozen=True)
class ProviderResponse:
    """Raw outcome of an outbound provider request."""

    status_code: int
    content: bytes

    @property
    def is_success(self) -> bool:
        return 200 <= self.status_code < 300
