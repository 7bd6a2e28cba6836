"""Typed provider failures.

The orchestrator distinguishes these to decide between retrying on another
local model, falling back to the cloud, or refusing.
"""


class ProviderError(Exception):
    """Base class for model provider failures."""

    def __init__(self, message: str, provider: str = "unknown") -> None:
        super().__init__(message)
        self.provider = provider


class ProviderUnavailableError(ProviderError):
    """The provider endpoint refused the connection or could not be reached."""


class ProviderTimeoutError(ProviderError):
    """The provider did not answer within the configured timeout."""


class ProviderResponseError(ProviderError):
    """The provider answered with an error status or a malformed payload."""

    def __init__(self, message: str, provider: str = "unknown", status_code: int | None = None) -> None:
        super().__init__(message, provider)
        self.status_code = status_code


class ModelNotFoundError(ProviderResponseError):
    """The requested model is not installed on the provider."""


class ProviderAuthError(ProviderResponseError):
    """The provider rejected the credentials (HTTP 401)."""


class ProviderRateLimitError(ProviderResponseError):
    """The provider throttled the request (HTTP 429)."""
