"""Exceptions raised by price provider clients.

Clients translate transport and HTTP failures into these types; the price
service turns every one of them into a PriceFetchError.
"""

from typing import Optional


class ProviderError(Exception):
    """Base class; ``provider_name`` identifies the failing provider."""

    def __init__(self, message: str, provider_name: str = ""):
        self.provider_name = provider_name
        super().__init__(message)


class ProviderAuthError(ProviderError):
    """API token rejected or missing where required (HTTP 401/403)."""


class ProviderConnectionError(ProviderError):
    """The request never got a response: DNS, refused connection, timeout."""


class ProviderAPIError(ProviderError):
    """Any other non-2xx response."""

    def __init__(
        self,
        message: str,
        provider_name: str = "",
        status_code: Optional[int] = None,
    ):
        self.status_code = status_code
        super().__init__(message, provider_name)


class ProviderRateLimitError(ProviderAPIError):
    """HTTP 429. ``retry_after`` is the server's Retry-After in seconds, if sent."""

    def __init__(
        self,
        message: str,
        provider_name: str = "",
        retry_after: Optional[float] = None,
    ):
        self.retry_after = retry_after
        super().__init__(message, provider_name, status_code=429)


class ProviderDataError(ProviderError):
    """A 2xx response whose body is not what the client expects."""
