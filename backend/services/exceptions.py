"""Domain error taxonomy for the wallet services.

Every error carries its :class:`ErrorKind` explicitly so the API layer can
map errors to HTTP responses without relying on subclass identity.
"""

from enum import Enum


class ErrorKind(str, Enum):
    """Category of a domain failure."""

    INVALID_INPUT = "INVALID_INPUT"
    PRICE_FETCH_ERROR = "PRICE_FETCH_ERROR"
    ASSET_NOT_FOUND = "ASSET_NOT_FOUND"
    ALREADY_EXISTS = "ALREADY_EXISTS"
    AUTHENTICATION_FAILED = "AUTHENTICATION_FAILED"
    INTERNAL_ERROR = "INTERNAL_ERROR"


class WalletError(Exception):
    """Base exception for expected domain failures."""

    kind: ErrorKind = ErrorKind.INTERNAL_ERROR

    def __init__(self, message: str, kind: ErrorKind | None = None):
        if kind is not None:
            self.kind = kind
        super().__init__(message)


class InvalidInputError(WalletError, ValueError):
    """A caller-supplied argument violates a documented precondition."""

    kind = ErrorKind.INVALID_INPUT


class PriceFetchError(WalletError):
    """A price could not be obtained from, or parsed out of, the provider."""

    kind = ErrorKind.PRICE_FETCH_ERROR


class AssetNotFoundError(WalletError):
    """A referenced symbol has no asset or holding record."""

    kind = ErrorKind.ASSET_NOT_FOUND


class AssetAlreadyExistsError(WalletError):
    """The user already holds the asset."""

    kind = ErrorKind.ALREADY_EXISTS


class UserAlreadyExistsError(WalletError):
    """A user with the same email is already registered."""

    kind = ErrorKind.ALREADY_EXISTS


class AuthenticationError(WalletError):
    """Bad credentials or an invalid access token."""

    kind = ErrorKind.AUTHENTICATION_FAILED


class SimulationConsistencyError(RuntimeError):
    """A simulated asset has no matching request entry.

    Indicates a defect, not a user error.
    """

    kind = ErrorKind.INTERNAL_ERROR
