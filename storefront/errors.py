# storefront/errors.py

"""Exception types raised by the storefront services."""


class StorefrontError(Exception):
    """Base class for every recoverable storefront failure."""


class ValidationError(StorefrontError):
    """A candidate record has a missing or invalid field."""


class DuplicateError(StorefrontError):
    """A product name collides case-insensitively with another item."""


class TransportError(StorefrontError):
    """The backend could not be reached or answered with an error.

    ``status`` carries the HTTP status code when one was received, so
    callers can tell rate limiting (429) or a busy server (503) apart
    from hard failures.
    """

    def __init__(self, message: str, status: int | None = None) -> None:
        super().__init__(message)
        self.status = status


class RetrievalError(TransportError):
    """A full collection reload failed."""


class NotFoundError(TransportError):
    """The target record does not exist on the backend."""

    def __init__(self, message: str, status: int | None = 404) -> None:
        super().__init__(message, status)


class AuthenticationError(StorefrontError):
    """Username and password did not match any account."""


class ConfigurationError(StorefrontError):
    """A required setting (such as an API credential) is missing."""


class BusyError(StorefrontError):
    """An operation of the same kind is already in flight."""
