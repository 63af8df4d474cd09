"""Storage-level errors shared by Mongo-backed repositories."""

from pymongo.errors import PyMongoError


class StoreError(Exception):
    """Base class for every error raised by the storage layer."""


class StoreConnectionError(StoreError, ConnectionError):
    """Raised when the client cannot connect or a request fails in transport."""


class DeadlineExceededError(StoreError, TimeoutError):
    """Raised when the session deadline elapses before an operation finishes."""


def translate_mongo_error(exc: PyMongoError, action: str) -> StoreError:
    """Map a driver error raised while performing ``action`` to a ``StoreError``."""

    if exc.timeout:
        return DeadlineExceededError(f"{action}: deadline exceeded ({exc})")
    return StoreConnectionError(f"{action}: {exc}")
