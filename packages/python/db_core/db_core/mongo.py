"""MongoSession and Deadline: one PyMongo client per run, bounded by one time budget.

Repositories and services get the session (or its collections and deadline)
passed in; nothing here caches a client at module level."""

from __future__ import annotations

import time
from contextlib import contextmanager
from typing import Any, Callable, Iterator, Optional

import pymongo
from loguru import logger
from pymongo import MongoClient
from pymongo.collection import Collection
from pymongo.database import Database
from pymongo.errors import PyMongoError

from .errors import DeadlineExceededError, StoreConnectionError, translate_mongo_error
from .settings import MongoSettings, load_settings


class Deadline:
    """A single time budget shared by every operation of a session.

    ``seconds=None`` means no deadline at all.
    """

    def __init__(self, seconds: Optional[float], clock: Callable[[], float] = time.monotonic):
        self._clock = clock
        self.expires_at: Optional[float] = None if seconds is None else clock() + seconds

    def remaining(self) -> Optional[float]:
        if self.expires_at is None:
            return None
        return max(0.0, self.expires_at - self._clock())

    @property
    def expired(self) -> bool:
        remaining = self.remaining()
        return remaining is not None and remaining <= 0

    def cancel(self) -> None:
        """Expire the deadline now; operations not yet started will fail."""

        self.expires_at = self._clock()

    def check(self) -> Optional[float]:
        """Return the remaining budget or raise ``DeadlineExceededError``."""

        if self.expired:
            raise DeadlineExceededError("deadline exceeded before the operation started")
        return self.remaining()

    @contextmanager
    def scope(self) -> Iterator[Optional[float]]:
        """Run the body under ``pymongo.timeout`` bound to the remaining budget.

        Driver timeouts raised inside the body surface as
        ``DeadlineExceededError``; other driver errors propagate unchanged.
        """

        remaining = self.check()
        try:
            with pymongo.timeout(remaining):
                yield remaining
        except PyMongoError as exc:
            if exc.timeout:
                raise DeadlineExceededError(f"deadline exceeded: {exc}") from exc
            raise


class MongoSession:
    """Explicit, scoped MongoDB connection with an umbrella deadline.

    Example::

        with MongoSession(load_settings()) as session:
            episodes = session.collection("episodes")
    """

    def __init__(
        self,
        settings: Optional[MongoSettings] = None,
        *,
        client_factory: Callable[..., Any] = MongoClient,
        clock: Callable[[], float] = time.monotonic,
    ):
        self.settings = settings or load_settings()
        self._client_factory = client_factory
        self._clock = clock
        self._client: Optional[MongoClient] = None
        self.deadline: Optional[Deadline] = None

    def open(self) -> "MongoSession":
        if self._client is not None:
            return self
        self.deadline = Deadline(self.settings.timeout_seconds, clock=self._clock)
        try:
            with self.deadline.scope():
                client = self._client_factory(self.settings.uri)
                try:
                    client.admin.command("ping")
                except BaseException:
                    client.close()
                    raise
        except PyMongoError as exc:
            err = translate_mongo_error(exc, f"connect to {self.settings.redacted_uri()}")
            logger.error("MongoDB connection failed: {}", err)
            raise err from exc
        self._client = client
        logger.success(
            "Connected to MongoDB @ {} (db={})",
            self.settings.redacted_uri(),
            self.settings.db_name,
        )
        return self

    def close(self) -> None:
        if self._client is None:
            return
        client, self._client = self._client, None
        client.close()
        logger.info("Closed MongoDB connection @ {}", self.settings.redacted_uri())

    def __enter__(self) -> "MongoSession":
        return self.open()

    def __exit__(self, exc_type, exc, tb) -> None:
        self.close()

    @property
    def is_open(self) -> bool:
        return self._client is not None

    @property
    def database(self) -> Database:
        if self._client is None:
            raise StoreConnectionError("MongoSession is not open")
        return self._client[self.settings.db_name]

    def collection(self, name: str) -> Collection:
        return self.database[name]

    def ping(self) -> dict[str, Any]:
        """Ping the server, bounded by what is left of the session deadline."""

        if self._client is None:
            raise StoreConnectionError("MongoSession is not open")
        try:
            with self.deadline.scope():
                self._client.admin.command("ping")
        except PyMongoError as exc:
            raise translate_mongo_error(exc, "ping") from exc
        return {"ok": True}
