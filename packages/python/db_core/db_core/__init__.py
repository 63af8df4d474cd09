"""Session, deadline and error helpers for talking to MongoDB.

Typical use from a repository or service:

    from db_core import MongoSession, load_settings

    with MongoSession(load_settings()) as session:
        with session.deadline.scope():
            docs = list(session.collection("episodes").find({}))
"""

from .errors import (
    DeadlineExceededError,
    StoreConnectionError,
    StoreError,
    translate_mongo_error,
)
from .mongo import Deadline, MongoSession
from .settings import MongoSettings, load_settings
from .typing import JoinedDocument, MongoDocument

__all__ = [
    "Deadline",
    "DeadlineExceededError",
    "JoinedDocument",
    "MongoDocument",
    "MongoSession",
    "MongoSettings",
    "StoreConnectionError",
    "StoreError",
    "load_settings",
    "translate_mongo_error",
]
