"""Environment-driven settings for the podcast quickstart's MongoDB session.

``load_settings`` reads every field from the environment and lets the CLI
override the database name and the deadline; the result is passed to
``MongoSession`` explicitly.
"""
import os

from loguru import logger
from pydantic import BaseModel, Field


def _default_uri() -> str:
    # DB is kept as a fallback for older quickstart setups.
    return os.getenv("MONGO_URI") or os.getenv("DB") or "mongodb://localhost:27017"


class MongoSettings(BaseModel):
    """Basic MongoDB configuration for the podcast quickstart."""

    uri: str = Field(default_factory=_default_uri)
    db_name: str = Field(default_factory=lambda: os.getenv("MONGO_DB_NAME", "quickstart"))
    timeout_seconds: float = Field(
        default_factory=lambda: float(os.getenv("MONGO_TIMEOUT_SECONDS", "10.0"))
    )
    episodes_collection: str = Field(
        default_factory=lambda: os.getenv("EPISODES_COLLECTION", "episodes")
    )
    podcasts_collection: str = Field(
        default_factory=lambda: os.getenv("PODCASTS_COLLECTION", "podcasts")
    )

    def redacted_uri(self) -> str:
        """Return ``uri`` with any ``user:password@`` part masked."""

        scheme, sep, rest = self.uri.partition("://")
        if not sep or "@" not in rest:
            return self.uri
        _, _, host = rest.rpartition("@")
        return f"{scheme}://***@{host}"


def load_settings(**overrides) -> MongoSettings:
    """Build settings from the environment, applying non-None overrides."""

    settings = MongoSettings(**{k: v for k, v in overrides.items() if v is not None})
    logger.info(
        "MongoSettings initialized with uri={} db_name={} timeout={}s",
        settings.redacted_uri(),
        settings.db_name,
        settings.timeout_seconds,
    )
    return settings
