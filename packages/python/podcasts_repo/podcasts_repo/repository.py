from __future__ import annotations

from typing import List, Optional, Sequence, Tuple

from db_core import Deadline, translate_mongo_error
from loguru import logger
from pymongo.database import Database
from pymongo.errors import PyMongoError

from .models import Episode, Podcast

SAMPLE_PODCAST = {
    "title": "My Awesome Podcast",
    "author": "Bruno",
    "tags": ["test", "demo"],
}

SAMPLE_EPISODES = [
    {"title": "Episode One", "description": "My Awesome Episode One", "duration": 1},
    {"title": "Episode Two", "description": "My Awesome Episode Two", "duration": 2},
]


class PodcastRepository:
    def __init__(
        self,
        database: Database,
        podcasts_collection: str = "podcasts",
        episodes_collection: str = "episodes",
        deadline: Optional[Deadline] = None,
    ):
        self.podcasts = database[podcasts_collection]
        self.episodes = database[episodes_collection]
        self.deadline = deadline or Deadline(None)

    @classmethod
    def from_session(cls, session) -> "PodcastRepository":
        settings = session.settings
        return cls(
            session.database,
            podcasts_collection=settings.podcasts_collection,
            episodes_collection=settings.episodes_collection,
            deadline=session.deadline,
        )

    # ---------------------------------------------------------
    # CREATE
    # ---------------------------------------------------------
    def create_podcast(self, podcast: Podcast) -> Podcast:
        try:
            with self.deadline.scope():
                res = self.podcasts.insert_one(podcast.to_document())
        except PyMongoError as exc:
            logger.error("Failed to insert podcast {!r}: {}", podcast.title, exc)
            raise translate_mongo_error(exc, "insert podcast") from exc
        return podcast.model_copy(update={"id": res.inserted_id})

    def create_episodes(self, episodes: Sequence[Episode]) -> List[Episode]:
        if not episodes:
            return []
        try:
            with self.deadline.scope():
                res = self.episodes.insert_many([e.to_document() for e in episodes])
        except PyMongoError as exc:
            logger.error("Failed to insert {} episode(s): {}", len(episodes), exc)
            raise translate_mongo_error(exc, "insert episodes") from exc
        return [
            episode.model_copy(update={"id": inserted_id})
            for episode, inserted_id in zip(episodes, res.inserted_ids)
        ]

    # ---------------------------------------------------------
    # SAMPLE DATA
    # ---------------------------------------------------------
    def seed_sample_data(self) -> Tuple[Podcast, List[Episode]]:
        """Insert one sample podcast and two episodes referencing it."""

        podcast = self.create_podcast(Podcast(**SAMPLE_PODCAST))
        episodes = self.create_episodes(
            [Episode(podcast=podcast.id, **fields) for fields in SAMPLE_EPISODES]
        )
        logger.success(
            "Seeded podcast {} with {} episode(s)", podcast.id, len(episodes)
        )
        return podcast, episodes
