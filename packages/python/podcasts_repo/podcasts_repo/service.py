"""Read-side queries over the episodes collection.

Every operation is a single request whose cursor is drained into a list
before returning; any failure aborts the whole operation.
"""

from __future__ import annotations

from typing import Any, Callable, Iterable, List, Optional, Type, TypeVar

from db_core import Deadline, JoinedDocument, MongoDocument, translate_mongo_error
from loguru import logger
from pydantic import BaseModel, ValidationError
from pymongo.collection import Collection
from pymongo.errors import OperationFailure, PyMongoError

from .errors import DecodeError, PipelineError
from .models import Episode, PodcastEpisode
from .pipelines import podcast_join_pipeline

ModelT = TypeVar("ModelT", bound=BaseModel)


def _decode_all(model: Type[ModelT], docs: Iterable[MongoDocument]) -> List[ModelT]:
    result: List[ModelT] = []
    for index, doc in enumerate(docs):
        try:
            result.append(model.model_validate(doc))
        except ValidationError as exc:
            raise DecodeError(
                f"document #{index} (_id={doc.get('_id')!r}) is not a valid {model.__name__}: {exc}"
            ) from exc
    return result


class EpisodeQueryService:
    """Query episodes, optionally joined with the podcasts they reference."""

    def __init__(
        self,
        episodes: Collection,
        podcasts_collection: str = "podcasts",
        deadline: Optional[Deadline] = None,
    ):
        self.episodes = episodes
        self.podcasts_collection = podcasts_collection
        self.deadline = deadline or Deadline(None)

    @classmethod
    def from_session(cls, session) -> "EpisodeQueryService":
        settings = session.settings
        return cls(
            session.collection(settings.episodes_collection),
            podcasts_collection=settings.podcasts_collection,
            deadline=session.deadline,
        )

    def _materialize(self, action: str, open_cursor: Callable[[], Any]) -> List[JoinedDocument]:
        try:
            with self.deadline.scope():
                cursor = open_cursor()
                try:
                    return list(cursor)
                finally:
                    cursor.close()
        except OperationFailure as exc:
            if action == "aggregate" and not exc.timeout:
                logger.error("Aggregation pipeline failed on {}: {}", self.episodes.name, exc)
                raise PipelineError(f"aggregate on {self.episodes.name}: {exc}") from exc
            logger.error("{} on {} failed: {}", action, self.episodes.name, exc)
            raise translate_mongo_error(exc, f"{action} on {self.episodes.name}") from exc
        except PyMongoError as exc:
            logger.error("{} on {} failed: {}", action, self.episodes.name, exc)
            raise translate_mongo_error(exc, f"{action} on {self.episodes.name}") from exc

    def _joined(self) -> List[JoinedDocument]:
        pipeline = podcast_join_pipeline(self.podcasts_collection)
        return self._materialize("aggregate", lambda: self.episodes.aggregate(pipeline))

    def fetch_all_episodes(self) -> List[Episode]:
        """Return every stored episode in store order (no sort is applied)."""

        docs = self._materialize("find", lambda: self.episodes.find({}))
        episodes = _decode_all(Episode, docs)
        logger.debug("Fetched {} episode(s)", len(episodes))
        return episodes

    def fetch_episodes_joined_generic(self) -> List[JoinedDocument]:
        """Return raw joined documents, one per episode with a resolvable podcast."""

        docs = self._joined()
        logger.debug("Fetched {} joined document(s)", len(docs))
        return docs

    def fetch_episodes_joined_typed(self) -> List[PodcastEpisode]:
        """Same join as the generic variant, decoded into ``PodcastEpisode``.

        A single document that does not decode fails the whole call.
        """

        episodes = _decode_all(PodcastEpisode, self._joined())
        logger.debug("Fetched {} podcast episode(s)", len(episodes))
        return episodes
