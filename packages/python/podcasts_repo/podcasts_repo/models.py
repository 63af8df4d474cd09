"""Pydantic models describing podcasts, episodes and their joined projection."""

from typing import List, Optional

from bson import ObjectId
from pydantic import BaseModel, ConfigDict, Field, StrictInt, StrictStr


class _MongoModel(BaseModel):
    model_config = ConfigDict(populate_by_name=True, arbitrary_types_allowed=True)

    def to_document(self) -> dict:
        """Dump for insertion; an unset ``_id`` is left for the store to assign."""

        return self.model_dump(by_alias=True, exclude_none=True)


class Podcast(_MongoModel):
    """Representation of a podcast stored in the ``podcasts`` collection."""

    id: Optional[ObjectId] = Field(default=None, alias="_id")
    title: StrictStr
    author: StrictStr
    tags: List[StrictStr] = Field(default_factory=list)


class Episode(_MongoModel):
    """Representation of an episode stored in the ``episodes`` collection.

    Scalar fields are strict, so a stored ``"7"`` for ``duration`` fails to
    decode. ``podcast`` references a ``Podcast`` id; it is not checked on write.
    """

    id: Optional[ObjectId] = Field(default=None, alias="_id")
    podcast: ObjectId
    title: StrictStr
    description: StrictStr
    duration: StrictInt


class PodcastEpisode(_MongoModel):
    """An episode with its podcast resolved and embedded. Never persisted."""

    id: Optional[ObjectId] = Field(default=None, alias="_id")
    podcast: Podcast
    title: StrictStr
    description: StrictStr
    duration: StrictInt
