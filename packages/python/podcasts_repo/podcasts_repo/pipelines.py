"""Aggregation stages used to join episodes with their podcast."""

from __future__ import annotations

from typing import Any, Dict, List

PODCAST_FIELD = "podcast"


def lookup_stage(from_collection: str, local_field: str, foreign_field: str, as_field: str) -> Dict[str, Any]:
    return {
        "$lookup": {
            "from": from_collection,
            "localField": local_field,
            "foreignField": foreign_field,
            "as": as_field,
        }
    }


def unwind_stage(field: str, preserve_empty: bool = False) -> Dict[str, Any]:
    return {"$unwind": {"path": f"${field}", "preserveNullAndEmptyArrays": preserve_empty}}


def podcast_join_pipeline(podcasts_collection: str = "podcasts") -> List[Dict[str, Any]]:
    """Join each episode with its podcast and flatten the match in place.

    Episodes without a matching podcast are dropped, never null-padded.
    """

    return [
        lookup_stage(podcasts_collection, PODCAST_FIELD, "_id", PODCAST_FIELD),
        unwind_stage(PODCAST_FIELD, preserve_empty=False),
    ]
