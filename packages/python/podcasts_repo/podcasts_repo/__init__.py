"""Podcasts repository exposing domain models, queries and the sample writer."""

from .errors import DecodeError, PipelineError
from .models import Episode, Podcast, PodcastEpisode
from .pipelines import podcast_join_pipeline
from .repository import PodcastRepository
from .service import EpisodeQueryService

__all__ = [
    "DecodeError",
    "Episode",
    "EpisodeQueryService",
    "PipelineError",
    "Podcast",
    "PodcastEpisode",
    "PodcastRepository",
    "podcast_join_pipeline",
]
