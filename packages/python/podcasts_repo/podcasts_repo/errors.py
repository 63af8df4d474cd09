"""Domain-level errors for the podcasts repository."""

from db_core import StoreError


class DecodeError(StoreError):
    """Raised when a stored document does not match the expected model."""


class PipelineError(StoreError):
    """Raised when the store rejects or fails an aggregation pipeline."""
