"""Lightweight typing helpers shared by Mongo-backed repositories."""

from typing import Any, Dict, Mapping

MongoDocument = Mapping[str, Any]

# Schemaless aggregation output, exactly as the driver decoded it.
JoinedDocument = Dict[str, Any]
