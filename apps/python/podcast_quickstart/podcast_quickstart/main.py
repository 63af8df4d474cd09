"""Podcast quickstart: connect, optionally seed, then read episodes three ways.

Run with:

    DB=mongodb://localhost:27017 python -m podcast_quickstart.main --seed
"""

from __future__ import annotations

import argparse
import os
import sys
from typing import Callable, Optional, Sequence, TextIO

from db_core import MongoSession, MongoSettings, StoreError, load_settings
from dotenv import find_dotenv, load_dotenv
from loguru import logger
from podcasts_repo import EpisodeQueryService, PodcastRepository

from .report import GREEN, RED, YELLOW, dump_section


def _configure_logging() -> None:
    level = os.getenv("LOG_LEVEL") or os.getenv("LOGURU_LEVEL") or "INFO"
    logger.remove()
    logger.add(sys.stderr, level=level.upper())
    logger.info("Logger configured at {level} level", level=level.upper())


def _parse_args(argv: Optional[Sequence[str]]) -> argparse.Namespace:
    p = argparse.ArgumentParser(
        description="Query podcast episodes with find and $lookup aggregation."
    )
    p.add_argument("--seed", action="store_true", help="Insert the sample podcast and episodes first")
    p.add_argument("--db", default=None, help="Database name (default: MONGO_DB_NAME or 'quickstart')")
    p.add_argument(
        "--timeout",
        type=float,
        default=None,
        help="Deadline in seconds for connecting and all queries (default: 10)",
    )
    return p.parse_args(argv)


def run(session: MongoSession, *, seed: bool = False, out: Optional[TextIO] = None) -> None:
    """Run the quickstart against an already open session."""

    if out is None:
        out = sys.stdout
    if seed:
        PodcastRepository.from_session(session).seed_sample_data()

    queries = EpisodeQueryService.from_session(session)
    dump_section("Get Data", queries.fetch_all_episodes(), RED, out)
    dump_section("Get Data Aggregated", queries.fetch_episodes_joined_generic(), YELLOW, out)
    dump_section("Get Data PodcastEpisode", queries.fetch_episodes_joined_typed(), GREEN, out)


def main(
    argv: Optional[Sequence[str]] = None,
    session_factory: Callable[[MongoSettings], MongoSession] = MongoSession,
) -> int:
    load_dotenv(find_dotenv(usecwd=True))
    _configure_logging()
    args = _parse_args(argv)

    try:
        settings = load_settings(db_name=args.db, timeout_seconds=args.timeout)
        with session_factory(settings) as session:
            run(session, seed=args.seed)
    except (StoreError, ValueError) as exc:
        logger.error("Quickstart failed: {}", exc)
        return 1
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
