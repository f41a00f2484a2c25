"""FastAPI dependencies for API routers."""

from collections.abc import AsyncGenerator

from fastapi import Depends
from redis.asyncio import Redis

from feedlist.config import get_settings
from feedlist.db.session import get_sessionmaker
from feedlist.feeds.coordinator import FeedLocks, MutationCoordinator
from feedlist.preferences import PreferenceStore, RedisPreferenceStore
from feedlist.repository import FeedRepository, SqlFeedRepository

_redis_client: Redis | None = None

# Shared by all requests so mutations of one feed id never overlap
_feed_locks = FeedLocks()


async def get_redis() -> AsyncGenerator[Redis, None]:
    """Dependency for FastAPI routes to get an async Redis connection.

    Yields:
        Async Redis client instance
    """
    global _redis_client

    if _redis_client is None:
        settings = get_settings()
        _redis_client = Redis.from_url(
            settings.redis_url,
            encoding="utf-8",
            decode_responses=False,
        )

    yield _redis_client


def get_repository() -> FeedRepository:
    """Feed repository bound to the application database."""
    return SqlFeedRepository(get_sessionmaker())


def get_feed_locks() -> FeedLocks:
    """App-wide registry of per-feed locks."""
    return _feed_locks


def get_preference_store(redis: Redis = Depends(get_redis)) -> PreferenceStore:
    """Preference store bound to the application Redis."""
    return RedisPreferenceStore(redis, key=get_settings().grouping_mode_key)


def get_coordinator(
    repository: FeedRepository = Depends(get_repository),
    preferences: PreferenceStore = Depends(get_preference_store),
    locks: FeedLocks = Depends(get_feed_locks),
) -> MutationCoordinator:
    """A coordinator for the duration of one request."""
    return MutationCoordinator(
        repository,
        preferences,
        timeout=get_settings().repository_timeout_seconds,
        locks=locks,
    )
