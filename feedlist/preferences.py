"""Persisted user preferences (currently the grouping mode)."""

import logging
from abc import ABC, abstractmethod

from redis.asyncio import Redis
from redis.exceptions import RedisError

from feedlist.errors import PersistenceFailureError
from feedlist.feeds.models import GroupingMode

logger = logging.getLogger(__name__)

DEFAULT_GROUPING_MODE = GroupingMode.CATEGORY


class PreferenceStore(ABC):
    """Abstract accessor for the persisted grouping mode."""

    @abstractmethod
    async def get_grouping_mode(self) -> GroupingMode:
        """
        Read the last selected grouping mode.

        Returns:
            The stored mode, or GroupingMode.CATEGORY if none is stored or
            the stored value is not a valid mode
        """
        pass

    @abstractmethod
    async def set_grouping_mode(self, mode: GroupingMode) -> None:
        """
        Persist the grouping mode before returning.

        Args:
            mode: The mode to store

        Raises:
            PersistenceFailureError: If the value could not be written
        """
        pass


class RedisPreferenceStore(PreferenceStore):
    """Preference store keeping the grouping mode under a single Redis key."""

    def __init__(self, redis: Redis, key: str = "feedlist:grouping_mode"):
        self.redis = redis
        self.key = key

    async def get_grouping_mode(self) -> GroupingMode:
        """Read the grouping mode from Redis, falling back to the default."""
        try:
            raw = await self.redis.get(self.key)
        except RedisError:
            logger.warning("Failed to read grouping mode, using default", exc_info=True)
            return DEFAULT_GROUPING_MODE

        if raw is None:
            return DEFAULT_GROUPING_MODE

        if isinstance(raw, bytes):
            raw = raw.decode("utf-8", errors="replace")

        try:
            return GroupingMode(raw)
        except ValueError:
            logger.warning(f"Ignoring unknown grouping mode {raw!r}")
            return DEFAULT_GROUPING_MODE

    async def set_grouping_mode(self, mode: GroupingMode) -> None:
        """Write the grouping mode to Redis."""
        try:
            await self.redis.set(self.key, mode.value)
        except RedisError as e:
            logger.error("Failed to persist grouping mode", exc_info=True)
            raise PersistenceFailureError(f"Failed to persist grouping mode: {e}") from e
        logger.info(f"Grouping mode set to {mode.value}")
