"""Feed repository abstraction and its SQLAlchemy implementation."""

import logging
from abc import ABC, abstractmethod

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from feedlist.db import crud
from feedlist.errors import FeedNotFoundError, PersistenceFailureError
from feedlist.feeds.models import FeedRecord

logger = logging.getLogger(__name__)


class FeedRepository(ABC):
    """Abstract CRUD access to stored feed records."""

    @abstractmethod
    async def list_all(self) -> list[FeedRecord]:
        """
        List every stored feed.

        Returns:
            Feed records in no particular order
        """
        pass

    @abstractmethod
    async def get(self, feed_id: str) -> FeedRecord:
        """
        Load a single feed.

        Args:
            feed_id: Identifier of the feed

        Returns:
            The stored feed record

        Raises:
            FeedNotFoundError: If no feed has this id
        """
        pass

    @abstractmethod
    async def save(self, record: FeedRecord) -> FeedRecord:
        """
        Insert or replace a feed, keyed by its id.

        Args:
            record: The feed record to persist

        Returns:
            The record as stored

        Raises:
            PersistenceFailureError: If the store rejected the write
        """
        pass

    @abstractmethod
    async def delete_by_id(self, feed_id: str) -> None:
        """
        Delete a feed.

        Args:
            feed_id: Identifier of the feed

        Raises:
            FeedNotFoundError: If no feed has this id
            PersistenceFailureError: If the store rejected the delete
        """
        pass


class SqlFeedRepository(FeedRepository):
    """Feed repository backed by a SQLAlchemy async database."""

    def __init__(self, sessionmaker: async_sessionmaker[AsyncSession]):
        self.sessionmaker = sessionmaker

    async def list_all(self) -> list[FeedRecord]:
        """List feeds from the database."""
        try:
            async with self.sessionmaker() as db:
                feeds = await crud.list_feeds(db)
        except SQLAlchemyError as e:
            logger.error("Failed to list feeds", exc_info=True)
            raise PersistenceFailureError(f"Failed to list feeds: {e}") from e
        return [FeedRecord.model_validate(feed) for feed in feeds]

    async def get(self, feed_id: str) -> FeedRecord:
        """Load a feed from the database."""
        try:
            async with self.sessionmaker() as db:
                feed = await crud.get_feed(db, feed_id)
        except SQLAlchemyError as e:
            logger.error(
                f"Failed to load feed {feed_id}", exc_info=True, extra={"feed_ids": [feed_id]}
            )
            raise PersistenceFailureError(
                f"Failed to load feed {feed_id}: {e}", [feed_id]
            ) from e

        if feed is None:
            raise FeedNotFoundError(f"Feed not found: {feed_id}", [feed_id])
        return FeedRecord.model_validate(feed)

    async def save(self, record: FeedRecord) -> FeedRecord:
        """Upsert a feed row."""
        try:
            async with self.sessionmaker() as db:
                feed = await crud.upsert_feed(
                    db,
                    feed_id=record.id,
                    title=record.title,
                    subtitle=record.subtitle,
                    category=record.category,
                    favorite=record.favorite,
                )
        except SQLAlchemyError as e:
            logger.error(
                f"Failed to save feed {record.id}",
                exc_info=True,
                extra={"feed_ids": [record.id]},
            )
            raise PersistenceFailureError(
                f"Failed to save feed {record.id}: {e}", [record.id]
            ) from e

        logger.info(f"Saved feed {record.id}")
        return FeedRecord.model_validate(feed)

    async def delete_by_id(self, feed_id: str) -> None:
        """Delete a feed row."""
        try:
            async with self.sessionmaker() as db:
                deleted = await crud.delete_feed(db, feed_id)
        except SQLAlchemyError as e:
            logger.error(
                f"Failed to delete feed {feed_id}",
                exc_info=True,
                extra={"feed_ids": [feed_id]},
            )
            raise PersistenceFailureError(
                f"Failed to delete feed {feed_id}: {e}", [feed_id]
            ) from e

        if not deleted:
            raise FeedNotFoundError(f"Feed not found: {feed_id}", [feed_id])
        logger.info(f"Deleted feed {feed_id}")
