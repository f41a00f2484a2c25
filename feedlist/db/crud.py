"""CRUD utilities for feed rows."""

from sqlalchemy import delete, select
from sqlalchemy.ext.asyncio import AsyncSession

from feedlist.db.models import Feed


async def get_feed(db: AsyncSession, feed_id: str) -> Feed | None:
    """Get a feed by its ID."""
    result = await db.execute(select(Feed).where(Feed.id == feed_id))
    return result.scalar_one_or_none()


async def list_feeds(db: AsyncSession) -> list[Feed]:
    """List all stored feeds, in no particular order."""
    result = await db.execute(select(Feed))
    return list(result.scalars().all())


async def upsert_feed(
    db: AsyncSession,
    feed_id: str,
    title: str | None = None,
    subtitle: str | None = None,
    category: str | None = None,
    favorite: bool = False,
) -> Feed:
    """Create a feed or overwrite the fields of an existing one."""
    feed = await get_feed(db, feed_id)

    if feed:
        feed.title = title
        feed.subtitle = subtitle
        feed.category = category
        feed.favorite = favorite
    else:
        feed = Feed(
            id=feed_id,
            title=title,
            subtitle=subtitle,
            category=category,
            favorite=favorite,
        )
        db.add(feed)

    await db.commit()
    await db.refresh(feed)
    return feed


async def delete_feed(db: AsyncSession, feed_id: str) -> bool:
    """Delete a feed.

    Args:
        db: Database session
        feed_id: The feed's ID

    Returns:
        True if the feed was deleted, False if it didn't exist
    """
    result = await db.execute(delete(Feed).where(Feed.id == feed_id))
    await db.commit()
    return result.rowcount > 0
