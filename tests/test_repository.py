"""Tests for the SQLAlchemy feed repository."""

from unittest.mock import AsyncMock, patch

import pytest
import pytest_asyncio
from sqlalchemy.exc import OperationalError
from sqlalchemy.ext.asyncio import async_sessionmaker, create_async_engine

from feedlist.db.models import Base
from feedlist.errors import ErrorKind, FeedNotFoundError, PersistenceFailureError
from feedlist.feeds.models import FeedRecord
from feedlist.repository import SqlFeedRepository


@pytest_asyncio.fixture
async def repository():
    """Repository over an in-memory SQLite database."""
    engine = create_async_engine("sqlite+aiosqlite:///:memory:", future=True)
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)

    yield SqlFeedRepository(async_sessionmaker(engine, expire_on_commit=False))

    await engine.dispose()


def db_error() -> OperationalError:
    return OperationalError("UPDATE feeds", {}, Exception("database is locked"))


@pytest.mark.asyncio
async def test_save_and_get(repository):
    record = FeedRecord(id="a", title="Tech News", subtitle="daily", category="News")

    saved = await repository.save(record)

    assert saved == record
    assert await repository.get("a") == record


@pytest.mark.asyncio
async def test_save_is_upsert(repository):
    await repository.save(FeedRecord(id="a", title="Old"))
    await repository.save(FeedRecord(id="a", title="New", favorite=True))

    records = await repository.list_all()

    assert records == [FeedRecord(id="a", title="New", favorite=True)]


@pytest.mark.asyncio
async def test_list_all(repository):
    assert await repository.list_all() == []

    await repository.save(FeedRecord(id="a"))
    await repository.save(FeedRecord(id="b", category="Sports"))

    assert {r.id for r in await repository.list_all()} == {"a", "b"}


@pytest.mark.asyncio
async def test_get_missing_raises_not_found(repository):
    with pytest.raises(FeedNotFoundError) as exc_info:
        await repository.get("missing")

    assert exc_info.value.kind is ErrorKind.NOT_FOUND
    assert exc_info.value.feed_ids == ["missing"]


@pytest.mark.asyncio
async def test_delete_by_id(repository):
    await repository.save(FeedRecord(id="a"))

    await repository.delete_by_id("a")

    assert await repository.list_all() == []


@pytest.mark.asyncio
async def test_delete_missing_raises_not_found(repository):
    with pytest.raises(FeedNotFoundError):
        await repository.delete_by_id("missing")


@pytest.mark.asyncio
async def test_save_failure_raises_persistence_failure(repository):
    with patch("feedlist.repository.crud.upsert_feed", AsyncMock(side_effect=db_error())):
        with pytest.raises(PersistenceFailureError) as exc_info:
            await repository.save(FeedRecord(id="a"))

    assert exc_info.value.kind is ErrorKind.PERSISTENCE_FAILURE
    assert exc_info.value.feed_ids == ["a"]


@pytest.mark.asyncio
async def test_delete_failure_raises_persistence_failure(repository):
    await repository.save(FeedRecord(id="a"))

    with patch("feedlist.repository.crud.delete_feed", AsyncMock(side_effect=db_error())):
        with pytest.raises(PersistenceFailureError):
            await repository.delete_by_id("a")

    assert [r.id for r in await repository.list_all()] == ["a"]


@pytest.mark.asyncio
async def test_list_failure_raises_persistence_failure(repository):
    with patch("feedlist.repository.crud.list_feeds", AsyncMock(side_effect=db_error())):
        with pytest.raises(PersistenceFailureError):
            await repository.list_all()
