"""Feed list endpoints for the Feed List Organizer API."""

import logging

from fastapi import APIRouter, Depends, HTTPException, Query, Request
from pydantic import BaseModel, Field
from slowapi import Limiter
from slowapi.util import get_remote_address

from feedlist.api.dependencies import get_coordinator
from feedlist.api.errors import to_http_exception
from feedlist.errors import FeedError, InvalidStateError
from feedlist.feeds.coordinator import MutationCoordinator
from feedlist.feeds.models import (
    FeedRecord,
    GroupingMode,
    MutationReport,
    Section,
)

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/feeds", tags=["feeds"])
limiter = Limiter(key_func=get_remote_address)


class FeedBody(BaseModel):
    """Request model for creating or editing a feed."""

    title: str | None = None
    subtitle: str | None = None
    category: str | None = None
    favorite: bool = False


class SelectionBody(BaseModel):
    """Request model for bulk actions on a set of feeds."""

    ids: list[str] = Field(min_length=1)


class SectionsResponse(BaseModel):
    """Response model for the organized feed list."""

    mode: GroupingMode
    sections: list[Section]


@router.get("", response_model=SectionsResponse)
@limiter.limit("120/minute")
async def list_sections(
    request: Request,
    q: str = Query(default="", description="Case-sensitive search text"),
    mode: GroupingMode | None = Query(
        default=None, description="Grouping mode (defaults to the stored preference)"
    ),
    coordinator: MutationCoordinator = Depends(get_coordinator),
):
    """
    Organized feed list.

    Feeds are filtered by ``q`` against "title subtitle", grouped by ``mode``
    (or the stored grouping mode) and sorted by title within each section.
    An explicit ``mode`` is not saved as the preference.

    Returns:
        The grouping mode used and the ordered sections
    """
    try:
        sections = await coordinator.refresh(q, mode=mode)
    except FeedError as e:
        raise to_http_exception(e)

    return SectionsResponse(mode=coordinator.mode, sections=sections)


@router.put("/{feed_id}", response_model=FeedRecord)
@limiter.limit("60/minute")
async def save_feed(
    request: Request,
    feed_id: str,
    body: FeedBody,
    coordinator: MutationCoordinator = Depends(get_coordinator),
):
    """
    Create or replace a feed.

    Raises:
        HTTPException: 400 if feed_id is blank, 500 if the store rejects the write
    """
    if not feed_id.strip():
        raise HTTPException(status_code=400, detail="feed_id cannot be empty")

    record = FeedRecord(id=feed_id, **body.model_dump())
    try:
        return await coordinator.save(record)
    except FeedError as e:
        raise to_http_exception(e)


@router.post("/{feed_id}/favorite", response_model=FeedRecord)
@limiter.limit("60/minute")
async def toggle_favorite(
    request: Request,
    feed_id: str,
    coordinator: MutationCoordinator = Depends(get_coordinator),
):
    """
    Toggle a feed's favorite flag.

    Raises:
        HTTPException: 404 if the feed does not exist
    """
    try:
        return await coordinator.toggle_favorite(feed_id)
    except FeedError as e:
        raise to_http_exception(e)


@router.delete("/{feed_id}", status_code=204)
@limiter.limit("60/minute")
async def delete_feed(
    request: Request,
    feed_id: str,
    coordinator: MutationCoordinator = Depends(get_coordinator),
):
    """
    Delete a single feed.

    Raises:
        HTTPException: 404 if the feed does not exist
    """
    try:
        await coordinator.delete(feed_id)
    except FeedError as e:
        raise to_http_exception(e)


def _with_selection(coordinator: MutationCoordinator, ids: list[str]) -> None:
    coordinator.enter_editing()
    for feed_id in ids:
        coordinator.select(feed_id)


@router.post("/bulk-delete", response_model=MutationReport)
@limiter.limit("30/minute")
async def bulk_delete(
    request: Request,
    body: SelectionBody,
    coordinator: MutationCoordinator = Depends(get_coordinator),
):
    """
    Delete several feeds, continuing past individual failures.

    Returns:
        Report listing the deleted ids and the failures with their kind
    """
    _with_selection(coordinator, body.ids)
    try:
        report = await coordinator.delete_selected()
    except (FeedError, InvalidStateError) as e:
        raise to_http_exception(e)

    if not report.ok:
        logger.warning(f"Bulk delete failed for {report.failed_ids}")
    return report


@router.post("/bulk-favorite", response_model=MutationReport)
@limiter.limit("30/minute")
async def bulk_favorite(
    request: Request,
    body: SelectionBody,
    coordinator: MutationCoordinator = Depends(get_coordinator),
):
    """
    Toggle the favorite flag of several feeds, best-effort.

    Returns:
        Report listing the toggled ids and the failures with their kind
    """
    _with_selection(coordinator, body.ids)
    try:
        return await coordinator.toggle_favorite_on_selection()
    except (FeedError, InvalidStateError) as e:
        raise to_http_exception(e)
