"""Preference endpoints for the Feed List Organizer API."""

from fastapi import APIRouter, Depends, Request
from pydantic import BaseModel
from slowapi import Limiter
from slowapi.util import get_remote_address

from feedlist.api.dependencies import get_preference_store
from feedlist.api.errors import to_http_exception
from feedlist.errors import FeedError
from feedlist.feeds.models import GroupingMode
from feedlist.preferences import PreferenceStore

router = APIRouter(prefix="/api/preferences", tags=["preferences"])
limiter = Limiter(key_func=get_remote_address)


class GroupingModeBody(BaseModel):
    """Request and response model for the grouping mode preference."""

    mode: GroupingMode


@router.get("/grouping-mode", response_model=GroupingModeBody)
@limiter.limit("120/minute")
async def get_grouping_mode(
    request: Request,
    preferences: PreferenceStore = Depends(get_preference_store),
):
    """Return the stored grouping mode (Category if none was stored)."""
    return GroupingModeBody(mode=await preferences.get_grouping_mode())


@router.put("/grouping-mode", response_model=GroupingModeBody)
@limiter.limit("30/minute")
async def set_grouping_mode(
    request: Request,
    body: GroupingModeBody,
    preferences: PreferenceStore = Depends(get_preference_store),
):
    """
    Persist the grouping mode.

    Raises:
        HTTPException: 500 if the preference could not be written
    """
    try:
        await preferences.set_grouping_mode(body.mode)
    except FeedError as e:
        raise to_http_exception(e)
    return body
