"""API routers for the Feed List Organizer."""

from feedlist.api.routes_feeds import router as feeds_router
from feedlist.api.routes_health import router as health_router
from feedlist.api.routes_preferences import router as preferences_router

__all__ = [
    "feeds_router",
    "health_router",
    "preferences_router",
]
