"""Database module for Feed List Organizer."""

from feedlist.db.models import Base, Feed
from feedlist.db.session import get_engine, get_session, get_sessionmaker, init_models

__all__ = [
    "Base",
    "Feed",
    "get_session",
    "get_engine",
    "get_sessionmaker",
    "init_models",
]
