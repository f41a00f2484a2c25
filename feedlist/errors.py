"""Error types raised by the feed repository and mutation coordinator."""

from collections.abc import Iterable
from enum import Enum


class ErrorKind(str, Enum):
    """Cause of a failed repository operation."""

    NOT_FOUND = "not_found"
    PERSISTENCE_FAILURE = "persistence_failure"
    TIMEOUT = "timeout"


class FeedError(Exception):
    """Base class for repository failures, tagged with kind and feed ids."""

    kind: ErrorKind

    def __init__(self, message: str, feed_ids: Iterable[str] = ()):
        super().__init__(message)
        self.message = message
        self.feed_ids = list(feed_ids)


class FeedNotFoundError(FeedError):
    """The referenced feed id does not exist in the repository."""

    kind = ErrorKind.NOT_FOUND


class PersistenceFailureError(FeedError):
    """The store rejected a write or delete."""

    kind = ErrorKind.PERSISTENCE_FAILURE


class RepositoryTimeoutError(FeedError):
    """A repository call did not finish within the configured bound."""

    kind = ErrorKind.TIMEOUT


class InvalidStateError(Exception):
    """An editing operation was requested in a state that does not allow it."""
