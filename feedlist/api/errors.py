"""Translation of coordinator errors into HTTP errors."""

from fastapi import HTTPException

from feedlist.errors import ErrorKind, FeedError, InvalidStateError

STATUS_BY_KIND = {
    ErrorKind.NOT_FOUND: 404,
    ErrorKind.PERSISTENCE_FAILURE: 500,
    ErrorKind.TIMEOUT: 504,
}


def to_http_exception(error: FeedError | InvalidStateError) -> HTTPException:
    """Build the HTTPException matching an error's kind."""
    if isinstance(error, InvalidStateError):
        return HTTPException(status_code=409, detail=str(error))
    return HTTPException(
        status_code=STATUS_BY_KIND[error.kind],
        detail={
            "kind": error.kind.value,
            "message": error.message,
            "feed_ids": error.feed_ids,
        },
    )
