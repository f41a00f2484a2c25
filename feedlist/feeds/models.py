"""Pydantic models for feed records and the organized view."""

from enum import Enum

from pydantic import BaseModel, ConfigDict, Field

from feedlist.errors import ErrorKind


class GroupingMode(str, Enum):
    """Dimension used to bucket feeds into sections.

    The values are the persisted representation.
    """

    CATEGORY = "Category"
    FAVORITE = "Favorite"


class FeedRecord(BaseModel):
    """A subscribed feed. Immutable; edits produce a new value."""

    model_config = ConfigDict(frozen=True, from_attributes=True)

    id: str = Field(min_length=1)
    title: str | None = None
    subtitle: str | None = None
    category: str | None = None
    favorite: bool = False


class Section(BaseModel):
    """A named, ordered group of feeds in the organized view."""

    title: str
    records: list[FeedRecord]


class FeedFailure(BaseModel):
    """A single failed mutation inside a bulk operation."""

    feed_id: str
    kind: ErrorKind
    message: str


class MutationReport(BaseModel):
    """Outcome of a best-effort bulk operation."""

    succeeded: list[str] = Field(default_factory=list)
    failures: list[FeedFailure] = Field(default_factory=list)
    # Set when the mutations were applied but the view could not be reloaded
    view_stale: bool = False

    @property
    def ok(self) -> bool:
        return not self.failures

    @property
    def failed_ids(self) -> list[str]:
        return [f.feed_id for f in self.failures]
