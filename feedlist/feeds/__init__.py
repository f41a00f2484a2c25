"""Feed organization module: models, organizer and mutation coordinator."""

from .coordinator import EditingState, FeedLocks, MutationCoordinator, SelectionSet
from .models import FeedFailure, FeedRecord, GroupingMode, MutationReport, Section
from .organizer import matches_search, organize, section_key

__all__ = [
    "EditingState",
    "FeedFailure",
    "FeedLocks",
    "FeedRecord",
    "GroupingMode",
    "MutationCoordinator",
    "MutationReport",
    "Section",
    "SelectionSet",
    "matches_search",
    "organize",
    "section_key",
]
