"""Organizer for filtering and sectioning a flat list of feed records."""

from collections.abc import Iterable

from feedlist.feeds.models import FeedRecord, GroupingMode, Section

DEFAULT_CATEGORY = "Default"
FAVORITES_SECTION = "Favorites"
OTHERS_SECTION = "Others"


def matches_search(record: FeedRecord, search_text: str | None) -> bool:
    """Check whether a record passes the search filter.

    The match is a case-sensitive substring test against the title and
    subtitle joined by a single space. Empty search text matches everything.

    Args:
        record: The feed record to test
        search_text: Text typed by the user, or None

    Returns:
        True if the record should be kept
    """
    if not search_text:
        return True
    searchable = f"{record.title or ''} {record.subtitle or ''}"
    return search_text in searchable


def section_key(record: FeedRecord, mode: GroupingMode) -> str:
    """Return the title of the section a record belongs to under ``mode``."""
    if mode is GroupingMode.FAVORITE:
        return FAVORITES_SECTION if record.favorite else OTHERS_SECTION
    return record.category or DEFAULT_CATEGORY


def organize(
    records: Iterable[FeedRecord],
    search_text: str | None,
    mode: GroupingMode,
) -> list[Section]:
    """Organize feed records into ordered sections.

    This function:
    1. Filters records by search text (case-sensitive substring)
    2. Groups the remaining records by category or favorite status
    3. Sorts each section's records by title (stable, missing title sorts as "")
    4. Sorts sections by title

    Args:
        records: Feed records in any order
        search_text: Optional search text; empty or None disables filtering
        mode: Grouping mode deciding the section keys

    Returns:
        Ordered list of sections; empty when nothing matches
    """
    grouped: dict[str, list[FeedRecord]] = {}
    for record in records:
        if not matches_search(record, search_text):
            continue
        grouped.setdefault(section_key(record, mode), []).append(record)

    return [
        Section(
            title=key,
            records=sorted(grouped[key], key=lambda r: r.title or ""),
        )
        for key in sorted(grouped)
    ]
