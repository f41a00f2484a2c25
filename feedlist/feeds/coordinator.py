"""Mutation coordinator: applies edits to the repository and keeps the view current."""

import asyncio
import logging
from collections.abc import AsyncIterator, Awaitable, Iterable, Iterator
from contextlib import asynccontextmanager
from enum import Enum
from typing import TypeVar

from feedlist.errors import FeedError, InvalidStateError, RepositoryTimeoutError
from feedlist.feeds.models import (
    FeedFailure,
    FeedRecord,
    GroupingMode,
    MutationReport,
    Section,
)
from feedlist.feeds.organizer import organize
from feedlist.preferences import PreferenceStore
from feedlist.repository import FeedRepository

logger = logging.getLogger(__name__)

T = TypeVar("T")


class EditingState(str, Enum):
    """Whether the feed list currently allows multi-selection."""

    BROWSING = "browsing"
    EDITING = "editing"


class SelectionSet:
    """Set of feed ids selected while editing."""

    def __init__(self, ids: Iterable[str] = ()):
        self._ids: set[str] = set(ids)

    def __contains__(self, feed_id: object) -> bool:
        return feed_id in self._ids

    def __iter__(self) -> Iterator[str]:
        return iter(sorted(self._ids))

    def __len__(self) -> int:
        return len(self._ids)

    def __eq__(self, other: object) -> bool:
        if isinstance(other, SelectionSet):
            return self._ids == other._ids
        if isinstance(other, (set, frozenset)):
            return self._ids == other
        return NotImplemented

    def __repr__(self) -> str:
        return f"SelectionSet({sorted(self._ids)!r})"

    def add(self, feed_id: str) -> None:
        self._ids.add(feed_id)

    def discard(self, feed_id: str) -> None:
        self._ids.discard(feed_id)

    def clear(self) -> None:
        self._ids.clear()


class FeedLocks:
    """Registry of per-feed locks, shared by every coordinator of an app.

    An entry exists only while some task holds or waits for its lock.
    """

    def __init__(self):
        self._locks: dict[str, asyncio.Lock] = {}
        self._users: dict[str, int] = {}

    def __len__(self) -> int:
        return len(self._locks)

    def __contains__(self, feed_id: object) -> bool:
        return feed_id in self._locks

    @asynccontextmanager
    async def hold(self, feed_id: str) -> AsyncIterator[None]:
        """Hold the lock for ``feed_id`` for the duration of the block."""
        lock = self._locks.get(feed_id)
        if lock is None:
            lock = self._locks[feed_id] = asyncio.Lock()
        self._users[feed_id] = self._users.get(feed_id, 0) + 1
        try:
            async with lock:
                yield
        finally:
            self._users[feed_id] -= 1
            if not self._users[feed_id]:
                del self._users[feed_id]
                del self._locks[feed_id]


class MutationCoordinator:
    """Sequences repository mutations and re-runs the organizer afterwards.

    The coordinator owns the state a feed list screen needs: the current search
    text, the organized sections, the editing state and the selection set.
    Every repository call is bounded by ``timeout`` seconds, and mutations of
    the same feed id never overlap.
    """

    def __init__(
        self,
        repository: FeedRepository,
        preferences: PreferenceStore,
        timeout: float = 5.0,
        locks: FeedLocks | None = None,
    ):
        self.repository = repository
        self.preferences = preferences
        self.timeout = timeout
        self.locks = locks if locks is not None else FeedLocks()

        self.search_text = ""
        self.mode = GroupingMode.CATEGORY
        self.sections: list[Section] = []
        self.state = EditingState.BROWSING
        self.selection = SelectionSet()

        self._generation = 0

    # Editing state

    @property
    def is_editing(self) -> bool:
        return self.state is EditingState.EDITING

    @property
    def has_selection(self) -> bool:
        """True when bulk actions should be enabled."""
        return self.is_editing and len(self.selection) > 0

    def enter_editing(self) -> None:
        """Switch to editing with an empty selection."""
        if self.is_editing:
            return
        self.selection.clear()
        self.state = EditingState.EDITING

    def exit_editing(self) -> None:
        """Switch back to browsing and drop the selection."""
        self.state = EditingState.BROWSING
        self.selection.clear()

    def select(self, feed_id: str) -> bool:
        """Add a feed to the selection. Ignored while browsing.

        Returns:
            True if the selection was changed
        """
        if not self.is_editing:
            logger.debug(f"Ignoring select of {feed_id} while browsing")
            return False
        self.selection.add(feed_id)
        return True

    def deselect(self, feed_id: str) -> bool:
        """Remove a feed from the selection. Ignored while browsing."""
        if not self.is_editing:
            logger.debug(f"Ignoring deselect of {feed_id} while browsing")
            return False
        self.selection.discard(feed_id)
        return True

    def clear_selection(self) -> None:
        self.selection.clear()

    def _require_selection(self) -> None:
        if not self.is_editing:
            raise InvalidStateError("Bulk actions are only available while editing")
        if not self.selection:
            raise InvalidStateError("No feeds selected")

    # Repository access

    async def _call(self, awaitable: Awaitable[T], feed_ids: Iterable[str] = ()) -> T:
        """Await a repository call, raising RepositoryTimeoutError past the bound."""
        try:
            return await asyncio.wait_for(awaitable, self.timeout)
        except asyncio.TimeoutError as e:
            ids = list(feed_ids)
            logger.warning(
                f"Repository call timed out after {self.timeout}s",
                extra={"feed_ids": ids, "error_kind": "timeout"},
            )
            raise RepositoryTimeoutError(
                f"Repository call timed out after {self.timeout}s", ids
            ) from e

    async def _refresh_after_mutation(self) -> bool:
        """Refresh after a persisted mutation without failing the mutation.

        Returns:
            False if the view could not be reloaded and is now stale
        """
        try:
            await self.refresh()
        except FeedError as e:
            logger.warning(
                f"View is stale, refresh after mutation failed: {e.message}",
                extra={"feed_ids": e.feed_ids, "error_kind": e.kind.value},
            )
            return False
        return True

    # View

    async def refresh(
        self,
        search_text: str | None = None,
        mode: GroupingMode | None = None,
    ) -> list[Section]:
        """Reload feeds and recompute the sectioned view.

        When a newer refresh starts before this one finishes, this one still
        returns its result but does not replace ``sections``.

        Args:
            search_text: New search text; None keeps the current one
            mode: Grouping mode for this view only; None reads the stored
                preference. An explicit mode is not persisted.

        Returns:
            The sections computed by this call
        """
        if search_text is not None:
            self.search_text = search_text
        text = self.search_text

        self._generation += 1
        generation = self._generation

        records = await self._call(self.repository.list_all())
        if mode is None:
            mode = await self._call(self.preferences.get_grouping_mode())
        sections = organize(records, text, mode)

        if generation == self._generation:
            self.sections = sections
            self.mode = mode
        else:
            logger.debug(f"Discarding superseded refresh for {text!r}")
        return sections

    async def set_grouping_mode(self, mode: GroupingMode) -> list[Section]:
        """Persist a new grouping mode and regroup the view.

        Returns:
            The regrouped sections, or the previous ones if reloading failed
        """
        await self._call(self.preferences.set_grouping_mode(mode))
        await self._refresh_after_mutation()
        return self.sections

    # Single feed mutations

    async def _toggle(self, feed_id: str) -> FeedRecord:
        async with self.locks.hold(feed_id):
            record = await self._call(self.repository.get(feed_id), [feed_id])
            updated = record.model_copy(update={"favorite": not record.favorite})
            saved = await self._call(self.repository.save(updated), [feed_id])
        logger.info(f"Feed {feed_id} favorite={saved.favorite}")
        return saved

    async def toggle_favorite(self, feed_id: str) -> FeedRecord:
        """Flip a feed's favorite flag.

        On failure the error propagates and ``sections`` is left untouched.
        Once the save succeeded, a failing reload only leaves the view stale.

        Raises:
            FeedNotFoundError: If the feed does not exist
            PersistenceFailureError: If the save was rejected
            RepositoryTimeoutError: If a repository call exceeded the timeout
        """
        saved = await self._toggle(feed_id)
        await self._refresh_after_mutation()
        return saved

    async def save(self, record: FeedRecord) -> FeedRecord:
        """Add a new feed or replace an existing one."""
        async with self.locks.hold(record.id):
            saved = await self._call(self.repository.save(record), [record.id])
        await self._refresh_after_mutation()
        return saved

    async def delete(self, feed_id: str) -> None:
        """Delete a single feed."""
        async with self.locks.hold(feed_id):
            await self._call(self.repository.delete_by_id(feed_id), [feed_id])
        self.selection.discard(feed_id)
        await self._refresh_after_mutation()

    # Bulk mutations

    async def delete_selected(self) -> MutationReport:
        """Delete every selected feed, continuing past individual failures.

        Successfully deleted ids leave the selection; failed ids stay selected
        and are listed in the report.

        Raises:
            InvalidStateError: If not editing or nothing is selected
        """
        self._require_selection()
        report = MutationReport()

        for feed_id in list(self.selection):
            try:
                async with self.locks.hold(feed_id):
                    await self._call(self.repository.delete_by_id(feed_id), [feed_id])
            except FeedError as e:
                logger.warning(
                    f"Failed to delete feed {feed_id}: {e.message}",
                    extra={"feed_ids": [feed_id], "error_kind": e.kind.value},
                )
                report.failures.append(
                    FeedFailure(feed_id=feed_id, kind=e.kind, message=e.message)
                )
                continue
            report.succeeded.append(feed_id)
            self.selection.discard(feed_id)

        report.view_stale = not await self._refresh_after_mutation()
        return report

    async def toggle_favorite_on_selection(self) -> MutationReport:
        """Flip the favorite flag of every selected feed, best-effort.

        Raises:
            InvalidStateError: If not editing or nothing is selected
        """
        self._require_selection()
        report = MutationReport()

        for feed_id in list(self.selection):
            try:
                await self._toggle(feed_id)
            except FeedError as e:
                logger.warning(
                    f"Failed to toggle favorite on {feed_id}: {e.message}",
                    extra={"feed_ids": [feed_id], "error_kind": e.kind.value},
                )
                report.failures.append(
                    FeedFailure(feed_id=feed_id, kind=e.kind, message=e.message)
                )
                continue
            report.succeeded.append(feed_id)

        report.view_stale = not await self._refresh_after_mutation()
        return report
