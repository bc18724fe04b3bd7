"""Classification of changed entries into status categories."""

from __future__ import annotations

from collections import Counter
from collections.abc import Iterable, Iterator

from .models import Category, Change, EntryState, StatusCounts, StatusEntry

# First match wins.
_PRIORITY: tuple[tuple[Change, Category], ...] = (
    (Change.NEW, Category.NEW),
    (Change.MODIFIED, Category.MODIFIED),
    (Change.DELETED, Category.DELETED),
    (Change.RENAMED, Category.RENAMED),
    (Change.TYPECHANGE, Category.TYPECHANGED),
)


def classify(changes: Iterable[Change]) -> Category | None:
    """Return the category of the highest-priority change, or None if unchanged."""
    present = frozenset(changes)
    for change, category in _PRIORITY:
        if change in present:
            return category
    return None


def _index_sweep(entries: list[StatusEntry]) -> Iterator[Category | None]:
    for entry in entries:
        if entry.state is EntryState.TRACKED:
            yield classify(entry.staged)


def _worktree_sweep(entries: list[StatusEntry]) -> Iterator[Category | None]:
    for entry in entries:
        if entry.state is EntryState.TRACKED:
            yield classify(entry.unstaged)


def _untracked_sweep(entries: list[StatusEntry]) -> Iterator[Category]:
    for entry in entries:
        if entry.state is EntryState.UNTRACKED:
            yield Category.NEW


def _ignored_sweep(entries: list[StatusEntry]) -> Iterator[Category]:
    for entry in entries:
        if entry.state is EntryState.IGNORED:
            yield Category.IGNORED


def tally(entries: Iterable[StatusEntry]) -> StatusCounts:
    """Fold status entries into counts.

    The index and worktree layers are independent sweeps, so a path that is
    both staged and changed again in the worktree is counted once per layer.
    """
    entries = list(entries)
    counter = Counter(
        category
        for sweep in (_index_sweep, _worktree_sweep, _untracked_sweep, _ignored_sweep)
        for category in sweep(entries)
        if category is not None
    )
    return StatusCounts(
        modified=counter[Category.MODIFIED],
        new=counter[Category.NEW],
        deleted=counter[Category.DELETED],
        renamed=counter[Category.RENAMED],
        typechanged=counter[Category.TYPECHANGED],
        ignored=counter[Category.IGNORED],
    )
