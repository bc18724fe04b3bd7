"""Repository status collection using dulwich.

Produces one ``StatusEntry`` per changed path. Tracked paths carry their
index-vs-HEAD and worktree-vs-index changes; untracked and ignored paths are
separate entries. Unchanged paths are never reported.
"""

from __future__ import annotations

import logging
import os
import stat
from collections.abc import Iterator

from dulwich import porcelain
from dulwich.ignore import IgnoreFilterManager
from dulwich.index import (
    ConflictedIndexEntry,
    Index,
    IndexEntry,
    blob_from_path_and_stat,
    cleanup_mode,
)
from dulwich.object_store import iter_tree_contents
from dulwich.objects import S_IFGITLINK
from dulwich.repo import Repo

from ..models import Change, EntryState, StatusEntry, StatusOptions

logger = logging.getLogger(__name__)

CONTROL_DIR = ".git"


def _head_tree(repo: Repo) -> dict[bytes, tuple[int, bytes]]:
    """Map of path to (mode, blob id) for the HEAD commit; empty when unborn."""
    try:
        head = repo.head()
    except KeyError:
        return {}
    tree_id = repo[head].tree
    return {
        entry.path: (entry.mode, entry.sha)
        for entry in iter_tree_contents(repo.object_store, tree_id)
    }


def _split_index(index: Index) -> tuple[dict[bytes, IndexEntry], set[bytes]]:
    tracked: dict[bytes, IndexEntry] = {}
    conflicted: set[bytes] = set()
    for path, entry in index.items():
        if isinstance(entry, ConflictedIndexEntry):
            conflicted.add(path)
        else:
            tracked[path] = entry
    return tracked, conflicted


def _pair_renames(
    changes: dict[bytes, Change],
    head: dict[bytes, tuple[int, bytes]],
    tracked: dict[bytes, IndexEntry],
) -> dict[bytes, Change]:
    """Collapse a deleted path and an added path with the same blob into a rename."""
    deleted_by_blob: dict[bytes, list[bytes]] = {}
    for path in sorted(p for p, c in changes.items() if c is Change.DELETED):
        deleted_by_blob.setdefault(head[path][1], []).append(path)

    paired = dict(changes)
    for path in sorted(p for p, c in changes.items() if c is Change.NEW):
        sources = deleted_by_blob.get(tracked[path].sha)
        if sources:
            del paired[sources.pop(0)]
            paired[path] = Change.RENAMED
    return paired


def _index_changes(
    head: dict[bytes, tuple[int, bytes]],
    tracked: dict[bytes, IndexEntry],
    conflicted: set[bytes],
    detect_renames: bool,
) -> dict[bytes, Change]:
    changes: dict[bytes, Change] = {}
    for path, (mode, sha) in head.items():
        if path in conflicted:
            continue
        entry = tracked.get(path)
        if entry is None:
            changes[path] = Change.DELETED
        elif stat.S_IFMT(mode) != stat.S_IFMT(entry.mode):
            changes[path] = Change.TYPECHANGE
        elif sha != entry.sha or cleanup_mode(mode) != cleanup_mode(entry.mode):
            changes[path] = Change.MODIFIED
    for path in tracked:
        if path not in head:
            changes[path] = Change.NEW

    if detect_renames:
        return _pair_renames(changes, head, tracked)
    return changes


def _worktree_change(root: bytes, path: bytes, entry: IndexEntry) -> Change | None:
    fs_path = os.path.join(root, *path.split(b"/"))
    try:
        st = os.lstat(fs_path)
    except (FileNotFoundError, NotADirectoryError):
        return Change.DELETED

    is_gitlink = stat.S_IFMT(entry.mode) == S_IFGITLINK
    if stat.S_ISDIR(st.st_mode):
        return None if is_gitlink else Change.TYPECHANGE
    if is_gitlink or stat.S_IFMT(st.st_mode) != stat.S_IFMT(entry.mode):
        return Change.TYPECHANGE

    if stat.S_ISREG(st.st_mode):
        if cleanup_mode(st.st_mode) != cleanup_mode(entry.mode):
            return Change.MODIFIED
        if st.st_size != entry.size:
            return Change.MODIFIED

    blob = blob_from_path_and_stat(fs_path, st)
    return None if blob.id == entry.sha else Change.MODIFIED


def _nested_repositories(
    repo: Repo,
    tracked: dict[bytes, IndexEntry],
    ignore_manager: IgnoreFilterManager,
    include_ignored: bool,
) -> Iterator[StatusEntry]:
    """Yield one ``dir/`` entry per untracked directory holding its own repository.

    Submodules registered in the index as gitlinks, and directories whose
    contents are tracked, are not reported.
    """
    for dirpath, dirnames, _ in os.walk(repo.path):
        kept = []
        for name in sorted(dirnames):
            if name == CONTROL_DIR:
                continue
            full = os.path.join(dirpath, name)
            tree_path = os.path.relpath(full, repo.path).replace(os.sep, "/")
            is_repository = os.path.lexists(os.path.join(full, CONTROL_DIR))
            if ignore_manager.is_ignored(tree_path + "/"):
                if is_repository and include_ignored:
                    yield StatusEntry(path=tree_path + "/", state=EntryState.IGNORED)
            elif is_repository:
                key = os.fsencode(tree_path)
                prefix = key + b"/"
                if key in tracked or any(p.startswith(prefix) for p in tracked):
                    continue
                yield StatusEntry(path=tree_path + "/", state=EntryState.UNTRACKED)
            else:
                kept.append(name)
        dirnames[:] = kept


def _untracked_entries(
    repo: Repo, index: Index, tracked: dict[bytes, IndexEntry], include_ignored: bool
) -> list[StatusEntry]:
    paths = porcelain.get_untracked_paths(
        repo.path,
        repo.path,
        index,
        exclude_ignored=not include_ignored,
        untracked_files="all",
    )
    ignore_manager = IgnoreFilterManager.from_repo(repo)

    entries: dict[str, StatusEntry] = {}
    for path in paths:
        tree_path = path.replace(os.sep, "/")
        state = EntryState.UNTRACKED
        if include_ignored and ignore_manager.is_ignored(tree_path):
            state = EntryState.IGNORED
        entries[tree_path] = StatusEntry(path=tree_path, state=state)

    for entry in _nested_repositories(repo, tracked, ignore_manager, include_ignored):
        entries.setdefault(entry.path, entry)
    return [entries[path] for path in sorted(entries)]


def collect_status(repo: Repo, options: StatusOptions | None = None) -> list[StatusEntry]:
    """Collect every changed, untracked and (optionally) ignored path.

    Untracked directories are always expanded to their individual files.
    """
    options = options or StatusOptions()
    head = _head_tree(repo)
    index = repo.open_index()
    tracked, conflicted = _split_index(index)

    staged = _index_changes(head, tracked, conflicted, options.detect_renames)

    root = os.fsencode(repo.path)
    unstaged: dict[bytes, Change] = {}
    for path, entry in tracked.items():
        change = _worktree_change(root, path, entry)
        if change is not None:
            unstaged[path] = change
    for path in sorted(conflicted):
        unstaged[path] = Change.MODIFIED

    changed = sorted(staged.keys() | unstaged.keys())
    entries = [
        StatusEntry(
            path=os.fsdecode(path),
            staged=frozenset([staged[path]]) if path in staged else frozenset(),
            unstaged=frozenset([unstaged[path]]) if path in unstaged else frozenset(),
        )
        for path in changed
    ]
    entries.extend(_untracked_entries(repo, index, tracked, options.include_ignored))

    logger.debug(
        "status for %s: %d tracked change(s), %d conflicted, %d untracked or ignored",
        repo.path, len(changed), len(conflicted), len(entries) - len(changed),
    )
    return entries
