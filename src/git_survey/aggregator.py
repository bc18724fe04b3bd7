"""Per-repository status aggregation."""

from __future__ import annotations

import logging
from collections.abc import Collection
from pathlib import Path

from dulwich.errors import NotGitRepository
from dulwich.repo import Repo

from .classifier import tally
from .exceptions import BareRepository, OpenFailed, RepoFailure, StatusQueryFailed
from .git import collect_status, resolve_branch, resolve_divergence
from .models import BranchState, RepoResult, RepoSummary, StatusOptions

logger = logging.getLogger(__name__)


def _is_highlighted(branch: BranchState, ignore_list: Collection[str]) -> bool:
    """A branch is highlighted when a list is configured and the branch is not on it."""
    if not ignore_list:
        return False
    return branch.is_detached or branch.name not in ignore_list


def _open(repo_root: Path) -> Repo:
    try:
        return Repo(str(repo_root))
    except (NotGitRepository, OSError, ValueError) as e:
        logger.debug("cannot open %s: %s", repo_root, e)
        raise OpenFailed(str(repo_root)) from e


def _is_bare(repo: Repo) -> bool:
    return repo.bare or repo.get_config().get_boolean(b"core", b"bare", False)


def process(
    repo_root: Path | str,
    ignore_list: Collection[str] = (),
    options: StatusOptions | None = None,
) -> RepoSummary:
    """Build the status summary for the repository rooted at ``repo_root``.

    Raises:
        RepoFailure: The repository cannot be opened, is bare, or its status
            or branch cannot be read.
    """
    repo = _open(Path(repo_root))
    try:
        if _is_bare(repo):
            raise BareRepository()

        try:
            entries = collect_status(repo, options)
        except Exception as e:  # noqa: BLE001 - any read error fails this repository only
            raise StatusQueryFailed(str(e) or type(e).__name__) from e

        branch = resolve_branch(repo)
        counts = tally(entries)
        ahead, behind = resolve_divergence(repo)
    finally:
        repo.close()

    return RepoSummary(
        branch=branch,
        counts=counts,
        ahead=ahead,
        behind=behind,
        highlighted=_is_highlighted(branch, ignore_list),
    )


def describe(
    repo_root: Path | str,
    ignore_list: Collection[str] = (),
    options: StatusOptions | None = None,
    display_path: str | None = None,
) -> RepoResult:
    """Like :func:`process`, but report failures as a result instead of raising."""
    path = display_path if display_path is not None else str(repo_root)
    try:
        return RepoResult(path=path, summary=process(repo_root, ignore_list, options))
    except RepoFailure as e:
        logger.debug("%s: %s", path, e.message)
        return RepoResult(path=path, failure=e)
