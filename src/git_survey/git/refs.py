"""Branch and upstream divergence resolution using dulwich."""

from __future__ import annotations

import logging

from dulwich.refs import SymrefLoop
from dulwich.repo import Repo

from ..exceptions import BranchResolutionFailed
from ..models import BranchState

logger = logging.getLogger(__name__)

HEADS_PREFIX = b"refs/heads/"
_SHORTHAND_PREFIXES = (HEADS_PREFIX, b"refs/tags/", b"refs/remotes/")


def shorthand(ref: bytes) -> str:
    """Short display form of a ref name: ``refs/heads/main`` becomes ``main``."""
    for prefix in _SHORTHAND_PREFIXES:
        if ref.startswith(prefix):
            ref = ref[len(prefix):]
            break
    return ref.decode("utf-8", errors="replace")


def _follow_head(repo: Repo) -> tuple[list[bytes], bytes | None]:
    return repo.refs.follow(b"HEAD")


def resolve_branch(repo: Repo) -> BranchState:
    """Resolve the checked-out branch.

    An unborn branch, a missing HEAD and a HEAD pointing directly at a commit
    all resolve to the detached state.

    Raises:
        BranchResolutionFailed: If HEAD cannot be read for any other reason.
    """
    try:
        refnames, sha = _follow_head(repo)
    except (SymrefLoop, KeyError, OSError, ValueError) as e:
        raise BranchResolutionFailed(str(e) or type(e).__name__) from e

    if sha is None:
        logger.debug("%s: HEAD is unborn", repo.path)
        return BranchState.detached()
    if not refnames or refnames[-1] == b"HEAD":
        return BranchState.detached()
    return BranchState.named(shorthand(refnames[-1]))


def _map_refspec(refspec: bytes, ref: bytes) -> bytes | None:
    """Map a ref through a fetch refspec such as ``+refs/heads/*:refs/remotes/origin/*``."""
    src, sep, dst = refspec.lstrip(b"+").partition(b":")
    if not sep:
        return None
    if src.endswith(b"*") and dst.endswith(b"*"):
        if ref.startswith(src[:-1]):
            return dst[:-1] + ref[len(src) - 1:]
        return None
    return dst if src == ref else None


def resolve_upstream(repo: Repo, branch_ref: bytes) -> bytes | None:
    """Return the remote-tracking ref configured as upstream of ``branch_ref``."""
    if not branch_ref.startswith(HEADS_PREFIX):
        return None
    section = (b"branch", branch_ref[len(HEADS_PREFIX):])
    config = repo.get_config()
    try:
        remote = config.get(section, b"remote")
        merge = config.get(section, b"merge")
    except KeyError:
        return None

    if remote == b".":
        return merge

    try:
        refspecs = list(config.get_multivar((b"remote", remote), b"fetch"))
    except KeyError:
        refspecs = []
    for refspec in refspecs:
        mapped = _map_refspec(refspec, merge)
        if mapped is not None:
            return mapped

    if merge.startswith(HEADS_PREFIX):
        return b"refs/remotes/" + remote + b"/" + merge[len(HEADS_PREFIX):]
    return None


def _has_exclusive_commits(repo: Repo, include: bytes, exclude: bytes) -> bool:
    walker = repo.get_walker(include=[include], exclude=[exclude])
    return next(iter(walker), None) is not None


def resolve_divergence(repo: Repo) -> tuple[bool, bool]:
    """Return ``(ahead, behind)`` relative to the upstream branch.

    Never raises: no upstream, detached or unborn HEAD and unreadable refs all
    give ``(False, False)``.
    """
    try:
        refnames, head = _follow_head(repo)
        if head is None:
            return False, False

        upstream_ref = resolve_upstream(repo, refnames[-1]) if refnames else None
        if upstream_ref is None:
            logger.debug("%s: no upstream configured", repo.path)
            return False, False

        upstream = repo.refs[upstream_ref]
        return (
            _has_exclusive_commits(repo, head, upstream),
            _has_exclusive_commits(repo, upstream, head),
        )
    except Exception as e:  # noqa: BLE001 - divergence is best effort
        logger.debug("%s: divergence unavailable: %s", repo.path, e)
        return False, False
