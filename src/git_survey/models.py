"""Data models for git-survey."""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum

from .exceptions import RepoFailure

DETACHED_LABEL = "HEAD (no branch)"


class Change(Enum):
    """One layer's change to a path."""

    NEW = "new"
    MODIFIED = "modified"
    DELETED = "deleted"
    RENAMED = "renamed"
    TYPECHANGE = "typechange"


class EntryState(Enum):
    TRACKED = "tracked"
    UNTRACKED = "untracked"
    IGNORED = "ignored"


class Category(Enum):
    NEW = "new"
    MODIFIED = "modified"
    DELETED = "deleted"
    RENAMED = "renamed"
    TYPECHANGED = "typechanged"
    IGNORED = "ignored"


@dataclass(frozen=True)
class BranchState:
    """Current branch, or ``name=None`` for a detached or unborn HEAD."""

    name: str | None = None

    @classmethod
    def named(cls, name: str) -> BranchState:
        return cls(name=name)

    @classmethod
    def detached(cls) -> BranchState:
        return cls(name=None)

    @property
    def is_detached(self) -> bool:
        return self.name is None

    @property
    def label(self) -> str:
        return self.name if self.name is not None else DETACHED_LABEL


@dataclass(frozen=True)
class StatusOptions:
    include_ignored: bool = False
    detect_renames: bool = True


@dataclass(frozen=True)
class StatusEntry:
    path: str
    state: EntryState = EntryState.TRACKED
    staged: frozenset[Change] = frozenset()
    unstaged: frozenset[Change] = frozenset()


@dataclass(frozen=True)
class StatusCounts:
    modified: int = 0
    new: int = 0
    deleted: int = 0
    renamed: int = 0
    typechanged: int = 0
    ignored: int = 0

    @property
    def total(self) -> int:
        return (
            self.modified + self.new + self.deleted
            + self.renamed + self.typechanged + self.ignored
        )

    @property
    def is_clean(self) -> bool:
        return self.total == 0


@dataclass(frozen=True)
class RepoSummary:
    branch: BranchState
    counts: StatusCounts = field(default_factory=StatusCounts)
    ahead: bool = False
    behind: bool = False
    highlighted: bool = False


@dataclass(frozen=True)
class RepoResult:
    """Outcome for one discovered repository: a summary or a failure, never both."""

    path: str
    summary: RepoSummary | None = None
    failure: RepoFailure | None = None

    def __post_init__(self) -> None:
        if (self.summary is None) == (self.failure is None):
            raise ValueError("RepoResult needs exactly one of summary or failure")

    @property
    def ok(self) -> bool:
        return self.summary is not None
