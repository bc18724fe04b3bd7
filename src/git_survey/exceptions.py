"""Per-repository failures.

Every failure is recoverable at the scan level: the orchestrator reports it
inline and moves on to the next repository.
"""

from __future__ import annotations


class RepoFailure(Exception):
    """Base class for a candidate path that could not be summarized."""

    def __init__(self, message: str) -> None:
        super().__init__(message)
        self.message = message


class OpenFailed(RepoFailure):
    def __init__(self, path: str) -> None:
        super().__init__(f"failed to open: {path}")
        self.path = path


class BareRepository(RepoFailure):
    def __init__(self) -> None:
        super().__init__("cannot report status on bare repository")


class StatusQueryFailed(RepoFailure):
    def __init__(self, reason: str) -> None:
        super().__init__(f"failed to fetch status: {reason}")
        self.reason = reason


class BranchResolutionFailed(RepoFailure):
    def __init__(self, reason: str) -> None:
        super().__init__(f"failed to resolve branch: {reason}")
        self.reason = reason
