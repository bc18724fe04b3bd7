"""Shared fixtures: small on-disk repositories built with dulwich."""

from __future__ import annotations

from pathlib import Path

import pytest
from dulwich import porcelain
from dulwich.repo import Repo

AUTHOR = b"Test User <test@example.com>"


class RepoBuilder:
    """Creates files, stages and commits in a fresh repository on branch ``main``."""

    def __init__(self, root: Path) -> None:
        self.root = root
        root.mkdir(parents=True, exist_ok=True)
        self.repo = Repo.init(str(root))
        self.repo.refs.set_symbolic_ref(b"HEAD", b"refs/heads/main")

    def write(self, name: str, content: str = "content\n") -> Path:
        path = self.root / name
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text(content)
        return path

    def stage(self, *names: str) -> None:
        porcelain.add(self.repo, paths=[str(self.root / n) for n in names])

    def unstage(self, name: str) -> None:
        index = self.repo.open_index()
        del index[name.encode()]
        index.write()

    def commit(self, message: str = "commit") -> bytes:
        return porcelain.commit(
            self.repo, message=message.encode(), author=AUTHOR, committer=AUTHOR
        )

    def commit_files(self, **files: str) -> bytes:
        for name, content in files.items():
            self.write(name, content)
        self.stage(*files)
        return self.commit(f"add {', '.join(files)}")

    def set_upstream(self, sha: bytes, branch: str = "main", remote: str = "origin") -> None:
        self.repo.refs[f"refs/remotes/{remote}/{branch}".encode()] = sha
        config = self.repo.get_config()
        config.set((b"remote", remote.encode()), b"fetch",
                   f"+refs/heads/*:refs/remotes/{remote}/*".encode())
        config.set((b"branch", branch.encode()), b"remote", remote.encode())
        config.set((b"branch", branch.encode()), b"merge", f"refs/heads/{branch}".encode())
        config.write_to_path()

    def reset_branch(self, sha: bytes, branch: str = "main") -> None:
        self.repo.refs[f"refs/heads/{branch}".encode()] = sha

    def detach(self, sha: bytes) -> None:
        (self.root / ".git" / "HEAD").write_bytes(sha + b"\n")

    def close(self) -> None:
        self.repo.close()


@pytest.fixture
def make_repo(tmp_path):
    builders: list[RepoBuilder] = []

    def _make(name: str = "repo") -> RepoBuilder:
        builder = RepoBuilder(tmp_path / name)
        builders.append(builder)
        return builder

    yield _make
    for builder in builders:
        builder.close()


@pytest.fixture
def repo(make_repo) -> RepoBuilder:
    return make_repo()
