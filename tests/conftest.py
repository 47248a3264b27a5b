"""Test configuration and fixtures."""

import time
from datetime import timedelta
from pathlib import Path
from typing import Callable

import pytest
from git import Actor, Repo

DAY = timedelta(days=1)


def git_date(age: timedelta) -> str:
    """Format a commit date ``age`` in the past the way git stores it."""
    return f"{int(time.time() - age.total_seconds())} +0000"


@pytest.fixture
def init_repo(tmp_path: Path) -> Callable[..., Repo]:
    """Return a factory for repositories with a single commit on ``main``."""

    def _init(name: str = "local", branch: str = "main") -> Repo:
        path = tmp_path / name
        path.mkdir()
        repo = Repo.init(path)

        author = Actor("Test User", "test@example.com")
        repo.config_writer().set_value("user", "name", author.name).release()
        repo.config_writer().set_value("user", "email", author.email).release()

        readme = path / "README.md"
        readme.write_text("# Test Repository")
        repo.index.add(["README.md"])
        date = git_date(365 * DAY)
        repo.index.commit("Initial commit", author=author, committer=author, author_date=date, commit_date=date)

        # Name the initial branch regardless of init.defaultBranch
        repo.git.branch("-M", branch)
        return repo

    return _init


def _commit_on(repo: Repo, branch: str, filename: str, age: timedelta) -> None:
    """Add a commit dated ``age`` ago on ``branch``, creating it from HEAD if needed."""
    if branch not in repo.heads:
        repo.create_head(branch)
    repo.heads[branch].checkout()

    author = Actor("Test User", "test@example.com")
    path = Path(repo.working_tree_dir) / filename
    path.write_text(f"{filename} content")
    repo.index.add([filename])
    date = git_date(age)
    repo.index.commit(f"Add {filename}", author=author, committer=author, author_date=date, commit_date=date)


@pytest.fixture
def commit_on() -> Callable[[Repo, str, str, timedelta], None]:
    """Return the helper that adds a dated commit to a branch."""
    return _commit_on


@pytest.fixture
def test_repo(init_repo: Callable[..., Repo]) -> Path:
    """Create a repository with one merged and one unmerged branch.

    - ``feature-x``: committed 2 days ago, fast-forwarded into main
    - ``old-stuff``: committed 3 months ago, not merged anywhere

    The checked out branch is ``main``.
    """
    repo = init_repo()

    _commit_on(repo, "old-stuff", "old.txt", 90 * DAY)

    repo.heads.main.checkout()
    _commit_on(repo, "feature-x", "feature.txt", 2 * DAY)

    repo.heads.main.checkout()
    repo.git.merge("--ff-only", "feature-x")

    return Path(repo.working_tree_dir)
