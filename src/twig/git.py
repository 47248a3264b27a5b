"""Git repository operations."""

import logging
from dataclasses import dataclass
from pathlib import Path
from typing import NamedTuple, Optional, Protocol

from git import GitCommandNotFound, InvalidGitRepositoryError, NoSuchPathError, Repo

logger = logging.getLogger(__name__)

BRANCH_LISTING_FORMAT = "--format=%(committerdate:relative)\t%(refname:short)"
ORIGIN_HEAD_PREFIX = "refs/remotes/origin/"
FALLBACK_DEFAULT_BRANCHES = ("main", "master")


class GitError(Exception):
    """Git operation error that ends the run."""


@dataclass(frozen=True)
class Branch:
    """Local branch as reported by git."""

    name: str
    relative_age: str


class CommandResult(NamedTuple):
    """Outcome of a git command: stdout when ok, stderr otherwise."""

    ok: bool
    output: str


class CommandRunner(Protocol):
    """Everything the pruning loop needs from git."""

    def list_branches(self) -> list[Branch]: ...

    def default_branch(self) -> Optional[str]: ...

    def delete_branch(self, name: str) -> CommandResult: ...

    def force_delete_branch(self, name: str) -> CommandResult: ...


def parse_branch_listing(text: str) -> list[Branch]:
    """Parse ``for-each-ref`` output of ``<relative age>\\t<name>`` lines.

    Lines without a tab are dropped. Git's ordering is kept as is.
    """
    branches = []
    for line in text.splitlines():
        age, sep, name = line.partition("\t")
        if not sep:
            continue
        branches.append(Branch(name=name, relative_age=age))
    return branches


def exclude_branch(branches: list[Branch], name: Optional[str]) -> list[Branch]:
    """Drop the branch called ``name``, if any."""
    if not name:
        return list(branches)
    return [branch for branch in branches if branch.name != name]


def list_local_branches(runner: CommandRunner) -> list[Branch]:
    """List local branches, most recently committed first, minus the default branch."""
    default = runner.default_branch()
    logger.debug("Default branch: %s", default)
    return exclude_branch(runner.list_branches(), default)


class GitRepo:
    """Git repository operations."""

    def __init__(self, path: Path) -> None:
        """Initialize repository."""
        try:
            self.repo: Repo = Repo(path, search_parent_directories=True)
            if self.repo.bare:
                raise GitError("Cannot operate on bare repository")
        except (InvalidGitRepositoryError, NoSuchPathError) as err:
            raise GitError(f"Failed to open repository: {err}") from err

    def _git(self, command: str, *args: str) -> CommandResult:
        """Run a git subcommand without raising on a non-zero exit status.

        Raises:
            GitError: If git itself cannot be executed
        """
        argv = [command, *args]
        try:
            status, stdout, stderr = getattr(self.repo.git, command.replace("-", "_"))(
                *args,
                with_extended_output=True,
                with_exceptions=False,
            )
        except GitCommandNotFound as err:
            raise GitError(f"Failed to run git {command}: {err}") from err
        logger.debug("git %s exited with %s", " ".join(argv), status)
        if status == 0:
            return CommandResult(True, stdout.strip())
        return CommandResult(False, stderr.strip())

    def list_branches(self) -> list[Branch]:
        """Get local branches sorted by committer date, newest first.

        Raises:
            GitError: If git cannot enumerate the branches
        """
        result = self._git("for-each-ref", "--sort=-committerdate", BRANCH_LISTING_FORMAT, "refs/heads/")
        if not result.ok:
            raise GitError(f"git for-each-ref failed: {result.output}")
        return parse_branch_listing(result.output)

    def default_branch(self) -> Optional[str]:
        """Get the branch origin/HEAD points to.

        Without a remote HEAD, fall back to whichever of main or master exists locally.
        """
        result = self._git("symbolic-ref", "refs/remotes/origin/HEAD")
        if result.ok:
            if result.output.startswith(ORIGIN_HEAD_PREFIX):
                return result.output[len(ORIGIN_HEAD_PREFIX) :]
            return None

        for name in FALLBACK_DEFAULT_BRANCHES:
            if self._git("rev-parse", "--verify", f"refs/heads/{name}").ok:
                return name
        return None

    def delete_branch(self, name: str) -> CommandResult:
        """Delete a branch, refusing if it is not fully merged."""
        return self._git("branch", "-d", name)

    def force_delete_branch(self, name: str) -> CommandResult:
        """Delete a branch regardless of its merge status."""
        return self._git("branch", "-D", name)
