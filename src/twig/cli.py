"""Command line interface for twig."""

import logging
from pathlib import Path
from typing import Annotated

import typer
from rich.console import Console

from twig.git import GitError, GitRepo, list_local_branches
from twig.prune import ConsolePrompter, prune

app = typer.Typer(help="Interactively delete local git branches")
console = Console(highlight=False, emoji=False, soft_wrap=True)
err_console = Console(stderr=True, highlight=False, emoji=False, soft_wrap=True)


def get_repo(path: Path) -> GitRepo:
    """Get git repository instance."""
    try:
        return GitRepo(path)
    except GitError as err:
        err_console.print(f"Error: {err}", markup=False)
        raise typer.Exit(code=1) from err


def setup_logging(log_level: str) -> None:
    """Send log records to stderr so prompts on stdout stay readable."""
    logging.basicConfig(
        level=getattr(logging, log_level.upper(), logging.WARNING),
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
        handlers=[logging.StreamHandler()],
        force=True,
    )


@app.command()
def main(
    path: Annotated[Path, typer.Option(help="Path to git repository")] = Path("."),
    log_level: Annotated[str, typer.Option(help="Logging level (DEBUG, INFO, WARNING, ERROR)")] = "WARNING",
) -> None:
    """Walk local branches, newest first, and choose what to delete."""
    setup_logging(log_level)
    repo = get_repo(path)

    try:
        branches = list_local_branches(repo)
        if not branches:
            console.print("No branches to delete.")
            return
        prune(branches, repo, ConsolePrompter(console), console)
    except GitError as err:
        err_console.print(f"Error: {err}", markup=False)
        raise typer.Exit(code=1) from err


if __name__ == "__main__":
    app()
