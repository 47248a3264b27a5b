"""Interactive branch-by-branch pruning."""

import logging
from dataclasses import dataclass
from typing import Optional, Protocol

from rich.console import Console
from rich.text import Text

from twig.git import Branch, CommandRunner

logger = logging.getLogger(__name__)

CHOICES = "[y,n,f,q,?]"
HELP = "\n".join(
    [
        "y - delete this branch",
        "n - skip this branch",
        "f - force delete this branch",
        "q - quit",
        "? - print help",
    ]
)
INDENT = "    "


@dataclass
class Tally:
    """Counts for the final report."""

    deleted: int = 0
    skipped: int = 0

    def summary(self) -> str:
        noun = "branch" if self.deleted == 1 else "branches"
        return f"Done. Deleted {self.deleted} {noun}, skipped {self.skipped}."


class Prompter(Protocol):
    """Reads one answer per question."""

    def ask(self, message: str, style: str = "") -> str: ...


class ConsolePrompter:
    """Prompt on a rich console and read a line from stdin."""

    def __init__(self, console: Console) -> None:
        self.console = console

    def ask(self, message: str, style: str = "") -> str:
        """Show the message and return the raw line.

        End of input reads as an empty line.
        """
        self.console.print(Text(message, style=style), end="", soft_wrap=True)
        try:
            return self.console.input()
        except EOFError:
            self.console.print()
            return ""


def strip_hints(text: str) -> str:
    """Remove git's ``hint:`` advice lines."""
    return "\n".join(line for line in text.splitlines() if not line.startswith("hint:"))


def _say(console: Console, message: str) -> None:
    # Git output and branch names are printed exactly as git reports them
    console.print(message, markup=False, emoji=False, highlight=False, soft_wrap=True)


def _ask(prompter: Prompter, message: str, style: str = "") -> str:
    return prompter.ask(message, style).strip().lower()


def _choose(prompter: Prompter, console: Console, branch: Branch, position: int, total: int) -> str:
    message = f"({position}/{total}) Delete {branch.name} (last touched {branch.relative_age}) {CHOICES}? "
    while True:
        answer = _ask(prompter, message, style="bold")
        if answer != "?":
            return answer
        _say(console, HELP)


def _force_delete(runner: CommandRunner, console: Console, branch: Branch, tally: Tally) -> None:
    result = runner.force_delete_branch(branch.name)
    if result.ok:
        _say(console, f"{INDENT}{result.output}")
        tally.deleted += 1
    else:
        _say(console, f"{INDENT}Force-delete failed: {result.output}")


def prune(
    branches: list[Branch],
    runner: CommandRunner,
    prompter: Prompter,
    console: Optional[Console] = None,
) -> Tally:
    """Ask about each branch in turn and delete the ones the user picks.

    Args:
        branches: Branches in the order they should be offered
        runner: Git commands used for deletion
        prompter: Source of the user's answers
        console: Where progress and the summary are printed

    Returns:
        The final tally, also printed as the last line of output.
    """
    console = console or Console(highlight=False, emoji=False, soft_wrap=True)
    tally = Tally()
    total = len(branches)

    for position, branch in enumerate(branches, start=1):
        answer = _choose(prompter, console, branch, position, total)
        logger.debug("Answer for %s: %r", branch.name, answer)

        if answer == "y":
            result = runner.delete_branch(branch.name)
            if result.ok:
                _say(console, f"{INDENT}{result.output}")
                tally.deleted += 1
                continue
            _say(console, f"{INDENT}Failed: {strip_hints(result.output)}")
            if _ask(prompter, f"{INDENT}Force delete? [y/n]: ") == "y":
                _force_delete(runner, console, branch, tally)
        elif answer == "f":
            _force_delete(runner, console, branch, tally)
        elif answer == "q":
            _say(console, "Quit.")
            break
        else:
            tally.skipped += 1

    _say(console, "")
    _say(console, tally.summary())
    return tally
