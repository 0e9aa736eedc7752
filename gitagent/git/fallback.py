"""
Ordered command recipes for operations whose git syntax changed over time.

A recipe is a list of steps run in sequence. Recipes are tried in order; a
recipe is abandoned for the next one only when git says it does not know a
subcommand or option used (UnsupportedCommandError). Any other failure is the
operation's outcome.
"""

import logging
from dataclasses import dataclass
from pathlib import Path

from gitagent.git.errors import GitCommandError, UnsupportedCommandError
from gitagent.git.runner import DEFAULT_TIMEOUT, Git, GitResult

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Step:
    """One git invocation within a recipe."""
    args: tuple[str, ...]
    tolerate_failure: bool = False  # Command failures are logged and skipped


Recipe = list[Step]


def run_recipes(git: Git, repo: Path, recipes: list[Recipe], timeout: float = DEFAULT_TIMEOUT) -> GitResult | None:
    """
    Run the first recipe the resolved git supports.

    Returns:
        Result of the last step that ran successfully, or None

    Raises:
        UnsupportedCommandError: no recipe is supported
        GitError: any other failure of a non-tolerant step
    """
    last_error: UnsupportedCommandError | None = None
    for recipe in recipes:
        try:
            return _run_steps(git, repo, recipe, timeout)
        except UnsupportedCommandError as e:
            logger.debug(f"Falling back from 'git {' '.join(recipe[0].args)}': {e}")
            last_error = e
    if last_error is None:
        raise ValueError("run_recipes needs at least one recipe")
    raise last_error


def _run_steps(git: Git, repo: Path, recipe: Recipe, timeout: float) -> GitResult | None:
    result = None
    for step in recipe:
        try:
            result = git(repo, list(step.args), timeout=timeout)
        except GitCommandError as e:
            if not step.tolerate_failure:
                raise
            logger.debug(f"Ignoring failure of 'git {' '.join(step.args)}': {e}")
    return result


def unstage_recipes(targets: list[str]) -> list[Recipe]:
    return [
        [Step(("restore", "--staged", "--", *targets))],
        [Step(("reset", "-q", "HEAD", "--", *targets))],
    ]


def restore_recipes(targets: list[str]) -> list[Recipe]:
    return [
        [Step(("restore", "--source=HEAD", "--staged", "--worktree", "--", *targets))],
        [
            # checkout reports the real error if reset could not run
            Step(("reset", "-q", "HEAD", "--", *targets), tolerate_failure=True),
            Step(("checkout", "--", *targets)),
        ],
    ]
