"""Git index and commit operations."""

import os
from pathlib import Path

from gitagent.git.fallback import restore_recipes, run_recipes, unstage_recipes
from gitagent.git.runner import COMMIT_TIMEOUT, DIFF_TIMEOUT, METADATA_TIMEOUT, Git, GitResult
from gitagent.git.types import IgnoreMatch

WHOLE_TREE = ["."]


def identity_overrides(user_name: str | None = None, user_email: str | None = None) -> list[str]:
    """`-c` options that set the commit identity for one invocation only."""
    args = []
    name = (user_name or "").strip()
    email = (user_email or "").strip()
    if name:
        args += ["-c", f"user.name={name}"]
    if email:
        args += ["-c", f"user.email={email}"]
    return args


def stage_all(git: Git, repo: Path) -> None:
    """Stage all changes (new, modified, deleted)."""
    git(repo, ["add", "-A"])


def stage_files(git: Git, repo: Path, files: list[str]) -> None:
    """
    Stage specific files.

    Files present on disk are added. Files that no longer exist are removed
    from the index only; unknown paths are ignored.
    """
    existing = [f for f in files if os.path.lexists(os.path.join(repo, f))]
    missing = [f for f in files if f not in existing]
    if existing:
        git(repo, ["add", "-A", "--", *existing])
    if missing:
        git(repo, ["rm", "--cached", "--ignore-unmatch", "--", *missing])


def unstage_files(git: Git, repo: Path, files: list[str] | None = None) -> None:
    """Unstage files (whole tree if none), via restore or reset on older git."""
    run_recipes(git, repo, unstage_recipes(list(files) if files else WHOLE_TREE))


def untrack_files(git: Git, repo: Path, files: list[str]) -> None:
    """Stop tracking files without deleting them from disk."""
    git(repo, ["rm", "--cached", "--", *files], timeout=DIFF_TIMEOUT)


def restore_files(git: Git, repo: Path, files: list[str] | None = None) -> None:
    """
    Discard staged and unstaged changes to files (whole tree if none).

    Prefers `git restore --source=HEAD --staged --worktree`; older git gets
    reset followed by checkout.
    """
    run_recipes(git, repo, restore_recipes(list(files) if files else WHOLE_TREE))


def check_ignore(git: Git, repo: Path, files: list[str]) -> list[IgnoreMatch]:
    """
    Report which ignore rule matches each file.

    Paths go in on stdin NUL-separated; output is source, line, pattern and
    path as four NUL-separated fields per path. Paths that match nothing
    come back with the first three fields empty. Exit code 1 means nothing
    matched.
    """
    result = git(
        repo,
        ["check-ignore", "-v", "-n", "-z", "--stdin"],
        timeout=METADATA_TIMEOUT,
        ok_codes=(0, 1),
        input="\0".join(files) + "\0",
    )
    # Empty fields are positional, so they must not be dropped
    tokens = result.stdout.split("\0") if result.stdout else []
    matches = []
    for i in range(0, len(tokens) - 3, 4):
        source, line_raw, pattern, path = tokens[i:i + 4]
        if not source:
            continue
        try:
            line = int(line_raw)
        except ValueError:
            line = None
        matches.append(IgnoreMatch(source=source, line=line, pattern=pattern, path=path))
    return matches


def commit(
    git: Git,
    repo: Path,
    message: str = "",
    amend: bool = False,
    signoff: bool = False,
    user_name: str | None = None,
    user_email: str | None = None,
) -> GitResult:
    """Create a commit; identity overrides are not written to config."""
    args = identity_overrides(user_name, user_email) + ["commit"]
    if amend:
        args.append("--amend")
    if signoff:
        args.append("--signoff")
    if message and message.strip():
        args += ["-m", message.strip()]
    return git(repo, args, timeout=COMMIT_TIMEOUT)
