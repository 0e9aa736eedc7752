"""Git stash operations."""

import logging
from pathlib import Path

from gitagent.git.errors import GitError
from gitagent.git.markers import (
    STASH_NOTHING_TO_SAVE,
    STASH_POP_CONFLICT,
    STASH_POP_ERROR,
    STASH_POP_MARKERS,
    STASH_POP_NO_STASH,
)
from gitagent.git.runner import DEFAULT_TIMEOUT, METADATA_TIMEOUT, STASH_POP_TIMEOUT, Git
from gitagent.git.types import StashPopResult, StashResult

logger = logging.getLogger(__name__)


def list_stashes(git: Git, repo: Path) -> str:
    """Raw `git stash list` output, or "" if it cannot be read."""
    try:
        return git(repo, ["stash", "list"], timeout=METADATA_TIMEOUT).stdout
    except GitError as e:
        logger.debug(f"git stash list failed in {repo}: {e}")
        return ""


def stash_push(git: Git, repo: Path, include_untracked: bool = True, message: str = "") -> StashResult:
    """
    Stash local changes.

    `git stash push` exits 0 even when there is nothing to save, so creation
    is decided by comparing the stash list before and after and by looking
    for the "no local changes" message.
    """
    before = list_stashes(git, repo)

    args = ["stash", "push"]
    if include_untracked:
        args.append("-u")
    clean_message = (message or "").strip()
    if clean_message:
        args += ["-m", clean_message]
    output = git(repo, args, timeout=DEFAULT_TIMEOUT).output

    after = list_stashes(git, repo)
    created = bool(
        after.strip()
        and after.strip() != before.strip()
        and STASH_NOTHING_TO_SAVE not in output.lower()
    )
    ref = None
    if created:
        first_line = after.splitlines()[0] if after.splitlines() else ""
        ref = first_line.split(":")[0].strip() or None
    return StashResult(ok=True, created=created, ref=ref, output=output)


def classify_stash_pop(output: str) -> StashPopResult:
    """Turn `git stash pop` output into an outcome (conflict > no stash > error)."""
    lowered = output.lower()
    found = {outcome for marker, outcome in STASH_POP_MARKERS if marker in lowered}
    conflicts = STASH_POP_CONFLICT in found
    no_stash = STASH_POP_NO_STASH in found
    error = not conflicts and not no_stash and STASH_POP_ERROR in found
    return StashPopResult(ok=not error, conflicts=conflicts, no_stash=no_stash, output=output)


def stash_pop(git: Git, repo: Path, ref: str | None = None, reinstate_index: bool = True) -> StashPopResult:
    """Apply and drop a stash. Exit code 1 (conflicted pop) is classified, not raised."""
    args = ["stash", "pop"]
    if reinstate_index:
        args.append("--index")
    if ref:
        args.append(ref)
    result = git(repo, args, timeout=STASH_POP_TIMEOUT, ok_codes=(0, 1))
    return classify_stash_pop(result.output)
