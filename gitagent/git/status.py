"""Git status operations."""

import locale
from pathlib import Path

from gitagent.git.runner import DEFAULT_TIMEOUT, METADATA_TIMEOUT, Git
from gitagent.git.types import CategorizedStatus, StatusEntry

RENAME_OR_COPY = ("R", "C")
CONFLICT_PAIRS = ("AA", "DD")


def parse_status_porcelain_z(output: str) -> list[StatusEntry]:
    """
    Parse `git status --porcelain=v1 -z` output.

    -z format: "XY path\\0". When X or Y is R or C, the record is followed by
    one more path-only record: the entry's path. The first record's path is
    then the original path. Records shorter than 3 characters are skipped.

    Returns:
        Entries in wire order
    """
    tokens = [t for t in output.split("\0") if t]
    entries = []
    i = 0
    while i < len(tokens):
        token = tokens[i]
        i += 1
        if len(token) < 3:
            continue

        x, y = token[0], token[1]
        path = token[3:]

        if x in RENAME_OR_COPY or y in RENAME_OR_COPY:
            # git writes the destination first ("R  new\0old\0"), so for real
            # git output path and original_path come out swapped.
            # Always consume the paired record, even if it turns out empty
            new_path = tokens[i] if i < len(tokens) else None
            i += 1
            if new_path:
                entries.append(StatusEntry(new_path, x, y, original_path=path))
            continue

        if path:
            entries.append(StatusEntry(path, x, y))

    return entries


def _by_path(entries: list[StatusEntry]) -> list[StatusEntry]:
    return sorted(entries, key=lambda e: locale.strxfrm(e.path))


def categorize_status(entries: list[StatusEntry]) -> CategorizedStatus:
    """
    Bucket entries into staged/unstaged/untracked/conflicted/ignored.

    An entry with both index and worktree changes lands in staged and
    unstaged. Unmerged entries land only in conflicted.
    """
    status = CategorizedStatus()
    for entry in entries:
        xy = entry.xy
        if xy == "!!":
            status.ignored.append(entry)
            continue
        if xy == "??":
            status.untracked.append(entry)
            continue
        if "U" in xy or xy in CONFLICT_PAIRS:
            status.conflicted.append(entry)
            continue
        if entry.index_state and entry.index_state != " ":
            status.staged.append(entry)
        if entry.worktree_state and entry.worktree_state != " ":
            status.unstaged.append(entry)

    return CategorizedStatus(
        staged=_by_path(status.staged),
        unstaged=_by_path(status.unstaged),
        untracked=_by_path(status.untracked),
        conflicted=_by_path(status.conflicted),
        ignored=_by_path(status.ignored),
    )


def get_status(git: Git, repo: Path) -> CategorizedStatus:
    """Full status including every untracked and ignored file."""
    result = git(
        repo,
        ["status", "--porcelain=v1", "-z", "-uall", "--ignored=matching"],
        timeout=DEFAULT_TIMEOUT,
    )
    return categorize_status(parse_status_porcelain_z(result.stdout))


def get_status_overview(git: Git, repo: Path, include_untracked: bool = False) -> CategorizedStatus:
    """
    Quick status for dirtiness checks.

    Untracked files are skipped unless requested, which keeps this fast on
    large trees. Without them the untracked and ignored buckets are empty.
    """
    # --no-optional-locks is a global option and must precede the subcommand
    args = ["--no-optional-locks", "status", "--porcelain=v1", "-z"]
    if include_untracked:
        args += ["-uall", "--ignored=matching"]
    else:
        args.append("-uno")

    result = git(repo, args, timeout=METADATA_TIMEOUT)
    status = categorize_status(parse_status_porcelain_z(result.stdout))
    if not include_untracked:
        status.untracked = []
        status.ignored = []
    return status
