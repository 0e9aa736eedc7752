"""Git diff and merge-conflict operations."""

from pathlib import Path

from gitagent.git.errors import GitError
from gitagent.git.runner import DEFAULT_TIMEOUT, DIFF_TIMEOUT, Git
from gitagent.git.types import ConflictVersions

CONFLICT_STAGES = {"base": 1, "ours": 2, "theirs": 3}
CONFLICT_SIDES = ("ours", "theirs")


def get_file_diff(git: Git, repo: Path, file: str, cached: bool = False, ref: str | None = None) -> str:
    """
    Get the patch for one file.

    Without ref: `git diff [--cached] -- file`.

    With ref, the first non-empty of:
      1. working tree vs ref
      2. index vs ref (changes that are staged but not in the working tree diff)
      3. /dev/null vs file with --no-index, so untracked files show as added

    Returns:
        Patch text, unmodified; "" if every attempt came up empty
    """
    base_ref = ref.strip() if isinstance(ref, str) and ref.strip() else None
    if not base_ref:
        args = ["diff", "--cached", "--", file] if cached else ["diff", "--", file]
        return git(repo, args, timeout=DIFF_TIMEOUT).stdout

    stdout = git(repo, ["diff", base_ref, "--", file], timeout=DIFF_TIMEOUT).stdout
    if stdout.strip():
        return stdout

    try:
        cached_stdout = git(repo, ["diff", "--cached", base_ref, "--", file], timeout=DIFF_TIMEOUT).stdout
        if cached_stdout.strip():
            return cached_stdout
    except GitError:
        pass

    try:
        # --no-index exits 1 when the files differ, which is the expected case
        return git(
            repo,
            ["diff", "--no-index", "--", "/dev/null", file],
            timeout=DIFF_TIMEOUT,
            ok_codes=(0, 1),
        ).stdout
    except GitError:
        return ""


def read_stage(git: Git, repo: Path, file: str, stage: int) -> tuple[str, str | None]:
    """Content of one index stage of file as (content, error)."""
    try:
        return git(repo, ["show", f":{stage}:{file}"], timeout=DEFAULT_TIMEOUT).stdout, None
    except GitError as e:
        return "", str(e)


def get_conflict_versions(git: Git, repo: Path, file: str) -> ConflictVersions:
    """
    Read base/ours/theirs for a conflicted file.

    A stage that does not exist (e.g. the file was added on one side only)
    yields empty content and its error message instead of failing.
    """
    base, base_error = read_stage(git, repo, file, CONFLICT_STAGES["base"])
    ours, ours_error = read_stage(git, repo, file, CONFLICT_STAGES["ours"])
    theirs, theirs_error = read_stage(git, repo, file, CONFLICT_STAGES["theirs"])
    return ConflictVersions(
        ok=True,
        file=file,
        base=base,
        ours=ours,
        theirs=theirs,
        base_error=base_error,
        ours_error=ours_error,
        theirs_error=theirs_error,
    )


def checkout_conflict_side(git: Git, repo: Path, file: str, source: str) -> None:
    """Resolve a conflicted file by taking one side ("ours" or "theirs")."""
    side = "--theirs" if source == "theirs" else "--ours"
    git(repo, ["checkout", side, "--", file], timeout=DIFF_TIMEOUT)
