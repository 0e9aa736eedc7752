"""Git remote operations."""

from pathlib import Path

from gitagent.git.auth import DIRECTION_PULL, DIRECTION_PUSH, build_auth_header
from gitagent.git.runner import PULL_TIMEOUT, PUSH_TIMEOUT, Git, GitResult


def _auth_args(git: Git, repo: Path, token: str | None, remote: str | None, direction: str) -> list[str]:
    clean_token = (token or "").strip()
    if not clean_token:
        return []
    header = build_auth_header(git, repo, clean_token, remote=remote, direction=direction)
    return ["-c", f"http.extraHeader={header}"]


def push(
    git: Git,
    repo: Path,
    remote: str | None = None,
    branch: str | None = None,
    set_upstream: bool = False,
    token: str | None = None,
) -> GitResult:
    """
    Push to remote.

    With a token, the remote must be HTTP(S); the token is sent as a header
    for this invocation only and never stored in git config.
    """
    args = _auth_args(git, repo, token, remote, DIRECTION_PUSH) + ["push"]
    if set_upstream:
        args.append("--set-upstream")
    if remote:
        args.append(remote)
    if branch:
        args.append(branch)
    return git(repo, args, timeout=PUSH_TIMEOUT)


def pull_strategy_args(rebase: bool = False, ff_only: bool = True) -> list[str]:
    """Reconcile flags for pull: fast-forward only unless rebase or merge is chosen."""
    if rebase:
        return ["--rebase=true", "--ff"]
    if not ff_only:
        return ["--rebase=false", "--ff"]
    return ["--ff-only"]


def pull(
    git: Git,
    repo: Path,
    remote: str | None = None,
    branch: str | None = None,
    rebase: bool = False,
    ff_only: bool = True,
    token: str | None = None,
) -> GitResult:
    """Pull from remote, fast-forward only by default."""
    args = _auth_args(git, repo, token, remote, DIRECTION_PULL) + ["pull"]
    args += pull_strategy_args(rebase=rebase, ff_only=ff_only)
    if remote:
        args.append(remote)
    if branch:
        args.append(branch)
    return git(repo, args, timeout=PULL_TIMEOUT)
