"""Git branch and remote metadata queries."""

from pathlib import Path

from gitagent.git.errors import GitError
from gitagent.git.runner import METADATA_TIMEOUT, Git
from gitagent.git.types import RepoInfo


def is_inside_work_tree(git: Git, repo: Path) -> bool:
    """Check if repo is inside a git work tree."""
    return git.output(repo, ["rev-parse", "--is-inside-work-tree"]).startswith("true")


def get_current_branch(git: Git, repo: Path) -> str | None:
    """Get the current branch name ("HEAD" when detached), or None on error."""
    return git.output(repo, ["rev-parse", "--abbrev-ref", "HEAD"]) or None


def get_upstream(git: Git, repo: Path) -> str | None:
    """Get the upstream tracking branch (e.g. "origin/main"), or None."""
    return git.output(
        repo,
        ["rev-parse", "--abbrev-ref", "--symbolic-full-name", "@{u}"],
        timeout=METADATA_TIMEOUT,
    ) or None


def get_upstream_remote(git: Git, repo: Path) -> str | None:
    """Get the remote name of the upstream tracking branch, or None."""
    upstream = get_upstream(git, repo)
    if upstream and "/" in upstream:
        return upstream.split("/")[0]
    return None


def get_remotes(git: Git, repo: Path) -> list[str]:
    """List configured remote names."""
    output = git.output(repo, ["remote"])
    return [line.strip() for line in output.splitlines() if line.strip()]


def get_config(git: Git, repo: Path, key: str, global_scope: bool = False) -> str:
    """Read a config value, or "" if unset."""
    args = ["config", "--get"]
    if global_scope:
        args.append("--global")
    args.append(key)
    return git.output(repo, args, timeout=METADATA_TIMEOUT)


def get_info(git: Git, repo: Path) -> RepoInfo:
    """
    Get branch, upstream and remotes for a repository.

    Returns RepoInfo with ok=False when repo is not a work tree or git
    cannot be run there at all.
    """
    try:
        if not is_inside_work_tree(git, repo):
            return RepoInfo(ok=False)
    except GitError:
        return RepoInfo(ok=False)

    return RepoInfo(
        ok=True,
        branch=get_current_branch(git, repo),
        upstream=get_upstream(git, repo),
        remotes=get_remotes(git, repo),
    )
