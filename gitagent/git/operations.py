"""
Repository operations exposed to tool-calling clients.

RepositoryOperations is the single entry point: each method validates its
repository path through the injected validator, checks file arguments, and
composes the per-topic git helpers. Methods return result dataclasses (or raw
patch text for diff) and raise GitError subclasses on failure.
"""

import os
import posixpath
from pathlib import Path
from typing import Callable

from gitagent.git import branch as branch_ops, commit as commit_ops, diff as diff_ops, identity as identity_ops
from gitagent.git import remote as remote_ops, stash as stash_ops, status as status_ops
from gitagent.git.binary import GitBinaryResolver
from gitagent.git.errors import InvalidInputError
from gitagent.git.overview import DEFAULT_MAX_REPOS, build_overview
from gitagent.git.runner import Git, Runner, run_command
from gitagent.git.types import (
    CheckIgnoreResult,
    CommandOutput,
    ConflictVersions,
    Diagnosis,
    IdentityResult,
    OkResult,
    OverviewResult,
    RepoInfo,
    SetIdentityResult,
    StashPopResult,
    StashResult,
    StatusResult,
)

PathValidator = Callable[[str], str]


def is_repo_relative_path(candidate) -> bool:
    """True for a non-empty relative path that stays inside the repository."""
    if not isinstance(candidate, str) or not candidate.strip():
        return False
    if "\0" in candidate:
        return False
    if os.path.isabs(candidate) or posixpath.isabs(candidate.replace("\\", "/")):
        return False
    normalized = candidate.replace("\\", "/")
    if normalized == ".." or normalized.startswith("../") or "/../" in normalized or normalized.endswith("/.."):
        return False
    return True


def check_file_args(files, tool: str) -> list[str]:
    """Validate a list of file arguments, returning it as a list."""
    file_list = list(files or [])
    for file in file_list:
        if not is_repo_relative_path(file):
            raise InvalidInputError(f"Invalid file path for {tool}: {file}")
    return file_list


class RepositoryOperations:
    """Version-control operations on repositories below the allowed roots."""

    def __init__(
        self,
        validate_path: PathValidator,
        resolver: GitBinaryResolver | None = None,
        run: Runner = run_command,
    ):
        self.validate_path = validate_path
        self.resolver = resolver or GitBinaryResolver(run=run)
        self.git = Git(self.resolver, run=run)

    def _repo(self, path: str | None) -> Path:
        return Path(self.validate_path(path or "/"))

    # Read-only queries

    def info(self, path: str) -> RepoInfo:
        return branch_ops.get_info(self.git, self._repo(path))

    def status(self, path: str) -> StatusResult:
        return StatusResult(ok=True, status=status_ops.get_status(self.git, self._repo(path)))

    def status_overview(self, path: str, include_untracked: bool = False) -> StatusResult:
        repo = self._repo(path)
        return StatusResult(ok=True, status=status_ops.get_status_overview(self.git, repo, include_untracked))

    def diff(self, path: str, file: str, cached: bool = False, ref: str | None = None) -> str:
        repo = self._repo(path)
        if not is_repo_relative_path(file):
            raise InvalidInputError(f"Invalid file path for git_diff: {file}")
        return diff_ops.get_file_diff(self.git, repo, file, cached=cached, ref=ref)

    def check_ignore(self, path: str, files) -> CheckIgnoreResult:
        repo = self._repo(path)
        file_list = check_file_args(files, "git_check_ignore")
        if not file_list:
            raise InvalidInputError("git_check_ignore requires at least one file path.")
        return CheckIgnoreResult(ok=True, matches=commit_ops.check_ignore(self.git, repo, file_list))

    def conflict_versions(self, path: str, file: str) -> ConflictVersions:
        repo = self._repo(path)
        if not is_repo_relative_path(file):
            raise InvalidInputError(f"Invalid file path for git_conflict_versions: {file}")
        return diff_ops.get_conflict_versions(self.git, repo, file)

    def identity(self, path: str) -> IdentityResult:
        repo = self._repo(path)
        effective, local, global_ = identity_ops.read_identity(self.git, repo)
        return IdentityResult(
            ok=bool(effective.name and effective.email),
            repo_path=str(repo),
            effective=effective,
            local=local,
            global_=global_,
        )

    def diagnose(self, path: str) -> Diagnosis:
        return self.resolver.diagnose(str(self._repo(path)))

    def repos_overview(self, path: str, max_repos: int = DEFAULT_MAX_REPOS) -> OverviewResult:
        root = self._repo(path)
        return OverviewResult(ok=True, repos_root=str(root), repos=build_overview(self.git, str(root), max_repos))

    # Index and working tree

    def stage(self, path: str, files=()) -> OkResult:
        repo = self._repo(path)
        file_list = check_file_args(files, "git_stage")
        if file_list:
            commit_ops.stage_files(self.git, repo, file_list)
        else:
            commit_ops.stage_all(self.git, repo)
        return OkResult()

    def unstage(self, path: str, files=()) -> OkResult:
        repo = self._repo(path)
        commit_ops.unstage_files(self.git, repo, check_file_args(files, "git_unstage"))
        return OkResult()

    def untrack(self, path: str, files) -> OkResult:
        repo = self._repo(path)
        file_list = check_file_args(files, "git_untrack")
        if not file_list:
            raise InvalidInputError("git_untrack requires at least one file path.")
        commit_ops.untrack_files(self.git, repo, file_list)
        return OkResult()

    def restore(self, path: str, files=()) -> OkResult:
        repo = self._repo(path)
        commit_ops.restore_files(self.git, repo, check_file_args(files, "git_restore"))
        return OkResult()

    def checkout_conflict(self, path: str, file: str, source: str) -> OkResult:
        repo = self._repo(path)
        if not is_repo_relative_path(file):
            raise InvalidInputError(f"Invalid file path for git_checkout_conflict: {file}")
        if source not in diff_ops.CONFLICT_SIDES:
            raise InvalidInputError('git_checkout_conflict requires source to be "ours" or "theirs".')
        diff_ops.checkout_conflict_side(self.git, repo, file, source)
        return OkResult()

    def stash(self, path: str, include_untracked: bool = True, message: str = "") -> StashResult:
        return stash_ops.stash_push(self.git, self._repo(path), include_untracked=include_untracked, message=message)

    def stash_pop(self, path: str, ref: str | None = None, reinstate_index: bool = True) -> StashPopResult:
        return stash_ops.stash_pop(self.git, self._repo(path), ref=ref, reinstate_index=reinstate_index)

    # History and remotes

    def commit(
        self,
        path: str,
        message: str = "",
        amend: bool = False,
        signoff: bool = False,
        user_name: str | None = None,
        user_email: str | None = None,
    ) -> CommandOutput:
        result = commit_ops.commit(
            self.git, self._repo(path), message,
            amend=amend, signoff=signoff, user_name=user_name, user_email=user_email,
        )
        return CommandOutput(ok=True, stdout=result.stdout, stderr=result.stderr)

    def push(
        self,
        path: str,
        remote: str | None = None,
        branch: str | None = None,
        set_upstream: bool = False,
        token: str | None = None,
    ) -> CommandOutput:
        result = remote_ops.push(
            self.git, self._repo(path),
            remote=remote, branch=branch, set_upstream=set_upstream, token=token,
        )
        return CommandOutput(ok=True, stdout=result.stdout, stderr=result.stderr)

    def pull(
        self,
        path: str,
        remote: str | None = None,
        branch: str | None = None,
        rebase: bool = False,
        ff_only: bool = True,
        token: str | None = None,
    ) -> CommandOutput:
        result = remote_ops.pull(
            self.git, self._repo(path),
            remote=remote, branch=branch, rebase=rebase, ff_only=ff_only, token=token,
        )
        return CommandOutput(ok=True, stdout=result.stdout, stderr=result.stderr)

    def set_identity(self, path: str, name, email, scope: str = identity_ops.SCOPE_LOCAL) -> SetIdentityResult:
        repo = self._repo(path)
        written = identity_ops.write_identity(self.git, repo, name, email, scope=scope)
        return SetIdentityResult(ok=True, scope=written, repo_path=str(repo))
