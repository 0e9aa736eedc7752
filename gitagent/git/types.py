"""
Shared data types for git operations.

Every operation result is a dataclass with an `ok` flag so the dispatcher can
serialise it without per-type code.
"""

from dataclasses import dataclass, field


@dataclass
class StatusEntry:
    """One path from `git status --porcelain=v1 -z`."""
    path: str
    index_state: str  # X column
    worktree_state: str  # Y column
    original_path: str | None = None  # Source path of a rename/copy

    @property
    def xy(self) -> str:
        return f"{self.index_state}{self.worktree_state}"


@dataclass
class CategorizedStatus:
    """Status entries bucketed by what kind of change they are."""
    staged: list[StatusEntry] = field(default_factory=list)
    unstaged: list[StatusEntry] = field(default_factory=list)
    untracked: list[StatusEntry] = field(default_factory=list)
    conflicted: list[StatusEntry] = field(default_factory=list)
    ignored: list[StatusEntry] = field(default_factory=list)


@dataclass(frozen=True)
class RepositoryHandle:
    """A repository root found under a scan root."""
    path: str
    relative_path: str  # Always '/'-separated
    name: str


@dataclass
class ChangeRow:
    """All buckets a single path appears in, merged."""
    path: str
    flags: dict[str, bool]
    x: str = " "
    y: str = " "
    kind: str = "unknown"
    orig_path: str | None = None


@dataclass
class OverviewRow:
    """Summary of one repository in a multi-repository overview."""
    path: str
    relative_path: str
    name: str
    ok: bool
    branch: str | None = None
    dirty: bool = False
    counts: dict[str, int] = field(default_factory=lambda: empty_buckets(0))
    sample: dict[str, list[str]] = field(default_factory=lambda: empty_buckets(list))
    changes: dict[str, list[str]] | None = None
    changes_by_path: dict[str, ChangeRow] | None = None
    ignored: list[str] | None = None
    ignored_count: int | None = None


OVERVIEW_BUCKETS = ("staged", "unstaged", "untracked", "conflicted")


def empty_buckets(value) -> dict:
    """A dict keyed by the overview buckets; value may be a factory."""
    return {name: value() if callable(value) else value for name in OVERVIEW_BUCKETS}


@dataclass
class RepoInfo:
    ok: bool
    branch: str | None = None
    upstream: str | None = None
    remotes: list[str] = field(default_factory=list)


@dataclass
class StatusResult:
    ok: bool
    status: CategorizedStatus


@dataclass
class OkResult:
    ok: bool = True


@dataclass
class CommandOutput:
    """Raw output of a mutating command that succeeded."""
    ok: bool
    stdout: str
    stderr: str


@dataclass
class IgnoreMatch:
    """One `git check-ignore -n` match."""
    source: str
    line: int | None
    pattern: str
    path: str


@dataclass
class CheckIgnoreResult:
    ok: bool
    matches: list[IgnoreMatch]


@dataclass
class ConflictVersions:
    """Three-way-merge stage contents of a conflicted file."""
    ok: bool
    file: str
    base: str
    ours: str
    theirs: str
    base_error: str | None = None
    ours_error: str | None = None
    theirs_error: str | None = None


@dataclass
class StashResult:
    ok: bool
    created: bool
    ref: str | None
    output: str


@dataclass
class StashPopResult:
    ok: bool
    conflicts: bool
    no_stash: bool
    output: str


@dataclass
class Identity:
    name: str | None = None
    email: str | None = None
    source: str | None = None  # "local", "global" or "none"; effective identity only


@dataclass
class IdentityResult:
    ok: bool
    repo_path: str
    effective: Identity
    local: Identity
    global_: Identity


@dataclass
class SetIdentityResult:
    ok: bool
    scope: str
    repo_path: str


@dataclass
class CandidateProbe:
    """Outcome of running `<candidate> --version`."""
    candidate: str
    version: str | None = None
    error: str | None = None


@dataclass
class Diagnosis:
    ok: bool
    repo_path: str
    cwd: str
    configured: str | None
    env_path: str | None
    selected: str | None
    selected_error: str | None
    candidates: list[CandidateProbe]


@dataclass
class OverviewResult:
    ok: bool
    repos_root: str
    repos: list[OverviewRow]
