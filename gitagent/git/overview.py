"""
Multi-repository status overview.

Scans a directory tree for repositories and summarises each one. A fixed pool
of workers pulls repository indices from one shared counter, so no more than
OVERVIEW_WORKERS git processes run at once however many repositories exist.
"""

import itertools
import locale
import logging
import math
from concurrent.futures import ThreadPoolExecutor
from pathlib import Path

from gitagent.git.branch import get_info
from gitagent.git.errors import GitError
from gitagent.git.runner import Git
from gitagent.git.scan import scan_repositories
from gitagent.git.status import get_status, get_status_overview
from gitagent.git.types import (
    OVERVIEW_BUCKETS,
    CategorizedStatus,
    ChangeRow,
    OverviewRow,
    RepositoryHandle,
    StatusEntry,
)

logger = logging.getLogger(__name__)

OVERVIEW_WORKERS = 4
OVERVIEW_MAX_DEPTH = 4
DEFAULT_MAX_REPOS = 200
MAX_REPOS_LIMIT = 500

SAMPLE_LIMIT = 8
CHANGES_LIMIT = 250
IGNORED_LIMIT = 800
CHANGE_ROWS_LIMIT = 800

# Merge order for changes_by_path
MERGE_ORDER = ("conflicted", "untracked", "unstaged", "staged")


def clamp_max_repos(max_repos) -> int:
    """Clamp a requested repository limit into [1, MAX_REPOS_LIMIT]."""
    if isinstance(max_repos, bool) or not isinstance(max_repos, (int, float)) or not math.isfinite(max_repos):
        return DEFAULT_MAX_REPOS
    return max(1, min(MAX_REPOS_LIMIT, int(max_repos)))


def _paths(entries: list[StatusEntry], limit: int) -> list[str]:
    return [e.path for e in entries[:limit] if e.path]


def _merge_char(existing: str, new: str) -> str:
    if not new:
        return existing
    if existing in (" ", "?") or new != " ":
        return new
    return existing


def classify_change(flags: dict[str, bool]) -> str:
    """Single label for a merged row: conflicted > untracked > both > staged > unstaged."""
    if flags.get("conflicted"):
        return "conflicted"
    if flags.get("untracked"):
        return "untracked"
    if flags.get("staged") and flags.get("unstaged"):
        return "staged+unstaged"
    if flags.get("staged"):
        return "staged"
    if flags.get("unstaged"):
        return "unstaged"
    return "unknown"


def merge_changes(status: CategorizedStatus, limit: int = CHANGE_ROWS_LIMIT) -> dict[str, ChangeRow]:
    """
    Merge the four change buckets into one row per path.

    Flags accumulate and are never cleared. Returns rows keyed by path in
    path order.
    """
    rows: dict[str, ChangeRow] = {}
    for bucket in MERGE_ORDER:
        for entry in getattr(status, bucket)[:limit]:
            if not entry.path:
                continue
            row = rows.get(entry.path)
            if row is None:
                row = ChangeRow(path=entry.path, flags={name: False for name in OVERVIEW_BUCKETS})
                rows[entry.path] = row
            row.flags[bucket] = True
            if entry.original_path and not row.orig_path:
                row.orig_path = entry.original_path
            row.x = _merge_char(row.x, entry.index_state)
            row.y = _merge_char(row.y, entry.worktree_state)

    for row in rows.values():
        row.kind = classify_change(row.flags)
    return {path: rows[path] for path in sorted(rows, key=locale.strxfrm)}


def _minimal_row(repo: RepositoryHandle, ok: bool, branch: str | None = None) -> OverviewRow:
    return OverviewRow(path=repo.path, relative_path=repo.relative_path, name=repo.name, ok=ok, branch=branch)


def summarize_repository(git: Git, repo: RepositoryHandle) -> OverviewRow:
    """Build the overview row for one repository."""
    try:
        info = get_info(git, Path(repo.path))
    except GitError:
        info = None
    if info is None or not info.ok:
        return _minimal_row(repo, ok=False)

    try:
        # Untracked files count as dirty here, and the ignored list is wanted even for clean repos
        shallow = get_status_overview(git, Path(repo.path), include_untracked=True)
        dirty = any(getattr(shallow, bucket) for bucket in OVERVIEW_BUCKETS)

        if not dirty:
            row = _minimal_row(repo, ok=True, branch=info.branch)
            row.ignored = _paths(shallow.ignored, IGNORED_LIMIT)
            row.ignored_count = len(shallow.ignored)
            return row

        try:
            full = get_status(git, Path(repo.path))
        except GitError as e:
            logger.warning(f"Full status failed for {repo.path}, using quick status: {e}")
            full = shallow

        return OverviewRow(
            path=repo.path,
            relative_path=repo.relative_path,
            name=repo.name,
            ok=True,
            branch=info.branch,
            dirty=True,
            counts={bucket: len(getattr(full, bucket)) for bucket in OVERVIEW_BUCKETS},
            sample={bucket: _paths(getattr(full, bucket), SAMPLE_LIMIT) for bucket in OVERVIEW_BUCKETS},
            changes={bucket: _paths(getattr(full, bucket), CHANGES_LIMIT) for bucket in OVERVIEW_BUCKETS},
            changes_by_path=merge_changes(full),
            ignored=_paths(full.ignored, IGNORED_LIMIT),
            ignored_count=len(full.ignored),
        )
    except GitError as e:
        logger.warning(f"Status failed for {repo.path}: {e}")
        return _minimal_row(repo, ok=True, branch=info.branch)


def build_overview(git: Git, root: str, max_repos: int = DEFAULT_MAX_REPOS) -> list[OverviewRow]:
    """
    Summarise every repository found below root.

    Args:
        git: Bound git runner shared by all workers
        root: Directory to scan
        max_repos: Maximum number of repositories, clamped to [1, 500]

    Returns:
        One row per repository, sorted by relative path
    """
    repos = scan_repositories(str(root), max_depth=OVERVIEW_MAX_DEPTH, max_results=clamp_max_repos(max_repos))
    rows: list[OverviewRow] = []
    cursor = itertools.count()

    def worker():
        while True:
            index = next(cursor)
            if index >= len(repos):
                return
            rows.append(summarize_repository(git, repos[index]))

    if repos:
        with ThreadPoolExecutor(max_workers=OVERVIEW_WORKERS) as pool:
            futures = [pool.submit(worker) for _ in range(min(OVERVIEW_WORKERS, len(repos)))]
            for future in futures:
                future.result()

    rows.sort(key=lambda row: locale.strxfrm(row.relative_path or row.name))
    return rows
