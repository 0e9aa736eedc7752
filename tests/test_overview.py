"""Tests for gitagent.git.overview module."""

import threading
import time

import pytest

from gitagent.git.errors import GitCommandError, GitTimeoutError
from gitagent.git.overview import (
    DEFAULT_MAX_REPOS,
    OVERVIEW_WORKERS,
    build_overview,
    clamp_max_repos,
    classify_change,
    merge_changes,
    summarize_repository,
)
from gitagent.git.types import CategorizedStatus, RepositoryHandle, StatusEntry

DIRTY_STATUS = " M a.txt\0?? new.txt\0!! build/\0"


def repo_script(status_output=DIRTY_STATUS):
    def reply(args):
        if args == ["rev-parse", "--is-inside-work-tree"]:
            return "true\n"
        if args == ["rev-parse", "--abbrev-ref", "HEAD"]:
            return "main\n"
        if "@{u}" in args:
            return GitCommandError("fatal: no upstream configured", 128)
        if args == ["remote"]:
            return "origin\n"
        if "status" in args:
            return status_output
        return ""
    return reply


def make_repos(root, names):
    for name in names:
        (root / name / ".git").mkdir(parents=True)


class TestClampMaxRepos:
    """Test clamp_max_repos function."""

    @pytest.mark.parametrize("value,expected", [
        (0, 1),
        (-5, 1),
        (1000, 500),
        (3.7, 3),
        (None, DEFAULT_MAX_REPOS),
        ("10", DEFAULT_MAX_REPOS),
        (True, DEFAULT_MAX_REPOS),
        (float("inf"), DEFAULT_MAX_REPOS),
        (float("nan"), DEFAULT_MAX_REPOS),
    ])
    def test_clamps(self, value, expected):
        assert clamp_max_repos(value) == expected


class TestMergeChanges:
    """Test merging status buckets into one row per path."""

    def test_staged_and_unstaged(self):
        entry = StatusEntry("a.txt", "M", "M")
        rows = merge_changes(CategorizedStatus(staged=[entry], unstaged=[entry]))
        row = rows["a.txt"]
        assert row.kind == "staged+unstaged"
        assert (row.x, row.y) == ("M", "M")
        assert row.flags == {"staged": True, "unstaged": True, "untracked": False, "conflicted": False}

    def test_untracked(self):
        rows = merge_changes(CategorizedStatus(untracked=[StatusEntry("b.txt", "?", "?")]))
        assert rows["b.txt"].kind == "untracked"
        assert (rows["b.txt"].x, rows["b.txt"].y) == ("?", "?")

    def test_conflict_outranks_everything(self):
        entry = StatusEntry("c.txt", "U", "U")
        rows = merge_changes(CategorizedStatus(conflicted=[entry], staged=[entry]))
        assert rows["c.txt"].kind == "conflicted"

    def test_rename_keeps_original_path(self):
        entry = StatusEntry("new.txt", "R", " ", original_path="old.txt")
        rows = merge_changes(CategorizedStatus(staged=[entry]))
        assert rows["new.txt"].orig_path == "old.txt"
        assert rows["new.txt"].kind == "staged"

    def test_rows_in_path_order(self):
        status = CategorizedStatus(
            staged=[StatusEntry("z.txt", "A", " ")],
            unstaged=[StatusEntry("a.txt", " ", "M")],
        )
        assert list(merge_changes(status)) == ["a.txt", "z.txt"]

    def test_limit_per_bucket(self):
        entries = [StatusEntry(f"f{i}.txt", " ", "M") for i in range(5)]
        assert len(merge_changes(CategorizedStatus(unstaged=entries), limit=2)) == 2


class TestClassifyChange:
    """Test classify_change function."""

    def test_unknown_without_flags(self):
        assert classify_change({}) == "unknown"

    def test_unstaged(self):
        assert classify_change({"unstaged": True}) == "unstaged"


class TestSummarizeRepository:
    """Test summarize_repository function."""

    def repo(self):
        return RepositoryHandle(path="/ws/app", relative_path="app", name="app")

    def test_not_a_work_tree(self, git, runner):
        runner.script = lambda args: "false\n"
        row = summarize_repository(git, self.repo())
        assert row.ok is False
        assert row.branch is None
        assert row.counts == {"staged": 0, "unstaged": 0, "untracked": 0, "conflicted": 0}

    def test_clean_repository(self, git, runner):
        runner.script = repo_script(status_output="")
        row = summarize_repository(git, self.repo())
        assert row.ok is True
        assert row.dirty is False
        assert row.branch == "main"
        assert row.ignored == [] and row.ignored_count == 0
        assert row.changes is None
        # Clean repos never run the full status
        assert sum(1 for args in runner.commands if args[0] == "status") == 0

    def test_dirty_repository(self, git, runner):
        runner.script = repo_script()
        row = summarize_repository(git, self.repo())
        assert row.dirty is True
        assert row.counts == {"staged": 0, "unstaged": 1, "untracked": 1, "conflicted": 0}
        assert row.sample["untracked"] == ["new.txt"]
        assert row.changes["unstaged"] == ["a.txt"]
        assert list(row.changes_by_path) == ["a.txt", "new.txt"]
        assert row.ignored == ["build/"]
        assert row.ignored_count == 1

    def test_status_failure_degrades_row(self, git, runner):
        def reply(args):
            if "status" in args:
                return GitTimeoutError(5)
            return repo_script()(args)
        runner.script = reply
        row = summarize_repository(git, self.repo())
        assert row.ok is True
        assert row.branch == "main"
        assert row.dirty is False
        assert row.changes is None


class TestBuildOverview:
    """Test build_overview function."""

    def test_rows_sorted_by_relative_path(self, tmp_path, git, runner):
        make_repos(tmp_path, ["zeta", "alpha", "group/beta"])
        runner.script = repo_script()
        rows = build_overview(git, str(tmp_path))
        assert [r.relative_path for r in rows] == ["alpha", "group/beta", "zeta"]
        assert all(r.ok and r.dirty for r in rows)

    def test_empty_root(self, tmp_path, git, runner):
        assert build_overview(git, str(tmp_path)) == []
        assert runner.calls == []

    def test_max_repos_limits_scan(self, tmp_path, git, runner):
        make_repos(tmp_path, ["a", "b", "c"])
        runner.script = repo_script()
        assert len(build_overview(git, str(tmp_path), max_repos=2)) == 2

    def test_concurrency_bounded(self, tmp_path, git, runner):
        make_repos(tmp_path, [f"repo{i:02d}" for i in range(12)])
        lock = threading.Lock()
        state = {"active": 0, "peak": 0}
        reply = repo_script()

        def instrumented(args):
            with lock:
                state["active"] += 1
                state["peak"] = max(state["peak"], state["active"])
            time.sleep(0.005)
            with lock:
                state["active"] -= 1
            return reply(args)

        runner.script = instrumented
        rows = build_overview(git, str(tmp_path))
        assert len(rows) == 12
        assert 1 <= state["peak"] <= OVERVIEW_WORKERS
