"""Tests for gitagent.git.status module."""

from pathlib import Path

from gitagent.git.status import (
    categorize_status,
    get_status,
    get_status_overview,
    parse_status_porcelain_z,
)
from gitagent.git.types import StatusEntry


class TestParseStatusPorcelainZ:
    """Test parsing of `git status --porcelain=v1 -z` output."""

    def test_untracked(self):
        entries = parse_status_porcelain_z("?? newfile.txt\0")
        assert entries == [StatusEntry("newfile.txt", "?", "?")]

    def test_empty_output(self):
        assert parse_status_porcelain_z("") == []

    def test_path_with_spaces(self):
        entries = parse_status_porcelain_z(" M dir/my file.txt\0")
        assert entries[0].path == "dir/my file.txt"

    def test_rename_consumes_two_records(self):
        entries = parse_status_porcelain_z("R  old.txt\0new.txt\0 M other.txt\0")
        assert entries == [
            StatusEntry("new.txt", "R", " ", original_path="old.txt"),
            StatusEntry("other.txt", " ", "M"),
        ]

    def test_copy_in_worktree_column(self):
        entries = parse_status_porcelain_z(" C src.py\0copy.py\0")
        assert entries == [StatusEntry("copy.py", " ", "C", original_path="src.py")]

    def test_rename_without_pair_is_dropped(self):
        assert parse_status_porcelain_z("R  old.txt\0") == []

    def test_short_records_skipped(self):
        entries = parse_status_porcelain_z("M\0 M a.txt\0")
        assert entries == [StatusEntry("a.txt", " ", "M")]

    def test_paired_record_not_reparsed(self):
        # "?? looks-like-status" would parse as untracked if the cursor moved by 1
        entries = parse_status_porcelain_z("R  a\0?? looks-like-status\0")
        assert len(entries) == 1
        assert entries[0].path == "?? looks-like-status"
        assert entries[0].original_path == "a"


class TestCategorizeStatus:
    """Test bucketing of status entries."""

    def test_untracked_only(self):
        status = categorize_status(parse_status_porcelain_z("?? newfile.txt\0"))
        assert [e.path for e in status.untracked] == ["newfile.txt"]
        assert status.staged == status.unstaged == status.conflicted == status.ignored == []

    def test_staged_rename(self):
        status = categorize_status(parse_status_porcelain_z("R  old.txt\0new.txt\0"))
        assert [e.path for e in status.staged] == ["new.txt"]
        assert status.unstaged == []

    def test_staged_and_unstaged(self):
        status = categorize_status([StatusEntry("a.txt", "M", "M")])
        assert [e.path for e in status.staged] == ["a.txt"]
        assert [e.path for e in status.unstaged] == ["a.txt"]

    def test_conflicts_only_in_conflicted(self):
        entries = [
            StatusEntry("u.txt", "U", "U"),
            StatusEntry("au.txt", "A", "U"),
            StatusEntry("aa.txt", "A", "A"),
            StatusEntry("dd.txt", "D", "D"),
        ]
        status = categorize_status(entries)
        assert [e.path for e in status.conflicted] == ["aa.txt", "au.txt", "dd.txt", "u.txt"]
        assert status.staged == [] and status.unstaged == []

    def test_ignored(self):
        status = categorize_status([StatusEntry("build/", "!", "!")])
        assert [e.path for e in status.ignored] == ["build/"]
        assert status.untracked == []

    def test_buckets_sorted_by_path(self):
        status = categorize_status([StatusEntry("b.txt", " ", "M"), StatusEntry("a.txt", " ", "M")])
        assert [e.path for e in status.unstaged] == ["a.txt", "b.txt"]

    def test_idempotent(self):
        entries = parse_status_porcelain_z("M  a\0 M b\0?? c\0UU d\0!! e\0")
        assert categorize_status(entries) == categorize_status(entries)

    def test_every_entry_lands_somewhere(self):
        entries = parse_status_porcelain_z("M  a\0 M b\0?? c\0UU d\0!! e\0MM f\0")
        status = categorize_status(entries)
        buckets = status.staged + status.unstaged + status.untracked + status.conflicted + status.ignored
        assert {e.path for e in buckets} == {e.path for e in entries}


class TestGetStatus:
    """Test status commands issued."""

    def test_full_status_args(self, git, runner):
        runner.script = lambda args: " M a.txt\0?? b.txt\0!! c.log\0"
        status = get_status(git, Path("/repo"))
        assert runner.commands == [["status", "--porcelain=v1", "-z", "-uall", "--ignored=matching"]]
        assert [e.path for e in status.ignored] == ["c.log"]

    def test_overview_skips_untracked_by_default(self, git, runner):
        runner.script = lambda args: " M a.txt\0"
        status = get_status_overview(git, Path("/repo"))
        assert runner.commands == [["--no-optional-locks", "status", "--porcelain=v1", "-z", "-uno"]]
        assert runner.calls[0].timeout == 5
        assert status.untracked == [] and status.ignored == []
        assert [e.path for e in status.unstaged] == ["a.txt"]

    def test_overview_with_untracked(self, git, runner):
        runner.script = lambda args: "?? b.txt\0"
        status = get_status_overview(git, Path("/repo"), include_untracked=True)
        assert runner.commands[0][-2:] == ["-uall", "--ignored=matching"]
        assert [e.path for e in status.untracked] == ["b.txt"]
