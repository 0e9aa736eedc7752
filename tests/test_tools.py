"""Tests for tool dispatch, argument validation and response envelopes."""

import json
from unittest.mock import MagicMock

import pytest

from gitagent.git.errors import NotARepositoryError
from gitagent.git.types import (
    CategorizedStatus,
    ChangeRow,
    ConflictVersions,
    Identity,
    IdentityResult,
    OverviewResult,
    OverviewRow,
    StatusEntry,
    StatusResult,
)
from gitagent.lib.responses import error_response, json_response, to_jsonable
from gitagent.lib.tools import dispatch, normalize_input
from gitagent.lib.validate import ValidationError, tool_names, validate_tool_args


def payload(response):
    return json.loads(response["content"][0]["text"])


class TestNormalizeInput:
    """Test unwrapping of argument envelopes."""

    def test_plain_arguments(self):
        assert normalize_input({"path": "/ws"}) == {"path": "/ws"}

    @pytest.mark.parametrize("envelope", [
        {"input": {"path": "/ws"}},
        {"arguments": {"path": "/ws"}},
        {"params": {"arguments": {"path": "/ws"}}},
        {"params": {"input": {"path": "/ws"}}},
        {"input": {"arguments": {"path": "/ws"}}},
    ])
    def test_nested(self, envelope):
        assert normalize_input(envelope) == {"path": "/ws"}

    @pytest.mark.parametrize("envelope", [None, "text", [1, 2]])
    def test_not_an_object(self, envelope):
        assert normalize_input(envelope) == {}


class TestValidateToolArgs:
    """Test schema validation of tool arguments."""

    def test_every_tool_has_schema(self):
        assert len(tool_names()) == 19
        assert "git_repos_overview" in tool_names()

    def test_missing_required(self):
        with pytest.raises(ValidationError, match="'path' is a required property"):
            validate_tool_args("git_status", {})

    def test_wrong_type_reports_location(self):
        with pytest.raises(ValidationError) as exc:
            validate_tool_args("git_stage", {"path": "/ws", "files": "a.txt"})
        assert exc.value.path == "files"
        assert exc.value.schema_name == "git_stage"

    def test_defaults_applied(self):
        args = validate_tool_args("git_pull", {"path": "/ws", "remote": None})
        assert args == {
            "path": "/ws", "remote": None, "branch": None,
            "rebase": False, "ffOnly": True, "token": None,
        }

    def test_default_list_not_shared(self):
        first = validate_tool_args("git_stage", {"path": "/ws"})
        first["files"].append("x")
        assert validate_tool_args("git_stage", {"path": "/ws"})["files"] == []

    def test_bad_enum(self):
        with pytest.raises(ValidationError):
            validate_tool_args("git_checkout_conflict", {"path": "/ws", "file": "a", "source": "base"})


class TestResponses:
    """Test response envelopes."""

    def test_error_response(self):
        assert error_response("boom") == {"content": [{"type": "text", "text": "Error: boom"}], "isError": True}

    def test_trailing_underscore_dropped(self):
        result = IdentityResult(
            ok=True, repo_path="/ws", effective=Identity("a", "b", "local"),
            local=Identity("a", "b"), global_=Identity(),
        )
        data = to_jsonable(result)
        assert "global" in data and "global_" not in data
        assert data["effective"]["source"] == "local"

    def test_field_names_camel_case(self):
        result = OverviewResult(ok=True, repos_root="/ws", repos=[OverviewRow(
            path="/ws/app", relative_path="app", name="app", ok=True, ignored_count=2,
            changes_by_path={"my_file.txt": ChangeRow(path="my_file.txt", flags={}, orig_path="old_name.txt")},
        )])
        data = to_jsonable(result)
        assert data["reposRoot"] == "/ws"
        row = data["repos"][0]
        assert row["relativePath"] == "app"
        assert row["ignoredCount"] == 2
        assert "ignored_count" not in row
        # Dict keys are data, not field names
        assert row["changesByPath"]["my_file.txt"]["origPath"] == "old_name.txt"
        assert "untracked" in row["counts"]

    def test_conflict_versions_camel_case(self):
        data = to_jsonable(ConflictVersions(ok=True, file="a", base="", ours="o", theirs="t", base_error="missing"))
        assert data["baseError"] == "missing"
        assert data["oursError"] is None

    def test_pretty(self):
        text = json_response({"ok": True}, pretty=True)["content"][0]["text"]
        assert text == '{\n  "ok": true\n}'


class TestDispatch:
    """Test dispatch function."""

    def test_status(self):
        ops = MagicMock()
        ops.status.return_value = StatusResult(
            ok=True, status=CategorizedStatus(untracked=[StatusEntry("new.txt", "?", "?")]),
        )
        response = dispatch(ops, "git_status", {"input": {"path": "/ws/app"}})
        ops.status.assert_called_once_with("/ws/app")
        assert "isError" not in response
        data = payload(response)
        assert data["status"]["untracked"] == [
            {"path": "new.txt", "indexState": "?", "worktreeState": "?", "originalPath": None},
        ]

    def test_unsupported_tool(self):
        response = dispatch(MagicMock(), "git_frobnicate", {"path": "/ws"})
        assert response["isError"] is True
        assert response["content"][0]["text"] == "Error: Unsupported tool: git_frobnicate"

    def test_invalid_arguments(self):
        ops = MagicMock()
        response = dispatch(ops, "git_status", {})
        assert response["isError"] is True
        assert "'path' is a required property" in response["content"][0]["text"]
        ops.status.assert_not_called()

    def test_operation_error(self):
        ops = MagicMock()
        ops.info.side_effect = NotARepositoryError()
        response = dispatch(ops, "git_info", {"path": "/ws"})
        assert response["isError"] is True
        assert response["content"][0]["text"].startswith("Error: Not a git repository")

    def test_diff_is_raw_text(self):
        ops = MagicMock()
        ops.diff.return_value = "diff --git a/a.txt b/a.txt\n"
        response = dispatch(ops, "git_diff", {"path": "/ws", "file": "a.txt", "ref": "HEAD"})
        ops.diff.assert_called_once_with("/ws", "a.txt", cached=False, ref="HEAD")
        assert response == {"content": [{"type": "text", "text": "diff --git a/a.txt b/a.txt\n"}]}

    def test_pull_defaults(self):
        ops = MagicMock()
        ops.pull.return_value = {"ok": True}
        dispatch(ops, "git_pull", {"path": "/ws"})
        ops.pull.assert_called_once_with("/ws", remote=None, branch=None, rebase=False, ff_only=True, token=None)

    def test_overview_default_limit(self):
        ops = MagicMock()
        ops.repos_overview.return_value = {"ok": True}
        dispatch(ops, "git_repos_overview", {"path": "/ws"}, default_max_repos=50)
        ops.repos_overview.assert_called_once_with("/ws", 50)

    def test_overview_explicit_limit(self):
        ops = MagicMock()
        ops.repos_overview.return_value = {"ok": True}
        dispatch(ops, "git_repos_overview", {"path": "/ws", "maxRepos": 7})
        ops.repos_overview.assert_called_once_with("/ws", 7)

    def test_stash_camel_case_arguments(self):
        ops = MagicMock()
        ops.stash.return_value = {"ok": True}
        dispatch(ops, "git_stash", {"path": "/ws", "includeUntracked": False, "message": "wip"})
        ops.stash.assert_called_once_with("/ws", include_untracked=False, message="wip")
