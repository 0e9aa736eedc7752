"""
Tool-call dispatch.

Maps a tool name plus its JSON arguments onto a RepositoryOperations method
and wraps the outcome in a response envelope. Every failure becomes an error
response; nothing escapes as an exception.
"""

import logging
from typing import Any, Callable

from gitagent.git.operations import RepositoryOperations
from gitagent.lib.responses import error_response, json_response, text_response
from gitagent.lib.validate import validate_tool_args

logger = logging.getLogger(__name__)

# Wrapper keys clients nest arguments under, and how deep to look
ENVELOPE_KEYS = ("input", "arguments")
MAX_ENVELOPE_DEPTH = 4


def normalize_input(envelope: Any) -> dict:
    """Unwrap tool arguments from input/arguments/params.* envelopes."""
    current = envelope
    for _ in range(MAX_ENVELOPE_DEPTH):
        if not isinstance(current, dict):
            break
        nested = next((current[k] for k in ENVELOPE_KEYS if isinstance(current.get(k), dict)), None)
        if nested is None:
            params = current.get("params")
            if isinstance(params, dict):
                nested = next((params[k] for k in ("arguments", "input") if isinstance(params.get(k), dict)), None)
        if nested is None:
            break
        current = nested
    return current if isinstance(current, dict) else {}


def _handlers(ops: RepositoryOperations, default_max_repos: int) -> dict[str, Callable[[dict], Any]]:
    return {
        "git_info": lambda a: ops.info(a["path"]),
        "git_status": lambda a: ops.status(a["path"]),
        "git_diff": lambda a: ops.diff(a["path"], a["file"], cached=a["cached"], ref=a["ref"]),
        "git_stage": lambda a: ops.stage(a["path"], a["files"]),
        "git_unstage": lambda a: ops.unstage(a["path"], a["files"]),
        "git_untrack": lambda a: ops.untrack(a["path"], a["files"]),
        "git_check_ignore": lambda a: ops.check_ignore(a["path"], a["files"]),
        "git_restore": lambda a: ops.restore(a["path"], a["files"]),
        "git_conflict_versions": lambda a: ops.conflict_versions(a["path"], a["file"]),
        "git_checkout_conflict": lambda a: ops.checkout_conflict(a["path"], a["file"], a["source"]),
        "git_stash": lambda a: ops.stash(a["path"], include_untracked=a["includeUntracked"], message=a["message"]),
        "git_stash_pop": lambda a: ops.stash_pop(a["path"], ref=a["ref"], reinstate_index=a["reinstateIndex"]),
        "git_commit": lambda a: ops.commit(
            a["path"], a["message"], amend=a["amend"], signoff=a["signoff"],
            user_name=a["userName"], user_email=a["userEmail"],
        ),
        "git_push": lambda a: ops.push(
            a["path"], remote=a["remote"], branch=a["branch"],
            set_upstream=a["setUpstream"], token=a["token"],
        ),
        "git_pull": lambda a: ops.pull(
            a["path"], remote=a["remote"], branch=a["branch"],
            rebase=a["rebase"], ff_only=a["ffOnly"], token=a["token"],
        ),
        "git_diagnose": lambda a: ops.diagnose(a["path"]),
        "git_repos_overview": lambda a: ops.repos_overview(
            a["path"], a["maxRepos"] if a.get("maxRepos") is not None else default_max_repos,
        ),
        "git_identity": lambda a: ops.identity(a["path"]),
        "git_set_identity": lambda a: ops.set_identity(a["path"], a["name"], a["email"], scope=a["scope"]),
    }


# Tools whose result is raw text rather than JSON
TEXT_TOOLS = {"git_diff"}


def dispatch(
    ops: RepositoryOperations,
    tool: str,
    envelope: Any,
    default_max_repos: int = 200,
    pretty: bool = False,
) -> dict:
    """
    Run one tool call and return its response envelope.

    Args:
        ops: Operations facade bound to the allowed roots
        tool: Tool name (e.g., "git_status")
        envelope: Parsed request body; arguments may be nested in it
        default_max_repos: maxRepos for git_repos_overview when not given
        pretty: Indent JSON results

    Returns:
        {"content": [...]} on success, with "isError": True on failure
    """
    try:
        handlers = _handlers(ops, default_max_repos)
        if tool not in handlers:
            return error_response(f"Unsupported tool: {tool}")
        args = validate_tool_args(tool, normalize_input(envelope))
        result = handlers[tool](args)
    except Exception as e:
        logger.debug(f"{tool} failed: {e}")
        return error_response(str(e) or type(e).__name__)

    if tool in TEXT_TOOLS:
        return text_response(result or "")
    return json_response(result, pretty=pretty)
