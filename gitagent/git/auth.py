"""One-shot HTTP auth headers for token-authenticated push and pull."""

import base64
from pathlib import Path

from gitagent.git.branch import get_config, get_upstream_remote
from gitagent.git.errors import AuthTransportError, InvalidInputError
from gitagent.git.runner import METADATA_TIMEOUT, Git

TOKEN_USERNAME = "x-access-token"
DEFAULT_REMOTE = "origin"

DIRECTION_PUSH = "push"
DIRECTION_PULL = "pull"


def basic_auth_header(token: str, username: str = TOKEN_USERNAME) -> str:
    """Format an HTTP Authorization header for basic auth."""
    encoded = base64.b64encode(f"{username}:{token}".encode("utf-8")).decode("ascii")
    return f"Authorization: Basic {encoded}"


def guess_remote(git: Git, repo: Path, direction: str) -> str:
    """
    Pick the remote a push or pull will talk to when none is given.

    Push: remote.pushDefault, then the upstream's remote.
    Pull: the upstream's remote, then remote.pushDefault.
    Falls back to origin. Each lookup that fails is skipped.
    """
    if direction == DIRECTION_PUSH:
        lookups = (
            lambda: get_config(git, repo, "remote.pushDefault"),
            lambda: get_upstream_remote(git, repo),
        )
    else:
        lookups = (
            lambda: get_upstream_remote(git, repo),
            lambda: get_config(git, repo, "remote.pushDefault"),
        )
    for lookup in lookups:
        remote = lookup()
        if remote:
            return remote
    return DEFAULT_REMOTE


def get_remote_url(git: Git, repo: Path, remote: str, direction: str) -> str:
    """URL of remote; for push the push URL is preferred over the fetch URL."""
    if direction == DIRECTION_PUSH:
        url = git.output(repo, ["remote", "get-url", "--push", remote], timeout=METADATA_TIMEOUT)
        if url:
            return url
    return git.output(repo, ["remote", "get-url", remote], timeout=METADATA_TIMEOUT)


def build_auth_header(
    git: Git,
    repo: Path,
    token: str,
    remote: str | None = None,
    direction: str = DIRECTION_PUSH,
) -> str:
    """
    Build an http.extraHeader value carrying token for a single push/pull.

    Raises:
        InvalidInputError: direction is not push or pull
        AuthTransportError: the remote URL is not http:// or https://
    """
    if direction not in (DIRECTION_PUSH, DIRECTION_PULL):
        raise InvalidInputError(f"Unknown auth direction: {direction}")

    remote_for_auth = remote or guess_remote(git, repo, direction)
    url = get_remote_url(git, repo, remote_for_auth, direction)
    if not url.startswith(("http://", "https://")):
        raise AuthTransportError(
            "Remote is not HTTPS; token auth is only supported for HTTPS remotes. "
            f"Configure an HTTPS remote or {direction} via SSH."
        )
    return basic_auth_header(token)
