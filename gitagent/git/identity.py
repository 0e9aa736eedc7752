"""Committer identity (user.name / user.email)."""

from pathlib import Path

from gitagent.git.branch import get_config
from gitagent.git.errors import InvalidInputError
from gitagent.git.runner import METADATA_TIMEOUT, Git
from gitagent.git.types import Identity

MAX_CONFIG_VALUE_LEN = 200
SCOPE_LOCAL = "local"
SCOPE_GLOBAL = "global"


def normalize_config_value(value) -> str:
    """Trim a config value and reject control characters or oversize input."""
    if value is None:
        return ""
    clean = str(value).strip()
    if "\0" in clean or "\n" in clean or "\r" in clean:
        raise InvalidInputError("Invalid git config value (contains control characters).")
    if len(clean) > MAX_CONFIG_VALUE_LEN:
        raise InvalidInputError("Invalid git config value (too long).")
    return clean


def read_identity(git: Git, repo: Path) -> tuple[Identity, Identity, Identity]:
    """
    Read local and global identity.

    Returns:
        (effective, local, global). Effective takes each field from local
        first, then global; its source says where the values came from.
    """
    local = Identity(
        name=get_config(git, repo, "user.name") or None,
        email=get_config(git, repo, "user.email") or None,
    )
    global_ = Identity(
        name=get_config(git, repo, "user.name", global_scope=True) or None,
        email=get_config(git, repo, "user.email", global_scope=True) or None,
    )
    if local.name or local.email:
        source = SCOPE_LOCAL
    elif global_.name or global_.email:
        source = SCOPE_GLOBAL
    else:
        source = "none"
    effective = Identity(
        name=local.name or global_.name,
        email=local.email or global_.email,
        source=source,
    )
    return effective, local, global_


def write_identity(git: Git, repo: Path, name, email, scope: str = SCOPE_LOCAL) -> str:
    """Persist user.name and user.email; returns the scope written."""
    clean_name = normalize_config_value(name)
    clean_email = normalize_config_value(email)
    if not clean_name:
        raise InvalidInputError("Missing user.name")
    if not clean_email:
        raise InvalidInputError("Missing user.email")

    scope = SCOPE_GLOBAL if scope == SCOPE_GLOBAL else SCOPE_LOCAL
    prefix = ["config", "--global"] if scope == SCOPE_GLOBAL else ["config"]
    git(repo, prefix + ["user.name", clean_name], timeout=METADATA_TIMEOUT)
    git(repo, prefix + ["user.email", clean_email], timeout=METADATA_TIMEOUT)
    return scope
