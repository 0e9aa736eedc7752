"""Git operations for gitagent.

Every git invocation goes through a Git instance (runner.py), which pairs a
GitBinaryResolver with a process runner. Per-topic modules take that instance
as their first argument; RepositoryOperations composes them into the
operations clients call.

Error conventions:
- Commands that fail raise a GitError subclass (errors.py).
- Lookups that may legitimately be absent (config keys, upstream) return
  "" or None instead of raising.
- Fallbacks catch only the error class they document.
"""

from gitagent.git.errors import (
    GitError,
    InvalidInputError,
    GitNotFoundError,
    NotARepositoryError,
    GitTimeoutError,
    GitCommandError,
    UnsupportedCommandError,
    AuthTransportError,
)
from gitagent.git.runner import (
    Git,
    GitResult,
    run_command,
)
from gitagent.git.binary import GitBinaryResolver
from gitagent.git.status import (
    parse_status_porcelain_z,
    categorize_status,
)
from gitagent.git.scan import scan_repositories
from gitagent.git.overview import build_overview
from gitagent.git.auth import build_auth_header
from gitagent.git.operations import RepositoryOperations, is_repo_relative_path

__all__ = [
    # errors
    "GitError",
    "InvalidInputError",
    "GitNotFoundError",
    "NotARepositoryError",
    "GitTimeoutError",
    "GitCommandError",
    "UnsupportedCommandError",
    "AuthTransportError",
    # runner
    "Git",
    "GitResult",
    "run_command",
    "GitBinaryResolver",
    # status
    "parse_status_porcelain_z",
    "categorize_status",
    # overview
    "scan_repositories",
    "build_overview",
    # auth
    "build_auth_header",
    # facade
    "RepositoryOperations",
    "is_repo_relative_path",
]
