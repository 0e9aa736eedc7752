"""
Allow-listing of repository paths.

Every tool call names a repository path; it must resolve inside one of the
configured roots before any git command runs there.
"""

import os
from pathlib import Path
from typing import Callable

from gitagent.git.errors import InvalidInputError


def is_within_roots(candidate: str, roots: list[Path]) -> bool:
    """True if candidate equals or lies below one of roots (no symlink resolution)."""
    resolved = os.path.abspath(candidate)
    for root in roots:
        root_str = str(root)
        if resolved == root_str or resolved.startswith(root_str.rstrip(os.sep) + os.sep):
            return True
    return False


def validate_path(path, roots: list[Path]) -> str:
    """
    Turn a caller-supplied path into an absolute path inside roots.

    Relative paths are taken relative to the first root.

    Raises:
        InvalidInputError: empty path, NUL byte, or outside the allowed roots
    """
    if not isinstance(path, str) or not path.strip():
        raise InvalidInputError("Path must be a non-empty string.")
    if "\0" in path:
        raise InvalidInputError("Invalid path (contains null byte).")
    if not roots:
        raise InvalidInputError("No allowed roots configured.")

    candidate = path.strip()
    if os.path.isabs(candidate):
        if not is_within_roots(candidate, roots):
            raise InvalidInputError("Path is outside allowed roots.")
        return os.path.abspath(candidate)

    resolved = os.path.abspath(os.path.join(str(roots[0]), candidate))
    if not is_within_roots(resolved, roots):
        raise InvalidInputError("Path is outside allowed roots.")
    return resolved


def make_path_validator(roots: list[Path]) -> Callable[[str], str]:
    """Bind validate_path to a set of roots for RepositoryOperations."""
    return lambda path: validate_path(path, roots)
