"""Discovering repositories under a directory tree."""

import logging
import os
from collections import deque

from gitagent.git.types import RepositoryHandle

logger = logging.getLogger(__name__)

GIT_MARKER = ".git"
DEFAULT_MAX_DEPTH = 4
DEFAULT_MAX_RESULTS = 200


def has_git_marker(directory: str) -> bool:
    """True if directory holds a .git directory or .git file (worktrees, submodules)."""
    marker = os.path.join(directory, GIT_MARKER)
    return os.path.isdir(marker) or os.path.isfile(marker)


def _relative(root: str, directory: str) -> str:
    return os.path.relpath(directory, root).replace(os.sep, "/")


def scan_repositories(
    root: str,
    max_depth: int = DEFAULT_MAX_DEPTH,
    max_results: int = DEFAULT_MAX_RESULTS,
) -> list[RepositoryHandle]:
    """
    Breadth-first search for repository roots below root.

    A repository is emitted and not descended into. Hidden directories and
    .git directories are never entered. Directories deeper than max_depth
    are dropped without being listed. Stops after max_results repositories.

    Returns:
        Repositories in discovery order
    """
    root = str(root)
    queue = deque([(root, 0)])
    seen = set()
    repos = []

    while queue and len(repos) < max_results:
        directory, depth = queue.popleft()
        real = os.path.realpath(directory)
        if real in seen:
            continue
        seen.add(real)

        if depth > max_depth:
            continue
        if os.path.basename(directory) == GIT_MARKER:
            continue

        if directory != root and has_git_marker(directory):
            repos.append(RepositoryHandle(
                path=directory,
                relative_path=_relative(root, directory),
                name=os.path.basename(directory),
            ))
            continue

        try:
            with os.scandir(directory) as it:
                children = sorted(
                    (entry for entry in it if entry.is_dir() and not entry.name.startswith(".")),
                    key=lambda entry: entry.name,
                )
        except OSError as e:
            logger.warning(f"Skipping unreadable directory {directory}: {e}")
            continue

        for entry in children:
            queue.append((os.path.join(directory, entry.name), depth + 1))

    return repos
