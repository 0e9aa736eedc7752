"""Exceptions raised by git operations.

Every failure that reaches a caller is one of these. The tool dispatcher turns
them into error responses; fallback chains catch only the class they document.
"""

GIT_BINARY_ENV = "ASSISTOS_GIT_BINARY"


class GitError(Exception):
    """Base class for git operation failures."""
    pass


class InvalidInputError(GitError):
    """Malformed or unsafe path/file argument, or a missing required field."""
    pass


class GitNotFoundError(GitError):
    """No usable git executable could be launched."""

    def __init__(self, message: str | None = None):
        super().__init__(
            message
            or f"Git executable not found. Install git or set {GIT_BINARY_ENV} "
               "to the full path of the git binary."
        )


class NotARepositoryError(GitError):
    """The working directory is not inside a git repository."""

    def __init__(self, message: str | None = None):
        super().__init__(
            message
            or "Not a git repository. Set the repo path to a folder inside a git "
               "repo (or the repo root)."
        )


class GitTimeoutError(GitError):
    """A git process exceeded its allotted time and was killed."""

    def __init__(self, timeout: float):
        self.timeout = timeout
        super().__init__(f"git timeout after {timeout}s")


class GitCommandError(GitError):
    """git exited with a code the caller did not accept."""

    def __init__(self, message: str, returncode: int | None = None):
        self.returncode = returncode
        super().__init__(message)


class UnsupportedCommandError(GitCommandError):
    """The resolved git does not know the subcommand or option used."""
    pass


class AuthTransportError(GitError):
    """Token auth was requested for a remote that is not HTTP(S)."""
    pass
