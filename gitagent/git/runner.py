"""Git command runner with timeout handling."""

import logging
import os
import subprocess
from dataclasses import dataclass
from pathlib import Path
from typing import Callable, Sequence

from gitagent.git.errors import (
    GitCommandError,
    GitNotFoundError,
    GitTimeoutError,
    NotARepositoryError,
    UnsupportedCommandError,
)
from gitagent.git.markers import ERROR_MARKERS, ERROR_NOT_A_REPO, ERROR_UNSUPPORTED, match_marker

logger = logging.getLogger(__name__)

# Timeouts in seconds
DEFAULT_TIMEOUT = 20
METADATA_TIMEOUT = 5
DIFF_TIMEOUT = 25
STASH_POP_TIMEOUT = 30
COMMIT_TIMEOUT = 60
PUSH_TIMEOUT = 120
PULL_TIMEOUT = 180

# Applied unless the inherited environment already sets a value
GIT_ENV_DEFAULTS = {
    "GIT_TERMINAL_PROMPT": "0",
    "GIT_OPTIONAL_LOCKS": "0",
    "GIT_DISCOVERY_ACROSS_FILESYSTEM": "1",
}


@dataclass
class GitResult:
    """Output of a git command that exited with an accepted code."""
    stdout: str
    stderr: str
    returncode: int = 0

    @property
    def output(self) -> str:
        """stdout and stderr joined, for marker inspection."""
        return f"{self.stdout}\n{self.stderr}".strip()


def build_env(base: dict | None = None) -> dict:
    """Inherited environment plus the non-interactive git defaults."""
    env = dict(os.environ if base is None else base)
    for key, value in GIT_ENV_DEFAULTS.items():
        if not env.get(key):
            env[key] = value
    return env


def _redact(argv: Sequence[str]) -> list[str]:
    redacted = []
    for arg in argv:
        if arg.lower().startswith("http.extraheader="):
            redacted.append("http.extraHeader=<redacted>")
        else:
            redacted.append(arg)
    return redacted


def _failure(returncode: int, stdout: str, stderr: str) -> GitCommandError | NotARepositoryError:
    message = stderr.strip() or stdout.strip() or f"git exited with code {returncode}"
    kind = match_marker(f"{stdout}\n{stderr}", ERROR_MARKERS)
    if kind == ERROR_NOT_A_REPO:
        return NotARepositoryError()
    if kind == ERROR_UNSUPPORTED:
        return UnsupportedCommandError(message, returncode)
    return GitCommandError(message, returncode)


def run_command(
    cwd: Path | str,
    argv: Sequence[str],
    timeout: float = DEFAULT_TIMEOUT,
    ok_codes: Sequence[int] = (0,),
    input: str | None = None,
) -> GitResult:
    """
    Run an executable in cwd and return its output.

    Args:
        cwd: Working directory for the command
        argv: Executable followed by its arguments
        timeout: Timeout in seconds; the process is killed when it expires
        ok_codes: Exit codes treated as success
        input: Text written to stdin before it is closed

    Returns:
        GitResult with decoded stdout and stderr

    Raises:
        GitNotFoundError: the executable could not be launched
        GitTimeoutError: the process exceeded timeout
        NotARepositoryError: git reported cwd is not inside a repository
        UnsupportedCommandError: git did not recognise the subcommand/option
        GitCommandError: any other non-accepted exit code
    """
    logger.debug(f"git: {' '.join(_redact(argv))} (cwd={cwd})")
    try:
        proc = subprocess.run(
            list(argv),
            cwd=str(cwd),
            env=build_env(),
            input=input,
            stdin=subprocess.DEVNULL if input is None else None,
            capture_output=True,
            text=True,
            encoding="utf-8",
            errors="replace",
            timeout=timeout,
        )
    except subprocess.TimeoutExpired:
        raise GitTimeoutError(timeout) from None
    except FileNotFoundError:
        raise GitNotFoundError() from None
    except OSError as e:
        raise GitCommandError(f"Failed to launch {argv[0]}: {e}") from None

    if proc.returncode in ok_codes:
        return GitResult(stdout=proc.stdout or "", stderr=proc.stderr or "", returncode=proc.returncode)

    logger.debug(f"git exited with code {proc.returncode}")
    raise _failure(proc.returncode, proc.stdout or "", proc.stderr or "")


Runner = Callable[..., GitResult]


class Git:
    """Runs git subcommands with the binary chosen by a resolver.

    Callers pass only the arguments after the executable; the runner is
    swappable so tests can record or instrument invocations.
    """

    def __init__(self, resolver, run: Runner = run_command):
        self.resolver = resolver
        self.run = run

    def __call__(
        self,
        cwd: Path | str,
        args: Sequence[str],
        timeout: float = DEFAULT_TIMEOUT,
        ok_codes: Sequence[int] = (0,),
        input: str | None = None,
    ) -> GitResult:
        binary = self.resolver.resolve(str(cwd))
        return self.run(cwd, [binary, *args], timeout=timeout, ok_codes=ok_codes, input=input)

    def output(self, cwd: Path | str, args: Sequence[str], timeout: float = DEFAULT_TIMEOUT) -> str:
        """Stripped stdout of a query, or "" when the query fails."""
        try:
            return self(cwd, args, timeout=timeout).stdout.strip()
        except (GitCommandError, NotARepositoryError, GitTimeoutError):
            return ""
