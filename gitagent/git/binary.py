"""Locating the git executable."""

import logging
import os

from gitagent.git.errors import GIT_BINARY_ENV, GitError, GitNotFoundError
from gitagent.git.runner import METADATA_TIMEOUT, Runner, run_command
from gitagent.git.types import CandidateProbe, Diagnosis

logger = logging.getLogger(__name__)

# Checked in order; the first one set wins and disables candidate probing.
BINARY_ENV_VARS = (GIT_BINARY_ENV, "GIT_BINARY")

GIT_CANDIDATES = (
    "git",
    "/usr/bin/git",
    "/bin/git",
    "/usr/local/bin/git",
    "/opt/homebrew/bin/git",
)


class GitBinaryResolver:
    """
    Finds a working git executable and remembers it for one working directory.

    Only the most recent (cwd, binary) pair is kept. Asking for another
    directory resolves again and replaces the entry.
    """

    def __init__(
        self,
        run: Runner = run_command,
        env_vars: tuple[str, ...] = BINARY_ENV_VARS,
        candidates: tuple[str, ...] = GIT_CANDIDATES,
        environ: dict | None = None,
    ):
        self.run = run
        self.env_vars = env_vars
        self.candidates = candidates
        self.environ = environ
        self._cached_cwd: str | None = None
        self._cached_binary: str | None = None

    def configured(self) -> str | None:
        """The operator override from the environment, if any."""
        environ = os.environ if self.environ is None else self.environ
        for name in self.env_vars:
            value = environ.get(name)
            if value:
                return value
        return None

    def resolve(self, cwd: str) -> str:
        """Return the git executable to use for cwd."""
        if self._cached_binary is not None and self._cached_cwd == cwd:
            return self._cached_binary
        binary = self._detect(cwd)
        self._cached_cwd = cwd
        self._cached_binary = binary
        return binary

    def _probe(self, cwd: str, candidate: str) -> str:
        result = self.run(cwd, [candidate, "--version"], timeout=METADATA_TIMEOUT)
        return result.stdout.strip()

    def _detect(self, cwd: str) -> str:
        configured = self.configured()
        if configured:
            try:
                self._probe(cwd, configured)
            except GitError as e:
                raise GitNotFoundError(
                    f"Configured git binary '{configured}' is not usable: {e}"
                ) from None
            logger.debug(f"Using configured git binary: {configured}")
            return configured

        for candidate in self.candidates:
            try:
                self._probe(cwd, candidate)
            except GitError:
                continue
            logger.debug(f"Resolved git binary: {candidate}")
            return candidate

        raise GitNotFoundError()

    def diagnose(self, cwd: str) -> Diagnosis:
        """Probe every candidate and report which binary would be selected."""
        environ = os.environ if self.environ is None else self.environ
        probes = []
        for candidate in self.candidates:
            probe = CandidateProbe(candidate=candidate)
            try:
                probe.version = self._probe(cwd, candidate) or None
            except GitError as e:
                probe.error = str(e)
            probes.append(probe)

        selected = None
        selected_error = None
        try:
            selected = self.resolve(cwd)
        except GitError as e:
            selected_error = str(e)

        return Diagnosis(
            ok=selected is not None,
            repo_path=cwd,
            cwd=os.getcwd(),
            configured=self.configured(),
            env_path=environ.get("PATH"),
            selected=selected,
            selected_error=selected_error,
            candidates=probes,
        )
