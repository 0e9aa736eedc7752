"""Shared fixtures: a scripted git runner that records every invocation."""

from dataclasses import dataclass
from unittest.mock import MagicMock

import pytest

from gitagent.git.runner import Git, GitResult


@dataclass
class Call:
    args: list[str]
    timeout: float | None
    ok_codes: tuple[int, ...]
    input: str | None


class ScriptedRunner:
    """
    Stand-in for run_command.

    `script` maps the git arguments (without the executable) to a reply:
    a str is stdout, a GitResult is returned as-is, an exception is raised.
    """

    def __init__(self, script=None):
        self.calls: list[Call] = []
        self.script = script or (lambda args: "")

    def __call__(self, cwd, argv, timeout=None, ok_codes=(0,), input=None):
        args = list(argv[1:])
        self.calls.append(Call(args=args, timeout=timeout, ok_codes=tuple(ok_codes), input=input))
        reply = self.script(args)
        if isinstance(reply, Exception):
            raise reply
        if isinstance(reply, GitResult):
            return reply
        return GitResult(stdout=reply or "", stderr="")

    @property
    def commands(self) -> list[list[str]]:
        return [call.args for call in self.calls]


@pytest.fixture
def runner():
    return ScriptedRunner()


@pytest.fixture
def git(runner):
    resolver = MagicMock()
    resolver.resolve.return_value = "git"
    return Git(resolver, run=runner)
