"""Shared fixtures: a fake process table in place of tmux and git."""

from __future__ import annotations

import io
from collections.abc import Callable
from dataclasses import dataclass, field

import pytest
from rich.console import Console

from goose_runner.schemas.config import GlobalOptions
from goose_runner.utils.output import Reporter
from goose_runner.utils.process import CommandResult, ProcessRunner


@dataclass
class FakeProcesses:
    """Records every external invocation and answers with canned exit codes."""

    calls: list[list[str]] = field(default_factory=list)
    failures: list[tuple[list[str], int]] = field(default_factory=list)
    missing_tools: set[str] = field(default_factory=set)

    def fail(self, *prefix: str, returncode: int = 1) -> None:
        """Make invocations starting with prefix exit with returncode."""
        self.failures.append((list(prefix), returncode))

    def execute(self, argv: list[str]) -> CommandResult:
        self.calls.append(argv)
        for prefix, returncode in self.failures:
            if argv[: len(prefix)] == prefix:
                return CommandResult(returncode=returncode, stdout="", stderr="boom")
        return CommandResult(returncode=0, stdout="", stderr="")

    def which(self, name: str) -> str | None:
        return None if name in self.missing_tools else f"/usr/bin/{name}"


@pytest.fixture
def procs(monkeypatch: pytest.MonkeyPatch) -> FakeProcesses:
    """Replace real process execution for every ProcessRunner."""
    fake = FakeProcesses()
    monkeypatch.setattr(ProcessRunner, "_execute", lambda self, argv, capture: fake.execute(argv))
    monkeypatch.setattr(ProcessRunner, "_which", lambda self, name: fake.which(name))
    return fake


@pytest.fixture
def buffer() -> io.StringIO:
    return io.StringIO()


@pytest.fixture
def make_runner(buffer: io.StringIO) -> Callable[..., ProcessRunner]:
    """Factory for runners whose output lands in the buffer fixture."""

    def factory(dry_run: bool = False, verbose: bool = False, session: str | None = None) -> ProcessRunner:
        options = GlobalOptions(dry_run=dry_run, verbose=verbose, session=session)
        console = Console(file=buffer, width=200, highlight=False, emoji=False)
        return ProcessRunner(options, Reporter(options, out=console))

    return factory
