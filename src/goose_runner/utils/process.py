"""External process execution with dry-run and verbose support."""

from __future__ import annotations

import shutil
import subprocess
import time
from dataclasses import dataclass

from goose_runner.errors import CommandFailedError, ToolNotFoundError
from goose_runner.schemas.config import GlobalOptions
from goose_runner.utils.output import Reporter


@dataclass
class CommandResult:
    """Result of an external command execution."""

    returncode: int
    stdout: str
    stderr: str
    duration_ms: int = 0

    @property
    def ok(self) -> bool:
        return self.returncode == 0


class ProcessRunner:
    """Runs external programs on behalf of every goose command.

    Nothing is executed in dry-run mode; the invocation is echoed instead
    and reported as successful. Commands block until they exit.
    """

    def __init__(self, options: GlobalOptions, reporter: Reporter | None = None):
        """Initialize the runner.

        Args:
            options: Global options for this invocation
            reporter: Output sink for command echo
        """
        self.options = options
        self.reporter = reporter or Reporter(options)

    def require_tool(self, name: str) -> None:
        """Ensure an executable is on PATH.

        Args:
            name: Executable name

        Raises:
            ToolNotFoundError: If the executable cannot be found
        """
        if self.options.dry_run:
            return
        if self._which(name) is None:
            raise ToolNotFoundError(name)

    def run(self, *args: str, check: bool = True, quiet: bool = False) -> CommandResult:
        """Run a program.

        Args:
            *args: Program name followed by its arguments
            check: Raise if the program exits non-zero
            quiet: Capture output instead of passing it through, and only
                echo the invocation in verbose mode

        Returns:
            CommandResult for the invocation

        Raises:
            CommandFailedError: If check is set and the exit status is non-zero
            ToolNotFoundError: If the program does not exist
        """
        argv = list(args)
        if self.options.verbose or (self.options.dry_run and not quiet):
            self.reporter.command(argv)

        if self.options.dry_run:
            return CommandResult(returncode=0, stdout="", stderr="")

        result = self._execute(argv, capture=quiet)
        if check and result.returncode != 0:
            raise CommandFailedError(argv, result.returncode, result.stderr)
        return result

    def probe(self, *args: str) -> bool:
        """Run a program quietly and report whether it succeeded."""
        return self.run(*args, check=False, quiet=True).ok

    def _which(self, name: str) -> str | None:
        return shutil.which(name)

    def _execute(self, argv: list[str], capture: bool) -> CommandResult:
        start = time.time()
        try:
            proc = subprocess.run(
                argv,
                capture_output=capture,
                text=True,
                check=False,
            )
        except FileNotFoundError as e:
            raise ToolNotFoundError(argv[0]) from e

        return CommandResult(
            returncode=proc.returncode,
            stdout=proc.stdout or "",
            stderr=proc.stderr or "",
            duration_ms=int((time.time() - start) * 1000),
        )
