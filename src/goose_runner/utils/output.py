"""Console output for command echo, verbose notes and status lines."""

from __future__ import annotations

import shlex
from collections.abc import Sequence
from pathlib import Path

from rich.console import Console

from goose_runner.schemas.config import GlobalOptions

console = Console(highlight=False, emoji=False)
err_console = Console(stderr=True, highlight=False, emoji=False)


class Reporter:
    """Prints what goose is doing, gated on the global options.

    Literal content (argv, handoff text) is written straight to the
    console's file so it reaches the terminal exactly as written.
    """

    def __init__(self, options: GlobalOptions, out: Console | None = None):
        self.options = options
        self.out = out or console

    def _raw(self, text: str, end: str = "\n") -> None:
        # Bypasses rendering so tabs and brackets reach the terminal as-is.
        self.out.file.write(text + end)
        self.out.file.flush()

    def command(self, args: Sequence[str]) -> None:
        """Echo an external invocation as a copy-pasteable shell line."""
        self._raw(f"$ {shlex.join(args)}")

    def append(self, path: Path, content: str) -> None:
        """Show content about to be appended to a handoff file."""
        self._raw(f"append {path}:\n{content}", end="")

    def write(self, path: Path, content: str) -> None:
        """Show content about to replace a file."""
        self._raw(f"write {path}:\n{content}", end="")

    def note(self, message: str) -> None:
        """Print a message only in verbose mode."""
        if self.options.verbose:
            self._raw(message)

    def success(self, message: str) -> None:
        self.out.print(message, markup=False, soft_wrap=True, style="green")


def print_error(message: str) -> None:
    err_console.print(f"error: {message}", markup=False, soft_wrap=True, style="red")
