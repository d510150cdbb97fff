"""Exceptions raised by goose commands.

Every exception here is terminal for the current invocation. The root
command prints it as ``error: <message>`` and exits with status 1.
"""

from __future__ import annotations

from collections.abc import Sequence


class GooseError(Exception):
    """Base class for all goose errors."""

    pass


class MissingOptionError(GooseError):
    """A required command-line flag was not given."""

    pass


class UnknownCommandError(GooseError):
    """A command or subcommand token was missing or not recognized."""

    pass


class MissingPayloadError(GooseError):
    """A radio command had nothing after its ``--`` separator."""

    pass


class ConfigError(GooseError):
    """The project configuration file could not be read."""

    pass


class ToolNotFoundError(GooseError):
    """An external program is not available on PATH."""

    def __init__(self, tool: str):
        self.tool = tool
        super().__init__(f"required tool not found in PATH: {tool}")


class CommandFailedError(GooseError):
    """An external program exited with a non-zero status."""

    def __init__(
        self,
        args: Sequence[str],
        returncode: int,
        stderr: str = "",
        message: str | None = None,
    ):
        self.args_list = list(args)
        self.returncode = returncode
        self.stderr = stderr
        if message is None:
            message = f"{' '.join(self.args_list)}: exit status {returncode}"
            if stderr.strip():
                message += f": {stderr.strip()}"
        super().__init__(message)


class BranchCreateError(CommandFailedError):
    """Creating an agent branch from its base failed."""

    def __init__(self, branch: str, base: str, cause: CommandFailedError):
        self.branch = branch
        self.base = base
        super().__init__(
            cause.args_list,
            cause.returncode,
            cause.stderr,
            message=f"failed creating branch '{branch}' from '{base}': {cause}",
        )
