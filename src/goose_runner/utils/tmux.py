"""tmux commands used to build sessions and drive panes."""

from __future__ import annotations

from pathlib import Path

from goose_runner.utils.process import CommandResult, ProcessRunner

TMUX = "tmux"
ENTER_KEY = "C-m"


def qualify_target(target: str, session: str | None) -> str:
    """Prefix a ``window.pane`` reference with the session name.

    Args:
        target: Pane reference such as ``goose.1`` or ``other:goose.1``
        session: Configured session name, if any

    Returns:
        ``session:target`` unless no session is configured or the target
        already names one
    """
    if not session:
        return target
    if ":" in target:
        return target
    return f"{session}:{target}"


def new_session(
    runner: ProcessRunner,
    session_name: str,
    working_dir: str | Path,
    window_name: str,
) -> CommandResult:
    """Create a detached session whose first window has the given name."""
    return runner.run(
        TMUX, "new-session", "-d", "-s", session_name, "-c", str(working_dir), "-n", window_name
    )


def new_window(
    runner: ProcessRunner,
    session_name: str,
    window_name: str,
    working_dir: str | Path,
) -> CommandResult:
    """Add a named window to an existing session."""
    return runner.run(TMUX, "new-window", "-t", session_name, "-n", window_name, "-c", str(working_dir))


def split_window(runner: ProcessRunner, target: str) -> CommandResult:
    """Split a window into left and right panes."""
    return runner.run(TMUX, "split-window", "-h", "-t", target)


def kill_session(runner: ProcessRunner, session_name: str) -> CommandResult:
    """Kill a session, ignoring failure.

    Args:
        runner: Process runner
        session_name: Name of session to kill

    Returns:
        CommandResult from tmux kill-session (non-zero if it did not exist)
    """
    return runner.run(TMUX, "kill-session", "-t", session_name, check=False)


def send_keys(runner: ProcessRunner, target: str, keys: str) -> CommandResult:
    """Type a line into a pane and press Enter.

    Args:
        runner: Process runner
        target: Fully qualified pane target
        keys: Text to type

    Returns:
        CommandResult from tmux send-keys
    """
    return runner.run(TMUX, "send-keys", "-t", target, keys, ENTER_KEY)
