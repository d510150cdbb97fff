"""tmux session layout for a lead agent and a goose agent."""

from __future__ import annotations

import os
from dataclasses import dataclass
from pathlib import Path

from goose_runner.utils import tmux
from goose_runner.utils.process import ProcessRunner

LEAD_WINDOW = "lead"
GOOSE_WINDOW = "goose"
OPS_WINDOW = "ops"

EDITOR_PANE = 0
AGENT_PANE = 1

OPS_POLL_SECONDS = 5
INBOX_TAIL_LINES = 80
OUTBOX_TAIL_LINES = 40


def absolute_repo(repo: str | Path) -> Path:
    """Absolute, normalized repository path without resolving symlinks."""
    return Path(os.path.abspath(repo))


def resolve_session_name(repo: Path, override: str | None, fallback: str = "flight") -> str:
    """Pick the session name for a repository.

    Args:
        repo: Repository path (made absolute)
        override: Explicit session name from flags or config
        fallback: Name used when the repo path has no usable basename

    Returns:
        The override, else the repo directory name, else the fallback
    """
    if override:
        return override
    base = absolute_repo(repo).name
    if base in ("", "/", "."):
        return fallback
    return base


def ops_watch_command(handoff_dir: str = "handoffs", interval: int = OPS_POLL_SECONDS) -> str:
    """Shell loop that keeps the inbox and outbox tails on screen."""
    inbox = f"{handoff_dir}/inbox.md"
    return (
        "while true; do clear; date; echo INBOX:; "
        f"[ -f {inbox} ] && tail -n {INBOX_TAIL_LINES} {inbox} || echo '(missing {inbox})'; "
        "echo; echo OUTBOX:; "
        f'for f in {handoff_dir}/outbox/*; do echo --- $f; tail -n {OUTBOX_TAIL_LINES} "$f"; done; '
        f"sleep {interval}; done"
    )


@dataclass
class SessionLayout:
    """What to run in each pane of a new session."""

    repo: Path
    editor: str = "nvim"
    ai_lead: str | None = None
    ai_goose: str | None = None
    ops: bool = False
    handoff_dir: str = "handoffs"


class SessionBuilder:
    """Creates the lead/goose (and optional ops) windows of a session."""

    def __init__(self, runner: ProcessRunner):
        self.runner = runner

    def start(self, session_name: str, layout: SessionLayout, rebuild: bool = False) -> str:
        """Build a session.

        Any failing tmux call aborts the build; windows already created
        are left in place.

        Args:
            session_name: Name of the session to create
            layout: Pane commands and repository path
            rebuild: Kill an existing session of the same name first

        Returns:
            The session name
        """
        self.runner.require_tool(tmux.TMUX)
        repo = absolute_repo(layout.repo)

        if rebuild:
            tmux.kill_session(self.runner, session_name)

        tmux.new_session(self.runner, session_name, repo, LEAD_WINDOW)
        self._seed_window(session_name, LEAD_WINDOW, layout.editor, layout.ai_lead)

        tmux.new_window(self.runner, session_name, GOOSE_WINDOW, repo)
        self._seed_window(session_name, GOOSE_WINDOW, layout.editor, layout.ai_goose)

        if layout.ops:
            tmux.new_window(self.runner, session_name, OPS_WINDOW, repo)
            tmux.send_keys(
                self.runner,
                f"{session_name}:{OPS_WINDOW}.0",
                ops_watch_command(layout.handoff_dir),
            )

        return session_name

    def _seed_window(
        self,
        session_name: str,
        window: str,
        editor: str | None,
        agent_command: str | None,
    ) -> None:
        # Pane 0 holds the editor, pane 1 the agent.
        tmux.split_window(self.runner, f"{session_name}:{window}")
        if editor:
            tmux.send_keys(self.runner, f"{session_name}:{window}.{EDITOR_PANE}", editor)
        if agent_command:
            tmux.send_keys(self.runner, f"{session_name}:{window}.{AGENT_PANE}", agent_command)
