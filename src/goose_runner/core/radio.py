"""Send typed commands to agent panes."""

from __future__ import annotations

from collections.abc import Sequence
from dataclasses import dataclass

from goose_runner.errors import MissingOptionError, MissingPayloadError
from goose_runner.utils import tmux
from goose_runner.utils.process import ProcessRunner


@dataclass(frozen=True)
class RadioMessage:
    """Keystrokes delivered to one pane."""

    target: str
    keystrokes: str


def join_payload(words: Sequence[str] | None) -> str:
    """Join the words after ``--`` into the text to type.

    Raises:
        MissingPayloadError: If there is no separator or nothing after it
    """
    if not words:
        raise MissingPayloadError("missing command after --")
    return " ".join(words)


def parse_agents(agents: str | None, default: Sequence[str]) -> list[str]:
    """Split a space separated agent list, falling back to the default."""
    names = (agents or "").split()
    return names or list(default)


class Radio:
    """Delivers a line of text plus Enter to tmux panes."""

    def __init__(self, runner: ProcessRunner, session: str | None):
        self.runner = runner
        self.session = session

    def send(self, target: str | None, words: Sequence[str] | None) -> RadioMessage:
        """Send to a single pane.

        Args:
            target: ``window.pane`` or ``session:window.pane``
            words: Words after the ``--`` separator

        Returns:
            The delivered message
        """
        self.runner.require_tool(tmux.TMUX)
        if not target:
            raise MissingOptionError("--target is required")
        message = RadioMessage(tmux.qualify_target(target, self.session), join_payload(words))
        tmux.send_keys(self.runner, message.target, message.keystrokes)
        return message

    def broadcast(
        self, agents: Sequence[str], pane: int, words: Sequence[str] | None
    ) -> list[RadioMessage]:
        """Send to the same pane of each agent's window, in order.

        The first failed delivery raises; agents after it are not sent to.

        Args:
            agents: Window names, one per agent
            pane: Pane index within each window
            words: Words after the ``--`` separator

        Returns:
            Delivered messages
        """
        self.runner.require_tool(tmux.TMUX)
        keystrokes = join_payload(words)
        sent: list[RadioMessage] = []
        for agent in agents:
            message = RadioMessage(tmux.qualify_target(f"{agent}.{pane}", self.session), keystrokes)
            tmux.send_keys(self.runner, message.target, message.keystrokes)
            sent.append(message)
        return sent
