"""Append-only handoff notes exchanged between agents.

The shared inbox (``<dir>/inbox.md``) gets one markdown block per opened
task. Each agent has an outbox (``<dir>/outbox/<AGENT>.md``) with one line
per acknowledgement, progress report or completion.
"""

from __future__ import annotations

from collections.abc import Callable
from dataclasses import dataclass
from datetime import date
from enum import Enum
from pathlib import Path

from goose_runner.errors import MissingOptionError
from goose_runner.schemas.config import GlobalOptions
from goose_runner.utils.output import Reporter

INBOX_FILE = "inbox.md"
OUTBOX_DIR = "outbox"


class HandoffOp(str, Enum):
    """Kinds of handoff entries."""

    OPEN = "open"
    ACK = "ack"
    PROGRESS = "progress"
    DONE = "done"

    @property
    def needs_branch(self) -> bool:
        return self in (HandoffOp.PROGRESS, HandoffOp.DONE)


def today_iso() -> str:
    return date.today().isoformat()


@dataclass(frozen=True)
class HandoffEntry:
    """A single note to append to the inbox or an outbox."""

    op: HandoffOp
    task: str | None
    agent: str | None
    branch: str | None = None
    note: str | None = None
    date: str = ""

    @property
    def agent_tag(self) -> str:
        return (self.agent or "").upper()

    def validate(self) -> None:
        """Check required fields.

        Raises:
            MissingOptionError: If task, agent, or (for progress/done) branch is empty
        """
        if not self.task:
            raise MissingOptionError("--task is required")
        if not self.agent:
            raise MissingOptionError("--agent is required")
        if self.op.needs_branch and not self.branch:
            raise MissingOptionError(f"--branch is required for {self.op.value}")

    def render(self) -> str:
        """Format the entry exactly as it is appended."""
        if self.op is HandoffOp.OPEN:
            lines = [f"## {self.task} (OPEN)", f"by @{self.agent_tag}"]
            if self.note:
                lines.append(f"note: {self.note}")
            lines.append(f"created: {self.date}")
            return "\n".join(lines) + "\n\n"

        if self.op is HandoffOp.ACK:
            return f"[{self.date}] {self.task} ACK by @{self.agent_tag}\n"

        line = f"[{self.date}] {self.task} {self.op.value.upper()} @{self.agent_tag} branch:{self.branch}"
        if self.note:
            line += f" note:{self.note}"
        return line + "\n"


class HandoffLog:
    """Writes handoff entries under a handoff directory."""

    def __init__(
        self,
        options: GlobalOptions,
        reporter: Reporter,
        root: str | Path = "handoffs",
        today: Callable[[], str] = today_iso,
    ):
        """Initialize the log.

        Args:
            options: Global options (dry-run suppresses every write)
            reporter: Output sink for the appended content
            root: Handoff directory, relative to the working directory
            today: Date stamp provider
        """
        self.options = options
        self.reporter = reporter
        self.root = Path(root)
        self.today = today

    @property
    def inbox_path(self) -> Path:
        return self.root / INBOX_FILE

    @property
    def outbox_dir(self) -> Path:
        return self.root / OUTBOX_DIR

    def outbox_path(self, agent: str) -> Path:
        return self.outbox_dir / f"{agent.upper()}.md"

    def path_for(self, entry: HandoffEntry) -> Path:
        if entry.op is HandoffOp.OPEN:
            return self.inbox_path
        return self.outbox_path(entry.agent_tag)

    def record(
        self,
        op: HandoffOp,
        task: str | None,
        agent: str | None,
        branch: str | None = None,
        note: str | None = None,
    ) -> HandoffEntry:
        """Validate and append one entry.

        Args:
            op: Entry kind
            task: Task identifier
            agent: Agent name (upper-cased in the output)
            branch: Working branch, required for progress and done
            note: Optional free text

        Returns:
            The entry that was written (or would be, in dry-run)

        Raises:
            MissingOptionError: If a required field is missing; nothing is written
        """
        entry = HandoffEntry(op=op, task=task, agent=agent, branch=branch, note=note, date=self.today())
        entry.validate()

        if not self.options.dry_run:
            self.outbox_dir.mkdir(parents=True, exist_ok=True)
            if op is HandoffOp.OPEN:
                self.root.mkdir(parents=True, exist_ok=True)

        self._append(self.path_for(entry), entry.render())
        return entry

    def _append(self, path: Path, content: str) -> None:
        if self.options.echo_commands:
            self.reporter.append(path, content)
        if self.options.dry_run:
            return
        with open(path, "a") as f:
            f.write(content)
