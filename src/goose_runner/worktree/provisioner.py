"""Branch and worktree provisioning for agents."""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path

from goose_runner.errors import BranchCreateError, CommandFailedError, MissingOptionError
from goose_runner.schemas.config import AgentDefaults
from goose_runner.utils import git
from goose_runner.utils.output import Reporter
from goose_runner.utils.process import ProcessRunner


@dataclass
class AgentRecord:
    """An agent's branch and the worktree checked out from it."""

    name: str
    branch: str
    worktree: Path
    base: str

    @classmethod
    def for_agent(
        cls,
        name: str,
        defaults: AgentDefaults,
        base: str | None = None,
        worktree: str | Path | None = None,
        branch: str | None = None,
    ) -> "AgentRecord":
        """Fill in derived branch and worktree names.

        Args:
            name: Agent name
            defaults: Configured prefixes and base branch
            base: Base branch override
            worktree: Worktree path override
            branch: Branch name override

        Returns:
            AgentRecord with every field set
        """
        return cls(
            name=name,
            branch=branch or f"{defaults.branch_prefix}/{name}",
            worktree=Path(worktree) if worktree else Path(defaults.worktree_root) / name,
            base=base or defaults.base,
        )


class AgentProvisioner:
    """Makes sure an agent has a branch and a worktree.

    Both steps are existence-gated, so provisioning the same agent twice
    leaves the repository unchanged the second time.
    """

    def __init__(
        self,
        runner: ProcessRunner,
        reporter: Reporter,
        defaults: AgentDefaults | None = None,
    ):
        """Initialize the provisioner.

        Args:
            runner: Process runner for git
            reporter: Output sink for skipped steps
            defaults: Branch/worktree naming defaults
        """
        self.runner = runner
        self.reporter = reporter
        self.defaults = defaults or AgentDefaults()

    def add(
        self,
        name: str | None,
        base: str | None = None,
        worktree: str | Path | None = None,
        branch: str | None = None,
    ) -> AgentRecord:
        """Provision an agent.

        Returns:
            The agent's record

        Raises:
            MissingOptionError: If name is empty
            BranchCreateError: If the branch is missing and cannot be created
            CommandFailedError: If the worktree cannot be added
        """
        if not name:
            raise MissingOptionError("--name is required")
        self.runner.require_tool(git.GIT)

        record = AgentRecord.for_agent(name, self.defaults, base=base, worktree=worktree, branch=branch)
        self.ensure_branch(record.branch, record.base)
        self.ensure_worktree(record.worktree, record.branch)
        return record

    def ensure_branch(self, branch: str, base: str) -> bool:
        """Create branch from base unless it already exists.

        Returns:
            True if the branch was created
        """
        if git.branch_exists(self.runner, branch):
            self.reporter.note(f"branch '{branch}' exists")
            return False

        try:
            git.create_branch(self.runner, branch, base)
        except CommandFailedError as e:
            raise BranchCreateError(branch, base, e) from e
        return True

    def ensure_worktree(self, path: Path, branch: str) -> bool:
        """Add a worktree at path unless something is already there.

        Returns:
            True if the worktree was added
        """
        try:
            path.stat()
        except FileNotFoundError:
            git.add_worktree(self.runner, path, branch)
            return True

        self.reporter.note(f"worktree exists at {path} (skipping add)")
        return False
