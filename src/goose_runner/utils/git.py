"""git commands for agent branches and worktrees."""

from __future__ import annotations

from pathlib import Path

from goose_runner.utils.process import CommandResult, ProcessRunner

GIT = "git"


def branch_exists(runner: ProcessRunner, branch: str) -> bool:
    """Check whether a local branch exists.

    Args:
        runner: Process runner
        branch: Branch name without the refs/heads/ prefix

    Returns:
        True if refs/heads/<branch> resolves
    """
    return runner.probe(GIT, "show-ref", "--verify", "--quiet", f"refs/heads/{branch}")


def create_branch(runner: ProcessRunner, branch: str, start_point: str) -> CommandResult:
    """Create a branch at start_point without checking it out."""
    return runner.run(GIT, "branch", branch, start_point)


def add_worktree(runner: ProcessRunner, path: str | Path, branch: str) -> CommandResult:
    """Check out an existing branch into a new worktree at path."""
    return runner.run(GIT, "worktree", "add", str(path), branch)
