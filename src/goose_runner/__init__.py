"""Goose multi-agent development runner.

Drives tmux sessions, git worktrees and plain-text handoff files so that
several coding agents can work side by side on one repository.
"""

__version__ = "0.1.0"
