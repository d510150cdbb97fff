"""Tests for session building."""

from pathlib import Path

import pytest

from goose_runner.core.session import (
    SessionBuilder,
    SessionLayout,
    ops_watch_command,
    resolve_session_name,
)
from goose_runner.errors import CommandFailedError, ToolNotFoundError


class TestResolveSessionName:
    """Tests for resolve_session_name."""

    def test_override_wins(self, tmp_path: Path) -> None:
        """Test an explicit session name is used as-is."""
        assert resolve_session_name(tmp_path / "repo", "custom") == "custom"

    def test_repo_basename(self, tmp_path: Path) -> None:
        """Test the repo directory name is the default."""
        assert resolve_session_name(tmp_path / "myrepo", None) == "myrepo"

    def test_relative_repo(self, tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
        """Test '.' resolves to the current directory's name."""
        workdir = tmp_path / "workspace"
        workdir.mkdir()
        monkeypatch.chdir(workdir)

        assert resolve_session_name(Path("."), None) == "workspace"

    def test_root_falls_back(self) -> None:
        """Test the filesystem root has no usable name."""
        assert resolve_session_name(Path("/"), None) == "flight"
        assert resolve_session_name(Path("/"), None, fallback="hangar") == "hangar"


class TestOpsWatchCommand:
    """Tests for the ops window loop."""

    def test_polls_inbox_and_outboxes(self) -> None:
        """Test the loop tails the inbox and every outbox every 5 seconds."""
        cmd = ops_watch_command()

        assert cmd.startswith("while true; do clear; date;")
        assert "tail -n 80 handoffs/inbox.md" in cmd
        assert "(missing handoffs/inbox.md)" in cmd
        assert "for f in handoffs/outbox/*" in cmd
        assert 'tail -n 40 "$f"' in cmd
        assert cmd.endswith("sleep 5; done")

    def test_custom_directory(self) -> None:
        """Test a configured handoff directory is watched."""
        assert "notes/inbox.md" in ops_watch_command("notes")


class TestSessionBuilder:
    """Tests for SessionBuilder.start."""

    def test_two_window_topology(self, procs, make_runner, tmp_path: Path) -> None:
        """Test the lead and goose windows get editor and agent panes."""
        layout = SessionLayout(repo=tmp_path, editor="nvim", ai_lead="claude", ai_goose="codex")
        SessionBuilder(make_runner()).start("flight", layout)

        repo = str(tmp_path)
        assert procs.calls == [
            ["tmux", "new-session", "-d", "-s", "flight", "-c", repo, "-n", "lead"],
            ["tmux", "split-window", "-h", "-t", "flight:lead"],
            ["tmux", "send-keys", "-t", "flight:lead.0", "nvim", "C-m"],
            ["tmux", "send-keys", "-t", "flight:lead.1", "claude", "C-m"],
            ["tmux", "new-window", "-t", "flight", "-n", "goose", "-c", repo],
            ["tmux", "split-window", "-h", "-t", "flight:goose"],
            ["tmux", "send-keys", "-t", "flight:goose.0", "nvim", "C-m"],
            ["tmux", "send-keys", "-t", "flight:goose.1", "codex", "C-m"],
        ]

    def test_agent_commands_optional(self, procs, make_runner, tmp_path: Path) -> None:
        """Test panes without a command are left as plain shells."""
        SessionBuilder(make_runner()).start("flight", SessionLayout(repo=tmp_path, editor=""))

        assert not any(call[1] == "send-keys" for call in procs.calls)

    def test_ops_window(self, procs, make_runner, tmp_path: Path) -> None:
        """Test --ops adds a window running the watch loop."""
        layout = SessionLayout(repo=tmp_path, ops=True)
        SessionBuilder(make_runner()).start("flight", layout)

        assert ["tmux", "new-window", "-t", "flight", "-n", "ops", "-c", str(tmp_path)] in procs.calls
        assert procs.calls[-1] == ["tmux", "send-keys", "-t", "flight:ops.0", ops_watch_command(), "C-m"]

    def test_rebuild_ignores_kill_failure(self, procs, make_runner, tmp_path: Path) -> None:
        """Test --rebuild kills first and carries on if nothing was running."""
        procs.fail("tmux", "kill-session")
        SessionBuilder(make_runner()).start("flight", SessionLayout(repo=tmp_path), rebuild=True)

        assert procs.calls[0] == ["tmux", "kill-session", "-t", "flight"]
        assert procs.calls[1][1] == "new-session"

    def test_failure_aborts_sequence(self, procs, make_runner, tmp_path: Path) -> None:
        """Test the first failing tmux call stops the build."""
        procs.fail("tmux", "split-window")

        with pytest.raises(CommandFailedError):
            SessionBuilder(make_runner()).start("flight", SessionLayout(repo=tmp_path))

        assert len(procs.calls) == 2

    def test_requires_tmux(self, procs, make_runner, tmp_path: Path) -> None:
        """Test a missing tmux fails before anything runs."""
        procs.missing_tools.add("tmux")

        with pytest.raises(ToolNotFoundError):
            SessionBuilder(make_runner()).start("flight", SessionLayout(repo=tmp_path))

        assert procs.calls == []

    def test_dry_run(self, procs, make_runner, buffer, tmp_path: Path) -> None:
        """Test dry-run echoes every step without tmux installed."""
        procs.missing_tools.add("tmux")
        SessionBuilder(make_runner(dry_run=True)).start("flight", SessionLayout(repo=tmp_path))

        assert procs.calls == []
        output = buffer.getvalue()
        assert "$ tmux new-session -d -s flight" in output
        assert "$ tmux send-keys -t flight:goose.0 nvim C-m" in output
