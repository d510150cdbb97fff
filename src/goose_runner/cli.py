"""CLI interface for goose."""

from __future__ import annotations

import sys
from dataclasses import dataclass
from functools import cached_property
from pathlib import Path
from typing import Any

import click

from goose_runner import __version__
from goose_runner.core.handoff import HandoffLog, HandoffOp
from goose_runner.core.radio import Radio, parse_agents
from goose_runner.core.session import SessionBuilder, SessionLayout, resolve_session_name
from goose_runner.errors import GooseError, UnknownCommandError
from goose_runner.schemas.config import DEFAULT_CONFIG_FILE, GlobalOptions, GooseConfig
from goose_runner.utils.output import Reporter, print_error
from goose_runner.utils.process import ProcessRunner
from goose_runner.worktree.provisioner import AgentProvisioner

PAYLOAD_KEY = "goose.payload"


@dataclass
class AppContext:
    """Everything a command needs, built on first use.

    The config file is only read when a command asks for it, so ``help``
    works next to a broken ``.goose.yaml``.
    """

    dry_run: bool = False
    verbose: bool = False
    session: str | None = None
    config_path: str | None = None

    @cached_property
    def config(self) -> GooseConfig:
        return GooseConfig.load(self.config_path or DEFAULT_CONFIG_FILE)

    @cached_property
    def options(self) -> GlobalOptions:
        return GlobalOptions(
            dry_run=self.dry_run,
            verbose=self.verbose,
            session=self.session or self.config.session,
        )

    @cached_property
    def reporter(self) -> Reporter:
        return Reporter(self.options)

    @cached_property
    def runner(self) -> ProcessRunner:
        return ProcessRunner(self.options, self.reporter)


class GooseGroup(click.Group):
    """Command group that fails with usage on missing or unknown subcommands."""

    def __init__(
        self,
        *args: Any,
        unknown_label: str = "unknown command",
        missing_message: str = "no command provided",
        **kwargs: Any,
    ):
        kwargs.setdefault("invoke_without_command", True)
        super().__init__(*args, **kwargs)
        self.unknown_label = unknown_label
        self.missing_message = missing_message

    def resolve_command(self, ctx: click.Context, args: list[str]):
        cmd_name = args[0]
        if self.get_command(ctx, cmd_name) is None and not ctx.resilient_parsing:
            click.echo(ctx.get_help())
            raise UnknownCommandError(f"{self.unknown_label}: {cmd_name}")
        return super().resolve_command(ctx, args)


class GooseCLI(GooseGroup):
    """Root group; reports every error as ``error: <message>`` with exit 1."""

    def main(
        self,
        args: Any = None,
        prog_name: str | None = None,
        complete_var: str | None = None,
        standalone_mode: bool = True,
        **extra: Any,
    ) -> Any:
        try:
            rv = super().main(
                args=args,
                prog_name=prog_name,
                complete_var=complete_var,
                standalone_mode=False,
                **extra,
            )
        except click.ClickException as e:
            if not standalone_mode:
                raise
            print_error(e.format_message())
            sys.exit(1)
        except (GooseError, OSError) as e:
            if not standalone_mode:
                raise
            print_error(str(e))
            sys.exit(1)
        except click.Abort:
            if not standalone_mode:
                raise
            print_error("aborted")
            sys.exit(1)

        if not standalone_mode:
            return rv
        sys.exit(rv if isinstance(rv, int) else 0)


class PayloadCommand(click.Command):
    """Command whose words after a literal ``--`` are kept verbatim.

    Everything before the separator is parsed as options; the words after
    it are stored in ``ctx.meta`` for the callback.
    """

    def parse_args(self, ctx: click.Context, args: list[str]) -> list[str]:
        if "--" in args:
            sep = args.index("--")
            ctx.meta[PAYLOAD_KEY] = args[sep + 1 :]
            args = args[:sep]
        return super().parse_args(ctx, args)

    def collect_usage_pieces(self, ctx: click.Context) -> list[str]:
        return super().collect_usage_pieces(ctx) + ["-- COMMAND..."]


def _require_subcommand(ctx: click.Context) -> None:
    if ctx.invoked_subcommand is None:
        click.echo(ctx.get_help())
        raise UnknownCommandError(ctx.command.missing_message)


@click.group(
    "goose",
    cls=GooseCLI,
    context_settings={"help_option_names": ["-h", "--help"]},
)
@click.version_option(version=__version__, prog_name="goose")
@click.option("--dry", "dry_run", is_flag=True, help="Print actions without executing")
@click.option("--verbose", is_flag=True, help="Echo commands and skipped steps")
@click.option("--session", default=None, help="tmux session name (default: repo basename or 'flight')")
@click.option(
    "--config",
    "config_path",
    type=click.Path(exists=True, dir_okay=False),
    default=None,
    help=f"Project config file (default: {DEFAULT_CONFIG_FILE} if present)",
)
@click.pass_context
def main(
    ctx: click.Context,
    dry_run: bool,
    verbose: bool,
    session: str | None,
    config_path: str | None,
) -> None:
    """Goose - multi-agent dev runner (tmux + git worktrees + AI panes).

    Global options go before the command.
    """
    ctx.obj = AppContext(dry_run=dry_run, verbose=verbose, session=session, config_path=config_path)
    _require_subcommand(ctx)


@main.command("help")
@click.pass_context
def help_command(ctx: click.Context) -> None:
    """Show this message."""
    click.echo(ctx.parent.get_help())


# ---------- session ----------


@main.group(
    cls=GooseGroup,
    unknown_label="unknown session subcommand",
    missing_message="missing subcommand for session (try 'session start')",
)
@click.pass_context
def session(ctx: click.Context) -> None:
    """Start a tmux session with windows/panes."""
    _require_subcommand(ctx)


@session.command("start")
@click.option("--repo", default=".", show_default=True, help="Repository path")
@click.option("--ai-lead", default=None, help="Command to run the AI in the lead pane")
@click.option("--ai-goose", default=None, help="Command to run the AI in the goose pane")
@click.option("--editor", default=None, help="Editor command for the left panes [default: nvim]")
@click.option("--ops", is_flag=True, help="Create an ops window that watches handoffs")
@click.option("--rebuild", is_flag=True, help="Kill an existing session before creating")
@click.pass_obj
def session_start(
    app: AppContext,
    repo: str,
    ai_lead: str | None,
    ai_goose: str | None,
    editor: str | None,
    ops: bool,
    rebuild: bool,
) -> None:
    """Create the lead and goose windows, each with editor and agent panes."""
    defaults = app.config.session_defaults
    layout = SessionLayout(
        repo=Path(repo),
        editor=defaults.editor if editor is None else editor,
        ai_lead=ai_lead or defaults.ai_lead,
        ai_goose=ai_goose or defaults.ai_goose,
        ops=ops,
        handoff_dir=app.config.handoffs.directory,
    )
    name = resolve_session_name(layout.repo, app.options.session, defaults.fallback_name)

    SessionBuilder(app.runner).start(name, layout, rebuild=rebuild)
    app.reporter.success(f"session '{name}' ready. Attach with: tmux attach -t {name}")


# ---------- agent ----------


@main.group(
    cls=GooseGroup,
    unknown_label="unknown agent subcommand",
    missing_message="missing subcommand for agent (try 'agent add')",
)
@click.pass_context
def agent(ctx: click.Context) -> None:
    """Add/update an agent worktree and branch."""
    _require_subcommand(ctx)


@agent.command("add")
@click.option("--name", default=None, help="Agent name (e.g. goose)")
@click.option("--base", default=None, help="Base branch [default: dev]")
@click.option("--worktree", default=None, help="Worktree directory [default: personas/<name>]")
@click.option("--branch", default=None, help="Branch name [default: agent/<name>]")
@click.pass_obj
def agent_add(
    app: AppContext,
    name: str | None,
    base: str | None,
    worktree: str | None,
    branch: str | None,
) -> None:
    """Ensure the agent's branch and worktree exist."""
    provisioner = AgentProvisioner(app.runner, app.reporter, app.config.agents)
    record = provisioner.add(name, base=base, worktree=worktree, branch=branch)
    app.reporter.success(
        f"agent '{record.name}' ready: worktree={record.worktree} branch={record.branch}"
    )


# ---------- handoff ----------


@main.group(
    cls=GooseGroup,
    unknown_label="unknown handoff op",
    missing_message="missing handoff op (open|ack|progress|done)",
)
@click.pass_context
def handoff(ctx: click.Context) -> None:
    """Write handoff inbox/outbox entries (open|ack|progress|done)."""
    _require_subcommand(ctx)


_HANDOFF_HELP = {
    HandoffOp.OPEN: "Open a task in the shared inbox.",
    HandoffOp.ACK: "Acknowledge a task in the agent's outbox.",
    HandoffOp.PROGRESS: "Report progress on a branch in the agent's outbox.",
    HandoffOp.DONE: "Report a finished branch in the agent's outbox.",
}


def _make_handoff_command(op: HandoffOp) -> click.Command:
    @click.command(op.value, help=_HANDOFF_HELP[op])
    @click.option("--task", default=None, help="Task ID (e.g. TASK-001)")
    @click.option("--agent", default=None, help="Agent name (e.g. maverick or goose)")
    @click.option("--branch", default=None, help="Branch (for progress/done)")
    @click.option("--note", default=None, help="Free text note")
    @click.pass_obj
    def command(
        app: AppContext,
        task: str | None,
        agent: str | None,
        branch: str | None,
        note: str | None,
    ) -> None:
        log = HandoffLog(app.options, app.reporter, root=app.config.handoffs.directory)
        log.record(op, task, agent, branch=branch, note=note)

    return command


for _op in HandoffOp:
    handoff.add_command(_make_handoff_command(_op))


# ---------- radio ----------


@main.group(
    cls=GooseGroup,
    unknown_label="unknown radio subcommand",
    missing_message="missing radio subcommand (send|all)",
)
@click.pass_context
def radio(ctx: click.Context) -> None:
    """Send commands to tmux panes."""
    _require_subcommand(ctx)


@radio.command("send", cls=PayloadCommand, context_settings={"allow_extra_args": True})
@click.option("--target", default=None, help="tmux target like window.pane (e.g. goose.1)")
@click.pass_context
def radio_send(ctx: click.Context, target: str | None) -> None:
    """Type a command into one pane and press Enter."""
    app: AppContext = ctx.obj
    Radio(app.runner, app.options.session).send(target, ctx.meta.get(PAYLOAD_KEY))


@radio.command("all", cls=PayloadCommand, context_settings={"allow_extra_args": True})
@click.option("--agents", default=None, help="Space-separated agent names [default: goose]")
@click.option("--pane", type=int, default=None, help="Pane index [default: 1]")
@click.pass_context
def radio_all(ctx: click.Context, agents: str | None, pane: int | None) -> None:
    """Type a command into the same pane of every agent window."""
    app: AppContext = ctx.obj
    defaults = app.config.radio
    Radio(app.runner, app.options.session).broadcast(
        parse_agents(agents, defaults.agents),
        defaults.pane if pane is None else pane,
        ctx.meta.get(PAYLOAD_KEY),
    )


# ---------- init ----------


@main.command()
@click.argument("output", type=click.Path(dir_okay=False), default=DEFAULT_CONFIG_FILE)
@click.pass_obj
def init(app: AppContext, output: str) -> None:
    """Write a config file with the default settings."""
    output_path = Path(output)

    if output_path.exists() and not app.options.dry_run:
        if not click.confirm(f"{output} already exists. Overwrite?"):
            return

    config = GooseConfig()
    if app.options.echo_commands:
        app.reporter.write(output_path, config.to_yaml())
    if app.options.dry_run:
        return

    config.save(output_path)
    app.reporter.success(f"Created: {output}")


if __name__ == "__main__":
    main()
