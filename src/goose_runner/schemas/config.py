"""Pydantic models for global options and .goose.yaml configuration."""

from __future__ import annotations

from pathlib import Path

import yaml
from pydantic import BaseModel, ConfigDict, Field, ValidationError

from goose_runner.errors import ConfigError

DEFAULT_CONFIG_FILE = ".goose.yaml"


class GlobalOptions(BaseModel):
    """Options set once per invocation from the global flags."""

    model_config = ConfigDict(frozen=True)

    dry_run: bool = Field(default=False, description="Print actions without executing")
    verbose: bool = Field(default=False, description="Echo commands and skipped steps")
    session: str | None = Field(default=None, description="tmux session name")

    @property
    def echo_commands(self) -> bool:
        return self.verbose or self.dry_run


class SessionDefaults(BaseModel):
    """Defaults for ``session start``."""

    editor: str = Field(default="nvim", description="Editor command for pane 0")
    ai_lead: str | None = Field(default=None, description="Agent command for lead pane 1")
    ai_goose: str | None = Field(default=None, description="Agent command for goose pane 1")
    fallback_name: str = Field(default="flight")


class AgentDefaults(BaseModel):
    """Defaults for ``agent add``."""

    base: str = Field(default="dev", description="Branch new agent branches start from")
    branch_prefix: str = Field(default="agent")
    worktree_root: str = Field(default="personas")


class HandoffSettings(BaseModel):
    """Location of the handoff inbox and outboxes."""

    directory: str = Field(default="handoffs")


class RadioDefaults(BaseModel):
    """Defaults for ``radio all``."""

    agents: list[str] = Field(default_factory=lambda: ["goose"])
    pane: int = Field(default=1, ge=0)


class GooseConfig(BaseModel):
    """Complete configuration for .goose.yaml."""

    session: str | None = Field(default=None, description="Session name override")
    session_defaults: SessionDefaults = Field(default_factory=SessionDefaults)
    agents: AgentDefaults = Field(default_factory=AgentDefaults)
    handoffs: HandoffSettings = Field(default_factory=HandoffSettings)
    radio: RadioDefaults = Field(default_factory=RadioDefaults)

    @classmethod
    def load(cls, path: str | Path) -> "GooseConfig":
        """Load configuration from a YAML file.

        A missing file yields the built-in defaults.
        """
        path = Path(path)
        if not path.exists():
            return cls()

        try:
            with open(path) as f:
                data = yaml.safe_load(f) or {}
        except yaml.YAMLError as e:
            raise ConfigError(f"invalid YAML in {path}: {e}") from e

        if not isinstance(data, dict):
            raise ConfigError(f"{path}: expected a mapping at the top level")

        try:
            return cls.model_validate(data)
        except ValidationError as e:
            raise ConfigError(f"{path}: {e}") from e

    def save(self, path: str | Path) -> None:
        """Save configuration to a YAML file."""
        path = Path(path)
        path.parent.mkdir(parents=True, exist_ok=True)

        with open(path, "w") as f:
            f.write(self.to_yaml())

    def to_yaml(self) -> str:
        return yaml.dump(
            self.model_dump(exclude_none=True),
            default_flow_style=False,
            sort_keys=False,
        )
