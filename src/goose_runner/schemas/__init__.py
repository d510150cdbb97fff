"""Pydantic schemas for runtime options and project configuration."""

from goose_runner.schemas.config import GlobalOptions, GooseConfig

__all__ = ["GlobalOptions", "GooseConfig"]
