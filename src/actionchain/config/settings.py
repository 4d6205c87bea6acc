"""Application settings loaded from environment variables."""

from __future__ import annotations

from pydantic import Field
from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    model_config = {"env_prefix": "ACTIONCHAIN_"}

    log_level: str = Field(default="INFO", description="Logging level")
    dry_run: bool = Field(
        default=False, description="Run setup and cleanup only, skip execution"
    )
    forbid_duplicate_actions: bool = Field(
        default=False,
        description="Abort a chain holding two actions of the same class",
    )
    log_traces: bool = Field(
        default=False, description="Log every lifecycle call at DEBUG level"
    )
