"""Ledger Configuration — environment-driven settings via pydantic-settings.

Invariants:
    - get_settings() is cached (lru_cache) — single instance per process
    - Core registries never read the environment; the service passes values in

Design Decisions:
    - pydantic-settings over raw os.environ: validation, type coercion, .env file support
    - Defaults match the reference deployment: CONTRACT_OWNER, 20 collaborators
"""

from pydantic import field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict
from functools import lru_cache

from algoledger.core.domain_types import (
    DEFAULT_MAX_COLLABORATORS, DEFAULT_PRIVILEGED_IDENTITY,
)


class Settings(BaseSettings):
    """Ledger settings from environment variables."""

    model_config = SettingsConfigDict(env_file=".env", case_sensitive=False)

    # Authority
    privileged_identity: str = DEFAULT_PRIVILEGED_IDENTITY

    # Projects
    max_collaborators: int = DEFAULT_MAX_COLLABORATORS

    @field_validator("privileged_identity")
    @classmethod
    def non_empty_identity(cls, v: str) -> str:
        if not v.strip():
            raise ValueError("privileged_identity cannot be empty")
        return v

    @field_validator("max_collaborators")
    @classmethod
    def positive_cap(cls, v: int) -> int:
        """The creator is always a member, so the cap must admit at least one."""
        if v < 1:
            raise ValueError("max_collaborators must be >= 1")
        return v

    # Observability
    log_level: str = "INFO"
    log_format: str = "json"


@lru_cache
def get_settings() -> Settings:
    return Settings()
