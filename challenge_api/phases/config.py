"""Configuration for the phase timeline engine."""

from functools import lru_cache

from pydantic import Field
from pydantic_settings import BaseSettings


class PhaseEngineSettings(BaseSettings):
    """Phase timeline engine settings."""

    # Scheduling
    root_stagger_minutes: int = Field(default=5, ge=1)
    iterative_review_phase_name: str = "Iterative Review"

    # Phases force-closed when a challenge is cancelled
    cancellation_phase_names: list[str] = Field(
        default_factory=lambda: ["Registration", "Submission", "Checkpoint Submission"]
    )

    # Catalog store: "memory" (built-in defaults) or "sql"
    catalog_backend: str = "memory"

    # Logging
    log_level: str = "INFO"
    log_json: bool = True

    class Config:
        env_file = ".env"
        env_prefix = "PHASE_"


@lru_cache
def get_phase_settings() -> PhaseEngineSettings:
    """Get cached phase engine settings instance."""
    return PhaseEngineSettings()
