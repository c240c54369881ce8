# /// script
# requires-python = ">=3.12"
# dependencies = ["pydantic>=2.0"]
# ///
"""Centralized configuration for the lineup search, with environment overrides."""

from __future__ import annotations

import os
from typing import Any, Optional

from pydantic import BaseModel, Field

from aggregator import DEFAULT_BOTTOM_K, DEFAULT_TOP_K

GAMES_ENV = "LINEUP_GAMES"
TOP_K_ENV = "LINEUP_TOP_K"
BOTTOM_K_ENV = "LINEUP_BOTTOM_K"
WORKERS_ENV = "LINEUP_WORKERS"
QUEUE_SIZE_ENV = "LINEUP_QUEUE_SIZE"
PROGRESS_EVERY_ENV = "LINEUP_PROGRESS_EVERY"
SEED_ENV = "LINEUP_SEED"
MAX_LINEUPS_ENV = "LINEUP_MAX_LINEUPS"

_ENV_FIELDS = {
    GAMES_ENV: "games_per_lineup",
    TOP_K_ENV: "top_k",
    BOTTOM_K_ENV: "bottom_k",
    WORKERS_ENV: "workers",
    QUEUE_SIZE_ENV: "queue_size",
    PROGRESS_EVERY_ENV: "progress_every",
    SEED_ENV: "seed",
    MAX_LINEUPS_ENV: "max_lineups",
}


def default_workers() -> int:
    """One worker per available core."""
    return os.cpu_count() or 1


class SimConfig(BaseModel):
    """Tunable parameters for a lineup search run."""
    games_per_lineup: int = Field(default=200, ge=1, description="Games simulated per lineup")
    top_k: int = Field(default=DEFAULT_TOP_K, ge=1, description="Size of the top-lineup ranking")
    bottom_k: int = Field(default=DEFAULT_BOTTOM_K, ge=1, description="Size of the bottom-lineup ranking")
    workers: int = Field(default_factory=default_workers, ge=1, description="Worker processes")
    queue_size: int = Field(default=1024, ge=1, description="Bounded lineup queue capacity")
    progress_every: int = Field(default=100_000, ge=1, description="Lineups between progress reports")
    seed: Optional[int] = Field(default=None, description="Base seed; random when unset")
    max_lineups: Optional[int] = Field(default=None, ge=1, description="Stop after this many lineups")

    @classmethod
    def from_env(cls, **overrides: Any) -> SimConfig:
        """Build a config from LINEUP_* environment variables.

        Explicit keyword overrides that are not None take precedence.
        """
        values: dict[str, Any] = {}
        for env_name, field_name in _ENV_FIELDS.items():
            raw = os.environ.get(env_name, "").strip()
            if raw:
                values[field_name] = raw
        values.update({k: v for k, v in overrides.items() if v is not None})
        return cls.model_validate(values)
