"""Application settings loaded from environment variables."""

from __future__ import annotations

from typing import List, Optional

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

HISTORY_BACKENDS = ("memory", "redis")


class Settings(BaseSettings):
    """Runtime settings for the coin-flip game service."""

    model_config = SettingsConfigDict(env_file=".env", env_file_encoding="utf-8")

    coin_probs: List[float] = Field(default_factory=lambda: [0.5, 0.6, 0.4], alias="COIN_PROBS")
    exploration_trials: int = Field(default=30, ge=1, alias="EXPLORATION_TRIALS")
    pdf_resolution: int = Field(default=40, ge=1, alias="PDF_RESOLUTION")
    rng_seed: Optional[int] = Field(default=None, alias="RNG_SEED")
    tick_on_flip: bool = Field(default=True, alias="TICK_ON_FLIP")
    history_backend: str = Field(default="memory", alias="HISTORY_BACKEND")
    redis_url: str = Field(default="redis://localhost:6379/0", alias="REDIS_URL")
    dump_path: str = Field(default="dump.json", alias="DUMP_PATH")
    flush_on_shutdown: bool = Field(default=False, alias="FLUSH_ON_SHUTDOWN")
    log_level: str = Field(default="INFO", alias="LOG_LEVEL")

    @field_validator("history_backend")
    @classmethod
    def validate_backend(cls, value: str) -> str:
        normalized = value.strip().lower()
        if normalized not in HISTORY_BACKENDS:
            raise ValueError(f"HISTORY_BACKEND must be one of {', '.join(HISTORY_BACKENDS)}")
        return normalized
