from __future__ import annotations

import random

from pydantic_settings import BaseSettings, SettingsConfigDict

from .dice import RandomSource, default_rng


class Settings(BaseSettings):
    model_config = SettingsConfigDict(env_prefix="DICE_", env_file=".env", env_file_encoding="utf-8", extra="ignore")

    # stdout carries the MCP transport, so logs go to stderr.
    log_level: str = "WARNING"

    # Reject formulas with unrecognized fragments instead of skipping them.
    strict_parsing: bool = False

    # Seed for reproducible rolls; leave unset for secrets.SystemRandom.
    rng_seed: int | None = None

    def make_rng(self) -> RandomSource:
        if self.rng_seed is None:
            return default_rng()
        return random.Random(self.rng_seed)


settings = Settings()
