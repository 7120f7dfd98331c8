"""Runtime configuration for the bot."""

from __future__ import annotations

import os

from pydantic import BaseModel, Field


ENV_PREFIX = "HANABI_BOT_"


class BotConfig(BaseModel):
    """Limits and identifiers used by the reasoning core."""

    table_id: int = 0
    max_copy_depth: int = Field(default=3, ge=0)  # Cloning beyond this is fatal
    max_rewind_depth: int = Field(default=3, ge=0)  # Rewinding beyond this is fatal
    log_level: str = "INFO"

    @classmethod
    def from_env(cls, **overrides) -> "BotConfig":
        """Read settings from HANABI_BOT_* environment variables.

        Call load_dotenv() first if settings live in a .env file.
        """
        values: dict[str, object] = {}
        for field in ("table_id", "max_copy_depth", "max_rewind_depth", "log_level"):
            raw = os.environ.get(ENV_PREFIX + field.upper())
            if raw is not None:
                values[field] = raw
        values.update(overrides)
        return cls(**values)
