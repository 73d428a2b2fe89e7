"""Runtime settings read from the environment and an optional .env file."""

import os
from pathlib import Path

from dotenv import find_dotenv, load_dotenv
from pydantic import BaseModel, Field, field_validator

DEFAULT_DB_PATH = str(Path.home() / ".flashdeck" / "flashdeck.duckdb")


class Settings(BaseModel):
    """Settings for the flashdeck front ends.

    Attributes:
        db_path: DuckDB file holding decks and words, or ":memory:".
        log_level: Name of the logging level.
        seed_demo_data: Whether to insert the demo decks into an empty database.
    """

    db_path: str = Field(default=DEFAULT_DB_PATH, description="Database file")
    log_level: str = Field(default="WARNING", description="Logging level name")
    seed_demo_data: bool = Field(default=True, description="Insert demo decks when empty")

    @field_validator("db_path")
    @classmethod
    def _expand_db_path(cls, value: str) -> str:
        if value == ":memory:":
            return value
        return str(Path(value).expanduser())

    @field_validator("log_level")
    @classmethod
    def _normalise_level(cls, value: str) -> str:
        level = value.upper()
        if level not in ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"):
            raise ValueError(f"Unknown log level: {value}")
        return level

    @classmethod
    def from_env(cls) -> "Settings":
        """Builds settings from FLASHDECK_* variables, loading .env from the working directory first."""
        load_dotenv(find_dotenv(usecwd=True))
        values = {}
        if os.getenv("FLASHDECK_DB_PATH"):
            values["db_path"] = os.getenv("FLASHDECK_DB_PATH")
        if os.getenv("FLASHDECK_LOG_LEVEL"):
            values["log_level"] = os.getenv("FLASHDECK_LOG_LEVEL")
        if os.getenv("FLASHDECK_SEED_DEMO"):
            values["seed_demo_data"] = os.getenv("FLASHDECK_SEED_DEMO")
        return cls(**values)

    def ensure_db_dir(self) -> None:
        if self.db_path != ":memory:":
            Path(self.db_path).parent.mkdir(parents=True, exist_ok=True)
