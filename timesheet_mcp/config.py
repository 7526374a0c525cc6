"""
Settings for the Timesheet MCP server.

Values come from environment variables prefixed with ``TIMESHEET_`` (for
example ``TIMESHEET_DB_PATH``) or from a ``.env`` file in the working
directory.
"""

from functools import lru_cache
from pathlib import Path

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

DEFAULT_DB_PATH = Path("~/.local/share/timesheet-mcp/timesheet.db")


class Settings(BaseSettings):
    """Server configuration."""

    model_config = SettingsConfigDict(env_prefix="TIMESHEET_", env_file=".env", extra="ignore")

    db_path: Path = Field(default=DEFAULT_DB_PATH, description="SQLite database file (':memory:' for a throwaway db)")

    log_level: str = Field(default="INFO", description="Log level: DEBUG, INFO, WARNING, ERROR")
    log_file: Path | None = Field(default=None, description="Rotating log file; stderr only when unset")
    log_max_bytes: int = Field(default=5_000_000, description="Maximum log file size in bytes", gt=0)
    log_backup_count: int = Field(default=7, description="Number of rotated log files to keep", ge=0)

    hourly_rate: float = Field(default=115.0, description="Default hourly rate for statements and invoices", gt=0)
    currency: str = Field(default="CAD", description="Invoice currency code")
    invoice_due_days: int = Field(default=30, description="Days from issue date until an invoice is due", ge=0)

    autosave_delay: float = Field(default=1.0, description="Seconds of inactivity before a notes draft is saved", gt=0)

    @field_validator("log_level")
    @classmethod
    def validate_log_level(cls, v: str) -> str:
        level = v.strip().upper()
        if level not in {"DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"}:
            raise ValueError(f"Unknown log level '{v}'")
        return level


@lru_cache
def get_settings() -> Settings:
    return Settings()
