"""Configuration management for p4-bridge."""

from pathlib import Path
from typing import Optional

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


DEFAULT_PORT = 4444
DEFAULT_CHANGE_LIMIT = 50

# Packaged static UI, served when no static_dir is configured
PACKAGED_STATIC_DIR = Path(__file__).resolve().parent.parent / "server" / "static"


class Settings(BaseSettings):
    """Application settings.

    Values come from keyword arguments, then `P4BRIDGE_*` environment
    variables, then a `.env` file in the working directory.
    """

    model_config = SettingsConfigDict(
        env_prefix="P4BRIDGE_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    # Storage base directory
    data_dir: Path = Field(default_factory=lambda: Path.home() / ".p4-bridge")

    # HTTP server
    host: str = "0.0.0.0"
    port: int = DEFAULT_PORT
    cors_origins: str = "*"
    static_dir: Optional[Path] = None

    # p4 CLI
    p4_executable: str = "p4"
    p4_timeout: Optional[float] = None  # seconds; None blocks until p4 exits

    # Queries
    default_change_limit: int = DEFAULT_CHANGE_LIMIT

    # Debug settings
    debug: bool = False

    @field_validator("p4_timeout")
    @classmethod
    def validate_timeout(cls, v: Optional[float]) -> Optional[float]:
        """Treat zero or negative timeouts as unbounded."""
        if v is not None and v <= 0:
            return None
        return v

    @field_validator("default_change_limit")
    @classmethod
    def validate_change_limit(cls, v: int) -> int:
        if v < 1:
            raise ValueError(f"default_change_limit must be positive, got {v}")
        return v

    @property
    def storage_dir(self) -> Path:
        """Get the storage directory."""
        return self.data_dir / "data"

    @property
    def credentials_path(self) -> Path:
        """Get the path of the persisted credential file."""
        return self.storage_dir / "creds.json"

    @property
    def debug_log_dir(self) -> Path:
        """Get the debug log directory."""
        return self.data_dir / "logs"

    @property
    def resolved_static_dir(self) -> Path:
        """Get the directory the browser UI is served from."""
        return self.static_dir or PACKAGED_STATIC_DIR
