"""Configuration management for tasktracker."""

from pathlib import Path

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


# Application Constants
class Constants:
    """Application-wide constants."""

    # Paths
    PROJECT_ROOT: Path = Path(__file__).parent.parent.parent
    DEFAULT_DATA_DIR: Path = PROJECT_ROOT / "data"

    # Collections (one backing file each)
    TASKS_COLLECTION: str = "tasks"
    USERS_COLLECTION: str = "users"

    # Identifiers
    FIRST_TASK_ID: int = 1
    USER_ID_PREFIX: str = "user"

    # On-disk format
    JSON_INDENT: int = 2
    TEMP_FILE_SUFFIX: str = ".tmp"
    LAST_MODIFIED_KEY: str = "lastModified"


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    # Storage
    data_dir: Path = Field(
        default=Constants.DEFAULT_DATA_DIR,
        description="Directory holding one JSON file per collection",
    )

    # Pydantic Logfire Configuration (optional)
    logfire_token: str | None = Field(default=None, description="Pydantic Logfire token for observability")
    environment: str = Field(default="development", description="Deployment environment reported to Logfire")
    log_level: str = Field(default="INFO", description="Minimum level for standard library logging")


def get_settings() -> Settings:
    """Get application settings (singleton pattern)."""
    return Settings()


# Global settings instance
settings = get_settings()
constants = Constants()
