"""Pydantic Settings model for application configuration."""

from pathlib import Path

from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Environment variable settings for the application.

    Names match what a GitHub Actions runner exports: action inputs arrive as
    `INPUT_<NAME>` and the event context as `GITHUB_*`.
    """

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    # Generic application-wide settings
    LOG_LEVEL: str | None = None
    CONFIG_FILE: Path | None = None

    # Action inputs (JSON documents shaped like {"ado": {...}} / {"github": {...}})
    INPUT_ADO: str | None = None
    INPUT_GITHUB: str | None = None

    # Tokens
    ADO_TOKEN: str | None = None
    GITHUB_TOKEN: str | None = None

    # GitHub event context
    GITHUB_API_URL: str = "https://api.github.com"
    GITHUB_EVENT_NAME: str | None = None
    GITHUB_EVENT_PATH: Path | None = None
    GITHUB_REPOSITORY: str | None = None
    GITHUB_REPOSITORY_OWNER: str | None = None


def get_settings() -> Settings:
    """Read settings from the current environment."""
    return Settings()
