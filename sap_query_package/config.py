"""Application configuration settings."""

from __future__ import annotations

from functools import lru_cache

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict

ENV_FILE = ".env"
ENV_FILE_ENCODING = "utf-8"


class Settings(BaseSettings):
    """Engine configuration values loaded from environment variables."""

    model_config = SettingsConfigDict(
        env_file=ENV_FILE,
        env_file_encoding=ENV_FILE_ENCODING,
        extra="ignore",
    )

    templates_directory: str = Field(
        default="sap-query-package",
        description="Remote directory where template and package files are stored",
        min_length=1,
    )
    flows_directory: str = Field(
        default="sap-gui-flow",
        description="Remote directory holding the base SAP GUI flow definitions",
        min_length=1,
    )
    packages_directory: str = Field(
        default="sap-packages",
        description="Remote directory where combined package documents are stored",
        min_length=1,
    )
    queries_directory: str = Field(
        default="sap-queries",
        description="Remote directory receiving the generated .sqpr files",
        min_length=1,
    )
    execution_log_capacity: int = Field(
        default=200,
        description="Maximum number of entries kept in the execution log",
        gt=0,
    )
    edit_history_capacity: int = Field(
        default=50,
        description="Maximum number of undo snapshots kept per editing session",
        gt=0,
    )
    template_version_capacity: int = Field(
        default=10,
        description="Maximum number of saved versions kept per template",
        gt=0,
    )
    app_timezone: str | None = Field(
        default=None,
        description="IANA timezone name or UTC offset used for execution timestamps",
    )


@lru_cache
def get_settings() -> Settings:
    """Return cached application settings instance."""

    return Settings()


def reset_settings_cache() -> None:
    """Clear the settings cache to force reloading from the environment."""

    get_settings.cache_clear()


__all__ = ["Settings", "get_settings", "reset_settings_cache"]
