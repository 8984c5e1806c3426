"""Configuration management for homeboard."""

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    # Database Configuration
    database_path: str = Field(default="homeboard.db", description="SQLite database file path")

    # Pydantic Logfire Configuration (optional)
    logfire_token: str | None = Field(default=None, description="Pydantic Logfire token for observability")

    # Service Metadata
    service_name: str = Field(default="homeboard", description="Service name reported to Logfire")
    environment: str = Field(default="development", description="Deployment environment name")

    @property
    def is_production(self) -> bool:
        """Return True when running in the production environment."""
        return self.environment.lower() == "production"

    def require_credential(self, field_name: str, service_name: str) -> str:
        """Validate that a required credential is set, raising a clear error if missing.

        Args:
            field_name: Name of the field to check
            service_name: Human-readable service name for error message

        Returns:
            The credential value

        Raises:
            ValueError: If the credential is None or empty
        """
        value = getattr(self, field_name)
        if not value:
            raise ValueError(
                f"{service_name} credential not configured. "
                f"Set {field_name.upper()} environment variable or add to .env file."
            )
        return value


# Application Constants
class Constants:
    """Application-wide constants."""

    # House validation
    HOUSE_NAME_MIN_LENGTH: int = 3
    HOUSE_NAME_MAX_LENGTH: int = 20
    HOUSE_NAME_PATTERN: str = r"^[a-zA-Z0-9\s]+$"

    # Membership validation
    DISPLAY_NAME_MAX_LENGTH: int = 12

    # Task validation
    TASK_TITLE_MAX_LENGTH: int = 100
    TASK_DESCRIPTION_MAX_LENGTH: int = 500
    TASK_MAX_ASSIGNEES: int = 10

    # Pagination Defaults
    DEFAULT_PAGE_LIMIT: int = 20
    MAX_PAGE_LIMIT: int = 100

    # Store
    DEFAULT_PER_PAGE_LIMIT: int = 100  # Default page size for collection listings


def get_settings() -> Settings:
    """Get application settings (singleton pattern)."""
    return Settings()


# Global settings instance
settings = get_settings()
constants = Constants()
