"""Application configuration settings."""

from functools import lru_cache

from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    # Application
    APP_NAME: str = "Student Portfolio API"
    APP_VERSION: str = "1.0.0"
    DEBUG: bool = False
    API_V1_PREFIX: str = "/api/v1"
    FRONTEND_URL: str = "*"

    # JWT Settings
    JWT_SECRET_KEY: str = "your-super-secret-key-change-in-production"
    JWT_ALGORITHM: str = "HS256"
    JWT_ACCESS_TOKEN_EXPIRE_MINUTES: int = 60 * 24

    # Google Sheets
    GOOGLE_SHEETS_ID: str = ""
    GOOGLE_SHEETS_API_KEY: str = ""
    SHEETS_API_BASE_URL: str = "https://sheets.googleapis.com/v4/spreadsheets"
    SHEETS_TIMEOUT_SECONDS: float = 15.0

    # Local workbook (takes precedence over Google Sheets when set)
    WORKBOOK_PATH: str | None = None

    # Portfolio
    KEY_COLUMN: str = "admission_no"
    RECENT_TESTS_LIMIT: int = 5
    PHOTO_PLACEHOLDER_URL: str = "/api/placeholder/120/120"

    @property
    def cors_origins(self) -> list[str]:
        """Split FRONTEND_URL into the list CORSMiddleware expects."""
        return [origin.strip() for origin in self.FRONTEND_URL.split(",") if origin.strip()]


@lru_cache
def get_settings() -> Settings:
    """Get cached settings instance."""
    return Settings()


settings = get_settings()
