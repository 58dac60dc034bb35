from pydantic_settings import BaseSettings, SettingsConfigDict
from typing import Optional


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore"
    )

    # Priority engine
    lexicon_path: Optional[str] = None

    # Incident search defaults
    search_default_limit: int = 20
    search_default_threshold: float = 0.3

    # Radio channel monitoring
    radio_time_window_minutes: int = 5
    duplicate_window_minutes: int = 5

    # CORS
    cors_origins: str = "http://localhost:3000"

    # Logging
    log_level: str = "INFO"

    @property
    def cors_origins_list(self) -> list[str]:
        """Parse CORS origins from comma-separated string."""
        return [origin.strip() for origin in self.cors_origins.split(",") if origin.strip()]

    @property
    def has_custom_lexicons(self) -> bool:
        """Check if a lexicon file is configured."""
        return self.lexicon_path is not None and len(self.lexicon_path.strip()) > 0


settings = Settings()
