#config.py
import os
from pydantic_settings import BaseSettings
from pydantic import AliasChoices, Field
from pydantic_settings import SettingsConfigDict
from typing import Optional, List
from functools import lru_cache

class Settings(BaseSettings):
    model_config = SettingsConfigDict(env_file=".env", case_sensitive=False, extra="ignore")
    # Application Settings
    APP_NAME: str = "Lyrics Insight API"
    APP_VERSION: str = "1.0.0"
    DEBUG: bool = False
    DOCS_ENABLED: bool = True

    # Server Settings
    HOST: str = "0.0.0.0"
    PORT: int = int(os.environ.get("PORT", 8000))

    # CORS Settings (accept comma-separated strings to avoid JSON parsing in env)
    ALLOWED_ORIGINS: str = "*"

    # AI Settings (GOOGLE_API_KEY is accepted for older deployments)
    GEMINI_API_KEY: str = Field(default="", validation_alias=AliasChoices("GEMINI_API_KEY", "GOOGLE_API_KEY"))
    GEMINI_MODEL: str = "gemini-1.5-flash"

    # Lyrics limits
    MIN_LYRICS_LENGTH: int = 50
    MAX_LYRICS_LENGTH: int = 2000
    PROMPT_LYRICS_LIMIT: int = 1000  # characters sent to the model

    # Store / listing
    RECENT_DEFAULT_LIMIT: int = 10
    RECENT_MAX_LIMIT: int = 100
    STORE_MAX_RECORDS: Optional[int] = None  # None = unbounded

    # Middleware settings
    MAX_REQUEST_SIZE: int = 64 * 1024  # bytes

    # Logging Settings
    LOG_LEVEL: str = "INFO"
    LOG_FORMAT: str = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"

    def _split_csv(self, value: str) -> List[str]:
        if value is None:
            return []
        value = value.strip()
        if value == "":
            return []
        return [item.strip() for item in value.split(",")]

    @property
    def allowed_origins_list(self) -> List[str]:
        return self._split_csv(self.ALLOWED_ORIGINS)

    @property
    def gemini_configured(self) -> bool:
        return bool(self.GEMINI_API_KEY and self.GEMINI_API_KEY.strip())


@lru_cache()
def get_settings() -> Settings:
    return Settings()

settings: Settings = get_settings()
