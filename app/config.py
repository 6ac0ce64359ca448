from pydantic_settings import BaseSettings
from functools import lru_cache
from typing import Optional

from app.core.crypto.key_derivation import KeyVersion


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    # API Settings
    app_name: str = "Cipher Chat API"
    app_version: str = "1.0.0"
    debug: bool = False
    log_level: str = "INFO"

    # Message Log Settings
    messages_per_page: int = 10
    max_messages: Optional[int] = None        # None keeps every record in memory
    password_placeholder: str = "***"         # Stored in place of the real password

    # Cipher Settings
    default_key_version: KeyVersion = KeyVersion.SHA256

    class Config:
        env_file = ".env"
        env_file_encoding = "utf-8"


@lru_cache
def get_settings() -> Settings:
    """Get cached settings instance."""
    return Settings()
