"""Application configuration."""
from pathlib import Path
from typing import List, Optional

from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application settings.
    
    Environment variables take precedence over .env file.
    This makes it compatible with Docker (uses env vars) and 
    local development (uses .env file).
    """
    
    APP_NAME: str = "Box Inventory"
    APP_VERSION: str = "0.1.0"
    DEBUG: bool = False
    LOG_LEVEL: str = "INFO"
    CORS_ORIGINS: List[str] = ["*"]
    
    # Inventory store: "sql", "file" or "sheet"
    STORE_BACKEND: str = "sql"
    STORE_TIMEOUT: float = 10.0
    DATABASE_URL: str = "sqlite:///./inventory.db"
    STORE_PATH: str = "./inventory.json"
    SHEET_READ_URL: Optional[str] = None
    SHEET_WRITE_URL: Optional[str] = None
    
    # Tag suggestions (Gemini generateContent)
    TAG_SUGGESTION_API_KEY: Optional[str] = None
    TAG_SUGGESTION_MODEL: str = "gemini-2.5-flash"
    TAG_SUGGESTION_URL: str = "https://generativelanguage.googleapis.com/v1beta/models"
    TAG_SUGGESTION_TIMEOUT: float = 10.0
    
    model_config = SettingsConfigDict(
        # Only load .env file if it exists (for local dev)
        # Docker will use environment variables directly
        env_file=".env" if Path(".env").exists() else None,
        env_file_encoding="utf-8",
        extra="ignore",
    )


settings = Settings()
