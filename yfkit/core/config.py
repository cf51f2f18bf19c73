"""
Configuration module for the yfkit Yahoo Finance client.
Loads environment variables and provides defaults for the HTTP client and logging.
"""

from pathlib import Path

from dotenv import load_dotenv
from pydantic import Field
from pydantic_settings import BaseSettings

# Load .env file from project root
env_path = Path(__file__).parent.parent.parent / ".env"
load_dotenv(dotenv_path=env_path)


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    # Upstream API
    base_url: str = Field(
        default="https://query2.finance.yahoo.com", alias="YF_BASE_URL"
    )
    request_timeout: float = Field(default=30.0, alias="YF_REQUEST_TIMEOUT")
    user_agent: str = Field(default="Mozilla/5.0", alias="YF_USER_AGENT")

    # Operation defaults
    news_count: int = Field(default=10, alias="YF_NEWS_COUNT")
    max_download_symbols: int = Field(default=50, alias="YF_MAX_DOWNLOAD_SYMBOLS")

    # Logging
    log_level: str = Field(default="INFO", alias="LOG_LEVEL")
    log_format: str = Field(default="text", alias="LOG_FORMAT")

    class Config:
        env_file = ".env"
        env_file_encoding = "utf-8"
        extra = "ignore"


# Global settings instance
settings = Settings()
