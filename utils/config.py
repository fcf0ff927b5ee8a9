"""
Configuration Utility - Environment Variables Management

Centralized configuration loading from .env files using pydantic-settings.
Type-safe access to all environment variables with validation.

Usage:
    from utils.config import settings

    redis_url = settings.REDIS_URL
    content_channel = settings.REDIS_CHANNEL_CONTENT
"""

from functools import lru_cache

from pydantic import Field
from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    # Redis Configuration
    REDIS_URL: str = Field(default="redis://redis:6379/0")
    REDIS_MAX_CONNECTIONS: int = Field(default=10)
    REDIS_CONNECT_TIMEOUT: float = Field(default=2.0)
    REDIS_SOCKET_TIMEOUT: float = Field(default=2.0)
    REDIS_CHANNEL_NATIVE: str = Field(default="NativeCmsPublicationEvents")
    REDIS_CHANNEL_CONTENT: str = Field(default="CmsPublicationEvents")

    # HTTP API Configuration
    API_PORT: int = Field(default=8080)
    API_HOST: str = Field(default="0.0.0.0")

    # Logging Configuration
    LOG_LEVEL: str = Field(default="INFO")
    LOG_FORMAT: str = Field(default="json")

    # Consumer Configuration
    RUN_ONCE: bool = Field(default=False)

    # Application Metadata
    APP_NAME: str = Field(default="video-mapper")
    APP_VERSION: str = Field(default="0.1.0")
    APP_DESCRIPTION: str = Field(
        default="Catch native video content, transform it into Content and send it back to the queue."
    )

    class Config:
        env_file = ".env"
        env_file_encoding = "utf-8"
        case_sensitive = True


@lru_cache()
def get_settings() -> Settings:
    """Get cached settings instance.

    Returns:
        Singleton Settings instance
    """
    return Settings()


# Global settings instance
settings = get_settings()
