"""
API configuration settings.
"""

from typing import Optional

from pydantic import field_validator
from pydantic_settings import BaseSettings


class APIConfig(BaseSettings):
    """API configuration settings."""

    # API Settings
    api_title: str = "Bookstore Catalog API"
    api_version: str = "1.0.0"
    api_description: str = "REST API for books, their publishers and the shops selling them"
    api_prefix: str = "/api"

    # Server Settings
    host: str = "0.0.0.0"
    port: int = 8000
    debug: bool = False

    # Database Settings
    mongodb_url: str = "mongodb://localhost:27017"
    mongodb_database: str = "bookstore"

    # Pagination
    default_page_size: int = 30

    # CORS Settings
    cors_origins: list = ["*"]
    cors_allow_credentials: bool = True
    cors_allow_methods: list = ["*"]
    cors_allow_headers: list = ["*"]

    # Logging
    log_level: str = "INFO"
    log_format: str = "json"
    log_file: Optional[str] = None

    model_config = {
        "env_file": ".env",
        "env_file_encoding": "utf-8",
        "case_sensitive": False,
        "extra": "ignore"  # Ignore extra fields from .env
    }

    @field_validator('log_level')
    @classmethod
    def validate_log_level(cls, v):
        """Ensure log level is valid."""
        valid_levels = ['DEBUG', 'INFO', 'WARNING', 'ERROR', 'CRITICAL']
        if v.upper() not in valid_levels:
            raise ValueError(f'log_level must be one of: {valid_levels}')
        return v.upper()

    @field_validator('log_format')
    @classmethod
    def validate_log_format(cls, v):
        """Ensure log format is valid."""
        valid_formats = ['json', 'console']
        if v.lower() not in valid_formats:
            raise ValueError(f'log_format must be one of: {valid_formats}')
        return v.lower()

    @field_validator('default_page_size')
    @classmethod
    def validate_default_page_size(cls, v):
        if v < 1:
            raise ValueError('default_page_size must be at least 1')
        return v


# Global config instance
config = APIConfig()
