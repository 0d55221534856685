# =============================================================================
# app/config.py - Application Settings
# =============================================================================
# This module loads configuration from environment variables using pydantic-settings.
# It provides a single Settings class with all configuration values.
#
# Usage:
#   from app.config import settings
#   print(settings.OPENAPI_URL)
#
# Environment variables are loaded from:
# 1. System environment variables
# 2. .env file in project root (if exists)
#
# Settings are read once at startup; changing them requires a restart.
# =============================================================================

from functools import lru_cache
from typing import Literal

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict

from core.models import CorsRule, RequestLoggingConfig


def _split_csv(value: str) -> tuple[str, ...]:
    return tuple(part.strip() for part in value.split(",") if part.strip())


class Settings(BaseSettings):
    """
    Application settings loaded from environment variables.

    Uses pydantic-settings to:
    - Automatically load from .env file
    - Validate types and constraints
    - Provide sensible defaults for development

    All settings are accessed via the global `settings` instance.
    """

    # -------------------------------------------------------------------------
    # Application Settings
    # -------------------------------------------------------------------------

    ENVIRONMENT: Literal["development", "staging", "production"] = Field(
        default="development",
        description="Current environment"
    )

    DEBUG: bool = Field(
        default=False,
        description="Enable debug mode (request/response logging, verbose logs)"
    )

    API_HOST: str = Field(
        default="0.0.0.0",
        description="Host to bind the API server to"
    )

    API_PORT: int = Field(
        default=8080,
        ge=1,
        le=65535,
        description="Port for the API server"
    )

    # -------------------------------------------------------------------------
    # API Documentation
    # -------------------------------------------------------------------------

    API_TITLE: str = Field(
        default="Learning Demo API",
        description="Title shown in the generated API documentation"
    )

    API_DESCRIPTION: str = Field(
        default="REST API demonstrating request/response logging",
        description="Description shown in the generated API documentation"
    )

    API_VERSION: str = Field(
        default="1.0.0",
        description="API version reported in docs and health checks"
    )

    OPENAPI_URL: str = Field(
        default="/v2/api-docs",
        description="Path of the machine-readable API description"
    )

    DOCS_URL: str = Field(
        default="/docs",
        description="Path of the interactive documentation UI"
    )

    # -------------------------------------------------------------------------
    # Request/Response Logging
    # -------------------------------------------------------------------------
    # Only active when the middleware logger is enabled for DEBUG

    LOG_INCLUDE_CLIENT_INFO: bool = Field(default=True)
    LOG_INCLUDE_QUERY_STRING: bool = Field(default=True)
    LOG_INCLUDE_HEADERS: bool = Field(default=True)
    LOG_INCLUDE_PAYLOAD: bool = Field(default=True)

    LOG_MAX_PAYLOAD_LENGTH: int = Field(
        default=10_000,
        ge=0,
        description="Maximum number of body bytes captured per request/response"
    )

    LOG_BEFORE_MESSAGE_PREFIX: str = Field(default="Before request [")
    LOG_BEFORE_MESSAGE_SUFFIX: str = Field(default="]")
    LOG_AFTER_MESSAGE_PREFIX: str = Field(default="After request [")
    LOG_AFTER_MESSAGE_SUFFIX: str = Field(default="]")
    LOG_RESPONSE_MESSAGE_PREFIX: str = Field(default="After response [")
    LOG_RESPONSE_MESSAGE_SUFFIX: str = Field(default="]")

    # Glob patterns (comma-separated), e.g. "/health,/docs*"
    LOG_EXCLUDE_PATHS: str = Field(
        default="",
        description="Paths that are never logged (comma-separated glob patterns)"
    )

    # -------------------------------------------------------------------------
    # CORS (applies to the API documentation path only)
    # -------------------------------------------------------------------------

    CORS_ALLOWED_ORIGINS: str = Field(
        default="*",
        description="Allowed CORS origins (comma-separated, '*' for any)"
    )

    CORS_ALLOWED_METHODS: str = Field(
        default="GET",
        description="Allowed CORS methods (comma-separated)"
    )

    CORS_ALLOWED_HEADERS: str = Field(
        default="Origin,Content-Type,Accept",
        description="Allowed CORS request headers (comma-separated)"
    )

    CORS_ALLOW_CREDENTIALS: bool = Field(
        default=True,
        description="Allow credentialed cross-origin requests"
    )

    # -------------------------------------------------------------------------
    # Pydantic Settings Configuration
    # -------------------------------------------------------------------------

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        env_ignore_empty=True,
        case_sensitive=True,
        extra="ignore",
    )

    # -------------------------------------------------------------------------
    # Computed Properties
    # -------------------------------------------------------------------------

    @property
    def request_logging(self) -> RequestLoggingConfig:
        """
        Build the logging middleware configuration.

        Example: LOG_EXCLUDE_PATHS="/health, /docs*" -> exclude_paths=("/health", "/docs*")
        """
        return RequestLoggingConfig(
            include_client_info=self.LOG_INCLUDE_CLIENT_INFO,
            include_query_string=self.LOG_INCLUDE_QUERY_STRING,
            include_headers=self.LOG_INCLUDE_HEADERS,
            include_payload=self.LOG_INCLUDE_PAYLOAD,
            max_payload_length=self.LOG_MAX_PAYLOAD_LENGTH,
            before_message_prefix=self.LOG_BEFORE_MESSAGE_PREFIX,
            before_message_suffix=self.LOG_BEFORE_MESSAGE_SUFFIX,
            after_message_prefix=self.LOG_AFTER_MESSAGE_PREFIX,
            after_message_suffix=self.LOG_AFTER_MESSAGE_SUFFIX,
            response_message_prefix=self.LOG_RESPONSE_MESSAGE_PREFIX,
            response_message_suffix=self.LOG_RESPONSE_MESSAGE_SUFFIX,
            exclude_paths=_split_csv(self.LOG_EXCLUDE_PATHS),
        )

    @property
    def cors_rules(self) -> list[CorsRule]:
        """
        Static CORS table: one rule for the API documentation path.
        """
        return [
            CorsRule(
                path=self.OPENAPI_URL,
                allowed_origins=_split_csv(self.CORS_ALLOWED_ORIGINS),
                allowed_methods=_split_csv(self.CORS_ALLOWED_METHODS),
                allowed_headers=_split_csv(self.CORS_ALLOWED_HEADERS),
                allow_credentials=self.CORS_ALLOW_CREDENTIALS,
            )
        ]


@lru_cache
def get_settings() -> Settings:
    """
    Get cached Settings instance.

    Using lru_cache ensures we only parse .env and validate once,
    not on every access.

    Returns:
        Settings: The application settings instance
    """
    return Settings()


# Global settings instance for easy importing
# Usage: from app.config import settings
settings = get_settings()
