"""
Pydantic settings for environment configuration.
"""

from typing import Literal, Optional

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class HTTPServiceSettings(BaseSettings):
    """
    HTTP Service configuration from environment variables.

    Reads from:
    1. Environment variables (HTTP_SERVICE_*)
    2. .env file
    3. Defaults

    Example .env file:
        HTTP_SERVICE_URI=https://api.example.com/v1/
        HTTP_SERVICE_TIMEOUT_CONNECT=5.0
        HTTP_SERVICE_TIMEOUT_READ=10.0
        HTTP_SERVICE_VERIFY_SSL=true
        HTTP_SERVICE_LOG_ENABLED=true
        HTTP_SERVICE_LOG_LEVEL=DEBUG
        HTTP_SERVICE_API_TOKEN=secret-token-123
    """

    model_config = SettingsConfigDict(
        env_prefix='HTTP_SERVICE_',
        env_file='.env',
        env_file_encoding='utf-8',
        case_sensitive=False,
        extra='ignore',
    )

    uri: Optional[str] = Field(default=None, description="Service URI (scheme://host[:port][/path])")

    # Transport
    timeout_connect: float = Field(default=5.0, gt=0)
    timeout_read: float = Field(default=30.0, gt=0)
    timeout_total: Optional[float] = Field(default=None, gt=0)
    verify_ssl: bool = Field(default=True)

    # Logging
    log_enabled: bool = Field(default=False)
    log_level: Literal["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"] = Field(default="INFO")
    log_format: Literal["json", "text"] = Field(default="text")
    log_enable_console: bool = Field(default=True)
    log_file_path: Optional[str] = None
    log_max_bytes: int = Field(default=10 * 1024 * 1024, gt=0)
    log_backup_count: int = Field(default=5, ge=0)
    log_enable_correlation_id: bool = Field(default=True)

    # Secrets (masked in logs)
    api_token: Optional[str] = Field(default=None, description="Bearer token sent with every request")

    @field_validator('uri')
    @classmethod
    def validate_uri_scheme(cls, v: Optional[str]) -> Optional[str]:
        """Only http and https URIs are accepted."""
        if v and not v.lower().startswith(("http://", "https://")):
            raise ValueError("uri must start with http:// or https://")
        return v

    @field_validator('api_token')
    @classmethod
    def validate_token_length(cls, v: Optional[str]) -> Optional[str]:
        """Validate secret is not too short."""
        if v is not None and len(v) < 8:
            raise ValueError("Secret must be at least 8 characters")
        return v
