"""
Configuration loader from environment variables and .env files.
"""

import os
from typing import Any, Optional

from pydantic import ValidationError

from ..config import ServiceConfig, TimeoutConfig
from ..exceptions import ConfigurationError
from ..headers import bearer_token
from ..logging.config import LoggingConfig, LogFormat, LogLevel
from .settings import HTTPServiceSettings

PROFILE_ENV_VAR = "HTTP_SERVICE_ENV"


def get_env_file_path(profile: Optional[str] = None) -> str:
    """
    Get .env file path for profile.

    Example:
        >>> get_env_file_path("production")
        '.env.production'
        >>> get_env_file_path(None)  # HTTP_SERVICE_ENV not set
        '.env'
    """
    if profile is None:
        profile = os.getenv(PROFILE_ENV_VAR)

    if not profile:
        return ".env"

    return f".env.{profile}"


def load_from_env(
    profile: Optional[str] = None,
    env_file: Optional[str] = None,
    **overrides: Any
) -> ServiceConfig:
    """
    Load ServiceConfig from environment variables.

    Priority (highest to lowest):
    1. **overrides - explicit parameters (same names as the settings fields)
    2. Environment variables (HTTP_SERVICE_*)
    3. .env file (profile-specific or default)
    4. Defaults

    Args:
        profile: Profile to load (development/staging/production/...)
        env_file: Custom .env file path (overrides profile)
        **overrides: Explicit config overrides

    Returns:
        ServiceConfig instance

    Raises:
        ConfigurationError: settings failed validation

    Example:
        >>> config = load_from_env(profile="production", uri="https://custom.api.com")
    """
    if env_file is None:
        env_file = get_env_file_path(profile)

    try:
        settings = HTTPServiceSettings(_env_file=env_file, **overrides)
    except ValidationError as e:
        raise ConfigurationError(f"Invalid HTTP service settings: {e}") from e

    decorators = []
    if settings.api_token:
        decorators.append(bearer_token(settings.api_token))

    logging_config = None
    if settings.log_enabled:
        logging_config = LoggingConfig(
            level=LogLevel(settings.log_level),
            format=LogFormat(settings.log_format),
            enable_console=settings.log_enable_console,
            enable_file=settings.log_file_path is not None,
            file_path=settings.log_file_path,
            max_bytes=settings.log_max_bytes,
            backup_count=settings.log_backup_count,
            enable_correlation_id=settings.log_enable_correlation_id,
        )

    return ServiceConfig(
        uri=settings.uri,
        timeout=TimeoutConfig(
            connect=settings.timeout_connect,
            read=settings.timeout_read,
            total=settings.timeout_total,
        ),
        verify_ssl=settings.verify_ssl,
        header_decorators=tuple(decorators),
        logging=logging_config,
    )
