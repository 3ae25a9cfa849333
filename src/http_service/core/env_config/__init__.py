"""
Environment configuration for HTTP Service.

Example:
    >>> from http_service.core.env_config import load_from_env
    >>> config = load_from_env(profile="production")
"""

from .loader import load_from_env, get_env_file_path
from .settings import HTTPServiceSettings

__all__ = [
    "load_from_env",
    "get_env_file_path",
    "HTTPServiceSettings",
]
