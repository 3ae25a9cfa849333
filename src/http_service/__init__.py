"""HTTP Service - request wrapper bound to a single origin."""

import logging
from importlib.metadata import version, PackageNotFoundError

from .core.http_service import HTTPService
from .async_service import AsyncHTTPService
from .core.config import ServiceConfig, TimeoutConfig
from .core.env_config import load_from_env
from .core.logging import LoggingConfig
from .core.headers import static_headers, bearer_token, api_key, basic_auth
from .core.outcome import Outcome, ServiceResponse
from .core.payload import RawBody, TextBody, StructuredBody, JSON_MEDIA_TYPE, FORM_MEDIA_TYPE
from .core.status import HttpStatus, StatusCategory
from .core.exceptions import (
    HTTPServiceException,
    InvalidTargetError,
    InvalidRequestError,
    UnsupportedBodyTypeError,
    ConfigurationError,
    TransportError,
    TimeoutError,
    ConnectionError,
    DNSError,
    TLSError,
    ProxyError,
    BodyParseError,
    HTTPError,
    BadRequestError,
    UnauthorizedError,
    ForbiddenError,
    NotFoundError,
    TooManyRequestsError,
    ServerError,
)

# Set up logging - add NullHandler to prevent "No handler found" warnings
# Users can configure logging themselves using logging.getLogger('http_service')
logging.getLogger('http_service').addHandler(logging.NullHandler())

# Version info - read from package metadata (single source of truth in pyproject.toml)
try:
    __version__ = version("http-service-core")
except PackageNotFoundError:
    # Package is not installed (development mode)
    __version__ = "0.0.0-dev"

__all__ = [
    # Core
    "HTTPService",
    "AsyncHTTPService",
    "Outcome",
    "ServiceResponse",
    "HttpStatus",
    "StatusCategory",

    # Config
    "ServiceConfig",
    "TimeoutConfig",
    "LoggingConfig",
    "load_from_env",

    # Body
    "RawBody",
    "TextBody",
    "StructuredBody",
    "JSON_MEDIA_TYPE",
    "FORM_MEDIA_TYPE",

    # Headers
    "static_headers",
    "bearer_token",
    "api_key",
    "basic_auth",

    # Exceptions
    "HTTPServiceException",
    "InvalidTargetError",
    "InvalidRequestError",
    "UnsupportedBodyTypeError",
    "ConfigurationError",
    "TransportError",
    "TimeoutError",
    "ConnectionError",
    "DNSError",
    "TLSError",
    "ProxyError",
    "BodyParseError",
    "HTTPError",
    "BadRequestError",
    "UnauthorizedError",
    "ForbiddenError",
    "NotFoundError",
    "TooManyRequestsError",
    "ServerError",

    # Version
    "__version__",
]
