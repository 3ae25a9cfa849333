"""Core HTTP Service модули."""

from .config import TimeoutConfig, ServiceConfig
from .exceptions import (
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
    classify_httpx_exception,
    classify_requests_exception,
)
from .target import TargetDescriptor
from .payload import (
    BodyKind,
    RawBody,
    TextBody,
    StructuredBody,
    BodyPayload,
    as_payload,
    serialize_body,
    JSON_MEDIA_TYPE,
    FORM_MEDIA_TYPE,
)
from .status import HttpStatus, StatusCategory
from .error_extractors import (
    ErrorExtractor,
    DEFAULT_ERROR_EXTRACTORS,
    extract_error_message,
)
from .headers import HeaderDecorator, static_headers, bearer_token, api_key, basic_auth
from .outcome import Outcome, ServiceResponse
from .pipeline import RequestPipeline, RequestSpec
from .transport import HttpxTransport, RequestsTransport, PreparedRequest, TransportResponse
from .http_service import HTTPService

__all__ = [
    # Config
    "TimeoutConfig",
    "ServiceConfig",
    # Core
    "HTTPService",
    "RequestPipeline",
    "RequestSpec",
    "TargetDescriptor",
    "Outcome",
    "ServiceResponse",
    # Status
    "HttpStatus",
    "StatusCategory",
    # Body
    "BodyKind",
    "RawBody",
    "TextBody",
    "StructuredBody",
    "BodyPayload",
    "as_payload",
    "serialize_body",
    "JSON_MEDIA_TYPE",
    "FORM_MEDIA_TYPE",
    # Headers
    "HeaderDecorator",
    "static_headers",
    "bearer_token",
    "api_key",
    "basic_auth",
    # Error extraction
    "ErrorExtractor",
    "DEFAULT_ERROR_EXTRACTORS",
    "extract_error_message",
    # Transport
    "HttpxTransport",
    "RequestsTransport",
    "PreparedRequest",
    "TransportResponse",
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
    "classify_httpx_exception",
    "classify_requests_exception",
]
