"""HTTP status classification."""

from enum import Enum
from http import HTTPStatus
from typing import Dict, Optional, Type

from .exceptions import (
    BadRequestError,
    ForbiddenError,
    HTTPError,
    NotFoundError,
    ServerError,
    TooManyRequestsError,
    UnauthorizedError,
)


class StatusCategory(str, Enum):
    """Semantic category of a status code."""
    INFORMATIONAL = "informational"
    SUCCESS = "success"
    NO_CONTENT = "no_content"
    REDIRECTION = "redirection"
    CLIENT_ERROR = "client_error"
    SERVER_ERROR = "server_error"
    UNKNOWN = "unknown"


# Statuses that never carry a body
NO_CONTENT_CODES = frozenset({204, 205, 304})

_ERROR_TYPES: Dict[int, Type[HTTPError]] = {
    400: BadRequestError,
    401: UnauthorizedError,
    403: ForbiddenError,
    404: NotFoundError,
    429: TooManyRequestsError,
}


class HttpStatus:
    """
    Numeric status code with its category.

    Example:
        >>> status = HttpStatus(404)
        >>> status.category
        <StatusCategory.CLIENT_ERROR: 'client_error'>
        >>> status.is_error
        True
        >>> str(status.error("[GET http://example.com:80/x] 404 Not Found"))
        '[GET http://example.com:80/x] 404 Not Found'
    """

    __slots__ = ("code", "category")

    def __init__(self, code: int):
        self.code = int(code)
        self.category = self.classify(self.code)

    @staticmethod
    def classify(code: int) -> StatusCategory:
        if code in NO_CONTENT_CODES:
            return StatusCategory.NO_CONTENT
        if 100 <= code < 200:
            return StatusCategory.INFORMATIONAL
        if 200 <= code < 300:
            return StatusCategory.SUCCESS
        if 300 <= code < 400:
            return StatusCategory.REDIRECTION
        if 400 <= code < 500:
            return StatusCategory.CLIENT_ERROR
        if 500 <= code < 600:
            return StatusCategory.SERVER_ERROR
        return StatusCategory.UNKNOWN

    @property
    def no_content(self) -> bool:
        return self.category is StatusCategory.NO_CONTENT

    @property
    def is_error(self) -> bool:
        return self.category in (StatusCategory.CLIENT_ERROR, StatusCategory.SERVER_ERROR)

    @property
    def reason(self) -> str:
        try:
            return HTTPStatus(self.code).phrase
        except ValueError:
            return "Unknown Status"

    def error(self, message: Optional[str] = None) -> HTTPError:
        """Build the structured error for this status."""
        message = message or f"{self.code} {self.reason}"
        error_type = _ERROR_TYPES.get(self.code)
        if error_type is not None:
            return error_type(message)
        if self.category is StatusCategory.SERVER_ERROR:
            return ServerError(self.code, message)
        return HTTPError(self.code, message)

    def __eq__(self, other) -> bool:
        if isinstance(other, HttpStatus):
            return self.code == other.code
        if isinstance(other, int):
            return self.code == other
        return NotImplemented

    def __hash__(self) -> int:
        return hash(self.code)

    def __repr__(self) -> str:
        return f"HttpStatus({self.code}, {self.category.value})"
