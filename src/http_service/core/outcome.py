"""Result of a single request."""

from dataclasses import dataclass
from typing import Any, Mapping, Optional

from .exceptions import HTTPServiceException
from .status import StatusCategory


@dataclass(frozen=True)
class ServiceResponse:
    """
    Successfully resolved response.

    Attributes:
        status_code: HTTP status code
        category: Status category
        content_type: Media type without parameters, ``""`` when absent
        headers: Response headers exactly as the transport returned them
        body: ``None``, a parsed JSON value, text, or raw bytes
    """

    status_code: int
    category: StatusCategory
    content_type: str
    headers: Mapping[str, str]
    body: Any = None


@dataclass(frozen=True)
class Outcome:
    """
    Either a response or an error, never both.

    Example:
        >>> outcome = await service.get("users")
        >>> if outcome.ok:
        ...     print(outcome.body)
        ... else:
        ...     print(outcome.error)
        >>> users = outcome.unwrap().body  # raises the error instead
    """

    response: Optional[ServiceResponse] = None
    error: Optional[HTTPServiceException] = None

    def __post_init__(self):
        if (self.response is None) == (self.error is None):
            raise ValueError("Outcome requires exactly one of response or error")

    @classmethod
    def success(cls, response: ServiceResponse) -> "Outcome":
        return cls(response=response)

    @classmethod
    def failure(cls, error: HTTPServiceException) -> "Outcome":
        return cls(error=error)

    @property
    def ok(self) -> bool:
        return self.error is None

    @property
    def status_code(self) -> Optional[int]:
        """Status code of the response, or of the error when it has one."""
        if self.response is not None:
            return self.response.status_code
        return getattr(self.error, "status_code", None)

    @property
    def body(self) -> Any:
        return self.response.body if self.response is not None else None

    def unwrap(self) -> ServiceResponse:
        """Return the response or raise the error."""
        if self.error is not None:
            raise self.error
        return self.response
