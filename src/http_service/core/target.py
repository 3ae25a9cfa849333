"""Fixed request origin parsed from a service URI."""

from dataclasses import dataclass, field
from types import MappingProxyType
from typing import Any, Mapping, Optional
from urllib.parse import urlsplit

from .exceptions import InvalidTargetError
from .utils import format_host

DEFAULT_PORTS = MappingProxyType({"http": 80, "https": 443})


@dataclass(frozen=True)
class TargetDescriptor:
    """
    Origin every request of a service is sent to.

    Attributes:
        protocol: ``"http"`` or ``"https"``
        host: Hostname without port (IPv6 literals without brackets)
        port: Explicit port, or the scheme default
        base_path: Path prefix, always starting with ``/``
        transport_options: Extra options forwarded to the transport library

    Example:
        >>> target = TargetDescriptor.parse("https://api.example.com/v1/")
        >>> target.port
        443
        >>> target.url_for("users")
        'https://api.example.com/v1/users'
    """

    protocol: str
    host: str
    port: int
    base_path: str = "/"
    transport_options: Mapping[str, Any] = field(default_factory=lambda: MappingProxyType({}))

    def __post_init__(self):
        if self.protocol not in DEFAULT_PORTS:
            raise InvalidTargetError(
                f"invalid protocol '{self.protocol}' (expected http or https)"
            )
        if not self.host:
            raise InvalidTargetError("host must not be empty")
        if self.port <= 0:
            raise InvalidTargetError(f"port must be positive, got {self.port}")
        if not self.base_path.startswith("/"):
            object.__setattr__(self, "base_path", "/" + self.base_path)
        if not isinstance(self.transport_options, MappingProxyType):
            object.__setattr__(
                self, "transport_options", MappingProxyType(dict(self.transport_options))
            )

    @classmethod
    def parse(
        cls,
        uri: str,
        transport_options: Optional[Mapping[str, Any]] = None
    ) -> "TargetDescriptor":
        """
        Parse ``scheme://host[:port][/basepath]``.

        Raises:
            InvalidTargetError: scheme is not http/https, host is missing
                or port is not a number
        """
        if not isinstance(uri, str):
            raise InvalidTargetError(f"URI must be a string, got {type(uri).__name__}")

        parsed = urlsplit(uri.strip())
        protocol = parsed.scheme.lower()
        if protocol not in DEFAULT_PORTS:
            raise InvalidTargetError(
                f"'{uri}' invalid protocol (expected http or https)", uri=uri
            )
        if not parsed.hostname:
            raise InvalidTargetError(f"'{uri}' has no host", uri=uri)

        try:
            port = parsed.port
        except ValueError as e:
            raise InvalidTargetError(f"'{uri}' has an invalid port", uri=uri) from e

        return cls(
            protocol=protocol,
            host=parsed.hostname,
            port=port or DEFAULT_PORTS[protocol],
            base_path=parsed.path or "/",
            transport_options=transport_options or {},
        )

    @property
    def origin(self) -> str:
        """``protocol://host[:port]`` with the default port left out."""
        origin = f"{self.protocol}://{format_host(self.host)}"
        if self.port != DEFAULT_PORTS[self.protocol]:
            origin += f":{self.port}"
        return origin

    def full_path(self, path: str) -> str:
        """Concatenate the base path and a request path (no separator added)."""
        return self.base_path + (path or "")

    def url_for(self, path: str) -> str:
        return self.origin + self.full_path(path)

    def describe(self, method: str, full_path: str) -> str:
        """Prefix used in synthesized error messages."""
        return f"[{method} {self.protocol}://{format_host(self.host)}:{self.port}{full_path}]"
