"""
Transports: the only place that touches the network.

A transport opens one request and exposes the status code, the headers and
an iterator of body chunks. Library exceptions are converted to
:class:`TransportError` subclasses, both when connecting and while the body
is being read.

Two implementations ship with the package:

- :class:`HttpxTransport` - async, on top of ``httpx.AsyncClient``
- :class:`RequestsTransport` - sync, one ``requests.Session`` per thread
"""

import threading
from contextlib import asynccontextmanager, contextmanager
from dataclasses import dataclass, field
from typing import (
    Any,
    AsyncContextManager,
    AsyncIterator,
    Callable,
    ContextManager,
    Iterator,
    List,
    Mapping,
    Optional,
    Protocol,
    Union,
)

import httpx
import requests

from .config import TimeoutConfig
from .exceptions import classify_httpx_exception, classify_requests_exception

CHUNK_SIZE = 8192


@dataclass(frozen=True)
class PreparedRequest:
    """Request ready to be handed to a transport."""

    method: str
    url: str
    path: str
    headers: Mapping[str, str]
    content: Optional[bytes] = None
    options: Mapping[str, Any] = field(default_factory=dict)


@dataclass(frozen=True)
class TransportResponse:
    """Status line, headers and the not yet consumed body stream."""

    status_code: int
    headers: Mapping[str, str]
    chunks: Union[Iterator[bytes], AsyncIterator[bytes]]


class AsyncTransport(Protocol):
    def open(self, request: PreparedRequest) -> AsyncContextManager[TransportResponse]: ...

    async def close(self) -> None: ...


class SyncTransport(Protocol):
    def open(self, request: PreparedRequest) -> ContextManager[TransportResponse]: ...

    def close(self) -> None: ...


# ==================== httpx ====================

class HttpxTransport:
    """
    Async transport on top of httpx.

    The ``httpx.AsyncClient`` is created lazily on first use, unless one is
    passed in (then it is not closed by :meth:`close`). Redirects are never
    followed.

    Example:
        >>> transport = HttpxTransport(timeout=TimeoutConfig(connect=3, read=10))
        >>> async with transport.open(prepared) as response:
        ...     async for chunk in response.chunks:
        ...         ...
        >>> await transport.close()
    """

    def __init__(
        self,
        timeout: Optional[TimeoutConfig] = None,
        verify_ssl: bool = True,
        client: Optional[httpx.AsyncClient] = None,
    ):
        timeout = timeout or TimeoutConfig()
        self._timeout = httpx.Timeout(
            connect=timeout.connect,
            read=timeout.read,
            write=timeout.read,  # Используем read для write
            pool=timeout.total,
        )
        self._verify_ssl = verify_ssl
        self._client = client
        self._owns_client = client is None

    async def _get_client(self) -> httpx.AsyncClient:
        """Получить или создать httpx клиент."""
        if self._client is None:
            self._client = httpx.AsyncClient(
                timeout=self._timeout,
                verify=self._verify_ssl,
                follow_redirects=False,
            )
        return self._client

    @asynccontextmanager
    async def open(self, request: PreparedRequest) -> AsyncIterator[TransportResponse]:
        client = await self._get_client()
        try:
            http_request = client.build_request(
                request.method,
                request.url,
                headers=dict(request.headers),
                content=request.content,
                **request.options,
            )
            response = await client.send(http_request, stream=True)
        except httpx.HTTPError as e:
            raise classify_httpx_exception(e, request.url) from e

        try:
            yield TransportResponse(
                status_code=response.status_code,
                headers=response.headers,
                chunks=self._iter_chunks(response, request.url),
            )
        finally:
            await response.aclose()

    @staticmethod
    async def _iter_chunks(response: httpx.Response, url: str) -> AsyncIterator[bytes]:
        try:
            async for chunk in response.aiter_bytes(CHUNK_SIZE):
                yield chunk
        except httpx.HTTPError as e:
            raise classify_httpx_exception(e, url) from e

    async def close(self) -> None:
        """Закрыть клиент и освободить ресурсы."""
        if self._client is not None and self._owns_client:
            await self._client.aclose()
            self._client = None


# ==================== requests ====================

class RequestsTransport:
    """
    Sync transport on top of requests.

    Thread-safe: each thread gets its own ``requests.Session``. Redirects are
    never followed.
    """

    def __init__(
        self,
        timeout: Optional[TimeoutConfig] = None,
        verify_ssl: bool = True,
        session_factory: Callable[[], requests.Session] = requests.Session,
    ):
        self._timeout = (timeout or TimeoutConfig()).as_tuple()
        self._verify_ssl = verify_ssl
        self._session_factory = session_factory
        self._local = threading.local()
        self._sessions: List[requests.Session] = []
        self._lock = threading.Lock()

    def _get_session(self) -> requests.Session:
        """Сессия текущего потока (создаётся при первом обращении)."""
        session = getattr(self._local, "session", None)
        if session is None:
            session = self._session_factory()
            self._local.session = session
            with self._lock:
                self._sessions.append(session)
        return session

    @property
    def active_sessions(self) -> int:
        with self._lock:
            return len(self._sessions)

    @contextmanager
    def open(self, request: PreparedRequest) -> Iterator[TransportResponse]:
        kwargs = {
            "timeout": self._timeout,
            "verify": self._verify_ssl,
            "allow_redirects": False,
            **request.options,
        }
        try:
            response = self._get_session().request(
                method=request.method,
                url=request.url,
                headers=dict(request.headers),
                data=request.content,
                stream=True,
                **kwargs,
            )
        except requests.exceptions.RequestException as e:
            raise classify_requests_exception(e, request.url) from e

        try:
            yield TransportResponse(
                status_code=response.status_code,
                headers=response.headers,
                chunks=self._iter_chunks(response, request.url),
            )
        finally:
            response.close()

    @staticmethod
    def _iter_chunks(response: requests.Response, url: str) -> Iterator[bytes]:
        try:
            for chunk in response.iter_content(CHUNK_SIZE):
                if chunk:  # Фильтруем keep-alive chunks
                    yield chunk
        except requests.exceptions.RequestException as e:
            raise classify_requests_exception(e, url) from e

    def close(self) -> None:
        """Закрывает сессии всех потоков."""
        with self._lock:
            sessions, self._sessions = self._sessions, []
        for session in sessions:
            session.close()
        self._local = threading.local()
