"""
Request/response pipeline.

One call goes through four steps:

1. prepare - assemble headers, serialize the body, build the URL
2. send - hand the prepared request to a transport
3. buffer - collect every body chunk before anything is parsed
4. resolve - classify the status, parse the body and pick the outcome

Failure precedence, highest first: transport error, body parse error,
server reported error. Network path failures are returned inside the
:class:`Outcome`; only programmer errors (unknown method, body that cannot
be serialized) are raised, and always before any I/O.

The pipeline does not log and keeps no per-request state on ``self``, so one
instance can serve any number of concurrent calls.
"""

import json
from dataclasses import dataclass
from typing import Any, Callable, Mapping, Optional, Sequence

from requests.structures import CaseInsensitiveDict

from .error_extractors import DEFAULT_ERROR_EXTRACTORS, ErrorExtractor, extract_error_message
from .exceptions import BodyParseError, InvalidRequestError, TransportError
from .headers import HeaderDecorator
from .outcome import Outcome, ServiceResponse
from .payload import CONTENT_TYPE_HEADER, JSON_MEDIA_TYPE, BodyPayload, serialize_body
from .status import HttpStatus
from .target import TargetDescriptor
from .transport import AsyncTransport, PreparedRequest, SyncTransport
from .utils import remove_params

METHODS = frozenset({"GET", "HEAD", "OPTIONS", "TRACE", "POST", "PUT", "PATCH", "DELETE"})

# Fields owned by the request; transport options never override them
RESERVED_OPTIONS = frozenset({"method", "url", "headers", "content", "data", "stream"})


@dataclass(frozen=True)
class RequestSpec:
    """One request: method, path relative to the base path, headers, body."""

    method: str
    path: str = ""
    headers: Optional[Mapping[str, str]] = None
    body: Optional[BodyPayload] = None


class RequestPipeline:
    """
    Turns a :class:`RequestSpec` into an :class:`Outcome`.

    Args:
        target: Origin of every request
        headers: Default headers, lowest priority
        header_decorators: Called with ``(method, path)``, their headers are
            layered over the defaults and under the caller's headers
        error_extractors: Tried in order on JSON error bodies
        status_classifier: Factory turning a status code into an
            :class:`HttpStatus`-like object

    Example:
        >>> pipeline = RequestPipeline(TargetDescriptor.parse("https://api.example.com/"))
        >>> outcome = await pipeline.execute(RequestSpec("GET", "users"), transport)
    """

    def __init__(
        self,
        target: TargetDescriptor,
        headers: Optional[Mapping[str, str]] = None,
        header_decorators: Sequence[HeaderDecorator] = (),
        error_extractors: Sequence[ErrorExtractor] = DEFAULT_ERROR_EXTRACTORS,
        status_classifier: Callable[[int], HttpStatus] = HttpStatus,
    ):
        self.target = target
        self._headers = dict(headers or {})
        self._header_decorators = tuple(header_decorators)
        self._error_extractors = tuple(error_extractors)
        self._status_classifier = status_classifier

    # ==================== Step 1: prepare ====================

    def prepare(self, spec: RequestSpec) -> PreparedRequest:
        """
        Build the request the transport will send.

        Raises:
            InvalidRequestError: unknown HTTP method
            UnsupportedBodyTypeError: body cannot be serialized
        """
        method = spec.method.upper()
        if method not in METHODS:
            raise InvalidRequestError(f"Unsupported HTTP method: {spec.method}")

        headers = CaseInsensitiveDict()
        layers = [self._headers]
        layers.extend(decorate(method, spec.path) or {} for decorate in self._header_decorators)
        layers.append(spec.headers or {})
        for layer in layers:
            for name, value in layer.items():
                if value is None:
                    headers.pop(name, None)
                else:
                    headers[name] = str(value)

        content = None
        if spec.body is not None and method != "HEAD":
            content = serialize_body(spec.body, headers)

        options = {
            key: value
            for key, value in self.target.transport_options.items()
            if key not in RESERVED_OPTIONS
        }

        return PreparedRequest(
            method=method,
            url=self.target.url_for(spec.path),
            path=self.target.full_path(spec.path),
            headers=headers,
            content=content,
            options=options,
        )

    # ==================== Steps 2-3: send and buffer ====================

    async def execute(self, spec: RequestSpec, transport: AsyncTransport) -> Outcome:
        """Run one request through an async transport."""
        prepared = self.prepare(spec)
        chunks = []
        try:
            async with transport.open(prepared) as response:
                async for chunk in response.chunks:
                    chunks.append(chunk)
        except TransportError as e:
            return Outcome.failure(e)
        return self.resolve(prepared, response.status_code, response.headers, b"".join(chunks))

    def execute_sync(self, spec: RequestSpec, transport: SyncTransport) -> Outcome:
        """Run one request through a sync transport."""
        prepared = self.prepare(spec)
        chunks = []
        try:
            with transport.open(prepared) as response:
                for chunk in response.chunks:
                    chunks.append(chunk)
        except TransportError as e:
            return Outcome.failure(e)
        return self.resolve(prepared, response.status_code, response.headers, b"".join(chunks))

    # ==================== Step 4: resolve ====================

    def resolve(
        self,
        prepared: PreparedRequest,
        status_code: int,
        headers: Mapping[str, str],
        body: bytes,
    ) -> Outcome:
        """
        Classify a fully buffered response.

        Args:
            prepared: The request that produced the response
            status_code: Response status code
            headers: Response headers, returned untouched in the response
            body: Complete response body
        """
        status = self._status_classifier(status_code)
        lookup = CaseInsensitiveDict(headers or {})
        content_type = remove_params(lookup.get(CONTENT_TYPE_HEADER))

        parsed: Any = None
        if not status.no_content and prepared.method != "HEAD":
            try:
                parsed = self._parse_body(content_type, body)
            except ValueError as e:
                message = f"{self._describe(prepared)} Parse Error: {e}"
                return Outcome.failure(BodyParseError(message, status.code, str(e)))

            if status.is_error:
                extracted = None
                if content_type == JSON_MEDIA_TYPE:
                    extracted = extract_error_message(parsed, self._error_extractors)
                return Outcome.failure(self._server_error(prepared, status, extracted))

        elif status.is_error:
            return Outcome.failure(self._server_error(prepared, status, None))

        return Outcome.success(ServiceResponse(
            status_code=status.code,
            category=status.category,
            content_type=content_type,
            headers=headers,
            body=parsed,
        ))

    @staticmethod
    def _parse_body(content_type: str, body: bytes) -> Any:
        if content_type == JSON_MEDIA_TYPE:
            # UnicodeDecodeError and JSONDecodeError are both ValueError
            return json.loads(body.decode("utf-8"))
        if content_type.startswith("text/") or content_type.endswith("+xml"):
            return body.decode("utf-8", errors="replace")
        return body

    def _server_error(self, prepared: PreparedRequest, status: HttpStatus, text: Optional[str]):
        reason = text or f"{status.code} {status.reason}"
        return status.error(f"{self._describe(prepared)} {reason}")

    def _describe(self, prepared: PreparedRequest) -> str:
        return self.target.describe(prepared.method, prepared.path)
