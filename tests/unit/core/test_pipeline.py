"""
Tests for RequestPipeline: request preparation, response resolution and
execution through fake transports.
"""

import asyncio
import json
from contextlib import asynccontextmanager, contextmanager

import pytest

from http_service.core.exceptions import (
    BadRequestError,
    BodyParseError,
    ConnectionError,
    HTTPError,
    InvalidRequestError,
    NotFoundError,
    ServerError,
    TimeoutError,
    UnauthorizedError,
    UnsupportedBodyTypeError,
)
from http_service.core.payload import RawBody, StructuredBody, TextBody
from http_service.core.pipeline import RequestPipeline, RequestSpec
from http_service.core.status import StatusCategory
from http_service.core.target import TargetDescriptor
from http_service.core.transport import TransportResponse

PREFIX = "[GET https://api.example.com:443/v1/users]"
JSON_HEADERS = {"Content-Type": "application/json"}


@pytest.fixture
def target():
    return TargetDescriptor.parse("https://api.example.com/v1/")


@pytest.fixture
def pipeline(target):
    return RequestPipeline(target)


@pytest.fixture
def get_users(pipeline):
    return pipeline.prepare(RequestSpec("GET", "users"))


class FakeAsyncTransport:
    """Async transport that answers from a handler and records requests."""

    def __init__(self, handler=None, error=None):
        self.handler = handler or (lambda request: (200, {}, []))
        self.error = error
        self.requests = []

    @asynccontextmanager
    async def open(self, request):
        self.requests.append(request)
        if self.error is not None:
            raise self.error
        status_code, headers, chunks = self.handler(request)

        async def iterate():
            for chunk in chunks:
                await asyncio.sleep(0)
                if isinstance(chunk, Exception):
                    raise chunk
                yield chunk

        yield TransportResponse(status_code, headers, iterate())

    async def close(self):
        pass


class FakeSyncTransport:
    """Sync counterpart of FakeAsyncTransport."""

    def __init__(self, handler=None, error=None):
        self.handler = handler or (lambda request: (200, {}, []))
        self.error = error
        self.requests = []

    @contextmanager
    def open(self, request):
        self.requests.append(request)
        if self.error is not None:
            raise self.error
        status_code, headers, chunks = self.handler(request)

        def iterate():
            for chunk in chunks:
                if isinstance(chunk, Exception):
                    raise chunk
                yield chunk

        yield TransportResponse(status_code, headers, iterate())

    def close(self):
        pass


class TestPrepare:
    """Test RequestPipeline.prepare."""

    def test_url_and_path(self, get_users):
        assert get_users.method == "GET"
        assert get_users.url == "https://api.example.com/v1/users"
        assert get_users.path == "/v1/users"
        assert get_users.content is None

    def test_method_is_upper_cased(self, pipeline):
        assert pipeline.prepare(RequestSpec("patch", "x")).method == "PATCH"

    def test_unknown_method(self, pipeline):
        with pytest.raises(InvalidRequestError):
            pipeline.prepare(RequestSpec("BREW", "coffee"))

    def test_header_layers(self, target):
        calls = []

        def decorate(method, path):
            calls.append((method, path))
            return {"accept": "text/plain", "X-Decorated": "yes"}

        pipeline = RequestPipeline(
            target,
            headers={"Accept": "application/json", "X-Default": "d"},
            header_decorators=[decorate],
        )
        prepared = pipeline.prepare(
            RequestSpec("POST", "users", headers={"ACCEPT": "application/xml"})
        )

        assert calls == [("POST", "users")]
        assert prepared.headers["Accept"] == "application/xml"
        assert prepared.headers["X-Default"] == "d"
        assert prepared.headers["x-decorated"] == "yes"
        assert len([name for name in prepared.headers if name.lower() == "accept"]) == 1

    def test_decorators_applied_in_order(self, target):
        pipeline = RequestPipeline(
            target,
            header_decorators=[lambda m, p: {"X-Order": "first"}, lambda m, p: {"X-Order": "second"}],
        )
        assert pipeline.prepare(RequestSpec("GET", "x")).headers["X-Order"] == "second"

    def test_none_value_removes_header(self, target):
        pipeline = RequestPipeline(target, headers={"User-Agent": "svc/1.0"})
        prepared = pipeline.prepare(RequestSpec("GET", "x", headers={"user-agent": None}))
        assert "User-Agent" not in prepared.headers

    def test_header_values_become_strings(self, pipeline):
        prepared = pipeline.prepare(RequestSpec("GET", "x", headers={"X-Count": 3}))
        assert prepared.headers["X-Count"] == "3"

    def test_structured_body(self, pipeline):
        prepared = pipeline.prepare(RequestSpec("POST", "users", body=StructuredBody({"name": "alice"})))
        assert prepared.content == b'{"name":"alice"}'
        assert prepared.headers["Content-Type"] == "application/json"
        assert prepared.headers["Content-Length"] == str(len(prepared.content))

    def test_default_headers_not_mutated(self, target):
        defaults = {"Accept": "application/json"}
        pipeline = RequestPipeline(target, headers=defaults)
        pipeline.prepare(RequestSpec("POST", "users", body=StructuredBody({"a": 1})))
        assert pipeline.prepare(RequestSpec("GET", "users")).headers.get("Content-Type") is None
        assert defaults == {"Accept": "application/json"}

    def test_head_body_dropped(self, pipeline):
        prepared = pipeline.prepare(RequestSpec("HEAD", "users", body=TextBody("ignored")))
        assert prepared.content is None
        assert "Content-Length" not in prepared.headers

    def test_unsupported_body(self, pipeline):
        spec = RequestSpec(
            "POST", "users",
            headers={"Content-Type": "text/csv"},
            body=StructuredBody([1, 2]),
        )
        with pytest.raises(UnsupportedBodyTypeError):
            pipeline.prepare(spec)

    def test_transport_options_filtered(self):
        target = TargetDescriptor.parse(
            "https://api.example.com/",
            {"timeout": 5, "headers": {"X": "1"}, "stream": False, "url": "http://evil"},
        )
        prepared = RequestPipeline(target).prepare(RequestSpec("GET", "x"))
        assert dict(prepared.options) == {"timeout": 5}
        assert prepared.url == "https://api.example.com/x"


class TestResolve:
    """Test RequestPipeline.resolve."""

    def test_json(self, pipeline, get_users):
        outcome = pipeline.resolve(get_users, 200, JSON_HEADERS, b'{"id": 1}')
        assert outcome.ok
        assert outcome.body == {"id": 1}
        assert outcome.response.content_type == "application/json"
        assert outcome.response.category is StatusCategory.SUCCESS

    @pytest.mark.parametrize("content_type", [
        "application/json; charset=utf-8",
        "Application/JSON",
        " application/json ;charset=utf-8",
    ])
    def test_json_media_type_variants(self, pipeline, get_users, content_type):
        outcome = pipeline.resolve(get_users, 200, {"content-type": content_type}, b"[1,2]")
        assert outcome.body == [1, 2]

    def test_text(self, pipeline, get_users):
        outcome = pipeline.resolve(get_users, 200, {"Content-Type": "text/plain"}, "héllo".encode("utf-8"))
        assert outcome.body == "héllo"

    def test_text_invalid_utf8_replaced(self, pipeline, get_users):
        outcome = pipeline.resolve(get_users, 200, {"Content-Type": "text/html"}, b"ok \xff")
        assert outcome.ok
        assert outcome.body == "ok �"

    def test_xml_suffix(self, pipeline, get_users):
        outcome = pipeline.resolve(get_users, 200, {"Content-Type": "application/atom+xml"}, b"<feed/>")
        assert outcome.body == "<feed/>"

    def test_binary(self, pipeline, get_users):
        outcome = pipeline.resolve(get_users, 200, {"Content-Type": "image/png"}, b"\x89PNG")
        assert outcome.body == b"\x89PNG"

    def test_missing_content_type(self, pipeline, get_users):
        outcome = pipeline.resolve(get_users, 200, {}, b"data")
        assert outcome.body == b"data"
        assert outcome.response.content_type == ""

    def test_headers_returned_untouched(self, pipeline, get_users):
        headers = {"Content-Type": "text/plain", "X-Request-Id": "abc"}
        outcome = pipeline.resolve(get_users, 200, headers, b"ok")
        assert outcome.response.headers is headers

    @pytest.mark.parametrize("status_code", [204, 205, 304])
    def test_no_content(self, pipeline, get_users, status_code):
        outcome = pipeline.resolve(get_users, status_code, JSON_HEADERS, b"not json")
        assert outcome.ok
        assert outcome.body is None
        assert outcome.response.category is StatusCategory.NO_CONTENT

    def test_head_has_no_body(self, pipeline):
        prepared = pipeline.prepare(RequestSpec("HEAD", "users"))
        outcome = pipeline.resolve(prepared, 200, JSON_HEADERS, b"")
        assert outcome.ok
        assert outcome.body is None

    def test_redirect_is_success(self, pipeline, get_users):
        outcome = pipeline.resolve(get_users, 302, {"Location": "/elsewhere"}, b"")
        assert outcome.ok
        assert outcome.response.category is StatusCategory.REDIRECTION

    def test_malformed_json(self, pipeline, get_users):
        outcome = pipeline.resolve(get_users, 200, JSON_HEADERS, b"{not json")
        assert isinstance(outcome.error, BodyParseError)
        assert str(outcome.error).startswith(f"{PREFIX} Parse Error: ")
        assert outcome.error.status_code == 200

    def test_empty_json_body(self, pipeline, get_users):
        outcome = pipeline.resolve(get_users, 200, JSON_HEADERS, b"")
        assert isinstance(outcome.error, BodyParseError)

    def test_invalid_utf8_json(self, pipeline, get_users):
        outcome = pipeline.resolve(get_users, 200, JSON_HEADERS, b'{"a": "\xff"}')
        assert isinstance(outcome.error, BodyParseError)

    def test_parse_error_wins_over_status_error(self, pipeline, get_users):
        outcome = pipeline.resolve(get_users, 500, JSON_HEADERS, b"<html>oops</html>")
        assert isinstance(outcome.error, BodyParseError)
        assert outcome.status_code == 500

    def test_error_description(self, pipeline, get_users):
        body = json.dumps({"error": "invalid_token", "error_description": "Token expired\r\nTrace: 1"})
        outcome = pipeline.resolve(get_users, 401, JSON_HEADERS, body.encode())
        assert isinstance(outcome.error, UnauthorizedError)
        assert str(outcome.error) == f"{PREFIX} Token expired"

    def test_error_object_message(self, pipeline, get_users):
        body = b'{"error": {"code": "E1", "message": "name is required"}}'
        outcome = pipeline.resolve(get_users, 400, JSON_HEADERS, body)
        assert isinstance(outcome.error, BadRequestError)
        assert str(outcome.error) == f"{PREFIX} name is required"

    def test_odata_error(self, pipeline, get_users):
        body = b'{"odata.error": {"message": {"lang": "en-US", "value": "Resource missing"}}}'
        outcome = pipeline.resolve(get_users, 404, JSON_HEADERS, body)
        assert isinstance(outcome.error, NotFoundError)
        assert str(outcome.error) == f"{PREFIX} Resource missing"

    def test_error_without_known_shape(self, pipeline, get_users):
        outcome = pipeline.resolve(get_users, 404, JSON_HEADERS, b'{"detail": "nope"}')
        assert str(outcome.error) == f"{PREFIX} 404 Not Found"

    def test_error_with_text_body(self, pipeline, get_users):
        outcome = pipeline.resolve(get_users, 500, {"Content-Type": "text/plain"}, b"oops")
        assert isinstance(outcome.error, ServerError)
        assert str(outcome.error) == f"{PREFIX} 500 Internal Server Error"

    def test_unmapped_client_error(self, pipeline, get_users):
        outcome = pipeline.resolve(get_users, 418, {}, b"")
        assert type(outcome.error) is HTTPError
        assert outcome.status_code == 418

    def test_head_error(self, pipeline):
        prepared = pipeline.prepare(RequestSpec("HEAD", "users"))
        outcome = pipeline.resolve(prepared, 404, JSON_HEADERS, b"")
        assert isinstance(outcome.error, NotFoundError)
        assert str(outcome.error) == "[HEAD https://api.example.com:443/v1/users] 404 Not Found"

    def test_custom_extractor(self, target, get_users):
        pipeline = RequestPipeline(target, error_extractors=[lambda body: body.get("detail")])
        outcome = pipeline.resolve(get_users, 422, JSON_HEADERS, b'{"detail": "invalid email"}')
        assert str(outcome.error) == f"{PREFIX} invalid email"


class TestExecuteAsync:
    """Test RequestPipeline.execute."""

    @pytest.mark.asyncio
    async def test_buffers_chunks(self, pipeline):
        transport = FakeAsyncTransport(lambda request: (200, JSON_HEADERS, [b'{"na', b'me": ', b'"alice"}']))
        outcome = await pipeline.execute(RequestSpec("GET", "users"), transport)
        assert outcome.body == {"name": "alice"}
        assert transport.requests[0].url == "https://api.example.com/v1/users"

    @pytest.mark.asyncio
    async def test_sends_serialized_body(self, pipeline):
        transport = FakeAsyncTransport(lambda request: (201, {}, []))
        outcome = await pipeline.execute(RequestSpec("POST", "users", body=RawBody(b"\x01\x02")), transport)
        assert outcome.status_code == 201
        assert transport.requests[0].content == b"\x01\x02"

    @pytest.mark.asyncio
    async def test_transport_failure(self, pipeline):
        transport = FakeAsyncTransport(error=TimeoutError("Request timeout", "https://api.example.com/v1/users"))
        outcome = await pipeline.execute(RequestSpec("GET", "users"), transport)
        assert isinstance(outcome.error, TimeoutError)
        assert outcome.response is None

    @pytest.mark.asyncio
    async def test_failure_while_reading_body(self, pipeline):
        transport = FakeAsyncTransport(
            lambda request: (200, JSON_HEADERS, [b'{"a":', ConnectionError("Connection error")])
        )
        outcome = await pipeline.execute(RequestSpec("GET", "users"), transport)
        assert isinstance(outcome.error, ConnectionError)

    @pytest.mark.asyncio
    async def test_unsupported_body_raised_before_transport(self, pipeline):
        transport = FakeAsyncTransport()
        spec = RequestSpec("POST", "users", headers={"Content-Type": "text/csv"}, body=StructuredBody({}))
        with pytest.raises(UnsupportedBodyTypeError):
            await pipeline.execute(spec, transport)
        assert transport.requests == []

    @pytest.mark.asyncio
    async def test_concurrent_calls_are_isolated(self, pipeline):
        def handler(request):
            name = request.path.rsplit("/", 1)[-1]
            payload = json.dumps({"name": name * 50}).encode()
            return 200, JSON_HEADERS, [payload[i:i + 7] for i in range(0, len(payload), 7)]

        transport = FakeAsyncTransport(handler)
        names = ["alpha", "beta", "gamma", "delta"]
        outcomes = await asyncio.gather(
            *(pipeline.execute(RequestSpec("GET", name), transport) for name in names)
        )
        assert [outcome.body["name"] for outcome in outcomes] == [name * 50 for name in names]


class TestExecuteSync:
    """Test RequestPipeline.execute_sync."""

    def test_buffers_chunks(self, pipeline):
        transport = FakeSyncTransport(lambda request: (200, {"Content-Type": "text/plain"}, [b"he", b"llo"]))
        outcome = pipeline.execute_sync(RequestSpec("GET", "greeting"), transport)
        assert outcome.body == "hello"

    def test_transport_failure(self, pipeline):
        transport = FakeSyncTransport(error=ConnectionError("Connection error"))
        outcome = pipeline.execute_sync(RequestSpec("GET", "users"), transport)
        assert isinstance(outcome.error, ConnectionError)

    def test_server_error(self, pipeline):
        transport = FakeSyncTransport(lambda request: (503, {}, []))
        outcome = pipeline.execute_sync(RequestSpec("DELETE", "users/1"), transport)
        assert isinstance(outcome.error, ServerError)
        assert str(outcome.error) == (
            "[DELETE https://api.example.com:443/v1/users/1] 503 Service Unavailable"
        )

    def test_unknown_method_raised(self, pipeline):
        with pytest.raises(InvalidRequestError):
            pipeline.execute_sync(RequestSpec("FETCH", "users"), FakeSyncTransport())
