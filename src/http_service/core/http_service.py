# src/http_service/core/http_service.py
from typing import Any, Mapping, Optional, Union

from .config import ServiceConfig
from .outcome import Outcome
from .service_base import BaseHTTPService
from .transport import RequestsTransport, SyncTransport
from .utils import append_query

Query = Optional[Union[str, Mapping[str, Any]]]
Headers = Optional[Mapping[str, str]]


class HTTPService(BaseHTTPService):
    """
    Синхронный HTTP сервис, привязанный к одному origin.

    Построен на requests. Сетевые ошибки, ошибки парсинга и ошибки сервера
    не выбрасываются, а возвращаются в Outcome.

    Example:
        >>> with HTTPService("https://api.example.com/v1/") as service:
        ...     outcome = service.get("users", {"page": 2})
        ...     if outcome.ok:
        ...         print(outcome.body)

    Features:
        - JSON / form-urlencoded сериализация тела
        - Разбор JSON, text/* и *+xml ответов
        - Сообщения об ошибках из error_description / error.message / odata.error
        - Thread-safe: каждый поток получает собственную сессию
    """

    def __init__(
        self,
        uri: Optional[str] = None,
        *,
        config: Optional[ServiceConfig] = None,
        transport: Optional[SyncTransport] = None,
        **transport_options: Any
    ):
        """
        Args:
            uri: http(s)://host[:port][/basepath]
            config: ServiceConfig
            transport: Свой транспорт (по умолчанию RequestsTransport)
            **transport_options: Доп. параметры для requests (timeout, cert, proxies...)
        """
        super().__init__(uri, config=config, **transport_options)
        self._owns_transport = transport is None
        self._transport = transport or RequestsTransport(
            timeout=self._config.timeout,
            verify_ssl=self._config.verify_ssl,
        )

    def __enter__(self) -> "HTTPService":
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        self.close()
        return False

    def close(self) -> None:
        """Закрывает сессии транспорта и логгер."""
        if self._owns_transport:
            self._transport.close()
        self._close_logger()

    # ==================== HTTP методы ====================

    def request(
        self,
        method: str,
        path: str = "",
        headers: Headers = None,
        body: Any = None,
    ) -> Outcome:
        """
        Выполнить HTTP запрос.

        Args:
            method: HTTP метод (GET, POST, etc.)
            path: Путь относительно base_path (без ведущего "/", если base_path не корневой)
            headers: Заголовки запроса
            body: bytes, str, dict/list или BodyPayload

        Returns:
            Outcome с ответом или ошибкой

        Raises:
            InvalidRequestError: Неизвестный HTTP метод
            UnsupportedBodyTypeError: Тело нельзя сериализовать
        """
        spec = self._build_spec(method, path, headers, body)
        started = self._log_started(spec)
        outcome = self._pipeline.execute_sync(spec, self._transport)
        self._log_finished(spec, outcome, started)
        return outcome

    def get(self, path: str, query: Query = None, headers: Headers = None) -> Outcome:
        """GET запрос."""
        return self.request("GET", append_query(path, query), headers)

    def head(self, path: str, query: Query = None, headers: Headers = None) -> Outcome:
        """HEAD запрос."""
        return self.request("HEAD", append_query(path, query), headers)

    def options(self, path: str, headers: Headers = None) -> Outcome:
        """OPTIONS запрос."""
        return self.request("OPTIONS", path, headers)

    def post(self, path: str, body: Any = None, headers: Headers = None) -> Outcome:
        """POST запрос."""
        return self.request("POST", path, headers, body)

    def put(self, path: str, body: Any = None, headers: Headers = None) -> Outcome:
        """PUT запрос."""
        return self.request("PUT", path, headers, body)

    def patch(self, path: str, body: Any = None, headers: Headers = None) -> Outcome:
        """PATCH запрос."""
        return self.request("PATCH", path, headers, body)

    def delete(self, path: str, headers: Headers = None) -> Outcome:
        """DELETE запрос."""
        return self.request("DELETE", path, headers)
