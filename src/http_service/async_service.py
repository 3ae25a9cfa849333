# src/http_service/async_service.py
"""
Асинхронный HTTP сервис на базе httpx.

Предоставляет async/await API для использования в asyncio приложениях
(FastAPI, aiohttp, etc.)
"""

from typing import Any, Mapping, Optional, Union

from .core.config import ServiceConfig
from .core.outcome import Outcome
from .core.service_base import BaseHTTPService
from .core.transport import AsyncTransport, HttpxTransport
from .core.utils import append_query

Query = Optional[Union[str, Mapping[str, Any]]]
Headers = Optional[Mapping[str, str]]


class AsyncHTTPService(BaseHTTPService):
    """
    Асинхронный HTTP сервис, привязанный к одному origin.

    Example:
        >>> async with AsyncHTTPService("https://api.example.com/v1/") as service:
        ...     outcome = await service.post("users", {"name": "alice"})
        ...     user = outcome.unwrap().body

        >>> # Параллельные запросы через один сервис
        >>> first, second = await asyncio.gather(service.get("a"), service.get("b"))

    Features:
        - Полная async/await поддержка
        - Тело ответа буферизуется целиком до разбора
        - Запросы не разделяют состояние: один сервис можно вызывать параллельно
    """

    def __init__(
        self,
        uri: Optional[str] = None,
        *,
        config: Optional[ServiceConfig] = None,
        transport: Optional[AsyncTransport] = None,
        **transport_options: Any
    ):
        """
        Args:
            uri: http(s)://host[:port][/basepath]
            config: ServiceConfig
            transport: Свой транспорт (по умолчанию HttpxTransport)
            **transport_options: Доп. параметры для httpx (timeout, extensions...)
        """
        super().__init__(uri, config=config, **transport_options)
        self._owns_transport = transport is None
        self._transport = transport or HttpxTransport(
            timeout=self._config.timeout,
            verify_ssl=self._config.verify_ssl,
        )

    async def __aenter__(self) -> "AsyncHTTPService":
        """Async context manager entry."""
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb) -> None:
        """Async context manager exit."""
        await self.close()

    async def close(self) -> None:
        """Закрыть транспорт и логгер."""
        if self._owns_transport:
            await self._transport.close()
        self._close_logger()

    # ==================== HTTP методы ====================

    async def request(
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
            path: Путь относительно base_path
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
        outcome = await self._pipeline.execute(spec, self._transport)
        self._log_finished(spec, outcome, started)
        return outcome

    # ==================== Удобные методы ====================

    async def get(self, path: str, query: Query = None, headers: Headers = None) -> Outcome:
        """GET запрос."""
        return await self.request("GET", append_query(path, query), headers)

    async def head(self, path: str, query: Query = None, headers: Headers = None) -> Outcome:
        """HEAD запрос."""
        return await self.request("HEAD", append_query(path, query), headers)

    async def options(self, path: str, headers: Headers = None) -> Outcome:
        """OPTIONS запрос."""
        return await self.request("OPTIONS", path, headers)

    async def post(self, path: str, body: Any = None, headers: Headers = None) -> Outcome:
        """POST запрос."""
        return await self.request("POST", path, headers, body)

    async def put(self, path: str, body: Any = None, headers: Headers = None) -> Outcome:
        """PUT запрос."""
        return await self.request("PUT", path, headers, body)

    async def patch(self, path: str, body: Any = None, headers: Headers = None) -> Outcome:
        """PATCH запрос."""
        return await self.request("PATCH", path, headers, body)

    async def delete(self, path: str, headers: Headers = None) -> Outcome:
        """DELETE запрос."""
        return await self.request("DELETE", path, headers)
