# src/http_service/core/headers.py
"""
Декораторы заголовков.

Декоратор получает (method, path) и возвращает заголовки, которые нужно
добавить к запросу. Заголовки, переданные в request() явно, имеют приоритет.

Example:
    >>> config = ServiceConfig.create(
    ...     header_decorators=[bearer_token("secret"), static_headers({"X-App": "demo"})]
    ... )
"""

import base64
from typing import Callable, Mapping

HeaderDecorator = Callable[[str, str], Mapping[str, str]]


def static_headers(headers: Mapping[str, str]) -> HeaderDecorator:
    """Одни и те же заголовки для каждого запроса."""
    frozen = dict(headers)

    def decorate(method: str, path: str) -> Mapping[str, str]:
        return frozen

    return decorate


def bearer_token(token: str) -> HeaderDecorator:
    """Authorization: Bearer <token>."""
    if not token:
        raise ValueError("token must not be empty")
    return static_headers({"Authorization": f"Bearer {token}"})


def api_key(key: str, header: str = "X-API-Key") -> HeaderDecorator:
    """API ключ в отдельном заголовке."""
    if not key:
        raise ValueError("key must not be empty")
    return static_headers({header: key})


def basic_auth(username: str, password: str) -> HeaderDecorator:
    """Authorization: Basic base64(username:password)."""
    credentials = base64.b64encode(f"{username}:{password}".encode("utf-8")).decode("ascii")
    return static_headers({"Authorization": f"Basic {credentials}"})
