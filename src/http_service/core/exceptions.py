"""
Иерархия исключений HTTP Service.

Классификация:
- Ошибки программиста (InvalidTargetError, InvalidRequestError,
  UnsupportedBodyTypeError) - выбрасываются сразу, до сетевого I/O
- Ошибки запроса (TransportError, BodyParseError, HTTPError) - никогда
  не выбрасываются из pipeline, возвращаются в Outcome
"""

import socket
import ssl
from typing import Optional

import httpx
import requests

# ━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━
# BASE
# ━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━

class HTTPServiceException(Exception):
    """Базовое исключение HTTP Service."""

    def __init__(self, message: str):
        self.message = message
        super().__init__(message)

# ━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━
# ОШИБКИ ПРОГРАММИСТА
# ━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━

class InvalidTargetError(HTTPServiceException, ValueError):
    """
    Невалидный URI при создании сервиса.

    Args:
        message: Сообщение об ошибке
        uri: Исходный URI
    """

    def __init__(self, message: str, uri: Optional[str] = None):
        self.uri = uri
        super().__init__(message)

class InvalidRequestError(HTTPServiceException, ValueError):
    """Невалидные параметры запроса (например, неизвестный HTTP метод)."""
    pass

class UnsupportedBodyTypeError(InvalidRequestError, TypeError):
    """
    Тело запроса нельзя сериализовать.

    Примеры:
    - Объект с Content-Type, отличным от JSON и form-urlencoded
    - Значение, которое не является bytes, str, dict или list
    """
    pass

class ConfigurationError(HTTPServiceException):
    """Ошибка конфигурации."""
    pass

# ━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━
# ТРАНСПОРТНЫЕ ОШИБКИ
# ━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━

class TransportError(HTTPServiceException):
    """
    Сетевая ошибка транспорта (соединение, DNS, TLS).

    Args:
        message: Сообщение об ошибке
        url: URL запроса
        cause: Исходное исключение библиотеки
    """

    def __init__(
        self,
        message: str,
        url: Optional[str] = None,
        cause: Optional[BaseException] = None
    ):
        self.url = url
        self.cause = cause

        full_message = message
        if url:
            full_message += f" (url: {url})"

        super().__init__(full_message)

class TimeoutError(TransportError):
    """Таймаут запроса."""
    pass

class ConnectionError(TransportError):
    """
    Ошибка подключения.

    Примеры:
    - Connection refused
    - Connection reset
    - Network unreachable
    """
    pass

class DNSError(ConnectionError):
    """DNS resolution failed."""
    pass

class TLSError(ConnectionError):
    """TLS handshake или проверка сертификата не прошли."""
    pass

class ProxyError(ConnectionError):
    """Ошибка прокси."""
    pass

# ━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━
# ОШИБКИ ОТВЕТА
# ━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━

class BodyParseError(HTTPServiceException):
    """
    Тело ответа не удалось разобрать.

    Примеры:
    - Битый JSON
    - Пустое тело при Content-Type: application/json
    - Невалидная UTF-8 последовательность

    Args:
        message: Полное сообщение
        status_code: HTTP статус ответа
        detail: Текст ошибки парсера
    """

    def __init__(self, message: str, status_code: int, detail: str = ""):
        self.status_code = status_code
        self.detail = detail
        super().__init__(message)

class HTTPError(HTTPServiceException):
    """
    Ошибка, о которой сообщил сервер (статус 4xx/5xx).

    Args:
        status_code: HTTP статус
        message: Сообщение (с префиксом запроса)
    """

    def __init__(self, status_code: int, message: str = ""):
        self.status_code = status_code
        super().__init__(message or f"HTTP {status_code} error")

    @property
    def code(self) -> int:
        """Числовой код ошибки (синоним status_code)."""
        return self.status_code

class BadRequestError(HTTPError):
    """400 Bad Request."""

    def __init__(self, message: str = ""):
        super().__init__(400, message)

class UnauthorizedError(HTTPError):
    """401 Unauthorized."""

    def __init__(self, message: str = ""):
        super().__init__(401, message)

class ForbiddenError(HTTPError):
    """403 Forbidden."""

    def __init__(self, message: str = ""):
        super().__init__(403, message)

class NotFoundError(HTTPError):
    """404 Not Found."""

    def __init__(self, message: str = ""):
        super().__init__(404, message)

class TooManyRequestsError(HTTPError):
    """429 Rate Limit."""

    def __init__(self, message: str = ""):
        super().__init__(429, message)

class ServerError(HTTPError):
    """5xx ошибка сервера."""
    pass

# ━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━
# УТИЛИТЫ
# ━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━

def _caused_by(exc: BaseException, kind: type) -> bool:
    """Есть ли исключение типа kind в цепочке __cause__/__context__."""
    seen = set()
    current: Optional[BaseException] = exc
    while current is not None and id(current) not in seen:
        if isinstance(current, kind):
            return True
        seen.add(id(current))
        current = current.__cause__ or current.__context__
    return False

def _classify_connect_failure(exc: BaseException, url: str) -> TransportError:
    if _caused_by(exc, socket.gaierror):
        return DNSError("DNS resolution failed", url, cause=exc)
    if _caused_by(exc, ssl.SSLError):
        return TLSError("TLS error", url, cause=exc)
    return ConnectionError("Connection error", url, cause=exc)

def classify_httpx_exception(exc: Exception, url: str) -> TransportError:
    """
    Конвертировать httpx исключения в наши.

    Args:
        exc: Исключение из httpx
        url: URL запроса

    Returns:
        TransportError подходящего подкласса

    Examples:
        >>> exc = httpx.ConnectTimeout("timed out")
        >>> our_exc = classify_httpx_exception(exc, "https://example.com")
        >>> assert isinstance(our_exc, TimeoutError)
    """
    if isinstance(exc, httpx.TimeoutException):
        return TimeoutError("Request timeout", url, cause=exc)

    elif isinstance(exc, httpx.ProxyError):
        return ProxyError("Proxy error", url, cause=exc)

    elif isinstance(exc, httpx.ConnectError):
        return _classify_connect_failure(exc, url)

    elif isinstance(exc, (httpx.NetworkError, httpx.RemoteProtocolError)):
        return ConnectionError("Connection error", url, cause=exc)

    else:
        return TransportError(f"Transport error: {exc}", url, cause=exc)

def classify_requests_exception(exc: Exception, url: str) -> TransportError:
    """
    Конвертировать requests.exceptions в наши исключения.

    Args:
        exc: Исключение из requests
        url: URL запроса

    Returns:
        TransportError подходящего подкласса

    Examples:
        >>> exc = requests.exceptions.Timeout()
        >>> our_exc = classify_requests_exception(exc, "https://example.com")
        >>> assert isinstance(our_exc, TimeoutError)
    """
    if isinstance(exc, requests.exceptions.Timeout):
        return TimeoutError("Request timeout", url, cause=exc)

    elif isinstance(exc, requests.exceptions.ProxyError):
        return ProxyError("Proxy error", url, cause=exc)

    elif isinstance(exc, requests.exceptions.SSLError):
        return TLSError("TLS error", url, cause=exc)

    elif isinstance(exc, requests.exceptions.ConnectionError):
        return _classify_connect_failure(exc, url)

    else:
        return TransportError(f"Transport error: {exc}", url, cause=exc)
