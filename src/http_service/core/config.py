"""
Система конфигурации для HTTP Service.

Все конфиги immutable (frozen dataclasses) для потокобезопасности.
"""

from dataclasses import dataclass, field, replace
from types import MappingProxyType
from typing import Any, Dict, Mapping, Optional, Sequence, Tuple, Union, TYPE_CHECKING

from .error_extractors import DEFAULT_ERROR_EXTRACTORS, ErrorExtractor
from .headers import HeaderDecorator

if TYPE_CHECKING:
    from .logging import LoggingConfig

# ━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━
# TIMEOUT CONFIG
# ━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━

@dataclass(frozen=True)
class TimeoutConfig:
    """
    Конфигурация таймаутов транспорта.

    Сервис сам таймауты не отслеживает: значения передаются в httpx/requests.

    Args:
        connect: Таймаут подключения (сек)
        read: Таймаут чтения данных (сек)
        total: Таймаут ожидания соединения из пула (сек, только httpx)

    Examples:
        >>> TimeoutConfig(connect=5, read=30)
        >>> TimeoutConfig(connect=3, read=60, total=90)
    """
    connect: float = 5
    read: float = 30
    total: Optional[float] = None

    def __post_init__(self):
        """Валидация."""
        if self.connect <= 0:
            raise ValueError("connect timeout must be positive")
        if self.read <= 0:
            raise ValueError("read timeout must be positive")
        if self.total is not None and self.total <= 0:
            raise ValueError("total timeout must be positive")

    def as_tuple(self) -> Tuple[float, float]:
        """Вернуть как (connect, read) для requests."""
        return (self.connect, self.read)

    @classmethod
    def coerce(cls, timeout: Union[float, Tuple[float, float], "TimeoutConfig"]) -> "TimeoutConfig":
        """Собрать TimeoutConfig из числа, кортежа (connect, read) или готового конфига."""
        if isinstance(timeout, TimeoutConfig):
            return timeout
        if isinstance(timeout, tuple):
            return cls(connect=timeout[0], read=timeout[1])
        return cls(connect=min(5, timeout), read=timeout)

# ━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━
# MAIN CONFIG
# ━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━

def _freeze_dict(d: Optional[Mapping[str, Any]]) -> Mapping[str, Any]:
    """
    Convert dict to immutable MappingProxyType.

    Example:
        >>> frozen = _freeze_dict({"X-API-Key": "secret"})
        >>> frozen["X-New"] = "value"  # Raises TypeError
    """
    if d is None:
        return MappingProxyType({})
    if isinstance(d, MappingProxyType):
        return d
    return MappingProxyType(dict(d))

@dataclass(frozen=True)
class ServiceConfig:
    """
    Главная конфигурация HTTPService / AsyncHTTPService.

    Args:
        uri: URI сервиса (если не передан в конструктор)
        headers: Дефолтные заголовки (самый низкий приоритет)
        timeout: Таймауты транспорта
        verify_ssl: Проверять SSL сертификаты
        transport_options: Доп. параметры для вызова транспорта
        header_decorators: Декораторы заголовков, применяются по порядку
        error_extractors: Извлечение сообщения из JSON тела ошибки
        logging: Конфигурация логирования (None = без логирования)

    Examples:
        >>> config = ServiceConfig(uri="https://api.example.com")
        >>> config = ServiceConfig.create(timeout=60, headers={"Accept": "application/json"})
    """
    uri: Optional[str] = None
    headers: Mapping[str, str] = field(default_factory=lambda: MappingProxyType({}))
    timeout: TimeoutConfig = field(default_factory=TimeoutConfig)
    verify_ssl: bool = True
    transport_options: Mapping[str, Any] = field(default_factory=lambda: MappingProxyType({}))
    header_decorators: Tuple[HeaderDecorator, ...] = ()
    error_extractors: Tuple[ErrorExtractor, ...] = tuple(DEFAULT_ERROR_EXTRACTORS)
    logging: Optional['LoggingConfig'] = None

    def __post_init__(self):
        """Freeze mutable containers."""
        object.__setattr__(self, 'headers', _freeze_dict(self.headers))
        object.__setattr__(self, 'transport_options', _freeze_dict(self.transport_options))
        object.__setattr__(self, 'header_decorators', tuple(self.header_decorators))
        object.__setattr__(self, 'error_extractors', tuple(self.error_extractors))

    @classmethod
    def create(
        cls,
        uri: Optional[str] = None,
        timeout: Union[float, Tuple[float, float], TimeoutConfig] = 30,
        verify_ssl: bool = True,
        headers: Optional[Dict[str, str]] = None,
        header_decorators: Sequence[HeaderDecorator] = (),
        error_extractors: Sequence[ErrorExtractor] = DEFAULT_ERROR_EXTRACTORS,
        logging: Optional['LoggingConfig'] = None,
        **transport_options: Any
    ) -> 'ServiceConfig':
        """
        Удобный конструктор конфигурации.

        Args:
            uri: URI сервиса
            timeout: Таймаут (число, (connect, read) или TimeoutConfig)
            verify_ssl: Проверять SSL
            headers: Дефолтные заголовки
            header_decorators: Декораторы заголовков
            error_extractors: Экстракторы сообщений об ошибках
            logging: Конфигурация логирования
            **transport_options: Доп. параметры транспорта

        Examples:
            >>> config = ServiceConfig.create(timeout=60)
            >>> config = ServiceConfig.create(timeout=(5, 60), verify_ssl=False)
        """
        return cls(
            uri=uri,
            headers=headers or {},
            timeout=TimeoutConfig.coerce(timeout),
            verify_ssl=verify_ssl,
            transport_options=transport_options,
            header_decorators=tuple(header_decorators),
            error_extractors=tuple(error_extractors),
            logging=logging,
        )

    def with_timeout(self, timeout: Union[float, Tuple[float, float], TimeoutConfig]) -> 'ServiceConfig':
        """
        Создать новый конфиг с изменённым timeout.

        Example:
            >>> new_config = config.with_timeout(60)
        """
        return replace(self, timeout=TimeoutConfig.coerce(timeout))

    def with_headers(self, headers: Dict[str, str]) -> 'ServiceConfig':
        """
        Создать новый конфиг с дополнительными заголовками.

        Example:
            >>> new_config = config.with_headers({"X-API-Key": "secret"})
        """
        merged = dict(self.headers)
        merged.update(headers)
        return replace(self, headers=merged)

    def with_header_decorators(self, *decorators: HeaderDecorator) -> 'ServiceConfig':
        """Создать новый конфиг с дополнительными декораторами заголовков."""
        return replace(self, header_decorators=self.header_decorators + decorators)
