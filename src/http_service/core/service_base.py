# src/http_service/core/service_base.py
"""Общая часть HTTPService и AsyncHTTPService."""

import time
import uuid
from typing import Any, Mapping, Optional

from .config import ServiceConfig
from .exceptions import InvalidTargetError
from .logging import LoggingConfig, ServiceLogger, set_correlation_id
from .outcome import Outcome
from .payload import FORM_MEDIA_TYPE, JSON_MEDIA_TYPE, as_payload
from .pipeline import RequestPipeline, RequestSpec
from .target import TargetDescriptor
from .utils import sanitize_url


class BaseHTTPService:
    """
    Разбор URI, сборка pipeline и логирование запросов.

    Сам по себе запросы не выполняет: см. HTTPService и AsyncHTTPService.
    """

    JSON_MEDIA_TYPE = JSON_MEDIA_TYPE
    FORM_MEDIA_TYPE = FORM_MEDIA_TYPE

    def __init__(
        self,
        uri: Optional[str] = None,
        *,
        config: Optional[ServiceConfig] = None,
        **transport_options: Any
    ):
        """
        Args:
            uri: http(s)://host[:port][/basepath] (по умолчанию config.uri)
            config: ServiceConfig
            **transport_options: Доп. параметры транспорта (поверх config.transport_options)

        Raises:
            InvalidTargetError: URI не указан или невалиден
        """
        config = config or ServiceConfig()
        uri = uri or config.uri
        if not uri:
            raise InvalidTargetError("A service URI is required (pass uri or config.uri)")

        options = dict(config.transport_options)
        options.update(transport_options)

        self._config = config
        self._target = TargetDescriptor.parse(uri, options)
        self._pipeline = RequestPipeline(
            self._target,
            headers=config.headers,
            header_decorators=config.header_decorators,
            error_extractors=config.error_extractors,
        )
        self._logger = self._create_logger(config.logging)

    def _create_logger(self, logging_config: Optional[LoggingConfig]) -> Optional[ServiceLogger]:
        if logging_config is None:
            return None
        # Имя логгера с хостом для уникальности
        return ServiceLogger(logging_config, name=f"http_service.{self._target.host}")

    @classmethod
    def from_env(
        cls,
        profile: Optional[str] = None,
        env_file: Optional[str] = None,
        **overrides: Any
    ):
        """
        Создать сервис из переменных окружения (HTTP_SERVICE_*).

        Example:
            >>> service = HTTPService.from_env(profile="production")
        """
        from .env_config import load_from_env
        return cls(config=load_from_env(profile=profile, env_file=env_file, **overrides))

    # ==================== Запрос ====================

    @staticmethod
    def _build_spec(
        method: str,
        path: Optional[str],
        headers: Optional[Mapping[str, str]],
        body: Any
    ) -> RequestSpec:
        return RequestSpec(method=method, path=path or "", headers=headers, body=as_payload(body))

    def _log_started(self, spec: RequestSpec) -> float:
        if self._logger is not None:
            if self._logger.config.enable_correlation_id:
                set_correlation_id(str(uuid.uuid4()))
            self._logger.debug(
                "Request started",
                method=spec.method.upper(),
                url=sanitize_url(self._target.url_for(spec.path)),
                has_body=spec.body is not None,
            )
        return time.monotonic()

    def _log_finished(self, spec: RequestSpec, outcome: Outcome, started: float) -> None:
        if self._logger is None:
            return
        fields = {
            "method": spec.method.upper(),
            "url": sanitize_url(self._target.url_for(spec.path)),
            "status_code": outcome.status_code,
            "duration_ms": round((time.monotonic() - started) * 1000, 2),
        }
        if outcome.ok:
            self._logger.info("Request completed", **fields)
        else:
            self._logger.warning(
                "Request failed",
                error_type=type(outcome.error).__name__,
                error=str(outcome.error),
                **fields
            )

    def _close_logger(self) -> None:
        if self._logger is not None:
            self._logger.close()

    # ==================== Properties ====================

    @property
    def config(self) -> ServiceConfig:
        return self._config

    @property
    def target(self) -> TargetDescriptor:
        return self._target

    @property
    def pipeline(self) -> RequestPipeline:
        return self._pipeline

    @property
    def protocol(self) -> str:
        return self._target.protocol

    @property
    def host(self) -> str:
        return self._target.host

    @property
    def port(self) -> int:
        return self._target.port

    @property
    def base_path(self) -> str:
        return self._target.base_path

    def __repr__(self) -> str:
        return f"{self.__class__.__name__}({self._target.origin + self._target.base_path!r})"
