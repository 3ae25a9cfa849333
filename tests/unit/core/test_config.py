"""
Tests for configuration classes.
"""

import pytest

from http_service.core.config import ServiceConfig, TimeoutConfig
from http_service.core.error_extractors import DEFAULT_ERROR_EXTRACTORS
from http_service.core.headers import bearer_token, static_headers
from http_service.core.logging import LoggingConfig


class TestTimeoutConfig:
    """Test TimeoutConfig."""

    def test_defaults(self):
        config = TimeoutConfig()
        assert config.connect == 5
        assert config.read == 30
        assert config.total is None
        assert config.as_tuple() == (5, 30)

    @pytest.mark.parametrize("kwargs", [
        {"connect": 0},
        {"read": -1},
        {"total": 0},
    ])
    def test_validation(self, kwargs):
        with pytest.raises(ValueError):
            TimeoutConfig(**kwargs)

    def test_coerce_number(self):
        assert TimeoutConfig.coerce(60) == TimeoutConfig(connect=5, read=60)
        assert TimeoutConfig.coerce(2) == TimeoutConfig(connect=2, read=2)

    def test_coerce_tuple(self):
        assert TimeoutConfig.coerce((3, 10)) == TimeoutConfig(connect=3, read=10)

    def test_coerce_config(self):
        config = TimeoutConfig(connect=1, read=2, total=3)
        assert TimeoutConfig.coerce(config) is config


class TestServiceConfig:
    """Test ServiceConfig."""

    def test_defaults(self):
        config = ServiceConfig()
        assert config.uri is None
        assert dict(config.headers) == {}
        assert config.verify_ssl is True
        assert config.header_decorators == ()
        assert config.error_extractors == tuple(DEFAULT_ERROR_EXTRACTORS)
        assert config.logging is None

    def test_headers_frozen(self):
        config = ServiceConfig(headers={"Accept": "application/json"})
        with pytest.raises(TypeError):
            config.headers["X-New"] = "value"

    def test_source_dict_not_shared(self):
        headers = {"Accept": "application/json"}
        config = ServiceConfig(headers=headers)
        headers["Accept"] = "text/html"
        assert config.headers["Accept"] == "application/json"

    def test_create(self):
        logging_config = LoggingConfig.create(level="DEBUG")
        config = ServiceConfig.create(
            uri="https://api.example.com",
            timeout=(3, 60),
            verify_ssl=False,
            headers={"Accept": "application/json"},
            header_decorators=[bearer_token("secret-token")],
            logging=logging_config,
            cert="/tmp/client.pem",
        )
        assert config.uri == "https://api.example.com"
        assert config.timeout == TimeoutConfig(connect=3, read=60)
        assert config.verify_ssl is False
        assert len(config.header_decorators) == 1
        assert config.transport_options["cert"] == "/tmp/client.pem"
        assert config.logging is logging_config

    def test_with_timeout(self):
        config = ServiceConfig()
        new_config = config.with_timeout(90)
        assert new_config.timeout.read == 90
        assert config.timeout.read == 30

    def test_with_headers_merges(self):
        config = ServiceConfig(headers={"Accept": "application/json"})
        new_config = config.with_headers({"X-App": "demo"})
        assert dict(new_config.headers) == {"Accept": "application/json", "X-App": "demo"}
        assert "X-App" not in config.headers

    def test_with_header_decorators_appends(self):
        first = static_headers({"X-A": "1"})
        second = static_headers({"X-B": "2"})
        config = ServiceConfig(header_decorators=[first]).with_header_decorators(second)
        assert config.header_decorators == (first, second)

    def test_frozen(self):
        config = ServiceConfig()
        with pytest.raises(Exception):
            config.verify_ssl = False
