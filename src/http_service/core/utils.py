"""
Utility functions for HTTP service.

Includes:
- Query string and media type helpers used by the request pipeline
- URL and header sanitization for safe logging
"""

from typing import Any, Mapping, Optional, Set, Union
from urllib.parse import parse_qs, urlencode, urlsplit, urlunsplit


def append_query(path: str, query: Optional[Union[str, Mapping[str, Any]]]) -> str:
    """
    Append a query to a request path.

    Mappings are form-encoded (sequence values repeat the key), strings are
    appended as they are. ``?`` starts the query unless the path already has
    one, in which case ``&`` joins it.

    Examples:
        >>> append_query("get", {"a": 1})
        'get?a=1'
        >>> append_query("get?x=1", {"a": 1})
        'get?x=1&a=1'
        >>> append_query("get", None)
        'get'
    """
    if isinstance(query, Mapping):
        query = urlencode(query, doseq=True)
    if not isinstance(query, str):
        return path
    separator = "?" if "?" not in path else "&"
    return f"{path}{separator}{query}"


def remove_params(value: Optional[str]) -> str:
    """
    Strip media type parameters.

    Examples:
        >>> remove_params("text/html; charset=utf-8")
        'text/html'
        >>> remove_params("text/html")
        'text/html'
        >>> remove_params(None)
        ''
    """
    if not value:
        return ""
    return value.split(";", 1)[0].strip().lower()


def format_host(host: str) -> str:
    """Bracket IPv6 literals for use inside a URL."""
    if ":" in host and not host.startswith("["):
        return f"[{host}]"
    return host


# Default sensitive parameter names that should be masked in logs
DEFAULT_SENSITIVE_PARAMS = {
    'api_key',
    'apikey',
    'api-key',
    'token',
    'access_token',
    'refresh_token',
    'key',
    'secret',
    'client_secret',
    'password',
    'auth',
    'authorization',
    'session',
    'session_id',
}

SENSITIVE_HEADERS = {
    'authorization',
    'proxy-authorization',
    'api-key',
    'x-api-key',
    'x-auth-token',
    'cookie',
    'set-cookie',
}


def sanitize_url(
    url: str,
    extra_params: Optional[Set[str]] = None,
    mask: str = 'REDACTED'
) -> str:
    """
    Mask sensitive query parameters in URL for safe logging.

    Args:
        url: The URL to sanitize
        extra_params: Additional parameter names to mask (case-insensitive)
        mask: The string to use for masking

    Returns:
        Sanitized URL with sensitive parameters masked

    Examples:
        >>> sanitize_url('https://api.example.com/data?api_key=secret123')
        'https://api.example.com/data?api_key=REDACTED'

        >>> sanitize_url('https://api.example.com/data?user=john&token=abc123')
        'https://api.example.com/data?user=john&token=REDACTED'
    """
    if not url:
        return url

    sensitive = DEFAULT_SENSITIVE_PARAMS | {p.lower() for p in (extra_params or ())}

    parsed = urlsplit(url)
    if not parsed.query:
        return url

    params = parse_qs(parsed.query, keep_blank_values=True)
    masked = {
        name: [mask] * len(values) if name.lower() in sensitive else values
        for name, values in params.items()
    }
    return urlunsplit(parsed._replace(query=urlencode(masked, doseq=True)))


def sanitize_headers(headers: Optional[Mapping[str, Any]], mask: str = 'REDACTED') -> dict:
    """
    Mask sensitive headers for safe logging.

    Examples:
        >>> sanitize_headers({'Authorization': 'Bearer token123'})
        {'Authorization': 'REDACTED'}
    """
    if not headers:
        return {}
    return {
        key: mask if key.lower() in SENSITIVE_HEADERS else value
        for key, value in headers.items()
    }


def mask_sensitive_data(data: Any, mask: str = "***REDACTED***") -> Any:
    """
    Recursively mask sensitive keys in dicts and lists.

    Examples:
        >>> mask_sensitive_data({"user": "alice", "password": "secret"})
        {'user': 'alice', 'password': '***REDACTED***'}
    """
    if isinstance(data, Mapping):
        return {
            key: mask if str(key).lower() in DEFAULT_SENSITIVE_PARAMS | SENSITIVE_HEADERS
            else mask_sensitive_data(value, mask)
            for key, value in data.items()
        }
    if isinstance(data, (list, tuple)):
        return type(data)(mask_sensitive_data(item, mask) for item in data)
    return data
