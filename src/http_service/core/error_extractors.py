"""
Error message extraction from JSON error bodies.

Each extractor receives the parsed body and returns a message or ``None``.
They run in order and the first non-empty message wins, so vendor specific
shapes can be added without touching the pipeline.
"""

import re
from typing import Any, Callable, Optional, Sequence

ErrorExtractor = Callable[[Any], Optional[str]]

_LINE_BREAK = re.compile(r"\r?\n")


def error_description(body: Any) -> Optional[str]:
    """OAuth style ``{"error_description": "..."}``, first line only."""
    if isinstance(body, dict) and body.get("error_description"):
        return _LINE_BREAK.split(str(body["error_description"]))[0]
    return None


def error_object_message(body: Any) -> Optional[str]:
    """``{"error": {"message": "..."}}``."""
    error = body.get("error") if isinstance(body, dict) else None
    if isinstance(error, dict) and error.get("message"):
        return str(error["message"])
    return None


def odata_error_message(body: Any) -> Optional[str]:
    """``{"odata.error": {"message": {"value": "..."}}}``."""
    error = body.get("odata.error") if isinstance(body, dict) else None
    message = error.get("message") if isinstance(error, dict) else None
    if isinstance(message, dict) and message.get("value"):
        return str(message["value"])
    return None


DEFAULT_ERROR_EXTRACTORS: Sequence[ErrorExtractor] = (
    error_description,
    error_object_message,
    odata_error_message,
)


def extract_error_message(
    body: Any,
    extractors: Sequence[ErrorExtractor] = DEFAULT_ERROR_EXTRACTORS
) -> Optional[str]:
    """
    Run extractors in order and return the first message found.

    Examples:
        >>> extract_error_message({"error": {"message": "bad token"}})
        'bad token'
        >>> extract_error_message({"detail": "nope"}) is None
        True
    """
    for extractor in extractors:
        message = extractor(body)
        if message:
            return message
    return None
