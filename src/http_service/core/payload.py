"""
Request body payloads and their serialization.

A body is one of three tagged variants. Plain Python values are converted
once, at the edge, by :func:`as_payload`; the pipeline only dispatches on
``payload.kind``.
"""

import json
from dataclasses import dataclass
from enum import Enum
from typing import Any, ClassVar, Mapping, MutableMapping, Optional, Union
from urllib.parse import urlencode

from .exceptions import UnsupportedBodyTypeError
from .utils import remove_params

JSON_MEDIA_TYPE = "application/json"
FORM_MEDIA_TYPE = "application/x-www-form-urlencoded"

CONTENT_TYPE_HEADER = "Content-Type"
CONTENT_LENGTH_HEADER = "Content-Length"


class BodyKind(str, Enum):
    """Closed set of body variants."""
    RAW = "raw"
    TEXT = "text"
    STRUCTURED = "structured"


@dataclass(frozen=True)
class RawBody:
    """Bytes sent as they are."""
    data: bytes
    kind: ClassVar[BodyKind] = BodyKind.RAW


@dataclass(frozen=True)
class TextBody:
    """Text sent UTF-8 encoded."""
    text: str
    kind: ClassVar[BodyKind] = BodyKind.TEXT


@dataclass(frozen=True)
class StructuredBody:
    """Mapping or sequence serialized according to the declared Content-Type."""
    value: Any
    kind: ClassVar[BodyKind] = BodyKind.STRUCTURED


BodyPayload = Union[RawBody, TextBody, StructuredBody]


def as_payload(value: Any) -> Optional[BodyPayload]:
    """
    Wrap a plain value into a body payload.

    Examples:
        >>> as_payload(b"raw")
        RawBody(data=b'raw')
        >>> as_payload({"a": 1})
        StructuredBody(value={'a': 1})
        >>> as_payload(None) is None
        True

    Raises:
        UnsupportedBodyTypeError: value is not bytes, str, a mapping or a list
    """
    if value is None:
        return None
    if isinstance(value, (RawBody, TextBody, StructuredBody)):
        return value
    if isinstance(value, (bytes, bytearray, memoryview)):
        return RawBody(bytes(value))
    if isinstance(value, str):
        return TextBody(value)
    if isinstance(value, (Mapping, list, tuple)):
        return StructuredBody(value)
    raise UnsupportedBodyTypeError(
        f"Expected bytes, str, a mapping or a list for the body "
        f"(got {type(value).__name__} instead)."
    )


def encode_json(value: Any) -> str:
    """Compact JSON, the same shape browsers and Node produce."""
    return json.dumps(value, separators=(",", ":"), ensure_ascii=False)


def serialize_body(payload: BodyPayload, headers: MutableMapping[str, str]) -> bytes:
    """
    Serialize a payload to bytes, completing ``headers`` in place.

    ``headers`` must be a case-insensitive mapping. A structured body with no
    declared Content-Type is sent as JSON and the header is added. The
    Content-Length header is set from the encoded size unless the caller
    already set it.

    Raises:
        UnsupportedBodyTypeError: structured body with a declared Content-Type
            that is neither JSON nor form-urlencoded
    """
    if payload.kind is BodyKind.STRUCTURED:
        declared = headers.get(CONTENT_TYPE_HEADER)
        media_type = remove_params(declared)
        if declared is not None and media_type not in (JSON_MEDIA_TYPE, FORM_MEDIA_TYPE):
            raise UnsupportedBodyTypeError(
                f"Unsupported media type: {declared}. Cannot serialize object."
            )
        try:
            if media_type == FORM_MEDIA_TYPE:
                text = urlencode(payload.value, doseq=True)
            else:
                text = encode_json(payload.value)
        except (TypeError, ValueError) as e:
            raise UnsupportedBodyTypeError(
                f"Cannot serialize object as {media_type or JSON_MEDIA_TYPE}: {e}"
            ) from e
        if declared is None:
            headers[CONTENT_TYPE_HEADER] = JSON_MEDIA_TYPE
        data = text.encode("utf-8")
    elif payload.kind is BodyKind.TEXT:
        data = payload.text.encode("utf-8")
    elif payload.kind is BodyKind.RAW:
        data = payload.data
    else:
        raise UnsupportedBodyTypeError(f"Unknown body kind: {payload.kind!r}")

    if headers.get(CONTENT_LENGTH_HEADER) is None:
        headers[CONTENT_LENGTH_HEADER] = str(len(data))
    return data
