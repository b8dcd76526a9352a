"""Encoding of endpoints into raw requests and decoding of raw responses."""

import json
import struct
from functools import lru_cache
from typing import Any, Iterator, Optional, Tuple

from pydantic import TypeAdapter, ValidationError

from ..models.errors import DecodingError, DockerApiError, NotFoundError
from .endpoints import NO_BODY, RAW, Endpoint
from .transport import RawRequest, RawResponse


# Multiplexed stream frame header: stream type, 3 padding bytes, payload size
STREAM_HEADER = struct.Struct(">BxxxL")

STREAM_STDIN = 0
STREAM_STDOUT = 1
STREAM_STDERR = 2

_BODYLESS_METHODS = ("GET", "DELETE", "HEAD")


def encode(endpoint: Endpoint, api_prefix: str) -> RawRequest:
    """Build the raw request for an endpoint under an API version prefix."""
    body = None
    if endpoint.body is not None and endpoint.method not in _BODYLESS_METHODS:
        body = endpoint.body.model_dump_json(by_alias=True, exclude_none=True).encode("utf-8")

    return RawRequest(
        method=endpoint.method,
        path=f"{api_prefix}{endpoint.path}",
        params=dict(endpoint.params),
        body=body,
        timeout=endpoint.timeout,
    )


@lru_cache(maxsize=None)
def _adapter(expected: Any) -> TypeAdapter:
    return TypeAdapter(expected)


def _type_name(expected: Any) -> str:
    return getattr(expected, "__name__", None) or str(expected)


def decode(response: RawResponse, expected: Any) -> Any:
    """Decode a raw response into the expected shape.

    Args:
        response: Raw daemon response
        expected: NO_BODY, RAW, or a type pydantic can validate JSON into

    Returns:
        NO_BODY, the body bytes (RAW), or the validated value

    Raises:
        DockerApiError: If the status is outside 200-299 (NotFoundError on 404)
        DecodingError: If a 2xx body is empty or doesn't match the expected type
    """
    if not response.ok:
        raise error_from_response(response)

    if expected is NO_BODY:
        return NO_BODY
    if expected is RAW:
        return response.body

    if not response.body.strip():
        raise DecodingError(
            f"Empty response body, expected {_type_name(expected)}",
            status_code=response.status_code,
        )

    try:
        return _adapter(expected).validate_json(response.body)
    except ValidationError as e:
        raise DecodingError(
            f"Unexpected response body for {_type_name(expected)}: {e.errors()[0]['msg']}",
            status_code=response.status_code,
            context={"body": response.text[:500]},
        ) from e


def _error_message(body: bytes) -> Optional[str]:
    """Extract the message of a ``{"message": ...}`` error envelope."""
    try:
        payload = json.loads(body)
    except ValueError:
        return None
    if isinstance(payload, dict) and isinstance(payload.get("message"), str):
        return payload["message"]
    return None


def error_from_response(response: RawResponse) -> DockerApiError:
    """Build the typed error for a non-2xx daemon response."""
    message = _error_message(response.body)
    if message is None:
        message = response.text.strip() or f"HTTP {response.status_code}"

    if response.status_code == 404:
        return NotFoundError(message)
    return DockerApiError(response.status_code, message)


def check_progress_stream(body: bytes) -> int:
    """Scan an NDJSON progress stream (image pull) for an error object.

    The daemon answers 200 before a pull finishes, so failures only show up
    as ``{"error": ..., "errorDetail": {...}}`` lines in the stream.

    Returns:
        Number of progress messages read

    Raises:
        DockerApiError: If the stream reports an error
    """
    count = 0
    for line in body.splitlines():
        if not line.strip():
            continue
        try:
            message = json.loads(line)
        except ValueError as e:
            raise DecodingError(
                "Malformed progress stream line",
                context={"line": line[:200].decode("utf-8", "replace")},
            ) from e
        count += 1
        if not isinstance(message, dict):
            continue
        detail = message.get("errorDetail") or {}
        error = message.get("error") or detail.get("message")
        if error:
            raise DockerApiError(detail.get("code") or 500, error)
    return count


def _is_multiplexed(data: bytes) -> bool:
    return (
        len(data) >= STREAM_HEADER.size
        and data[0] in (STREAM_STDIN, STREAM_STDOUT, STREAM_STDERR)
        and data[1:4] == b"\x00\x00\x00"
    )


def iter_frames(data: bytes) -> Iterator[Tuple[int, bytes]]:
    """Yield (stream type, payload) pairs of a multiplexed stream.

    Output that isn't framed (containers running with a TTY) is yielded as a
    single stdout chunk. A truncated trailing frame yields what is present.
    """
    if not _is_multiplexed(data):
        if data:
            yield STREAM_STDOUT, data
        return

    offset = 0
    while offset + STREAM_HEADER.size <= len(data):
        stream_type, length = STREAM_HEADER.unpack_from(data, offset)
        offset += STREAM_HEADER.size
        yield stream_type, data[offset : offset + length]
        offset += length


def demultiplex_stream(data: bytes) -> str:
    """Strip frame headers and return stdout and stderr as one string."""
    return b"".join(payload for _, payload in iter_frames(data)).decode(
        "utf-8", errors="replace"
    )
