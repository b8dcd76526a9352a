"""Low-level daemon protocol.

This package provides the wire layer under DockerClient:
- transport.py: HTTP over a Unix socket or TCP (RawRequest / RawResponse)
- endpoints.py: Endpoint definitions for each Engine API call
- codec.py: Endpoint encoding, response decoding and stream demultiplexing
"""

from .codec import decode, demultiplex_stream, encode
from .endpoints import NO_BODY, RAW, Endpoint
from .transport import RawRequest, RawResponse, Transport

__all__ = [
    "Transport",
    "RawRequest",
    "RawResponse",
    "Endpoint",
    "NO_BODY",
    "RAW",
    "encode",
    "decode",
    "demultiplex_stream",
]
