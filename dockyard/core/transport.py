"""HTTP transport to the Docker daemon.

Speaks HTTP/1.1 over a Unix domain socket (or plain TCP) through a single
pooled httpx.AsyncClient. The transport knows nothing about endpoints or
payload types; it moves bytes and turns connection failures into typed
errors. It never retries.
"""

from dataclasses import dataclass, field
from typing import Dict, Optional

import httpx
import structlog

from ..models.errors import DockerTimeoutError, TransportError

logger = structlog.get_logger(__name__)

DEFAULT_HEADERS = {"Content-Type": "application/json", "Host": "localhost"}


@dataclass(frozen=True)
class RawRequest:
    """An encoded daemon request."""

    method: str
    path: str
    params: Dict[str, str] = field(default_factory=dict)
    body: Optional[bytes] = None
    timeout: Optional[float] = None


@dataclass(frozen=True)
class RawResponse:
    """Status code and body bytes of a daemon response."""

    status_code: int
    body: bytes

    @property
    def ok(self) -> bool:
        return 200 <= self.status_code <= 299

    @property
    def text(self) -> str:
        return self.body.decode("utf-8", errors="replace")


class Transport:
    """Sends raw requests to one daemon address."""

    def __init__(
        self,
        base_url: str = "http://localhost",
        uds: Optional[str] = None,
        timeout: float = 30.0,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        """
        Initialize the transport.

        Args:
            base_url: Base URL of the daemon; "http://localhost" for sockets
            uds: Unix domain socket path, if connecting over a socket
            timeout: Default per-request timeout in seconds
            transport: Pre-built httpx transport, replaces the socket/TCP one
        """
        self.base_url = base_url
        self.uds = uds
        if transport is None:
            transport = httpx.AsyncHTTPTransport(uds=uds) if uds else httpx.AsyncHTTPTransport()

        headers = dict(DEFAULT_HEADERS)
        if not uds:
            # Over TCP the Host header must name the real daemon
            headers.pop("Host")

        self.client = httpx.AsyncClient(
            base_url=base_url,
            transport=transport,
            headers=headers,
            timeout=httpx.Timeout(timeout=timeout),
            limits=httpx.Limits(max_connections=100, max_keepalive_connections=20),
        )

    @property
    def target(self) -> str:
        """Human-readable daemon address, for logs and errors."""
        return f"unix://{self.uds}" if self.uds else self.base_url

    async def execute(self, request: RawRequest) -> RawResponse:
        """Send one request and return the raw response.

        Raises:
            DockerTimeoutError: If the request exceeded its timeout
            TransportError: If the daemon could not be reached
        """
        extra = {}
        if request.timeout is not None:
            extra["timeout"] = request.timeout

        try:
            response = await self.client.request(
                request.method,
                request.path,
                params=request.params or None,
                content=request.body,
                **extra,
            )
        except httpx.TimeoutException as e:
            raise DockerTimeoutError(
                f"{request.method} {request.path} timed out",
                context={"daemon": self.target, "path": request.path},
            ) from e
        except httpx.HTTPError as e:
            logger.debug(
                "Daemon request failed",
                method=request.method,
                path=request.path,
                daemon=self.target,
                error=str(e),
            )
            raise TransportError(
                f"Cannot reach Docker daemon at {self.target}: {e}",
                context={"daemon": self.target, "path": request.path},
            ) from e

        return RawResponse(status_code=response.status_code, body=response.content)

    async def aclose(self) -> None:
        await self.client.aclose()

    async def __aenter__(self) -> "Transport":
        return self

    async def __aexit__(self, *exc_info) -> None:
        await self.aclose()
