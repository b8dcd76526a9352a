"""Readiness strategies.

Every strategy is an immutable dataclass with one coroutine,
``wait_until_ready(container)``. Deadlines are wall-clock and start when the
strategy starts, and every strategy checks at least once before giving up.
"""

import asyncio
import contextlib
from dataclasses import dataclass, field
from typing import Awaitable, Callable, Optional, Tuple

import httpx
import structlog

from ...models.errors import (
    DecodingError,
    DockerApiError,
    TransportError,
    WaitStrategyError,
    WaitTimeoutError,
)
from .base import (
    Deadline,
    WaitStrategy,
    default_poll_interval,
    default_request_timeout,
    default_retries,
    default_timeout,
    short_id,
)

logger = structlog.get_logger(__name__)

# Errors an exec check may hit while the container is still coming up
_EXEC_ERRORS = (DockerApiError, TransportError, DecodingError)


def _exhausted(attempt: int, retries: Optional[int], deadline: Deadline) -> bool:
    return (retries is not None and attempt >= retries) or deadline.expired


@dataclass(frozen=True)
class NoWait:
    """Consider the container ready as soon as it has started."""

    async def wait_until_ready(self, container) -> None:
        return None


@dataclass(frozen=True)
class TcpWait:
    """Wait until the mapped host port accepts TCP connections."""

    port: int
    timeout: float = field(default_factory=default_timeout)
    retries: Optional[int] = field(default_factory=default_retries)
    poll_interval: float = field(default_factory=default_poll_interval)
    connect_timeout: float = field(default_factory=default_request_timeout)

    async def wait_until_ready(self, container) -> None:
        deadline = Deadline(self.timeout)
        host = container.host
        host_port = await container.get_mapped_port(self.port)

        attempt = 0
        last_error: Optional[BaseException] = None
        while True:
            attempt += 1
            try:
                await self._connect(host, host_port, deadline)
                logger.info(
                    "Container ready",
                    strategy="tcp",
                    container_id=short_id(container),
                    port=self.port,
                    host_port=host_port,
                    attempts=attempt,
                )
                return
            except (OSError, asyncio.TimeoutError) as e:
                last_error = e

            if _exhausted(attempt, self.retries, deadline):
                break
            await asyncio.sleep(self.poll_interval)

        message = (
            f"Port {self.port} (host {host}:{host_port}) not reachable "
            f"after {attempt} attempts: {last_error}"
        )
        if deadline.expired:
            raise WaitTimeoutError(
                message, timeout=self.timeout, context={"container_id": short_id(container)}
            ) from last_error
        raise WaitStrategyError(
            message, context={"port": self.port, "container_id": short_id(container)}
        ) from last_error

    async def _connect(self, host: str, port: int, deadline: Deadline) -> None:
        budget = min(self.connect_timeout, max(deadline.remaining, self.poll_interval))
        _, writer = await asyncio.wait_for(asyncio.open_connection(host, port), budget)
        writer.close()
        with contextlib.suppress(OSError):
            await writer.wait_closed()


@dataclass(frozen=True)
class HttpWait:
    """Wait until an HTTP request to the mapped port returns a 2xx status."""

    port: int
    path: str = "/"
    scheme: str = "http"
    method: str = "GET"
    timeout: float = field(default_factory=default_timeout)
    retries: Optional[int] = field(default_factory=default_retries)
    poll_interval: float = field(default_factory=default_poll_interval)
    request_timeout: float = field(default_factory=default_request_timeout)

    async def url_for(self, container) -> str:
        host_port = await container.get_mapped_port(self.port)
        path = self.path if self.path.startswith("/") else f"/{self.path}"
        return f"{self.scheme}://{container.host}:{host_port}{path}"

    async def wait_until_ready(self, container) -> None:
        deadline = Deadline(self.timeout)
        url = await self.url_for(container)

        attempt = 0
        last_error: Optional[BaseException] = None
        async with httpx.AsyncClient(
            timeout=httpx.Timeout(timeout=self.request_timeout), verify=False
        ) as client:
            while True:
                attempt += 1
                try:
                    response = await client.request(self.method, url)
                    if 200 <= response.status_code <= 299:
                        logger.info(
                            "Container ready",
                            strategy="http",
                            container_id=short_id(container),
                            url=url,
                            status_code=response.status_code,
                            attempts=attempt,
                        )
                        return
                    last_error = WaitStrategyError(
                        f"{self.method} {url} returned HTTP {response.status_code}",
                        status_code=response.status_code,
                    )
                except httpx.HTTPError as e:
                    last_error = e

                if _exhausted(attempt, self.retries, deadline):
                    break
                await asyncio.sleep(self.poll_interval)

        message = f"{self.method} {url} not ready after {attempt} attempts: {last_error}"
        if deadline.expired:
            raise WaitTimeoutError(
                message, timeout=self.timeout, context={"container_id": short_id(container)}
            ) from last_error
        raise WaitStrategyError(
            message, context={"url": url, "container_id": short_id(container)}
        ) from last_error


@dataclass(frozen=True)
class LogWait:
    """Wait until the container's output contains a message, optionally several times."""

    message: str
    occurrences: int = 1
    timeout: float = field(default_factory=default_timeout)
    poll_interval: float = field(default_factory=default_poll_interval)

    async def wait_until_ready(self, container) -> None:
        deadline = Deadline(self.timeout)
        while True:
            logs = await container.get_logs()
            if logs.count(self.message) >= self.occurrences:
                logger.info(
                    "Container ready",
                    strategy="log",
                    container_id=short_id(container),
                    elapsed=round(deadline.elapsed, 3),
                )
                return
            if deadline.expired:
                raise WaitTimeoutError(
                    f"Log message {self.message!r} not seen within {self.timeout}s",
                    timeout=self.timeout,
                    context={"container_id": short_id(container)},
                )
            await asyncio.sleep(self.poll_interval)


@dataclass(frozen=True)
class ExecWait:
    """Wait until a command run inside the container exits with code 0."""

    command: Tuple[str, ...]
    timeout: float = field(default_factory=default_timeout)
    poll_interval: float = field(default_factory=default_poll_interval)

    def __post_init__(self):
        if isinstance(self.command, str):
            object.__setattr__(self, "command", ("sh", "-c", self.command))
        else:
            object.__setattr__(self, "command", tuple(self.command))

    async def wait_until_ready(self, container) -> None:
        deadline = Deadline(self.timeout)
        last_result = None
        while True:
            try:
                last_result = await container.exec(list(self.command))
                if last_result.exit_code == 0:
                    logger.info(
                        "Container ready",
                        strategy="exec",
                        container_id=short_id(container),
                        command=" ".join(self.command),
                    )
                    return
            except _EXEC_ERRORS as e:
                logger.debug("Exec check failed", container_id=short_id(container), error=str(e))

            if deadline.expired:
                detail = f", last exit code {last_result.exit_code}" if last_result else ""
                raise WaitTimeoutError(
                    f"Command {' '.join(self.command)!r} did not succeed within "
                    f"{self.timeout}s{detail}",
                    timeout=self.timeout,
                    context={"container_id": short_id(container)},
                )
            await asyncio.sleep(self.poll_interval)


@dataclass(frozen=True)
class HealthCheckWait:
    """Wait until the container's Docker health check reports healthy."""

    timeout: float = field(default_factory=default_timeout)
    poll_interval: float = field(default_factory=default_poll_interval)

    async def wait_until_ready(self, container) -> None:
        deadline = Deadline(self.timeout)
        while True:
            inspect = await container.inspect()
            state = inspect.state
            status = (state.health.status if state.health else state.status).lower()

            if status == "healthy":
                logger.info(
                    "Container ready",
                    strategy="health_check",
                    container_id=short_id(container),
                    elapsed=round(deadline.elapsed, 3),
                )
                return
            if status == "unhealthy":
                raise WaitStrategyError(
                    f"Container {short_id(container)} reported unhealthy",
                    context={"container_id": short_id(container)},
                )
            if deadline.expired:
                raise WaitTimeoutError(
                    f"Container not healthy within {self.timeout}s (last status {status!r})",
                    timeout=self.timeout,
                    context={"container_id": short_id(container)},
                )
            await asyncio.sleep(self.poll_interval)


@dataclass(frozen=True)
class CombinedWait:
    """Run strategies one after another; the first failure aborts."""

    strategies: Tuple[WaitStrategy, ...] = ()

    def __post_init__(self):
        object.__setattr__(self, "strategies", tuple(self.strategies))

    async def wait_until_ready(self, container) -> None:
        for strategy in self.strategies:
            await strategy.wait_until_ready(container)


@dataclass(frozen=True)
class CustomWait:
    """Run a caller-supplied readiness coroutine."""

    check: Callable[..., Awaitable[None]]
    description: str = "custom"

    async def wait_until_ready(self, container) -> None:
        await self.check(container)
