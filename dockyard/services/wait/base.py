"""Wait strategy contract and shared polling helpers."""

import time
from typing import TYPE_CHECKING, Protocol, runtime_checkable

from ...config import settings

if TYPE_CHECKING:
    from ..container import DockerContainer


@runtime_checkable
class WaitStrategy(Protocol):
    """A readiness check, run once after a container has started."""

    async def wait_until_ready(self, container: "DockerContainer") -> None:
        """Return once the container is ready; raise WaitStrategyError otherwise."""
        ...


class Deadline:
    """Wall-clock budget measured from construction."""

    def __init__(self, timeout: float):
        self.timeout = timeout
        self._started = time.monotonic()

    @property
    def elapsed(self) -> float:
        return time.monotonic() - self._started

    @property
    def remaining(self) -> float:
        return self.timeout - self.elapsed

    @property
    def expired(self) -> bool:
        return self.elapsed >= self.timeout


def default_timeout() -> float:
    return settings.wait_timeout_seconds


def default_poll_interval() -> float:
    return settings.wait_poll_interval_seconds


def default_retries() -> int:
    return settings.wait_retries


def default_request_timeout() -> float:
    return settings.wait_http_request_timeout


def short_id(container) -> str:
    return str(getattr(container, "id", "") or "")[:12]
