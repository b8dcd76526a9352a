"""Shorthand constructors for wait strategies."""

from typing import Awaitable, Callable, Optional, Sequence, Union

from .base import WaitStrategy
from .strategies import (
    CombinedWait,
    CustomWait,
    ExecWait,
    HealthCheckWait,
    HttpWait,
    LogWait,
    NoWait,
    TcpWait,
)


def _given(**kwargs):
    return {key: value for key, value in kwargs.items() if value is not None}


class Wait:
    """Factory for wait strategies; unset options use configured defaults.

    Usage:
        Wait.all(Wait.tcp(5432), Wait.log("ready to accept connections"))
    """

    @staticmethod
    def no_wait() -> NoWait:
        return NoWait()

    @staticmethod
    def tcp(
        port: int,
        timeout: Optional[float] = None,
        retries: Optional[int] = None,
        poll_interval: Optional[float] = None,
    ) -> TcpWait:
        return TcpWait(
            port=port, **_given(timeout=timeout, retries=retries, poll_interval=poll_interval)
        )

    @staticmethod
    def http(
        port: int,
        path: str = "/",
        scheme: str = "http",
        method: str = "GET",
        timeout: Optional[float] = None,
        retries: Optional[int] = None,
        poll_interval: Optional[float] = None,
    ) -> HttpWait:
        return HttpWait(
            port=port,
            path=path,
            scheme=scheme,
            method=method,
            **_given(timeout=timeout, retries=retries, poll_interval=poll_interval),
        )

    @staticmethod
    def log(
        message: str,
        occurrences: int = 1,
        timeout: Optional[float] = None,
        poll_interval: Optional[float] = None,
    ) -> LogWait:
        return LogWait(
            message=message,
            occurrences=occurrences,
            **_given(timeout=timeout, poll_interval=poll_interval),
        )

    @staticmethod
    def exec(
        command: Union[str, Sequence[str]],
        timeout: Optional[float] = None,
        poll_interval: Optional[float] = None,
    ) -> ExecWait:
        return ExecWait(command=command, **_given(timeout=timeout, poll_interval=poll_interval))

    @staticmethod
    def health_check(
        timeout: Optional[float] = None, poll_interval: Optional[float] = None
    ) -> HealthCheckWait:
        return HealthCheckWait(**_given(timeout=timeout, poll_interval=poll_interval))

    @staticmethod
    def all(*strategies: WaitStrategy) -> CombinedWait:
        return CombinedWait(strategies=strategies)

    @staticmethod
    def custom(
        check: Callable[..., Awaitable[None]], description: str = "custom"
    ) -> CustomWait:
        return CustomWait(check=check, description=description)
