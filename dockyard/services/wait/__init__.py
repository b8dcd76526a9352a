"""Wait strategies: readiness checks run after a container starts.

This package provides:
- base.py: WaitStrategy protocol and deadline helpers
- strategies.py: NoWait, Tcp, Http, Log, Exec, HealthCheck, Combined, Custom
- factory.py: Wait, shorthand constructors with configured defaults
"""

from .base import Deadline, WaitStrategy
from .factory import Wait
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

__all__ = [
    "Wait",
    "WaitStrategy",
    "Deadline",
    "NoWait",
    "TcpWait",
    "HttpWait",
    "LogWait",
    "ExecWait",
    "HealthCheckWait",
    "CombinedWait",
    "CustomWait",
]
