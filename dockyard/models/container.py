"""Container specification and runtime state models."""

from dataclasses import dataclass
from enum import Enum
from typing import Dict, List, Optional

from pydantic import BaseModel, Field


class ContainerStatus(str, Enum):
    """Container status as reported by the daemon."""

    CREATED = "created"
    RUNNING = "running"
    PAUSED = "paused"
    RESTARTING = "restarting"
    REMOVING = "removing"
    EXITED = "exited"
    DEAD = "dead"
    UNKNOWN = "unknown"

    @classmethod
    def parse(cls, value: Optional[str]) -> "ContainerStatus":
        """Parse a daemon status string, case-insensitively."""
        try:
            return cls((value or "").strip().lower())
        except ValueError:
            return cls.UNKNOWN


class LifecycleState(str, Enum):
    """Where a container handle is in its lifecycle."""

    CREATED = "created"
    STARTED = "started"
    READY = "ready"
    STOPPED = "stopped"
    REMOVED = "removed"


class PortBinding(BaseModel):
    """A requested container port and how it should be published."""

    container_port: int = Field(..., ge=1, le=65535)
    host_port: Optional[int] = Field(
        default=None, ge=1, le=65535, description="None lets the daemon pick a free port"
    )
    protocol: str = Field(default="tcp", pattern="^(tcp|udp|sctp)$")

    @property
    def key(self) -> str:
        return f"{self.container_port}/{self.protocol}"


class ContainerSpec(BaseModel):
    """Everything needed to create a container."""

    image: str
    name: Optional[str] = None
    hostname: Optional[str] = None
    env: Dict[str, str] = Field(default_factory=dict)
    labels: Dict[str, str] = Field(default_factory=dict)
    port_bindings: List[PortBinding] = Field(default_factory=list)
    entrypoint: Optional[List[str]] = None
    command: Optional[List[str]] = None
    network: Optional[str] = None
    network_aliases: List[str] = Field(default_factory=list)


@dataclass(frozen=True)
class ExecResult:
    """Outcome of running a command inside a container."""

    exit_code: Optional[int]
    output: str

    @property
    def succeeded(self) -> bool:
        return self.exit_code == 0
