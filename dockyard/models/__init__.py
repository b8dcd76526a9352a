"""Data models for dockyard."""

from .container import (
    ContainerSpec,
    ContainerStatus,
    ExecResult,
    LifecycleState,
    PortBinding,
)
from .docker import (
    ContainerCreateResponse,
    ContainerInspect,
    ContainerState,
    ContainerSummary,
    CreateContainerRequest,
    ExecInspect,
    ImageInspect,
    NetworkCreateResponse,
    PortBindingInfo,
    VersionInfo,
)
from .errors import (
    ErrorType,
    ErrorDetail,
    DockyardError,
    TransportError,
    DockerTimeoutError,
    DecodingError,
    DockerApiError,
    NotFoundError,
    ConfigurationError,
    PortMappingError,
    WaitStrategyError,
    WaitTimeoutError,
    ContainerRemovedError,
)

__all__ = [
    # Container models
    "ContainerSpec",
    "ContainerStatus",
    "ExecResult",
    "LifecycleState",
    "PortBinding",
    # Daemon payloads
    "ContainerCreateResponse",
    "ContainerInspect",
    "ContainerState",
    "ContainerSummary",
    "CreateContainerRequest",
    "ExecInspect",
    "ImageInspect",
    "NetworkCreateResponse",
    "PortBindingInfo",
    "VersionInfo",
    # Errors
    "ErrorType",
    "ErrorDetail",
    "DockyardError",
    "TransportError",
    "DockerTimeoutError",
    "DecodingError",
    "DockerApiError",
    "NotFoundError",
    "ConfigurationError",
    "PortMappingError",
    "WaitStrategyError",
    "WaitTimeoutError",
    "ContainerRemovedError",
]
