"""Error models and exception classes for dockyard."""

from enum import Enum
from typing import Any, Dict, Optional

from pydantic import BaseModel, Field


class ErrorType(str, Enum):
    """Error type enumeration."""

    TRANSPORT = "transport"
    DECODING = "decoding"
    API = "api"
    NOT_FOUND = "not_found"
    CONFIGURATION = "configuration"
    PORT_MAPPING = "port_mapping"
    WAIT_STRATEGY_FAILED = "wait_strategy_failed"
    TIMEOUT = "timeout"
    LIFECYCLE = "lifecycle"


class ErrorDetail(BaseModel):
    """Serializable error information, for reports and test output."""

    message: str = Field(..., description="Human-readable error message")
    error_type: ErrorType = Field(..., description="Error category")
    status_code: Optional[int] = Field(None, description="Daemon HTTP status, if any")
    context: Dict[str, Any] = Field(
        default_factory=dict, description="Identifiers needed to diagnose the failure"
    )

    class Config:
        use_enum_values = True


# Custom Exception Classes


class DockyardError(Exception):
    """Base exception for dockyard."""

    def __init__(
        self,
        message: str,
        error_type: ErrorType = ErrorType.API,
        status_code: Optional[int] = None,
        context: Optional[Dict[str, Any]] = None,
    ):
        self.message = message
        self.error_type = error_type
        self.status_code = status_code
        self.context = context or {}
        # Set when a container was left behind by the failed operation
        self.container: Optional[Any] = None
        super().__init__(message)

    def to_detail(self) -> ErrorDetail:
        """Convert exception to an error detail model."""
        return ErrorDetail(
            message=self.message,
            error_type=self.error_type,
            status_code=self.status_code,
            context=self.context,
        )


class TransportError(DockyardError):
    """The daemon socket could not be reached or the connection broke."""

    def __init__(self, message: str, **kwargs):
        super().__init__(message=message, error_type=ErrorType.TRANSPORT, **kwargs)


class DockerTimeoutError(DockyardError):
    """A daemon request did not complete within its timeout."""

    def __init__(self, message: str = "Docker daemon request timed out", **kwargs):
        super().__init__(message=message, error_type=ErrorType.TIMEOUT, **kwargs)


class DecodingError(DockyardError):
    """A daemon response body did not match the expected shape."""

    def __init__(self, message: str, **kwargs):
        super().__init__(message=message, error_type=ErrorType.DECODING, **kwargs)


class DockerApiError(DockyardError):
    """The daemon answered with a non-2xx status."""

    def __init__(self, status_code: int, message: str, **kwargs):
        kwargs.setdefault("error_type", ErrorType.API)
        super().__init__(message=message, status_code=status_code, **kwargs)

    def __str__(self) -> str:
        return f"Docker API error ({self.status_code}): {self.message}"


class NotFoundError(DockerApiError):
    """The daemon does not know the requested container, image or network."""

    def __init__(self, message: str = "Resource not found", **kwargs):
        super().__init__(
            status_code=404, message=message, error_type=ErrorType.NOT_FOUND, **kwargs
        )


class ConfigurationError(DockyardError):
    """Invalid container, network or client configuration."""

    def __init__(self, message: str, **kwargs):
        super().__init__(message=message, error_type=ErrorType.CONFIGURATION, **kwargs)


class PortMappingError(DockyardError):
    """No host port is bound for the requested container port."""

    def __init__(self, port: int, message: Optional[str] = None, **kwargs):
        self.port = port
        context = kwargs.pop("context", None) or {}
        context.setdefault("port", port)
        super().__init__(
            message=message or f"No host port mapping found for container port {port}",
            error_type=ErrorType.PORT_MAPPING,
            context=context,
            **kwargs,
        )


class WaitStrategyError(DockyardError):
    """A readiness condition could not be satisfied."""

    def __init__(self, message: str, **kwargs):
        kwargs.setdefault("error_type", ErrorType.WAIT_STRATEGY_FAILED)
        super().__init__(message=message, **kwargs)


class WaitTimeoutError(WaitStrategyError):
    """A readiness condition was still unmet when the deadline passed."""

    def __init__(self, message: str, timeout: float, **kwargs):
        self.timeout = timeout
        context = kwargs.pop("context", None) or {}
        context.setdefault("timeout", timeout)
        super().__init__(
            message=message, error_type=ErrorType.TIMEOUT, context=context, **kwargs
        )


class ContainerRemovedError(DockyardError):
    """An operation was attempted on a container handle after delete()."""

    def __init__(self, container_id: str, **kwargs):
        self.container_id = container_id
        super().__init__(
            message=f"Container {container_id[:12]} has been removed",
            error_type=ErrorType.LIFECYCLE,
            context={"container_id": container_id},
            **kwargs,
        )
