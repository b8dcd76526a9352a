"""dockyard: throwaway Docker containers for tests.

Usage:
    from dockyard import ContainerBuilder, DockerClient, Wait

    async with DockerClient() as client:
        container = await (
            ContainerBuilder("postgres:16-alpine", client)
            .with_env("POSTGRES_PASSWORD", "secret")
            .with_exposed_port(5432)
            .with_wait_strategy(Wait.log("ready to accept connections", occurrences=2))
            .start()
        )
        async with container:
            port = await container.get_mapped_port(5432)
"""

from .models import (
    ContainerSpec,
    ContainerStatus,
    ExecResult,
    PortBinding,
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
from .services import (
    ContainerBuilder,
    DockerClient,
    DockerContainer,
    DockerNetwork,
    NetworkBuilder,
    Wait,
    WaitStrategy,
)

__version__ = "0.1.0"

__all__ = [
    # Client and handles
    "DockerClient",
    "ContainerBuilder",
    "DockerContainer",
    "NetworkBuilder",
    "DockerNetwork",
    "Wait",
    "WaitStrategy",
    # Models
    "ContainerSpec",
    "ContainerStatus",
    "ExecResult",
    "PortBinding",
    # Errors
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
