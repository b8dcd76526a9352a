"""Common base for pre-configured service containers."""

from typing import Optional

from ..services.container import ContainerBuilder, DockerContainer
from ..services.docker_client import DockerClient
from ..services.wait import WaitStrategy


class ServiceContainer:
    """A ContainerBuilder with defaults for one well-known service.

    Subclasses set the image, the main port and the default version, and
    supply a wait strategy and a connection string format. The underlying
    builder stays reachable through ``builder`` for anything not covered.
    """

    image_repository: str = ""
    default_version: str = "latest"
    port: int = 0

    def __init__(self, client: DockerClient, version: Optional[str] = None):
        self.client = client
        self.version = version or self.default_version
        self.builder = ContainerBuilder(
            f"{self.image_repository}:{self.version}", client
        ).with_exposed_port(self.port)

    @property
    def image(self) -> str:
        return self.builder.spec.image

    def wait_strategy(self) -> WaitStrategy:
        raise NotImplementedError

    def connection_string(self, host: str, port: int) -> str:
        raise NotImplementedError

    async def start(self) -> "ServiceReference":
        """Create and start the service and wait until it accepts clients."""
        container = await self.builder.with_wait_strategy(self.wait_strategy()).start()
        return ServiceReference(container, self)


class ServiceReference:
    """A started service: its container plus client-facing details."""

    def __init__(self, container: DockerContainer, service: ServiceContainer):
        self.container = container
        self.service = service

    @property
    def host(self) -> str:
        return self.container.host

    async def get_mapped_port(self, port: Optional[int] = None) -> int:
        return await self.container.get_mapped_port(port or self.service.port)

    async def get_connection_string(self) -> str:
        port = await self.get_mapped_port()
        return self.service.connection_string(self.container.host, port)

    async def stop(self) -> None:
        await self.container.stop()

    async def delete(self) -> None:
        await self.container.delete()

    async def __aenter__(self) -> "ServiceReference":
        return self

    async def __aexit__(self, exc_type, exc, tb) -> None:
        await self.container.__aexit__(exc_type, exc, tb)
