"""User-defined Docker networks for containers that need to reach each other."""

from typing import Dict, Optional, Sequence, Set

from ..models.errors import ConfigurationError
from .docker_client import DockerClient


def _container_id(container) -> str:
    return container if isinstance(container, str) else container.id


class DockerNetwork:
    """Handle to a created network."""

    def __init__(self, network_id: str, name: str, driver: str, client: DockerClient):
        self.id = network_id
        self.name = name
        self.driver = driver
        self.client = client
        # Containers joined via connect_container or built with with_network(self)
        self.connected: Set[str] = set()

    def __repr__(self) -> str:
        return f"DockerNetwork(id={self.id[:12]!r}, name={self.name!r}, driver={self.driver!r})"

    async def connect_container(
        self, container, aliases: Optional[Sequence[str]] = None
    ) -> None:
        """Connect a running container (handle or ID) to this network."""
        container_id = _container_id(container)
        await self.client.connect_network(
            self.id, container_id, aliases=list(aliases) if aliases else None
        )
        self.connected.add(container_id)

    async def disconnect_container(self, container, force: bool = False) -> None:
        container_id = _container_id(container)
        await self.client.disconnect_network(self.id, container_id, force=force)
        self.connected.discard(container_id)

    async def delete(self) -> None:
        await self.client.remove_network(self.id)
        self.connected.clear()

    async def __aenter__(self) -> "DockerNetwork":
        return self

    async def __aexit__(self, exc_type, exc, tb) -> None:
        await self.delete()


class NetworkBuilder:
    """Fluent builder for a network."""

    def __init__(self, name: str, client: DockerClient):
        if not name:
            raise ConfigurationError("Network name must not be empty")
        self.name = name
        self.client = client
        self.driver = "bridge"
        self.internal = False
        self.labels: Dict[str, str] = {}

    def with_driver(self, driver: str) -> "NetworkBuilder":
        self.driver = driver
        return self

    def with_internal(self, internal: bool = True) -> "NetworkBuilder":
        self.internal = internal
        return self

    def with_label(self, key: str, value: str) -> "NetworkBuilder":
        self.labels[key] = value
        return self

    async def build(self) -> DockerNetwork:
        network_id = await self.client.create_network(
            self.name, driver=self.driver, internal=self.internal, labels=self.labels or None
        )
        return DockerNetwork(network_id, self.name, self.driver, self.client)

