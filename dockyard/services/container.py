"""Container lifecycle management.

ContainerBuilder accumulates a ContainerSpec and creates the container;
DockerContainer is the handle that drives it from there:

    Created --start()--> Started --wait_until_ready()--> Ready
    Ready/Started --stop()--> Stopped --delete()--> Removed

Usage:
    async with DockerClient() as client:
        container = await (
            ContainerBuilder("redis:7-alpine", client)
            .with_exposed_port(6379)
            .with_wait_strategy(Wait.tcp(6379))
            .start()
        )
        async with container:
            port = await container.get_mapped_port(6379)
"""

import asyncio
import uuid
from typing import Dict, Optional, Sequence, Union

import structlog

from ..models.container import (
    ContainerSpec,
    ContainerStatus,
    ExecResult,
    LifecycleState,
    PortBinding,
)
from ..models.docker import ContainerInspect
from ..models.errors import ContainerRemovedError, DockyardError, PortMappingError
from .docker_client import DockerClient
from .wait import NoWait, WaitStrategy

logger = structlog.get_logger(__name__)

# Labels put on every container this library creates
LABEL_MANAGED = "org.dockyard.managed"
LABEL_SESSION_ID = "org.dockyard.session-id"

# One id per process, so all containers of a test run can be found together
SESSION_ID = str(uuid.uuid4())


class DockerContainer:
    """Handle to a created container."""

    def __init__(
        self,
        container_id: str,
        spec: ContainerSpec,
        client: DockerClient,
        wait_strategy: Optional[WaitStrategy] = None,
    ):
        self.id = container_id
        self.spec = spec
        self.client = client
        self.wait_strategy = wait_strategy or NoWait()
        self.host = client.address.published_host
        self.ip_address: Optional[str] = None
        self.state = LifecycleState.CREATED

        self._inspect: Optional[ContainerInspect] = None
        self._port_mappings: Dict[str, int] = {}
        self._port_lock = asyncio.Lock()

    def __repr__(self) -> str:
        return (
            f"DockerContainer(id={self.id[:12]!r}, image={self.image!r}, "
            f"state={self.state.value})"
        )

    @property
    def image(self) -> str:
        return self.spec.image

    @property
    def name(self) -> Optional[str]:
        return self.spec.name

    @property
    def labels(self) -> Dict[str, str]:
        return self.spec.labels

    @property
    def last_inspect(self) -> Optional[ContainerInspect]:
        """Most recent inspect snapshot, without querying the daemon."""
        return self._inspect

    def _check_not_removed(self) -> None:
        if self.state == LifecycleState.REMOVED:
            raise ContainerRemovedError(self.id)

    async def start(self) -> "DockerContainer":
        """Start the container and resolve its network address.

        Port mappings are resolved lazily by get_mapped_port.
        """
        self._check_not_removed()
        await self.client.start_container(self.id)
        self.state = LifecycleState.STARTED

        inspect = await self.inspect()
        self.ip_address = inspect.first_ip_address()
        logger.debug(
            "Container network resolved",
            container_id=self.id[:12],
            host=self.host,
            ip_address=self.ip_address,
        )
        return self

    async def wait_until_ready(self) -> "DockerContainer":
        """Block until the configured wait strategy succeeds."""
        self._check_not_removed()
        await self.wait_strategy.wait_until_ready(self)
        self.state = LifecycleState.READY
        return self

    async def inspect(self) -> ContainerInspect:
        """Query the daemon and refresh the cached inspect snapshot."""
        self._check_not_removed()
        self._inspect = await self.client.inspect_container(self.id)
        return self._inspect

    async def get_state(self) -> ContainerStatus:
        inspect = await self.inspect()
        return ContainerStatus.parse(inspect.state.status)

    async def get_mapped_port(self, port: int, protocol: str = "tcp") -> int:
        """Return the host port bound to a container port.

        Resolved ports are cached; a miss costs exactly one inspect.

        Raises:
            PortMappingError: If the daemon reports no binding for the port
        """
        self._check_not_removed()
        key = f"{port}/{protocol}"

        async with self._port_lock:
            cached = self._port_mappings.get(key)
            if cached is not None:
                return cached

            inspect = await self.inspect()
            bindings = inspect.host_bindings(key)
            if not bindings or not bindings[0].host_port:
                raise PortMappingError(port, context={"container_id": self.id, "key": key})

            try:
                host_port = int(bindings[0].host_port)
            except ValueError as e:
                raise PortMappingError(
                    port,
                    message=f"Invalid host port {bindings[0].host_port!r} for {key}",
                    context={"container_id": self.id},
                ) from e
            if not 1 <= host_port <= 65535:
                raise PortMappingError(
                    port,
                    message=f"Host port {host_port} for {key} is out of range",
                    context={"container_id": self.id},
                )

            self._port_mappings[key] = host_port
            return host_port

    async def exec(self, command: Union[str, Sequence[str]]) -> ExecResult:
        """Run a command inside the container and wait for it to finish."""
        self._check_not_removed()
        cmd = ["sh", "-c", command] if isinstance(command, str) else list(command)

        exec_id = await self.client.exec_create(self.id, cmd)
        output = await self.client.exec_start(exec_id)
        inspect = await self.client.exec_inspect(exec_id)
        return ExecResult(exit_code=inspect.exit_code, output=output)

    async def get_logs(self, tail: Optional[int] = None) -> str:
        self._check_not_removed()
        return await self.client.container_logs(self.id, tail=tail)

    async def stop(self, timeout: Optional[int] = None) -> None:
        self._check_not_removed()
        await self.client.stop_container(self.id, timeout=timeout)
        self.state = LifecycleState.STOPPED

    async def delete(self) -> None:
        """Force-remove the container; the handle is unusable afterwards."""
        self._check_not_removed()
        await self.client.remove_container(self.id, force=True)
        self.state = LifecycleState.REMOVED
        self._port_mappings.clear()

    async def __aenter__(self) -> "DockerContainer":
        return self

    async def __aexit__(self, exc_type, exc, tb) -> None:
        if self.state == LifecycleState.REMOVED:
            return
        try:
            try:
                await self.stop()
            finally:
                # Forced removal also covers a container that refused to stop
                await self.delete()
        except Exception as e:
            logger.warning("Container cleanup failed", container_id=self.id[:12], error=str(e))
            if exc is None:
                raise


class ContainerBuilder:
    """Fluent builder for a container; every setter returns the builder."""

    def __init__(self, image: str, client: DockerClient):
        self.client = client
        self.spec = ContainerSpec(
            image=image,
            labels={LABEL_MANAGED: "true", LABEL_SESSION_ID: SESSION_ID},
        )
        self.wait_strategy: WaitStrategy = NoWait()
        self.network = None
        self.always_pull = client.config.container_always_pull

    def with_name(self, name: str) -> "ContainerBuilder":
        self.spec.name = name
        return self

    def with_hostname(self, hostname: str) -> "ContainerBuilder":
        self.spec.hostname = hostname
        return self

    def with_env(self, key: str, value: str) -> "ContainerBuilder":
        self.spec.env[key] = str(value)
        return self

    def with_environment(self, environment: Dict[str, str]) -> "ContainerBuilder":
        for key, value in environment.items():
            self.with_env(key, value)
        return self

    def with_label(self, key: str, value: str) -> "ContainerBuilder":
        self.spec.labels[key] = value
        return self

    def with_labels(self, labels: Dict[str, str]) -> "ContainerBuilder":
        self.spec.labels.update(labels)
        return self

    def with_exposed_port(
        self, port: int, random_host_port: bool = True, protocol: str = "tcp"
    ) -> "ContainerBuilder":
        """Publish a container port, on a daemon-chosen host port by default.

        With ``random_host_port=False`` the host port equals the container port.
        """
        host_port = None if random_host_port else port
        return self._add_binding(
            PortBinding(container_port=port, host_port=host_port, protocol=protocol)
        )

    def with_exposed_ports(self, *ports: int) -> "ContainerBuilder":
        for port in ports:
            self.with_exposed_port(port)
        return self

    def with_port_binding(
        self, host_port: int, container_port: int, protocol: str = "tcp"
    ) -> "ContainerBuilder":
        return self._add_binding(
            PortBinding(container_port=container_port, host_port=host_port, protocol=protocol)
        )

    def _add_binding(self, binding: PortBinding) -> "ContainerBuilder":
        self.spec.port_bindings = [
            existing for existing in self.spec.port_bindings if existing.key != binding.key
        ]
        self.spec.port_bindings.append(binding)
        return self

    def with_command(self, command: Union[str, Sequence[str]]) -> "ContainerBuilder":
        self.spec.command = ["sh", "-c", command] if isinstance(command, str) else list(command)
        return self

    def with_entrypoint(self, entrypoint: Sequence[str]) -> "ContainerBuilder":
        self.spec.entrypoint = list(entrypoint)
        return self

    def with_network(self, network) -> "ContainerBuilder":
        """Attach to a network, given a DockerNetwork or a network name."""
        if isinstance(network, str):
            self.spec.network = network
            self.network = None
        else:
            self.spec.network = network.name
            self.network = network
        return self

    def with_network_aliases(self, *aliases: str) -> "ContainerBuilder":
        self.spec.network_aliases.extend(aliases)
        return self

    def with_wait_strategy(self, strategy: WaitStrategy) -> "ContainerBuilder":
        self.wait_strategy = strategy
        return self

    def with_always_pull(self, always_pull: bool = True) -> "ContainerBuilder":
        self.always_pull = always_pull
        return self

    async def build(self) -> DockerContainer:
        """Pull the image if needed and create the container (not started)."""
        spec = self.spec.model_copy(deep=True)

        if spec.image and (self.always_pull or not await self.client.image_exists(spec.image)):
            await self.client.pull_image(spec.image)

        container_id = await self.client.create_container(spec)
        if self.network is not None:
            self.network.connected.add(container_id)
        return DockerContainer(container_id, spec, self.client, self.wait_strategy)

    async def start(self) -> DockerContainer:
        """Build, start and wait for readiness.

        The container is left running if start or the wait fails, so its logs
        can be inspected. The raised DockyardError carries the handle as
        ``error.container``; the caller decides whether to remove it.
        """
        container = await self.build()
        try:
            await container.start()
            await container.wait_until_ready()
        except DockyardError as e:
            e.container = container
            e.context.setdefault("container_id", container.id)
            raise
        return container
