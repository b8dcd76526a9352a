"""Typed Docker Engine API client.

One DockerClient owns one pooled connection to one daemon and may be shared
by any number of concurrent container and network operations. There is no
process-wide instance; construct one (usually per test session) and pass it
to builders explicitly.
"""

import os
from dataclasses import dataclass
from typing import Dict, List, Optional, Tuple

import httpx
import structlog

from ..config import settings
from ..config.docker import DockerConfig
from ..core import endpoints
from ..core.codec import check_progress_stream, decode, demultiplex_stream, encode
from ..core.endpoints import Endpoint
from ..core.transport import Transport
from ..models.container import ContainerSpec
from ..models.docker import (
    ContainerInspect,
    ContainerSummary,
    CreateContainerRequest,
    EndpointConfig,
    ExecInspect,
    HostConfig,
    ImageInspect,
    NetworkConnectRequest,
    NetworkCreateRequest,
    NetworkDisconnectRequest,
    NetworkingConfig,
    PortBindingInfo,
    VersionInfo,
)
from ..models.errors import ConfigurationError, DockerApiError, NotFoundError

logger = structlog.get_logger(__name__)

# Checked in order when DOCKER_HOST is not set
DEFAULT_SOCKET_PATHS = ("/var/run/docker.sock", "~/.docker/run/docker.sock")
FALLBACK_SOCKET_PATH = "/var/run/docker.sock"

# Returned by start/stop when the container is already in the requested state
HTTP_NOT_MODIFIED = 304


@dataclass(frozen=True)
class DaemonAddress:
    """Where the daemon listens: a Unix socket, or a TCP base URL."""

    base_url: str = "http://localhost"
    uds: Optional[str] = None

    @property
    def url(self) -> str:
        return f"unix://{self.uds}" if self.uds else self.base_url

    @property
    def published_host(self) -> str:
        """Host on which published container ports are reachable."""
        if self.uds:
            return "localhost"
        return httpx.URL(self.base_url).host or "localhost"


def resolve_daemon_address(docker_host: Optional[str] = None) -> DaemonAddress:
    """Find the daemon to talk to.

    First match wins: the explicit ``docker_host`` (or the DOCKER_HOST
    environment variable), /var/run/docker.sock, ~/.docker/run/docker.sock,
    and finally /var/run/docker.sock even if it does not exist yet.

    Args:
        docker_host: unix:///path, tcp://host:port, http(s)://host:port,
            an absolute socket path or host:port

    Returns:
        DaemonAddress for the transport

    Raises:
        ConfigurationError: If the address uses an unsupported scheme
    """
    host = docker_host if docker_host is not None else os.environ.get("DOCKER_HOST")
    host = (host or "").strip()

    if host:
        if host.startswith("unix://"):
            path = host[len("unix://") :]
            if path:
                return DaemonAddress(uds=path)
        elif host.startswith("tcp://"):
            return DaemonAddress(base_url="http://" + host[len("tcp://") :].rstrip("/"))
        elif host.startswith(("http://", "https://")):
            return DaemonAddress(base_url=host.rstrip("/"))
        elif host.startswith("/"):
            return DaemonAddress(uds=host)
        elif "://" not in host:
            return DaemonAddress(base_url=f"http://{host}")
        else:
            raise ConfigurationError(
                f"Unsupported DOCKER_HOST scheme: {host}", context={"docker_host": host}
            )

    for candidate in DEFAULT_SOCKET_PATHS:
        path = os.path.expanduser(candidate)
        if os.path.exists(path):
            return DaemonAddress(uds=path)

    return DaemonAddress(uds=FALLBACK_SOCKET_PATH)


def parse_image_reference(reference: str) -> Tuple[str, str]:
    """Split an image reference into (repository, tag).

    The tag defaults to "latest". A registry port ("registry:5000/app") is
    not mistaken for a tag, and a digest ("app@sha256:...") is kept as the
    tag value, which is what ``POST /images/create`` expects.
    """
    reference = reference.strip()
    if not reference:
        raise ConfigurationError("Image reference must not be empty")

    if "@" in reference:
        name, digest = reference.split("@", 1)
        return name, digest

    last_segment = reference.rsplit("/", 1)[-1]
    if ":" in last_segment:
        name, tag = reference.rsplit(":", 1)
        return name, tag
    return reference, "latest"


def build_create_request(spec: ContainerSpec) -> CreateContainerRequest:
    """Translate a container spec into the ``POST /containers/create`` body.

    Every requested port is exposed and published on 0.0.0.0. A binding
    without a host port is sent with an empty HostPort, which makes the
    daemon choose a free one.
    """
    exposed_ports: Dict[str, Dict] = {}
    port_bindings: Dict[str, List[PortBindingInfo]] = {}
    for binding in spec.port_bindings:
        exposed_ports[binding.key] = {}
        port_bindings.setdefault(binding.key, []).append(
            PortBindingInfo(
                host_ip="0.0.0.0",
                host_port=str(binding.host_port) if binding.host_port else "",
            )
        )

    networking_config = None
    if spec.network and spec.network_aliases:
        networking_config = NetworkingConfig(
            endpoints_config={spec.network: EndpointConfig(aliases=list(spec.network_aliases))}
        )

    return CreateContainerRequest(
        image=spec.image,
        hostname=spec.hostname,
        env=[f"{key}={value}" for key, value in spec.env.items()] or None,
        cmd=spec.command,
        entrypoint=spec.entrypoint,
        exposed_ports=exposed_ports or None,
        labels=dict(spec.labels) or None,
        host_config=HostConfig(
            port_bindings=port_bindings or None,
            network_mode=spec.network,
        ),
        networking_config=networking_config,
    )


class DockerClient:
    """Async client for the Docker Engine API."""

    def __init__(
        self,
        docker_host: Optional[str] = None,
        config: Optional[DockerConfig] = None,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        """
        Initialize the client. The daemon address is resolved once, here.

        Args:
            docker_host: Daemon address; overrides config and DOCKER_HOST
            config: Connection settings (defaults to the global settings)
            transport: httpx transport to use instead of a real socket
        """
        self.config = config or settings.docker
        self.address = resolve_daemon_address(
            docker_host if docker_host is not None else self.config.docker_host
        )
        self._transport = Transport(
            base_url=self.address.base_url,
            uds=self.address.uds,
            timeout=self.config.docker_request_timeout,
            transport=transport,
        )

        logger.debug(
            "Initialized Docker client",
            daemon=self.address.url,
            api_version=self.config.docker_api_version,
        )

    @property
    def daemon_url(self) -> str:
        return self.address.url

    async def _call(self, endpoint: Endpoint):
        request = encode(endpoint, self.config.api_prefix)
        response = await self._transport.execute(request)
        return decode(response, endpoint.response_type)

    async def close(self) -> None:
        """Release the connection pool."""
        await self._transport.aclose()

    async def __aenter__(self) -> "DockerClient":
        return self

    async def __aexit__(self, *exc_info) -> None:
        await self.close()

    # ========================================================================
    # Daemon
    # ========================================================================

    async def ping(self) -> bool:
        """Return True if the daemon answers ``/_ping`` with OK."""
        body = await self._call(endpoints.ping())
        return body.strip() == b"OK"

    async def version(self) -> VersionInfo:
        return await self._call(endpoints.version())

    # ========================================================================
    # Images
    # ========================================================================

    async def inspect_image(self, reference: str) -> ImageInspect:
        return await self._call(endpoints.inspect_image(reference))

    async def image_exists(self, reference: str) -> bool:
        try:
            await self.inspect_image(reference)
        except NotFoundError:
            return False
        return True

    async def pull_image(self, reference: str) -> None:
        """Pull an image and wait for the pull to finish.

        Raises:
            DockerApiError: If the daemon rejects the pull or reports an
                error in the progress stream
        """
        repository, tag = parse_image_reference(reference)
        logger.info("Pulling image", image=repository, tag=tag)

        body = await self._call(
            endpoints.pull_image(repository, tag, timeout=self.config.docker_pull_timeout)
        )
        check_progress_stream(body)

        logger.info("Pulled image", image=repository, tag=tag)

    # ========================================================================
    # Containers
    # ========================================================================

    async def create_container(self, spec: ContainerSpec) -> str:
        """Create a container and return its ID.

        Raises:
            ConfigurationError: If the spec has no image
            DockerApiError: If the daemon refuses the configuration
        """
        if not spec.image or not spec.image.strip():
            raise ConfigurationError("Container image must not be empty")

        response = await self._call(
            endpoints.create_container(build_create_request(spec), name=spec.name)
        )
        for warning in response.warnings or []:
            logger.warning("Daemon warning on create", warning=warning, image=spec.image)

        logger.info(
            "Created container",
            container_id=response.id[:12],
            image=spec.image,
            name=spec.name,
        )
        return response.id

    async def start_container(self, container_id: str) -> None:
        try:
            await self._call(endpoints.start_container(container_id))
        except DockerApiError as e:
            if e.status_code != HTTP_NOT_MODIFIED:
                raise
            logger.debug("Container already running", container_id=container_id[:12])
            return
        logger.info("Started container", container_id=container_id[:12])

    async def stop_container(self, container_id: str, timeout: Optional[int] = None) -> None:
        """Stop a container, letting the daemon kill it after ``timeout`` seconds."""
        if timeout is None:
            timeout = self.config.container_stop_timeout

        try:
            await self._call(
                endpoints.stop_container(
                    container_id,
                    timeout,
                    request_timeout=self.config.docker_request_timeout + timeout,
                )
            )
        except DockerApiError as e:
            if e.status_code != HTTP_NOT_MODIFIED:
                raise
            logger.debug("Container already stopped", container_id=container_id[:12])
            return
        logger.info("Stopped container", container_id=container_id[:12], timeout=timeout)

    async def remove_container(
        self, container_id: str, force: bool = True, volumes: bool = True
    ) -> None:
        await self._call(endpoints.remove_container(container_id, force=force, volumes=volumes))
        logger.info("Removed container", container_id=container_id[:12])

    async def inspect_container(self, container_id: str) -> ContainerInspect:
        return await self._call(endpoints.inspect_container(container_id))

    async def list_containers(
        self, all: bool = False, labels: Optional[Dict[str, str]] = None
    ) -> List[ContainerSummary]:
        """List containers, optionally only those carrying all given labels."""
        return await self._call(endpoints.list_containers(all=all, labels=labels))

    async def container_logs(self, container_id: str, tail: Optional[int] = None) -> str:
        """Return stdout and stderr of a container as one string."""
        body = await self._call(endpoints.container_logs(container_id, tail=tail))
        return demultiplex_stream(body)

    # ========================================================================
    # Exec
    # ========================================================================

    async def exec_create(self, container_id: str, cmd: List[str]) -> str:
        response = await self._call(endpoints.exec_create(container_id, cmd))
        logger.debug("Created exec", container_id=container_id[:12], exec_id=response.id[:12])
        return response.id

    async def exec_start(self, exec_id: str) -> str:
        """Run a created exec to completion and return its combined output."""
        body = await self._call(endpoints.exec_start(exec_id))
        return demultiplex_stream(body)

    async def exec_inspect(self, exec_id: str) -> ExecInspect:
        return await self._call(endpoints.exec_inspect(exec_id))

    # ========================================================================
    # Networks
    # ========================================================================

    async def create_network(
        self,
        name: str,
        driver: str = "bridge",
        internal: bool = False,
        labels: Optional[Dict[str, str]] = None,
    ) -> str:
        if not name:
            raise ConfigurationError("Network name must not be empty")

        response = await self._call(
            endpoints.create_network(
                NetworkCreateRequest(name=name, driver=driver, internal=internal, labels=labels)
            )
        )
        if response.warning:
            logger.warning("Daemon warning on network create", warning=response.warning)

        logger.info("Created network", network_id=response.id[:12], name=name, driver=driver)
        return response.id

    async def connect_network(
        self, network_id: str, container_id: str, aliases: Optional[List[str]] = None
    ) -> None:
        request = NetworkConnectRequest(
            container=container_id,
            endpoint_config=EndpointConfig(aliases=list(aliases)) if aliases else None,
        )
        await self._call(endpoints.connect_network(network_id, request))
        logger.info(
            "Connected container to network",
            network_id=network_id[:12],
            container_id=container_id[:12],
        )

    async def disconnect_network(
        self, network_id: str, container_id: str, force: bool = False
    ) -> None:
        request = NetworkDisconnectRequest(container=container_id, force=force)
        await self._call(endpoints.disconnect_network(network_id, request))
        logger.info(
            "Disconnected container from network",
            network_id=network_id[:12],
            container_id=container_id[:12],
        )

    async def remove_network(self, network_id: str) -> None:
        await self._call(endpoints.remove_network(network_id))
        logger.info("Removed network", network_id=network_id[:12])
