"""Docker Engine API payloads.

Field names follow the Engine API schema through aliases, so every model can
be validated straight from daemon JSON and dumped back with ``by_alias=True``.
"""

from typing import Dict, List, Optional

from pydantic import BaseModel, ConfigDict, Field


class DockerModel(BaseModel):
    """Base for Engine API payloads."""

    model_config = ConfigDict(populate_by_name=True, extra="ignore")


# ============================================================================
# Container inspect
# ============================================================================


class HealthState(DockerModel):
    status: str = Field(default="", alias="Status")
    failing_streak: int = Field(default=0, alias="FailingStreak")


class ContainerState(DockerModel):
    """Runtime state as reported by ``GET /containers/{id}/json``."""

    status: str = Field(default="", alias="Status")
    running: bool = Field(default=False, alias="Running")
    paused: bool = Field(default=False, alias="Paused")
    restarting: bool = Field(default=False, alias="Restarting")
    oom_killed: bool = Field(default=False, alias="OOMKilled")
    dead: bool = Field(default=False, alias="Dead")
    pid: int = Field(default=0, alias="Pid")
    exit_code: int = Field(default=0, alias="ExitCode")
    error: str = Field(default="", alias="Error")
    started_at: Optional[str] = Field(default=None, alias="StartedAt")
    finished_at: Optional[str] = Field(default=None, alias="FinishedAt")
    health: Optional[HealthState] = Field(default=None, alias="Health")


class ContainerConfig(DockerModel):
    image: Optional[str] = Field(default=None, alias="Image")
    hostname: Optional[str] = Field(default=None, alias="Hostname")
    env: Optional[List[str]] = Field(default=None, alias="Env")
    cmd: Optional[List[str]] = Field(default=None, alias="Cmd")
    entrypoint: Optional[List[str]] = Field(default=None, alias="Entrypoint")
    exposed_ports: Optional[Dict[str, Dict]] = Field(default=None, alias="ExposedPorts")
    labels: Optional[Dict[str, str]] = Field(default=None, alias="Labels")


class PortBindingInfo(DockerModel):
    """One host-side binding of a container port."""

    host_ip: str = Field(default="", alias="HostIp")
    host_port: str = Field(default="", alias="HostPort")


class EndpointSettings(DockerModel):
    network_id: Optional[str] = Field(default=None, alias="NetworkID")
    ip_address: str = Field(default="", alias="IPAddress")
    ip_prefix_len: int = Field(default=0, alias="IPPrefixLen")
    gateway: str = Field(default="", alias="Gateway")
    mac_address: str = Field(default="", alias="MacAddress")
    aliases: Optional[List[str]] = Field(default=None, alias="Aliases")


class NetworkSettings(DockerModel):
    ports: Optional[Dict[str, Optional[List[PortBindingInfo]]]] = Field(
        default=None, alias="Ports"
    )
    networks: Optional[Dict[str, EndpointSettings]] = Field(
        default=None, alias="Networks"
    )


class ContainerInspect(DockerModel):
    """Full container description returned by inspect."""

    id: str = Field(..., alias="Id")
    name: str = Field(default="", alias="Name")
    image: Optional[str] = Field(default=None, alias="Image")
    created: Optional[str] = Field(default=None, alias="Created")
    state: ContainerState = Field(default_factory=ContainerState, alias="State")
    config: ContainerConfig = Field(default_factory=ContainerConfig, alias="Config")
    network_settings: NetworkSettings = Field(
        default_factory=NetworkSettings, alias="NetworkSettings"
    )

    def host_bindings(self, port_key: str) -> List[PortBindingInfo]:
        """Return the host bindings for a ``"<port>/<proto>"`` key (may be empty)."""
        ports = self.network_settings.ports or {}
        return ports.get(port_key) or []

    def first_ip_address(self) -> Optional[str]:
        """IP address on the first attached network, if any."""
        for endpoint in (self.network_settings.networks or {}).values():
            if endpoint.ip_address:
                return endpoint.ip_address
        return None


class ContainerSummary(DockerModel):
    """Entry returned by ``GET /containers/json``."""

    id: str = Field(..., alias="Id")
    names: List[str] = Field(default_factory=list, alias="Names")
    image: str = Field(default="", alias="Image")
    state: str = Field(default="", alias="State")
    status: str = Field(default="", alias="Status")
    labels: Optional[Dict[str, str]] = Field(default=None, alias="Labels")


# ============================================================================
# Container create
# ============================================================================


class HostConfig(DockerModel):
    port_bindings: Optional[Dict[str, List[PortBindingInfo]]] = Field(
        default=None, alias="PortBindings"
    )
    network_mode: Optional[str] = Field(default=None, alias="NetworkMode")


class EndpointConfig(DockerModel):
    aliases: Optional[List[str]] = Field(default=None, alias="Aliases")


class NetworkingConfig(DockerModel):
    endpoints_config: Dict[str, EndpointConfig] = Field(
        default_factory=dict, alias="EndpointsConfig"
    )


class CreateContainerRequest(DockerModel):
    """Body of ``POST /containers/create``."""

    image: str = Field(..., alias="Image")
    hostname: Optional[str] = Field(default=None, alias="Hostname")
    env: Optional[List[str]] = Field(default=None, alias="Env")
    cmd: Optional[List[str]] = Field(default=None, alias="Cmd")
    entrypoint: Optional[List[str]] = Field(default=None, alias="Entrypoint")
    exposed_ports: Optional[Dict[str, Dict]] = Field(default=None, alias="ExposedPorts")
    labels: Optional[Dict[str, str]] = Field(default=None, alias="Labels")
    host_config: Optional[HostConfig] = Field(default=None, alias="HostConfig")
    networking_config: Optional[NetworkingConfig] = Field(
        default=None, alias="NetworkingConfig"
    )


class ContainerCreateResponse(DockerModel):
    id: str = Field(..., alias="Id")
    warnings: Optional[List[str]] = Field(default=None, alias="Warnings")


# ============================================================================
# Exec
# ============================================================================


class ExecCreateRequest(DockerModel):
    cmd: List[str] = Field(..., alias="Cmd")
    attach_stdout: bool = Field(default=True, alias="AttachStdout")
    attach_stderr: bool = Field(default=True, alias="AttachStderr")
    tty: bool = Field(default=False, alias="Tty")


class ExecStartRequest(DockerModel):
    detach: bool = Field(default=False, alias="Detach")
    tty: bool = Field(default=False, alias="Tty")


class ExecInspect(DockerModel):
    id: str = Field(default="", alias="ID")
    running: bool = Field(default=False, alias="Running")
    exit_code: Optional[int] = Field(default=None, alias="ExitCode")
    pid: int = Field(default=0, alias="Pid")


class IdResponse(DockerModel):
    id: str = Field(..., alias="Id")


# ============================================================================
# Networks
# ============================================================================


class NetworkCreateRequest(DockerModel):
    name: str = Field(..., alias="Name")
    driver: str = Field(default="bridge", alias="Driver")
    internal: bool = Field(default=False, alias="Internal")
    labels: Optional[Dict[str, str]] = Field(default=None, alias="Labels")


class NetworkCreateResponse(DockerModel):
    id: str = Field(..., alias="Id")
    warning: Optional[str] = Field(default=None, alias="Warning")


class NetworkConnectRequest(DockerModel):
    container: str = Field(..., alias="Container")
    endpoint_config: Optional[EndpointConfig] = Field(default=None, alias="EndpointConfig")


class NetworkDisconnectRequest(DockerModel):
    container: str = Field(..., alias="Container")
    force: bool = Field(default=False, alias="Force")


# ============================================================================
# Daemon / images
# ============================================================================


class VersionInfo(DockerModel):
    version: str = Field(default="", alias="Version")
    api_version: str = Field(default="", alias="ApiVersion")
    min_api_version: Optional[str] = Field(default=None, alias="MinAPIVersion")
    git_commit: Optional[str] = Field(default=None, alias="GitCommit")
    go_version: Optional[str] = Field(default=None, alias="GoVersion")
    os: str = Field(default="", alias="Os")
    arch: str = Field(default="", alias="Arch")
    kernel_version: Optional[str] = Field(default=None, alias="KernelVersion")


class ImageInspect(DockerModel):
    id: str = Field(..., alias="Id")
    repo_tags: Optional[List[str]] = Field(default=None, alias="RepoTags")
    created: Optional[str] = Field(default=None, alias="Created")
