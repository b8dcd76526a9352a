"""Container services built on the daemon client.

This package provides:
- docker_client.py: DockerClient, typed Engine API operations and socket detection
- container.py: ContainerBuilder and the DockerContainer lifecycle handle
- network.py: NetworkBuilder and the DockerNetwork handle
- wait/: readiness strategies
"""

from .container import ContainerBuilder, DockerContainer
from .docker_client import DockerClient, resolve_daemon_address
from .network import DockerNetwork, NetworkBuilder
from .wait import Wait, WaitStrategy

__all__ = [
    "DockerClient",
    "resolve_daemon_address",
    "ContainerBuilder",
    "DockerContainer",
    "NetworkBuilder",
    "DockerNetwork",
    "Wait",
    "WaitStrategy",
]
