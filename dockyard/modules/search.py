"""Search engines."""

from typing import Optional

from ..services.docker_client import DockerClient
from ..services.wait import HttpWait, Wait, WaitStrategy
from .base import ServiceContainer


class ElasticsearchContainer(ServiceContainer):
    """Single-node Elasticsearch with security disabled."""

    image_repository = "docker.elastic.co/elasticsearch/elasticsearch"
    default_version = "8.13.4"
    port = 9200

    def __init__(self, client: DockerClient, version: Optional[str] = None):
        super().__init__(client, version)
        self.builder.with_environment(
            {
                "discovery.type": "single-node",
                "xpack.security.enabled": "false",
                "ES_JAVA_OPTS": "-Xms512m -Xmx512m",
            }
        )

    def wait_strategy(self) -> WaitStrategy:
        return Wait.all(
            Wait.tcp(self.port),
            HttpWait(self.port, path="/_cluster/health", timeout=120, retries=None),
        )

    def connection_string(self, host: str, port: int) -> str:
        return f"http://{host}:{port}"
