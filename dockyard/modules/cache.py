"""Redis."""

from ..services.wait import Wait, WaitStrategy
from .base import ServiceContainer


class RedisContainer(ServiceContainer):
    image_repository = "redis"
    default_version = "7-alpine"
    port = 6379

    def wait_strategy(self) -> WaitStrategy:
        return Wait.all(Wait.tcp(self.port), Wait.log("Ready to accept connections"))

    def connection_string(self, host: str, port: int) -> str:
        return f"redis://{host}:{port}"
