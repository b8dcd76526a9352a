"""Message brokers."""

from typing import Optional

from ..services.docker_client import DockerClient
from ..services.wait import Wait, WaitStrategy
from .base import ServiceContainer


class RabbitMqContainer(ServiceContainer):
    """RabbitMQ with the management plugin; AMQP on 5672, UI on 15672."""

    image_repository = "rabbitmq"
    default_version = "3-management-alpine"
    port = 5672
    management_port = 15672

    def __init__(self, client: DockerClient, version: Optional[str] = None):
        super().__init__(client, version)
        self.username = "guest"
        self.password = "guest"
        self.builder.with_exposed_port(self.management_port).with_environment(
            {"RABBITMQ_DEFAULT_USER": self.username, "RABBITMQ_DEFAULT_PASS": self.password}
        )

    def with_username(self, username: str) -> "RabbitMqContainer":
        self.username = username
        self.builder.with_env("RABBITMQ_DEFAULT_USER", username)
        return self

    def with_password(self, password: str) -> "RabbitMqContainer":
        self.password = password
        self.builder.with_env("RABBITMQ_DEFAULT_PASS", password)
        return self

    def wait_strategy(self) -> WaitStrategy:
        return Wait.all(Wait.tcp(self.port), Wait.log("Server startup complete"))

    def connection_string(self, host: str, port: int) -> str:
        return f"amqp://{self.username}:{self.password}@{host}:{port}/"
