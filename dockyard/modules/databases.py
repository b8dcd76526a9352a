"""Relational and document database services."""

from typing import Optional

from ..services.docker_client import DockerClient
from ..services.wait import Wait, WaitStrategy
from .base import ServiceContainer


class PostgresContainer(ServiceContainer):
    """PostgreSQL, ready once the server logs that it accepts connections."""

    image_repository = "postgres"
    default_version = "16-alpine"
    port = 5432

    def __init__(self, client: DockerClient, version: Optional[str] = None):
        super().__init__(client, version)
        self.username = "postgres"
        self.password = "postgres"
        self.database = "postgres"
        self.builder.with_env("POSTGRES_PASSWORD", self.password)

    def with_database(self, database: str) -> "PostgresContainer":
        self.database = database
        self.builder.with_env("POSTGRES_DB", database)
        return self

    def with_username(self, username: str) -> "PostgresContainer":
        self.username = username
        self.builder.with_env("POSTGRES_USER", username)
        return self

    def with_password(self, password: str) -> "PostgresContainer":
        self.password = password
        self.builder.with_env("POSTGRES_PASSWORD", password)
        return self

    def wait_strategy(self) -> WaitStrategy:
        # Printed once by the temporary init server, then by the real one
        return Wait.all(
            Wait.tcp(self.port),
            Wait.log("database system is ready to accept connections", occurrences=2),
        )

    def connection_string(self, host: str, port: int) -> str:
        return f"postgresql://{self.username}:{self.password}@{host}:{port}/{self.database}"


class MySqlContainer(ServiceContainer):
    """MySQL server."""

    image_repository = "mysql"
    default_version = "8.0"
    port = 3306

    def __init__(self, client: DockerClient, version: Optional[str] = None):
        super().__init__(client, version)
        self.username = "root"
        self.password = "root"
        self.database = "test"
        self.builder.with_environment(
            {"MYSQL_ROOT_PASSWORD": self.password, "MYSQL_DATABASE": self.database}
        )

    def with_database(self, database: str) -> "MySqlContainer":
        self.database = database
        self.builder.with_env("MYSQL_DATABASE", database)
        return self

    def with_username(self, username: str) -> "MySqlContainer":
        self.username = username
        if username != "root":
            self.builder.with_env("MYSQL_USER", username)
            self.builder.with_env("MYSQL_PASSWORD", self.password)
        return self

    def with_password(self, password: str) -> "MySqlContainer":
        self.password = password
        if self.username == "root":
            self.builder.with_env("MYSQL_ROOT_PASSWORD", password)
        else:
            self.builder.with_env("MYSQL_PASSWORD", password)
        return self

    def wait_strategy(self) -> WaitStrategy:
        # Only the real server logs its ready line with port 3306; the init server logs port 0
        return Wait.all(
            Wait.tcp(self.port), Wait.log(f"port: {self.port}  MySQL Community Server")
        )

    def connection_string(self, host: str, port: int) -> str:
        return f"mysql://{self.username}:{self.password}@{host}:{port}/{self.database}"


class MongoDbContainer(ServiceContainer):
    """MongoDB with a root user."""

    image_repository = "mongo"
    default_version = "7"
    port = 27017

    def __init__(self, client: DockerClient, version: Optional[str] = None):
        super().__init__(client, version)
        self.username = "admin"
        self.password = "admin"
        self.builder.with_environment(
            {
                "MONGO_INITDB_ROOT_USERNAME": self.username,
                "MONGO_INITDB_ROOT_PASSWORD": self.password,
            }
        )

    def with_username(self, username: str) -> "MongoDbContainer":
        self.username = username
        self.builder.with_env("MONGO_INITDB_ROOT_USERNAME", username)
        return self

    def with_password(self, password: str) -> "MongoDbContainer":
        self.password = password
        self.builder.with_env("MONGO_INITDB_ROOT_PASSWORD", password)
        return self

    def wait_strategy(self) -> WaitStrategy:
        return Wait.all(Wait.tcp(self.port), Wait.log("Waiting for connections"))

    def connection_string(self, host: str, port: int) -> str:
        return f"mongodb://{self.username}:{self.password}@{host}:{port}/"
