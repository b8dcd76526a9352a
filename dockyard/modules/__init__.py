"""Pre-configured service containers.

Each preset wraps a ContainerBuilder with the image, ports, environment and
wait strategy of one service, and returns a ServiceReference from start().
"""

from .base import ServiceContainer, ServiceReference
from .cache import RedisContainer
from .databases import MongoDbContainer, MySqlContainer, PostgresContainer
from .messaging import RabbitMqContainer
from .search import ElasticsearchContainer

__all__ = [
    "ServiceContainer",
    "ServiceReference",
    "PostgresContainer",
    "MySqlContainer",
    "MongoDbContainer",
    "RedisContainer",
    "RabbitMqContainer",
    "ElasticsearchContainer",
]
