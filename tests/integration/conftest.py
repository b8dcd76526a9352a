"""Integration fixtures that talk to a real Docker daemon.

The daemon is found the same way the library finds it (DOCKER_HOST, then
the usual socket paths). Tests are skipped when it cannot be reached.

Example:
    DOCKER_HOST=unix:///var/run/docker.sock pytest tests/integration -m integration -v
"""

import os

import pytest
import pytest_asyncio

from dockyard.models.errors import ConfigurationError, DockyardError
from dockyard.services.docker_client import DockerClient

TEST_IMAGE = os.environ.get("DOCKYARD_TEST_IMAGE", "alpine:3.19")


@pytest_asyncio.fixture
async def live_client():
    """DockerClient connected to a reachable daemon, or skip."""
    try:
        client = DockerClient()
    except ConfigurationError as e:
        pytest.skip(f"Invalid DOCKER_HOST: {e}")

    try:
        await client.ping()
    except DockyardError as e:
        await client.close()
        pytest.skip(f"Docker daemon not reachable at {client.daemon_url}: {e}")

    yield client
    await client.close()
