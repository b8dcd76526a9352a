"""Pytest configuration and shared fixtures."""

import re
import struct
from typing import Any, Callable, Dict, List, Optional, Tuple, Union
from unittest.mock import AsyncMock, MagicMock

import httpx
import pytest
import pytest_asyncio

from dockyard.models.container import ContainerSpec, ExecResult
from dockyard.models.docker import ContainerInspect
from dockyard.services.docker_client import DockerClient

CONTAINER_ID = "4f1c2d9e8b7a6c5d4e3f2a1b0c9d8e7f6a5b4c3d2e1f0a9b8c7d6e5f4a3b2c1d"

ResponseSpec = Union[Tuple[int, Any], Callable[[httpx.Request], httpx.Response]]


class FakeDaemon:
    """In-memory Engine API for httpx.MockTransport.

    Routes are keyed by method and version-less path. Each route holds a
    queue of responses; the last one repeats once the queue is drained.
    """

    def __init__(self):
        self.routes: Dict[Tuple[str, str], List[ResponseSpec]] = {}
        self.requests: List[httpx.Request] = []

    def on(self, method: str, path: str, *responses: ResponseSpec) -> "FakeDaemon":
        self.routes.setdefault((method, path), []).extend(responses)
        return self

    def handler(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        path = re.sub(r"^/v[\d.]+", "", request.url.path)
        queue = self.routes.get((request.method, path))
        if not queue:
            return httpx.Response(404, json={"message": f"no route for {request.method} {path}"})

        spec = queue[0] if len(queue) == 1 else queue.pop(0)
        if callable(spec):
            return spec(request)

        status, body = spec
        if body is None:
            return httpx.Response(status)
        if isinstance(body, (bytes, str)):
            return httpx.Response(status, content=body)
        return httpx.Response(status, json=body)

    def calls(self, method: str, path: str) -> List[httpx.Request]:
        return [
            r
            for r in self.requests
            if r.method == method and re.sub(r"^/v[\d.]+", "", r.url.path) == path
        ]

    def transport(self) -> httpx.MockTransport:
        return httpx.MockTransport(self.handler)


def frame(payload: bytes, stream: int = 1) -> bytes:
    """Wrap a payload in a multiplexed stream frame."""
    return struct.pack(">BxxxL", stream, len(payload)) + payload


def inspect_payload(
    container_id: str = CONTAINER_ID,
    status: str = "running",
    ports: Optional[Dict[str, Optional[List[Dict[str, str]]]]] = None,
    ip_address: str = "172.17.0.2",
    health: Optional[str] = None,
) -> Dict[str, Any]:
    """Build a ``GET /containers/{id}/json`` body."""
    state: Dict[str, Any] = {
        "Status": status,
        "Running": status == "running",
        "Paused": False,
        "Restarting": False,
        "OOMKilled": False,
        "Dead": False,
        "Pid": 4242,
        "ExitCode": 0,
        "Error": "",
        "StartedAt": "2024-05-01T12:00:00.000000000Z",
        "FinishedAt": "0001-01-01T00:00:00Z",
    }
    if health is not None:
        state["Health"] = {"Status": health, "FailingStreak": 0, "Log": []}

    return {
        "Id": container_id,
        "Name": "/dockyard-test",
        "Image": "sha256:abc",
        "State": state,
        "Config": {"Image": "redis:7-alpine", "Env": ["A=1"], "Cmd": None, "Labels": {}},
        "NetworkSettings": {
            "Ports": ports or {},
            "Networks": {
                "bridge": {
                    "NetworkID": "n1",
                    "IPAddress": ip_address,
                    "IPPrefixLen": 16,
                    "Gateway": "172.17.0.1",
                    "MacAddress": "02:42:ac:11:00:02",
                    "Aliases": None,
                }
            },
        },
    }


@pytest.fixture
def fake_daemon():
    """Fake Engine API that records every request."""
    return FakeDaemon()


@pytest_asyncio.fixture
async def docker_client(fake_daemon):
    """DockerClient wired to the fake daemon."""
    client = DockerClient(
        docker_host="unix:///var/run/docker.sock", transport=fake_daemon.transport()
    )
    yield client
    await client.close()


@pytest.fixture
def mock_container():
    """Container handle double for wait strategy tests."""
    container = MagicMock()
    container.id = CONTAINER_ID
    container.host = "127.0.0.1"
    container.spec = ContainerSpec(image="redis:7-alpine")
    container.get_mapped_port = AsyncMock(return_value=6379)
    container.get_logs = AsyncMock(return_value="")
    container.exec = AsyncMock(return_value=ExecResult(exit_code=0, output=""))
    container.inspect = AsyncMock(return_value=ContainerInspect.model_validate(inspect_payload()))
    return container

