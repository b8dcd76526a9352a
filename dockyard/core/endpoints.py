"""Engine API endpoint definitions.

Each factory returns an Endpoint: method, path, query parameters, optional
request body and the shape the response body is expected to have. Endpoints
are pure data; the codec turns them into raw requests and decodes responses.
"""

import json
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, List, Optional

from pydantic import BaseModel

from ..models.docker import (
    ContainerCreateResponse,
    ContainerInspect,
    ContainerSummary,
    CreateContainerRequest,
    ExecCreateRequest,
    ExecInspect,
    ExecStartRequest,
    IdResponse,
    ImageInspect,
    NetworkConnectRequest,
    NetworkCreateRequest,
    NetworkCreateResponse,
    NetworkDisconnectRequest,
    VersionInfo,
)


class BodyShape(Enum):
    """Response shapes that are not JSON documents."""

    NO_BODY = "no_body"
    RAW = "raw"


NO_BODY = BodyShape.NO_BODY
RAW = BodyShape.RAW


@dataclass(frozen=True)
class Endpoint:
    """One Engine API call."""

    method: str
    path: str
    response_type: Any = NO_BODY
    body: Optional[BaseModel] = None
    params: Dict[str, str] = field(default_factory=dict)
    timeout: Optional[float] = None


def _flag(value: bool) -> str:
    return "1" if value else "0"


# ============================================================================
# Daemon
# ============================================================================


def ping() -> Endpoint:
    return Endpoint("GET", "/_ping", RAW)


def version() -> Endpoint:
    return Endpoint("GET", "/version", VersionInfo)


# ============================================================================
# Images
# ============================================================================


def inspect_image(reference: str) -> Endpoint:
    return Endpoint("GET", f"/images/{reference}/json", ImageInspect)


def pull_image(from_image: str, tag: str, timeout: Optional[float] = None) -> Endpoint:
    """``POST /images/create``; the response is an NDJSON progress stream."""
    return Endpoint(
        "POST",
        "/images/create",
        RAW,
        params={"fromImage": from_image, "tag": tag},
        timeout=timeout,
    )


# ============================================================================
# Containers
# ============================================================================


def create_container(request: CreateContainerRequest, name: Optional[str] = None) -> Endpoint:
    params = {"name": name} if name else {}
    return Endpoint(
        "POST", "/containers/create", ContainerCreateResponse, body=request, params=params
    )


def start_container(container_id: str) -> Endpoint:
    return Endpoint("POST", f"/containers/{container_id}/start")


def stop_container(
    container_id: str, timeout: int, request_timeout: Optional[float] = None
) -> Endpoint:
    return Endpoint(
        "POST",
        f"/containers/{container_id}/stop",
        params={"t": str(timeout)},
        timeout=request_timeout,
    )


def remove_container(container_id: str, force: bool = True, volumes: bool = True) -> Endpoint:
    return Endpoint(
        "DELETE",
        f"/containers/{container_id}",
        params={"force": _flag(force), "v": _flag(volumes)},
    )


def inspect_container(container_id: str) -> Endpoint:
    return Endpoint("GET", f"/containers/{container_id}/json", ContainerInspect)


def list_containers(all: bool = False, labels: Optional[Dict[str, str]] = None) -> Endpoint:
    params = {"all": _flag(all)}
    if labels:
        params["filters"] = json.dumps(
            {"label": [f"{key}={value}" for key, value in labels.items()]}
        )
    return Endpoint("GET", "/containers/json", List[ContainerSummary], params=params)


def container_logs(container_id: str, tail: Optional[int] = None) -> Endpoint:
    params = {"stdout": "1", "stderr": "1"}
    if tail is not None:
        params["tail"] = str(tail)
    return Endpoint("GET", f"/containers/{container_id}/logs", RAW, params=params)


# ============================================================================
# Exec
# ============================================================================


def exec_create(container_id: str, cmd: List[str]) -> Endpoint:
    return Endpoint(
        "POST", f"/containers/{container_id}/exec", IdResponse, body=ExecCreateRequest(cmd=cmd)
    )


def exec_start(exec_id: str) -> Endpoint:
    return Endpoint("POST", f"/exec/{exec_id}/start", RAW, body=ExecStartRequest())


def exec_inspect(exec_id: str) -> Endpoint:
    return Endpoint("GET", f"/exec/{exec_id}/json", ExecInspect)


# ============================================================================
# Networks
# ============================================================================


def create_network(request: NetworkCreateRequest) -> Endpoint:
    return Endpoint("POST", "/networks/create", NetworkCreateResponse, body=request)


def connect_network(network_id: str, request: NetworkConnectRequest) -> Endpoint:
    return Endpoint("POST", f"/networks/{network_id}/connect", body=request)


def disconnect_network(network_id: str, request: NetworkDisconnectRequest) -> Endpoint:
    return Endpoint("POST", f"/networks/{network_id}/disconnect", body=request)


def remove_network(network_id: str) -> Endpoint:
    return Endpoint("DELETE", f"/networks/{network_id}")
