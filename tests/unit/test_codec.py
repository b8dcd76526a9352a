"""Unit tests for the endpoint codec and transport."""

import json
from typing import List

import httpx
import pytest

from dockyard.core import endpoints
from dockyard.core.codec import (
    check_progress_stream,
    decode,
    demultiplex_stream,
    encode,
    iter_frames,
)
from dockyard.core.endpoints import NO_BODY, RAW
from dockyard.core.transport import RawRequest, RawResponse, Transport
from dockyard.models.docker import (
    ContainerInspect,
    ContainerSummary,
    CreateContainerRequest,
    HostConfig,
    IdResponse,
    PortBindingInfo,
)
from dockyard.models.errors import (
    DecodingError,
    DockerApiError,
    DockerTimeoutError,
    ErrorType,
    NotFoundError,
    TransportError,
)
from tests.conftest import frame, inspect_payload


class TestEncode:
    """Test endpoint encoding."""

    def test_path_gets_version_prefix(self):
        """Test that endpoint paths are prefixed with the API version."""
        request = encode(endpoints.inspect_container("abc"), "/v1.44")
        assert request.method == "GET"
        assert request.path == "/v1.44/containers/abc/json"
        assert request.body is None

    def test_body_uses_engine_field_names_and_drops_none(self):
        """Test that request bodies use Engine field names and omit unset fields."""
        body = CreateContainerRequest(
            image="alpine:latest",
            env=["A=1"],
            host_config=HostConfig(
                port_bindings={"80/tcp": [PortBindingInfo(host_ip="0.0.0.0", host_port="")]}
            ),
        )
        request = encode(endpoints.create_container(body, name="web"), "/v1.44")

        payload = json.loads(request.body)
        assert payload == {
            "Image": "alpine:latest",
            "Env": ["A=1"],
            "HostConfig": {"PortBindings": {"80/tcp": [{"HostIp": "0.0.0.0", "HostPort": ""}]}},
        }
        assert request.params == {"name": "web"}

    def test_exec_start_body(self):
        """Test the exec start request body."""
        request = encode(endpoints.exec_start("e1"), "/v1.44")
        assert json.loads(request.body) == {"Detach": False, "Tty": False}

    def test_stop_carries_grace_period(self):
        """Test that stop sends the grace period as a query parameter."""
        request = encode(endpoints.stop_container("abc", 7), "/v1.44")
        assert request.params == {"t": "7"}

    def test_list_filters_are_json_encoded(self):
        """Test that list filters are sent as a JSON query value."""
        request = encode(endpoints.list_containers(labels={"org.dockyard.managed": "true"}), "/v1.44")
        assert json.loads(request.params["filters"]) == {"label": ["org.dockyard.managed=true"]}


class TestDecode:
    """Test response decoding and error classification."""

    def test_no_body_sentinel_ignores_body(self):
        """Test that endpoints without a response body ignore whatever comes back."""
        response = RawResponse(status_code=204, body=b"garbage")
        assert decode(response, NO_BODY) is NO_BODY

    def test_raw_returns_bytes(self):
        """Test that raw endpoints return the body bytes untouched."""
        assert decode(RawResponse(200, b"OK"), RAW) == b"OK"

    def test_decodes_model(self):
        """Test decoding a JSON body into a model."""
        body = json.dumps(inspect_payload(status="exited")).encode()
        result = decode(RawResponse(200, body), ContainerInspect)
        assert isinstance(result, ContainerInspect)
        assert result.state.status == "exited"

    def test_decodes_list(self):
        """Test decoding a JSON array into a list of models."""
        body = json.dumps([{"Id": "a", "Names": ["/x"]}, {"Id": "b"}]).encode()
        result = decode(RawResponse(200, body), List[ContainerSummary])
        assert [c.id for c in result] == ["a", "b"]

    def test_malformed_json_is_decoding_error(self):
        """Test that malformed JSON raises a decoding error."""
        with pytest.raises(DecodingError) as exc_info:
            decode(RawResponse(200, b"{not json"), IdResponse)
        assert exc_info.value.error_type == ErrorType.DECODING

    def test_missing_field_is_decoding_error(self):
        """Test that a missing required field raises a decoding error."""
        with pytest.raises(DecodingError):
            decode(RawResponse(201, b'{"Warnings": []}'), IdResponse)

    def test_empty_body_is_decoding_error(self):
        """Test that an empty body raises a decoding error when a model is expected."""
        with pytest.raises(DecodingError):
            decode(RawResponse(200, b""), IdResponse)

    def test_404_with_message_envelope(self):
        """Test that a 404 message envelope becomes a not-found error."""
        response = RawResponse(404, b'{"message":"No such container"}')
        with pytest.raises(DockerApiError) as exc_info:
            decode(response, ContainerInspect)

        error = exc_info.value
        assert isinstance(error, NotFoundError)
        assert error.status_code == 404
        assert error.message == "No such container"

    def test_error_without_envelope_uses_raw_text(self):
        """Test that non-JSON error bodies are reported as raw text."""
        response = RawResponse(500, b"daemon exploded\n")
        with pytest.raises(DockerApiError) as exc_info:
            decode(response, NO_BODY)
        assert exc_info.value.status_code == 500
        assert exc_info.value.message == "daemon exploded"
        assert not isinstance(exc_info.value, NotFoundError)

    def test_error_with_empty_body(self):
        """Test an error status with no body."""
        with pytest.raises(DockerApiError) as exc_info:
            decode(RawResponse(409, b""), NO_BODY)
        assert exc_info.value.message == "HTTP 409"

    def test_error_checked_before_no_body(self):
        """Test that error statuses are raised even for endpoints without a body."""
        with pytest.raises(DockerApiError):
            decode(RawResponse(400, b'{"message":"bad"}'), NO_BODY)


class TestStreams:
    """Test multiplexed stream and progress stream handling."""

    def test_demultiplex_concatenates_stdout_and_stderr(self):
        """Test that multiplexed frames are joined in order."""
        data = frame(b"starting\n", 1) + frame(b"warning\n", 2) + frame(b"ready\n", 1)
        assert demultiplex_stream(data) == "starting\nwarning\nready\n"

    def test_frames_keep_stream_type(self):
        """Test that decoded frames keep their stream type."""
        data = frame(b"out", 1) + frame(b"err", 2)
        assert list(iter_frames(data)) == [(1, b"out"), (2, b"err")]

    def test_unframed_output_passes_through(self):
        """Test that output from a TTY container passes through unchanged."""
        assert demultiplex_stream(b"plain tty output\n") == "plain tty output\n"

    def test_empty_stream(self):
        """Test demultiplexing an empty stream."""
        assert demultiplex_stream(b"") == ""

    def test_truncated_frame_keeps_partial_payload(self):
        """Test that a truncated final frame keeps what was received."""
        data = frame(b"complete\n") + frame(b"cut off here")[:-4]
        assert demultiplex_stream(data) == "complete\ncut off "

    def test_progress_stream_ok(self):
        """Test a pull progress stream without errors."""
        body = b'{"status":"Pulling from library/alpine"}\n{"status":"Download complete"}\n'
        assert check_progress_stream(body) == 2

    def test_progress_stream_error(self):
        """Test that an error line in a progress stream is raised."""
        body = (
            b'{"status":"Pulling"}\n'
            b'{"errorDetail":{"message":"manifest unknown"},"error":"manifest unknown"}\n'
        )
        with pytest.raises(DockerApiError) as exc_info:
            check_progress_stream(body)
        assert exc_info.value.message == "manifest unknown"


class TestTransport:
    """Test the raw HTTP transport."""

    @pytest.mark.asyncio
    async def test_returns_status_and_body(self):
        """Test that the transport returns status and body."""
        seen = []

        def handler(request: httpx.Request) -> httpx.Response:
            seen.append(request)
            return httpx.Response(201, content=b'{"Id":"x"}')

        async with Transport(uds="/var/run/docker.sock", transport=httpx.MockTransport(handler)) as t:
            response = await t.execute(
                RawRequest("POST", "/v1.44/containers/create", body=b"{}", params={"name": "n"})
            )

        assert response.status_code == 201
        assert response.body == b'{"Id":"x"}'
        assert seen[0].headers["Host"] == "localhost"
        assert seen[0].headers["Content-Type"] == "application/json"
        assert seen[0].url.params["name"] == "n"

    @pytest.mark.asyncio
    async def test_connection_error_is_transport_error(self):
        """Test that connection failures become transport errors."""
        def handler(request: httpx.Request) -> httpx.Response:
            raise httpx.ConnectError("connection refused", request=request)

        async with Transport(uds="/nope.sock", transport=httpx.MockTransport(handler)) as t:
            with pytest.raises(TransportError) as exc_info:
                await t.execute(RawRequest("GET", "/v1.44/_ping"))

        assert "unix:///nope.sock" in exc_info.value.message
        assert isinstance(exc_info.value.__cause__, httpx.ConnectError)

    @pytest.mark.asyncio
    async def test_timeout_is_timeout_error(self):
        """Test that request timeouts become timeout errors."""
        def handler(request: httpx.Request) -> httpx.Response:
            raise httpx.ReadTimeout("too slow", request=request)

        async with Transport(transport=httpx.MockTransport(handler)) as t:
            with pytest.raises(DockerTimeoutError):
                await t.execute(RawRequest("GET", "/v1.44/_ping"))

    @pytest.mark.asyncio
    async def test_non_2xx_is_not_an_exception_at_this_layer(self):
        """Test that the transport does not raise on error statuses."""
        def handler(request: httpx.Request) -> httpx.Response:
            return httpx.Response(500, content=b"boom")

        async with Transport(transport=httpx.MockTransport(handler)) as t:
            response = await t.execute(RawRequest("GET", "/v1.44/_ping"))
        assert response.status_code == 500
        assert not response.ok
