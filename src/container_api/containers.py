"""
Docker Containers API
"""

from typing import Optional

from .cancel import CancelToken
from .http_client import ResponseStream
from .models import (
    Config, ContainerCreateRequest, CreateResponse, HostConfig,
    InspectResponse, NetworkingConfig, WaitResponse
)
from .options import (
    LogsOptions, RemoveOptions, StopOptions, WaitCondition,
    encode_create, encode_wait, quote_id, validate_id
)
from .stream import decode_wait_response


class ContainerCollection:
    """Docker Containers collection"""

    def __init__(self, client):
        self.client = client

    def create(self, config: Config, host_config: Optional[HostConfig] = None,
               networking_config: Optional[NetworkingConfig] = None,
               name: Optional[str] = None,
               cancel: Optional[CancelToken] = None) -> CreateResponse:
        """
        Create container

        Args:
            config: Portable container configuration
            host_config: Host-specific configuration
            networking_config: Per-network endpoint settings
            name: Container name (default: generated by the daemon)
            cancel: Cancellation/deadline token

        Returns:
            CreateResponse with the new container ID and any warnings
        """
        path, query = encode_create(name)
        body = ContainerCreateRequest(config, host_config, networking_config)
        data = self.client.http.request_json(
            'POST', path, query=query, body=body,
            expected_status=201, cancel=cancel, action='container creation'
        )
        return CreateResponse.from_dict(data)

    def start(self, container_id: str, cancel: Optional[CancelToken] = None):
        """Start container"""
        container_id = validate_id(container_id)
        self.client.http.post(
            f'/containers/{quote_id(container_id)}/start',
            expected_status=204, cancel=cancel, action='container start'
        )

    def stop(self, container_id: str, options: Optional[StopOptions] = None,
             cancel: Optional[CancelToken] = None):
        """
        Stop container

        The container gets options.signal (SIGTERM by default) and is killed
        once options.timeout seconds have passed. With no timeout the
        container's own StopTimeout or the daemon default applies; 0 kills
        immediately and a negative value never kills.

        Only 204 counts as success: stopping a container that is not running
        gets 304 Not Modified from the daemon, raised as APIError.
        """
        container_id = validate_id(container_id)
        path, query = (options or StopOptions()).encode(container_id)
        self.client.http.post(
            path, query=query,
            expected_status=204, cancel=cancel, action='container stop'
        )

    def remove(self, container_id: str, options: Optional[RemoveOptions] = None,
               cancel: Optional[CancelToken] = None):
        """Remove container"""
        container_id = validate_id(container_id)
        path, query = (options or RemoveOptions()).encode(container_id)
        self.client.http.delete(
            path, query=query,
            expected_status=204, cancel=cancel, action='container removal'
        )

    def inspect(self, container_id: str, cancel: Optional[CancelToken] = None) -> InspectResponse:
        """
        Get low-level information about a container

        Raises:
            APIError: If the daemon does not answer 200 (e.g. 404 for an unknown container)
            json.JSONDecodeError: If the 200 body is not JSON
        """
        container_id = validate_id(container_id)
        data = self.client.http.request_json(
            'GET', f'/containers/{quote_id(container_id)}/json',
            expected_status=200, cancel=cancel, action='container inspect'
        )
        return InspectResponse.from_dict(data)

    def wait(self, container_id: str, condition: Optional[WaitCondition] = None,
             cancel: Optional[CancelToken] = None) -> WaitResponse:
        """
        Block until the container reaches the given condition

        Args:
            container_id: Container ID or name
            condition: NOT_RUNNING (daemon default), NEXT_EXIT or REMOVED
            cancel: Cancellation/deadline token; the only way to bound the wait
                unless the client has a read timeout

        Returns:
            WaitResponse with the exit status code

        Raises:
            MalformedResponse: If something in between answered with plaintext
        """
        container_id = validate_id(container_id)
        path, query = encode_wait(container_id, condition)
        body = self.client.http.post(
            path, query=query, stream=True,
            expected_status=200, cancel=cancel, action='container wait'
        )
        with body:
            return decode_wait_response(body)

    def logs(self, container_id: str, options: Optional[LogsOptions] = None,
             cancel: Optional[CancelToken] = None) -> ResponseStream:
        """
        Get container logs as a raw byte stream

        The caller owns the returned stream and must close it.

        A container with a TTY produces its output as is. Otherwise stdout
        and stderr are multiplexed in frames of an 8-byte header followed by
        the payload:

            [STREAM_TYPE, 0, 0, 0, SIZE1, SIZE2, SIZE3, SIZE4][PAYLOAD]

        STREAM_TYPE is 1 for stdout and 2 for stderr; SIZE1..SIZE4 are the
        payload length as a big-endian uint32. The stream is returned as
        received; splitting it into stdout and stderr is up to the caller.
        """
        container_id = validate_id(container_id)
        path, query = (options or LogsOptions()).encode(container_id)
        return self.client.http.get(
            path, query=query, stream=True,
            expected_status=200, cancel=cancel, action='container logs'
        )

