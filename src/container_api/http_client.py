"""
HTTP Client for the Docker daemon socket
Plain http.client over a Unix domain socket or a Windows named pipe
"""

import http.client
import io
import json
import logging
import socket
import time
from typing import Any, Dict, Optional

from .cancel import CancelToken
from .config import EndpointConfig
from .exceptions import APIError, RequestCancelled
from .options import Query, build_url

logger = logging.getLogger(__name__)

# Seconds allowed for reaching the daemon socket
CONNECT_TIMEOUT = 10

JSON_CONTENT_TYPE = 'application/json'

# Windows ERROR_PIPE_BUSY
_ERROR_PIPE_BUSY = 231


class UnixHTTPConnection(http.client.HTTPConnection):
    """HTTP connection over Unix socket"""

    def __init__(self, socket_path: str, timeout: Optional[float] = None,
                 connect_timeout: Optional[float] = CONNECT_TIMEOUT):
        # the host only fills the Host header; connect() always dials the socket
        super().__init__('localhost', timeout=timeout)
        self.socket_path = socket_path
        self.connect_timeout = connect_timeout

    def connect(self):
        """Connect to Unix socket"""
        sock = socket.socket(socket.AF_UNIX, socket.SOCK_STREAM)
        try:
            sock.settimeout(self.connect_timeout)
            sock.connect(self.socket_path)
            sock.settimeout(self.timeout)
        except OSError:
            sock.close()
            raise
        self.sock = sock


class NpipeSocket:
    """
    Socket-like wrapper around an open named pipe

    Provides the subset of the socket API that http.client uses. As with real
    sockets, close() only releases the pipe once every file returned by
    makefile() is closed too.
    """

    def __init__(self, handle):
        self._handle = handle
        self._io_refs = 0
        self._closed = False
        self._timeout = None

    def settimeout(self, timeout):
        # pipes opened as files block; the timeout is recorded but not enforced
        self._timeout = timeout

    def gettimeout(self):
        return self._timeout

    def sendall(self, data):
        view = memoryview(data)
        while view:
            written = self._handle.write(view)
            view = view[written:]

    def recv_into(self, buffer) -> int:
        return self._handle.readinto(buffer) or 0

    def makefile(self, mode='rb', buffering=None, **kwargs):
        self._io_refs += 1
        return io.BufferedReader(_PipeReader(self))

    def shutdown(self, how):
        self._handle.close()

    def close(self):
        self._closed = True
        if self._io_refs <= 0:
            self._handle.close()

    def _decref(self):
        self._io_refs -= 1
        if self._closed and self._io_refs <= 0:
            self._handle.close()


class _PipeReader(io.RawIOBase):

    def __init__(self, pipe: NpipeSocket):
        self._pipe = pipe

    def readable(self):
        return True

    def readinto(self, buffer):
        return self._pipe.recv_into(buffer)

    def close(self):
        if not self.closed:
            self._pipe._decref()
        super().close()


class NpipeHTTPConnection(http.client.HTTPConnection):
    """HTTP connection over a Windows named pipe"""

    def __init__(self, pipe_path: str, timeout: Optional[float] = None,
                 connect_timeout: Optional[float] = CONNECT_TIMEOUT):
        super().__init__('localhost', timeout=timeout)
        # '//./pipe/docker_engine' -> '\\.\pipe\docker_engine'
        self.pipe_path = pipe_path.replace('/', '\\')
        self.connect_timeout = connect_timeout

    def connect(self):
        """Open the pipe, waiting while all of its instances are busy"""
        started = time.monotonic()
        while True:
            try:
                handle = open(self.pipe_path, 'r+b', buffering=0)
                break
            except OSError as e:
                if getattr(e, 'winerror', None) != _ERROR_PIPE_BUSY:
                    raise
                if self.connect_timeout is not None and time.monotonic() - started >= self.connect_timeout:
                    raise socket.timeout(f"timed out waiting for {self.pipe_path}") from e
                time.sleep(0.05)
        self.sock = NpipeSocket(handle)
        self.sock.settimeout(self.timeout)


class ResponseStream:
    """
    Caller-owned streaming response body

    Returned by streaming operations (image build, image pull, container logs).
    The body is not read or released on the caller's behalf: read it at any
    pace, then call close() (or use the stream as a context manager) to
    release the connection.
    """

    def __init__(self, response: http.client.HTTPResponse,
                 connection: http.client.HTTPConnection,
                 release, cancel: Optional[CancelToken] = None):
        self._response = response
        self._connection = connection
        self._release = release
        self._cancel = cancel
        self.status = response.status
        self.reason = response.reason
        self.headers = response.headers

    def __repr__(self):
        return f"<ResponseStream: {self.status} {self.reason}>"

    def __enter__(self):
        return self

    def __exit__(self, exc_type, exc, tb):
        self.close()

    def __iter__(self):
        while True:
            line = self.readline()
            if not line:
                return
            yield line

    @property
    def closed(self) -> bool:
        return self._response.isclosed() and self._connection.sock is None

    def read(self, amt: Optional[int] = None) -> bytes:
        """Read up to amt bytes, or everything left when amt is None"""
        return self._guarded(self._response.read, amt)

    def readline(self, limit: int = -1) -> bytes:
        """Read one line including its trailing newline; b'' at end of stream"""
        return self._guarded(self._response.readline, limit)

    def close(self):
        """Release the response body and its connection"""
        self._response.close()
        self._release(self._connection)

    def _guarded(self, read, arg):
        cancel = self._cancel
        if cancel is not None:
            cancel.raise_if_cancelled()
        try:
            data = read(arg)
        except (OSError, http.client.HTTPException) as e:
            if cancel is not None and cancel.cancelled:
                raise RequestCancelled('stream read cancelled') from e
            raise
        # a shut-down socket reads as a clean end of stream
        if not data and cancel is not None and cancel.cancelled:
            raise RequestCancelled('stream read cancelled')
        return data


class DockerHTTPClient:
    """HTTP client for Docker daemon"""

    def __init__(self, endpoint: EndpointConfig, timeout: Optional[float] = None):
        """
        Initialize Docker HTTP client

        Args:
            endpoint: Local socket or pipe of the daemon
            timeout: Read timeout in seconds (default: block; wait and
                follow-logs requests can stay open indefinitely)
        """
        self.endpoint = endpoint
        self.timeout = timeout

    def request(self, method: str, path: str, query: Optional[Query] = None,
                body: Any = None, headers: Optional[Dict[str, str]] = None,
                expected_status: int = 200, stream: bool = False,
                cancel: Optional[CancelToken] = None, action: str = 'request') -> Any:
        """
        Make HTTP request to Docker daemon

        Args:
            method: HTTP method (GET, POST, DELETE, etc.)
            path: API path
            query: Query pairs, as produced by the option encoders
            body: JSON-serializable data (dicts or models with to_dict()),
                or raw bytes / a binary file object sent as-is
            headers: Extra HTTP headers
            expected_status: The one status code meaning success
            stream: If True, return a ResponseStream the caller must close
            cancel: Cancellation/deadline token
            action: Operation name used in error messages

        Returns:
            Raw body bytes, or a ResponseStream if stream=True

        Raises:
            APIError: If the daemon answers with any other status
            RequestCancelled: If the token is cancelled or its deadline passes
        """
        url = build_url(path, query)

        req_headers = {'Host': 'localhost'}
        payload = None
        if body is not None:
            if isinstance(body, (bytes, bytearray)) or hasattr(body, 'read'):
                # Raw data (e.g., tar archive)
                payload = body
            else:
                payload = encode_body(body)
                req_headers['Content-Type'] = JSON_CONTENT_TYPE
        if headers:
            req_headers.update(headers)

        if cancel is not None:
            cancel.raise_if_cancelled()

        conn = self._open(cancel)
        release = self._releaser(conn.sock, cancel)
        keep_open = False
        try:
            logger.debug(f"{method} {url}")
            conn.request(method, url, body=payload, headers=req_headers)
            response = conn.getresponse()
            logger.debug(f"{method} {url} -> {response.status} {response.reason}")

            if response.status != expected_status:
                # body is not guaranteed to be JSON; it is released unread
                raise APIError(
                    f"{action} failed: {response.status} {response.reason}",
                    response=response,
                    status_code=response.status,
                    reason=response.reason
                )

            if stream:
                keep_open = True
                return ResponseStream(response, conn, release, cancel)

            return response.read()

        except (OSError, http.client.HTTPException) as e:
            if cancel is not None and cancel.cancelled:
                raise RequestCancelled(f"{action} cancelled") from e
            raise

        finally:
            if not keep_open:
                release(conn)

    def request_json(self, method: str, path: str, **kwargs) -> Any:
        """Make a request and decode its body as JSON once the status check passed"""
        return json.loads(self.request(method, path, **kwargs))

    def get(self, path: str, **kwargs) -> Any:
        """Make GET request"""
        return self.request('GET', path, **kwargs)

    def post(self, path: str, **kwargs) -> Any:
        """Make POST request"""
        return self.request('POST', path, **kwargs)

    def delete(self, path: str, **kwargs) -> Any:
        """Make DELETE request"""
        return self.request('DELETE', path, **kwargs)

    def _open(self, cancel: Optional[CancelToken]) -> http.client.HTTPConnection:
        timeout = self.timeout
        connect_timeout = CONNECT_TIMEOUT
        if cancel is not None:
            timeout = cancel.timeout_for(timeout)
            connect_timeout = cancel.timeout_for(connect_timeout)

        if self.endpoint.scheme == 'npipe':
            conn = NpipeHTTPConnection(self.endpoint.address, timeout=timeout,
                                       connect_timeout=connect_timeout)
        else:
            conn = UnixHTTPConnection(self.endpoint.address, timeout=timeout,
                                      connect_timeout=connect_timeout)
        try:
            conn.connect()
        except OSError as e:
            if cancel is not None and cancel.cancelled:
                raise RequestCancelled('connect cancelled') from e
            raise

        if cancel is not None:
            cancel.bind(conn.sock)
        return conn

    @staticmethod
    def _releaser(sock, cancel: Optional[CancelToken]):
        # http.client may drop conn.sock on its own, so the bound socket is kept here
        def release(conn: http.client.HTTPConnection):
            if cancel is not None:
                cancel.unbind(sock)
            conn.close()
        return release


def encode_body(body: Any) -> bytes:
    """JSON-encode a request body"""
    if hasattr(body, 'to_dict'):
        body = body.to_dict()
    return json.dumps(body).encode('utf-8')

