"""Shared fixtures: a fake Docker daemon listening on a Unix socket."""

import io
import json
import os
import shutil
import socket
import socketserver
import tarfile
import tempfile
import threading
from dataclasses import dataclass, field
from http.server import BaseHTTPRequestHandler
from typing import Any, Callable, Dict, List, Optional, Tuple
from urllib.parse import parse_qsl, urlsplit

import pytest

from container_api import DockerClient


@dataclass
class RecordedRequest:
    method: str
    raw_path: str
    headers: Dict[str, str]
    body: bytes

    @property
    def path(self) -> str:
        return urlsplit(self.raw_path).path

    @property
    def query(self) -> List[Tuple[str, str]]:
        return parse_qsl(urlsplit(self.raw_path).query, keep_blank_values=True)

    @property
    def query_string(self) -> str:
        return urlsplit(self.raw_path).query

    def json(self) -> Any:
        return json.loads(self.body)


@dataclass
class Reply:
    status: int = 200
    body: bytes = b''
    content_type: str = 'application/json'
    # written one by one, flushing after each
    chunks: List[bytes] = field(default_factory=list)
    # called after the headers are sent, instead of writing body/chunks
    handler: Optional[Callable[[BaseHTTPRequestHandler], None]] = None


def json_reply(data: Any, status: int = 200) -> Reply:
    return Reply(status=status, body=json.dumps(data).encode('utf-8'))


def tar_names(data: bytes) -> List[str]:
    """Member names of a tar archive, in archive order"""
    with tarfile.open(fileobj=io.BytesIO(data)) as tar:
        return tar.getnames()


class FakeDaemon:
    """Records every request and answers with the reply registered for its method and path"""

    def __init__(self, socket_path: str):
        self.socket_path = socket_path
        self.requests: List[RecordedRequest] = []
        self.routes: Dict[Tuple[str, str], Reply] = {}
        self.release = threading.Event()
        self._server = None
        self._thread = None

    @property
    def base_url(self) -> str:
        return f"unix://{self.socket_path}"

    def route(self, method: str, path: str, reply: Reply):
        self.routes[(method, path)] = reply

    @property
    def last(self) -> RecordedRequest:
        return self.requests[-1]

    def start(self):
        daemon = self

        class Handler(BaseHTTPRequestHandler):

            def log_message(self, format, *args):
                pass

            def _read_body(self) -> bytes:
                if self.headers.get('Transfer-Encoding', '').lower() == 'chunked':
                    data = b''
                    while True:
                        size = int(self.rfile.readline().strip(), 16)
                        if size == 0:
                            self.rfile.readline()
                            return data
                        data += self.rfile.read(size)
                        self.rfile.readline()
                length = int(self.headers.get('Content-Length') or 0)
                return self.rfile.read(length) if length else b''

            def _handle(self):
                body = self._read_body()
                request = RecordedRequest(self.command, self.path, dict(self.headers), body)
                daemon.requests.append(request)

                reply = daemon.routes.get((self.command, request.path))
                if reply is None:
                    reply = json_reply({'message': f'no route for {request.path}'}, status=404)

                self.send_response(reply.status)
                self.send_header('Content-Type', reply.content_type)
                if reply.handler is None and not reply.chunks:
                    self.send_header('Content-Length', str(len(reply.body)))
                self.end_headers()

                if reply.handler is not None:
                    reply.handler(self)
                elif reply.chunks:
                    for chunk in reply.chunks:
                        self.wfile.write(chunk)
                        self.wfile.flush()
                else:
                    self.wfile.write(reply.body)

            do_GET = _handle
            do_POST = _handle
            do_PUT = _handle
            do_DELETE = _handle

        class Server(socketserver.ThreadingUnixStreamServer):
            daemon_threads = True

            def handle_error(self, request, client_address):
                # clients hanging up mid-reply are expected in cancellation tests
                pass

        self._server = Server(self.socket_path, Handler)
        self._thread = threading.Thread(target=self._server.serve_forever, daemon=True)
        self._thread.start()

    def stop(self):
        self.release.set()
        if self._server is not None:
            self._server.shutdown()
            self._server.server_close()


@pytest.fixture
def daemon():
    """A running fake daemon on a short temporary socket path."""
    if not hasattr(socket, 'AF_UNIX'):
        pytest.skip('Unix domain sockets are not available')

    # AF_UNIX paths are limited to ~100 bytes, so avoid pytest's long tmp_path
    directory = tempfile.mkdtemp(prefix='ca-')
    fake = FakeDaemon(os.path.join(directory, 'docker.sock'))
    fake.start()
    try:
        yield fake
    finally:
        fake.stop()
        shutil.rmtree(directory, ignore_errors=True)


@pytest.fixture
def client(daemon):
    """DockerClient bound to the fake daemon."""
    return DockerClient(base_url=daemon.base_url)


@pytest.fixture
def missing_socket_client(tmp_path):
    """DockerClient pointing at a socket nobody listens on."""
    return DockerClient(base_url=f"unix://{tmp_path / 'absent.sock'}")
