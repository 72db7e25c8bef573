"""Tests for the client entry point, transport and cancellation."""

import threading
import time

import pytest

from container_api import (
    APIError, CancelToken, DockerClient, EndpointConfig, RequestCancelled
)
from container_api.http_client import CONNECT_TIMEOUT, UnixHTTPConnection

from conftest import Reply, json_reply


class TestPing:

    def test_ping(self, client, daemon):
        daemon.route('GET', '/_ping', Reply(body=b'OK', content_type='text/plain'))

        assert client.ping() is None
        assert daemon.last.headers['Host'] == 'localhost'

    def test_ping_failure(self, client, daemon):
        daemon.route('GET', '/_ping', Reply(status=503, body=b'starting'))

        with pytest.raises(APIError) as exc_info:
            client.ping()
        assert exc_info.value.status_code == 503

    def test_version(self, client, daemon):
        daemon.route('GET', '/version', json_reply({'Version': '28.5.1', 'ApiVersion': '1.51'}))

        assert client.version()['ApiVersion'] == '1.51'

    def test_no_daemon(self, missing_socket_client):
        with pytest.raises(OSError):
            missing_socket_client.ping()


class TestConstruction:

    def test_base_url(self):
        client = DockerClient(base_url='unix:///run/user/1000/docker.sock')
        assert client.endpoint == EndpointConfig('unix', '/run/user/1000/docker.sock')

    def test_endpoint_wins(self):
        endpoint = EndpointConfig('unix', '/tmp/other.sock')
        client = DockerClient(base_url='unix:///var/run/docker.sock', endpoint=endpoint)
        assert client.endpoint is endpoint

    def test_default_does_not_touch_the_socket(self):
        client = DockerClient()
        assert client.endpoint.scheme in ('unix', 'npipe')

    def test_from_env(self):
        client = DockerClient.from_env({'DOCKER_HOST': 'unix:///srv/docker.sock'}, timeout=5)
        assert client.endpoint.address == '/srv/docker.sock'
        assert client.http.timeout == 5

    def test_connection_ignores_network_address(self):
        conn = UnixHTTPConnection('/var/run/docker.sock')
        assert conn.host == 'localhost'
        assert conn.connect_timeout == CONNECT_TIMEOUT == 10


class TestCancellation:

    def test_cancelled_token_sends_nothing(self, client, daemon):
        daemon.route('GET', '/_ping', Reply(body=b'OK'))
        token = CancelToken()
        token.cancel()

        with pytest.raises(RequestCancelled):
            client.ping(cancel=token)
        assert daemon.requests == []

    def test_expired_deadline_sends_nothing(self, client, daemon):
        token = CancelToken(timeout=0)

        with pytest.raises(RequestCancelled, match='deadline'):
            client.ping(cancel=token)
        assert daemon.requests == []

    def test_cancel_aborts_blocked_wait(self, client, daemon):
        def hold(handler):
            daemon.release.wait(5)

        daemon.route('POST', '/containers/abc/wait', Reply(handler=hold))
        token = CancelToken()
        timer = threading.Timer(0.2, token.cancel)
        timer.start()

        started = time.monotonic()
        try:
            with pytest.raises(RequestCancelled):
                client.containers.wait('abc', cancel=token)
        finally:
            timer.cancel()
            daemon.release.set()
        assert time.monotonic() - started < 4

    def test_deadline_aborts_blocked_stream_read(self, client, daemon):
        def trickle(handler):
            handler.wfile.write(b'first\n')
            handler.wfile.flush()
            daemon.release.wait(5)

        daemon.route('GET', '/containers/abc/logs', Reply(handler=trickle))
        token = CancelToken(timeout=0.5)

        stream = client.containers.logs('abc', cancel=token)
        try:
            assert stream.readline() == b'first\n'
            with pytest.raises(RequestCancelled):
                stream.readline()
        finally:
            stream.close()
            daemon.release.set()

    def test_token_timeout_clamps_socket_timeout(self):
        token = CancelToken(timeout=30)
        assert token.timeout_for(None) <= 30
        assert token.timeout_for(2) == 2
        assert CancelToken().timeout_for(None) is None


class TestConcurrency:

    def test_parallel_requests_keep_their_responses(self, client, daemon):
        for i in range(8):
            daemon.route('GET', f'/containers/c{i}/json', json_reply({'Id': f'c{i}', 'Name': f'/n{i}'}))

        results = {}
        errors = []

        def inspect(i):
            try:
                results[i] = client.containers.inspect(f'c{i}').id
            except Exception as e:
                errors.append(e)

        threads = [threading.Thread(target=inspect, args=(i,)) for i in range(8)]
        for t in threads:
            t.start()
        for t in threads:
            t.join(10)

        assert errors == []
        assert results == {i: f'c{i}' for i in range(8)}
