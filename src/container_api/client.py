"""
Docker Client - Main API entry point
"""

from typing import Mapping, Optional

from .cancel import CancelToken
from .config import EndpointConfig, parse_host
from .containers import ContainerCollection
from .http_client import DockerHTTPClient
from .images import ImageCollection
from .networks import NetworkCollection


class DockerClient:
    """
    Docker API Client

    Every operation performs one blocking HTTP round-trip. A client holds no
    mutable state besides its fixed endpoint, so one instance can be shared
    between threads.
    """

    def __init__(self, base_url: Optional[str] = None,
                 endpoint: Optional[EndpointConfig] = None,
                 timeout: Optional[float] = None):
        """
        Initialize Docker client

        Args:
            base_url: Daemon host, e.g. 'unix:///var/run/docker.sock'
            endpoint: Parsed endpoint; takes precedence over base_url
            timeout: Read timeout in seconds (default: none)

        With neither base_url nor endpoint the platform default is used.
        """
        if endpoint is None:
            endpoint = parse_host(base_url) if base_url else EndpointConfig.default()
        self.endpoint = endpoint
        self.http = DockerHTTPClient(endpoint, timeout=timeout)
        self.images = ImageCollection(self)
        self.containers = ContainerCollection(self)
        self.networks = NetworkCollection(self)

    def __repr__(self):
        return f"<DockerClient: {self.endpoint}>"

    @classmethod
    def from_env(cls, environ: Optional[Mapping[str, str]] = None,
                 timeout: Optional[float] = None) -> 'DockerClient':
        """Client for DOCKER_HOST, or the platform default"""
        return cls(endpoint=EndpointConfig.from_env(environ), timeout=timeout)

    def ping(self, cancel: Optional[CancelToken] = None):
        """Ping Docker daemon; raises APIError unless it answers 200"""
        self.http.get('/_ping', expected_status=200, cancel=cancel, action='ping')

    def version(self, cancel: Optional[CancelToken] = None) -> dict:
        """Get Docker version info"""
        return self.http.request_json('GET', '/version', expected_status=200,
                                      cancel=cancel, action='version')

    def close(self):
        """Close client (no-op: connections are released per request)"""
        pass
