"""
Daemon endpoint configuration

The endpoint is resolved once, when a client is constructed, and never
changes afterwards. Nothing here is read at import time.
"""

import os
import sys
from dataclasses import dataclass
from typing import Mapping, Optional
from urllib.parse import urlsplit

from .exceptions import ConfigError

DEFAULT_UNIX_HOST = 'unix:///var/run/docker.sock'
DEFAULT_NPIPE_HOST = 'npipe:////./pipe/docker_engine'

SUPPORTED_SCHEMES = ('unix', 'npipe')


def default_host(platform: Optional[str] = None) -> str:
    """Return the platform-specific default daemon host URL"""
    platform = platform or sys.platform
    if platform.startswith('win'):
        return DEFAULT_NPIPE_HOST
    return DEFAULT_UNIX_HOST


@dataclass(frozen=True)
class EndpointConfig:
    """
    Local transport endpoint
    
    Attributes:
        scheme: 'unix' for a Unix domain socket, 'npipe' for a Windows named pipe
        address: Socket path or pipe path (e.g. '/var/run/docker.sock', '//./pipe/docker_engine')
    """
    scheme: str
    address: str
    
    def __str__(self):
        return f"{self.scheme}://{self.address}"
    
    @classmethod
    def default(cls, platform: Optional[str] = None) -> 'EndpointConfig':
        """Endpoint for the platform default host"""
        return parse_host(default_host(platform))
    
    @classmethod
    def from_env(cls, environ: Optional[Mapping[str, str]] = None,
                 platform: Optional[str] = None) -> 'EndpointConfig':
        """
        Endpoint from DOCKER_HOST, or the platform default when it is unset or empty
        
        Args:
            environ: Environment mapping (default: os.environ)
            platform: Platform name used to pick the default (default: sys.platform)
        """
        if environ is None:
            environ = os.environ
        host = environ.get('DOCKER_HOST', '').strip()
        if not host:
            return cls.default(platform)
        return parse_host(host)


def parse_host(host: str) -> EndpointConfig:
    """
    Parse a daemon host URL
    
    Args:
        host: Host URL, e.g. 'unix:///var/run/docker.sock' or 'npipe:////./pipe/docker_engine'.
            A bare absolute path is taken as a Unix socket path.
    
    Returns:
        EndpointConfig
    
    Raises:
        ConfigError: If the scheme is not a local transport or the address is empty
    """
    host = (host or '').strip()
    if host.startswith('/'):
        return EndpointConfig('unix', host)
    
    parts = urlsplit(host)
    scheme = parts.scheme.lower()
    if scheme not in SUPPORTED_SCHEMES:
        raise ConfigError(f"unsupported daemon host {host!r}: only unix:// and npipe:// are supported")
    
    address = parts.netloc + parts.path
    if not address:
        raise ConfigError(f"daemon host {host!r} has no address")
    return EndpointConfig(scheme, address)
