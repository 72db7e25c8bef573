"""
Minimal Docker Engine API client
Works with the Docker daemon via Unix socket (Linux/macOS) or named pipe (Windows)
"""

from .cancel import CancelToken
from .client import DockerClient
from .config import EndpointConfig, default_host, parse_host
from .exceptions import (
    DockerException,
    APIError,
    BuildError,
    ConfigError,
    InvalidIdentifier,
    MalformedResponse,
    RequestCancelled
)
from .http_client import ResponseStream
from .models import (
    Config,
    CreateResponse,
    EndpointSettings,
    HostConfig,
    ImageDeleteResponse,
    InspectResponse,
    JSONError,
    JSONMessage,
    Mount,
    MountType,
    NetworkCreateResponse,
    NetworkingConfig,
    PortBinding,
    WaitExitError,
    WaitResponse
)
from .options import (
    ImageBuildOptions,
    ImagePullOptions,
    ImageRemoveOptions,
    LogsOptions,
    RemoveOptions,
    StopOptions,
    WaitCondition
)
from .stream import BuildStreamConsumer, BuildStreamState, consume_build_stream, decode_wait_response

__all__ = [
    'DockerClient',
    'CancelToken',
    'EndpointConfig',
    'default_host',
    'parse_host',
    'ResponseStream',
    'DockerException',
    'APIError',
    'BuildError',
    'ConfigError',
    'InvalidIdentifier',
    'MalformedResponse',
    'RequestCancelled',
    'Config',
    'CreateResponse',
    'EndpointSettings',
    'HostConfig',
    'ImageDeleteResponse',
    'InspectResponse',
    'JSONError',
    'JSONMessage',
    'Mount',
    'MountType',
    'NetworkCreateResponse',
    'NetworkingConfig',
    'PortBinding',
    'WaitExitError',
    'WaitResponse',
    'ImageBuildOptions',
    'ImagePullOptions',
    'ImageRemoveOptions',
    'LogsOptions',
    'RemoveOptions',
    'StopOptions',
    'WaitCondition',
    'BuildStreamConsumer',
    'BuildStreamState',
    'consume_build_stream',
    'decode_wait_response'
]

__version__ = '1.0.0'
