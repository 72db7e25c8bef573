"""
Engine API data contracts

Simplified mirrors of the daemon's request and response documents. Request
types serialize with to_dict() using the daemon's JSON field names; response
types are built with from_dict() and tolerate missing fields.
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, List, Optional

# Port in "<number>/<protocol>" form, e.g. "80/tcp"
Port = str


@dataclass
class PortBinding:
    """Binding between a host IP address and a host port"""
    host_ip: str = ''
    host_port: str = ''

    def to_dict(self) -> Dict[str, Any]:
        return {'HostIp': self.host_ip, 'HostPort': self.host_port}

    @classmethod
    def from_dict(cls, data: Optional[Dict[str, Any]]) -> 'PortBinding':
        data = data or {}
        return cls(host_ip=data.get('HostIp') or '', host_port=data.get('HostPort') or '')


# Port mapping between exposed container ports and host bindings
PortMap = Dict[Port, List[PortBinding]]


def _port_map_to_dict(ports: PortMap) -> Dict[str, Any]:
    return {port: [binding.to_dict() for binding in bindings] for port, bindings in ports.items()}


def _port_map_from_dict(data: Optional[Dict[str, Any]]) -> PortMap:
    if not data:
        return {}
    return {port: [PortBinding.from_dict(b) for b in (bindings or [])] for port, bindings in data.items()}


def _object(data: Dict[str, Any], key: str) -> Optional[Dict[str, Any]]:
    """Nested object under key, or None when absent or null"""
    value = data.get(key)
    if value is not None and not isinstance(value, dict):
        raise ValueError(f"{key} must be an object, got {type(value).__name__}")
    return value


class MountType(str, Enum):
    BIND = 'bind'
    VOLUME = 'volume'
    TMPFS = 'tmpfs'
    NAMED_PIPE = 'npipe'
    CLUSTER = 'cluster'
    IMAGE = 'image'


@dataclass
class Mount:
    """
    A mount (volume) attached to a container

    Attributes:
        type: Kind of mount
        source: Volume name or host path, depending on the type; must be empty for tmpfs
        target: Path inside the container
    """
    type: Optional[MountType] = None
    source: str = ''
    target: str = ''

    def to_dict(self) -> Dict[str, Any]:
        data: Dict[str, Any] = {}
        if self.type:
            data['Type'] = MountType(self.type).value
        if self.source:
            data['Source'] = self.source
        if self.target:
            data['Target'] = self.target
        return data

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> 'Mount':
        mount_type = data.get('Type')
        return cls(
            type=MountType(mount_type) if mount_type else None,
            source=data.get('Source') or '',
            target=data.get('Target') or ''
        )


@dataclass
class Config:
    """
    Portable container configuration

    Host-dependent settings belong in HostConfig.
    """
    image: str = ''
    user: str = ''
    env: List[str] = field(default_factory=list)
    cmd: List[str] = field(default_factory=list)
    exposed_ports: List[Port] = field(default_factory=list)

    def to_dict(self) -> Dict[str, Any]:
        data: Dict[str, Any] = {
            'User': self.user,
            'Env': list(self.env),
            'Cmd': list(self.cmd),
            'Image': self.image,
        }
        if self.exposed_ports:
            data['ExposedPorts'] = {port: {} for port in self.exposed_ports}
        return data

    @classmethod
    def from_dict(cls, data: Optional[Dict[str, Any]]) -> 'Config':
        data = data or {}
        return cls(
            image=data.get('Image') or '',
            user=data.get('User') or '',
            env=list(data.get('Env') or []),
            cmd=list(data.get('Cmd') or []),
            exposed_ports=list((data.get('ExposedPorts') or {}).keys())
        )


@dataclass
class HostConfig:
    """Non-portable container configuration"""
    port_bindings: PortMap = field(default_factory=dict)
    auto_remove: bool = False
    mounts: List[Mount] = field(default_factory=list)

    def to_dict(self) -> Dict[str, Any]:
        data: Dict[str, Any] = {
            'PortBindings': _port_map_to_dict(self.port_bindings),
            'AutoRemove': self.auto_remove,
        }
        if self.mounts:
            data['Mounts'] = [mount.to_dict() for mount in self.mounts]
        return data

    @classmethod
    def from_dict(cls, data: Optional[Dict[str, Any]]) -> 'HostConfig':
        data = data or {}
        return cls(
            port_bindings=_port_map_from_dict(data.get('PortBindings')),
            auto_remove=bool(data.get('AutoRemove')),
            mounts=[Mount.from_dict(m) for m in (data.get('Mounts') or [])]
        )


@dataclass
class EndpointSettings:
    """Network endpoint details of a container"""
    aliases: List[str] = field(default_factory=list)

    def to_dict(self) -> Dict[str, Any]:
        return {'Aliases': list(self.aliases)}


@dataclass
class NetworkingConfig:
    """Endpoint settings per network, keyed by network name or ID"""
    endpoints_config: Dict[str, EndpointSettings] = field(default_factory=dict)

    def to_dict(self) -> Dict[str, Any]:
        return {
            'EndpointsConfig': {name: settings.to_dict() for name, settings in self.endpoints_config.items()}
        }


@dataclass
class ContainerCreateRequest:
    """Body of a container create call: Config fields plus host and networking config"""
    config: Config
    host_config: Optional[HostConfig] = None
    networking_config: Optional[NetworkingConfig] = None

    def to_dict(self) -> Dict[str, Any]:
        data = self.config.to_dict()
        if self.host_config is not None:
            data['HostConfig'] = self.host_config.to_dict()
        if self.networking_config is not None:
            data['NetworkingConfig'] = self.networking_config.to_dict()
        return data


@dataclass
class CreateResponse:
    """Result of a container create call"""
    id: str
    warnings: List[str] = field(default_factory=list)

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> 'CreateResponse':
        return cls(id=data.get('Id', ''), warnings=list(data.get('Warnings') or []))


@dataclass
class NetworkSettings:
    ports: PortMap = field(default_factory=dict)


@dataclass
class InspectResponse:
    """Container details from GET /containers/{id}/json"""
    id: str
    created: str = ''
    path: str = ''
    args: List[str] = field(default_factory=list)
    image: str = ''
    resolv_conf_path: str = ''
    hostname_path: str = ''
    hosts_path: str = ''
    log_path: str = ''
    name: str = ''
    restart_count: int = 0
    driver: str = ''
    platform: str = ''
    mount_label: str = ''
    process_label: str = ''
    app_armor_profile: str = ''
    exec_ids: List[str] = field(default_factory=list)
    host_config: Optional[HostConfig] = None
    config: Optional[Config] = None
    network_settings: Optional[NetworkSettings] = None
    attrs: Dict[str, Any] = field(default_factory=dict, repr=False)

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> 'InspectResponse':
        if not isinstance(data, dict):
            raise ValueError(f"container details must be an object, got {type(data).__name__}")
        settings = _object(data, 'NetworkSettings')
        host_config = _object(data, 'HostConfig')
        config = _object(data, 'Config')
        return cls(
            id=data.get('Id', ''),
            created=data.get('Created') or '',
            path=data.get('Path') or '',
            args=list(data.get('Args') or []),
            image=data.get('Image') or '',
            resolv_conf_path=data.get('ResolvConfPath') or '',
            hostname_path=data.get('HostnamePath') or '',
            hosts_path=data.get('HostsPath') or '',
            log_path=data.get('LogPath') or '',
            name=data.get('Name') or '',
            restart_count=data.get('RestartCount') or 0,
            driver=data.get('Driver') or '',
            platform=data.get('Platform') or '',
            mount_label=data.get('MountLabel') or '',
            process_label=data.get('ProcessLabel') or '',
            app_armor_profile=data.get('AppArmorProfile') or '',
            exec_ids=list(data.get('ExecIDs') or []),
            host_config=HostConfig.from_dict(host_config) if host_config is not None else None,
            config=Config.from_dict(config) if config is not None else None,
            network_settings=NetworkSettings(ports=_port_map_from_dict(settings.get('Ports'))) if settings is not None else None,
            attrs=data
        )


@dataclass
class WaitExitError:
    message: str = ''


@dataclass
class WaitResponse:
    """Exit status reported by a container wait call"""
    status_code: int
    error: Optional[WaitExitError] = None

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> 'WaitResponse':
        """
        Raises:
            ValueError: If StatusCode is not an integer or Error is not an object
        """
        status_code = data.get('StatusCode')
        if status_code is None:
            status_code = 0
        elif isinstance(status_code, bool) or not isinstance(status_code, int):
            raise ValueError(f"StatusCode must be an integer, got {status_code!r}")

        error = _object(data, 'Error')
        return cls(
            status_code=status_code,
            error=WaitExitError(message=error.get('Message') or '') if error is not None else None
        )


@dataclass
class NetworkCreateOptions:
    """Body of a network create call"""
    name: str
    driver: str = ''

    def to_dict(self) -> Dict[str, Any]:
        return {'Name': self.name, 'Driver': self.driver}


@dataclass
class NetworkConnectOptions:
    container: str
    endpoint_config: Optional[EndpointSettings] = None

    def to_dict(self) -> Dict[str, Any]:
        data: Dict[str, Any] = {'Container': self.container}
        if self.endpoint_config is not None:
            data['EndpointConfig'] = self.endpoint_config.to_dict()
        return data


@dataclass
class NetworkDisconnectOptions:
    container: str
    force: bool = False

    def to_dict(self) -> Dict[str, Any]:
        return {'Container': self.container, 'Force': self.force}


@dataclass
class NetworkCreateResponse:
    id: str
    warning: str = ''

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> 'NetworkCreateResponse':
        return cls(id=data.get('Id', ''), warning=data.get('Warning') or '')


@dataclass
class ImageDeleteResponse:
    """One entry of an image remove result: an untagged reference or a deleted image ID"""
    deleted: str = ''
    untagged: str = ''

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> 'ImageDeleteResponse':
        return cls(deleted=data.get('Deleted') or '', untagged=data.get('Untagged') or '')


@dataclass
class JSONError:
    """Error embedded in a progress stream message"""
    code: int = 0
    message: str = ''

    def __str__(self):
        return self.message


@dataclass
class JSONMessage:
    """One message of a build or pull progress stream"""
    stream: str = ''
    status: str = ''
    id: str = ''
    error: Optional[JSONError] = None

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> 'JSONMessage':
        detail = data.get('errorDetail')
        error = None
        if isinstance(detail, dict):
            error = JSONError(code=detail.get('code') or 0, message=detail.get('message') or '')
        elif data.get('error'):
            error = JSONError(message=str(data['error']))
        return cls(
            stream=data.get('stream') or '',
            status=data.get('status') or '',
            id=data.get('id') or '',
            error=error
        )
