"""
Docker Networks API
"""

from typing import Optional

from .cancel import CancelToken
from .models import (
    EndpointSettings, NetworkConnectOptions, NetworkCreateOptions,
    NetworkCreateResponse, NetworkDisconnectOptions
)
from .options import quote_id, validate_id


class NetworkCollection:
    """Docker Networks Collection"""

    def __init__(self, client):
        self.client = client

    def create(self, name: str, driver: str = 'bridge',
               cancel: Optional[CancelToken] = None) -> NetworkCreateResponse:
        """
        Create network

        Args:
            name: Network name
            driver: Network driver (default: bridge)
            cancel: Cancellation/deadline token

        Returns:
            NetworkCreateResponse with the network ID
        """
        data = self.client.http.request_json(
            'POST', '/networks/create', body=NetworkCreateOptions(name, driver),
            expected_status=201, cancel=cancel, action='network creation'
        )
        return NetworkCreateResponse.from_dict(data)

    def remove(self, network_id: str, cancel: Optional[CancelToken] = None):
        """Remove network"""
        network_id = validate_id(network_id, 'network')
        self.client.http.delete(
            f'/networks/{quote_id(network_id)}',
            expected_status=204, cancel=cancel, action='network removal'
        )

    def connect(self, network_id: str, container_id: str,
                endpoint_config: Optional[EndpointSettings] = None,
                cancel: Optional[CancelToken] = None):
        """
        Connect a container to a network

        Args:
            network_id: Network ID or name
            container_id: Container ID or name
            endpoint_config: Endpoint settings, e.g. DNS aliases
            cancel: Cancellation/deadline token
        """
        network_id = validate_id(network_id, 'network')
        container_id = validate_id(container_id)
        self.client.http.post(
            f'/networks/{quote_id(network_id)}/connect',
            body=NetworkConnectOptions(container_id, endpoint_config),
            expected_status=200, cancel=cancel, action='network connect'
        )

    def disconnect(self, network_id: str, container_id: str, force: bool = False,
                   cancel: Optional[CancelToken] = None):
        """Disconnect a container from a network"""
        network_id = validate_id(network_id, 'network')
        container_id = validate_id(container_id)
        self.client.http.post(
            f'/networks/{quote_id(network_id)}/disconnect',
            body=NetworkDisconnectOptions(container_id, force),
            expected_status=200, cancel=cancel, action='network disconnect'
        )
