"""Tests for network operations against the fake daemon."""

import pytest

from container_api import APIError, EndpointSettings, InvalidIdentifier

from conftest import Reply, json_reply

NETWORK_ID = '7c1e5d0a9b2f'


class TestCreate:

    def test_create(self, client, daemon):
        daemon.route('POST', '/networks/create', json_reply({'Id': NETWORK_ID, 'Warning': ''}, status=201))

        resp = client.networks.create('container-abc123', driver='bridge')

        assert resp.id == NETWORK_ID
        assert resp.warning == ''
        assert daemon.last.json() == {'Name': 'container-abc123', 'Driver': 'bridge'}
        assert daemon.last.headers['Content-Type'] == 'application/json'

    def test_conflict(self, client, daemon):
        daemon.route('POST', '/networks/create', json_reply({'message': 'network exists'}, status=409))

        with pytest.raises(APIError, match='network creation failed: 409 Conflict'):
            client.networks.create('taken')


class TestRemove:

    def test_remove(self, client, daemon):
        daemon.route('DELETE', f'/networks/{NETWORK_ID}', Reply(status=204))

        client.networks.remove(NETWORK_ID)

        assert daemon.last.method == 'DELETE'

    def test_empty_identifier(self, client, daemon):
        with pytest.raises(InvalidIdentifier, match='network ID cannot be empty'):
            client.networks.remove('   ')
        assert daemon.requests == []


class TestConnect:

    def test_connect_with_aliases(self, client, daemon):
        daemon.route('POST', f'/networks/{NETWORK_ID}/connect', Reply(status=200))

        client.networks.connect(NETWORK_ID, ' abc ', EndpointSettings(aliases=['ssh-1']))

        assert daemon.last.json() == {'Container': 'abc', 'EndpointConfig': {'Aliases': ['ssh-1']}}

    def test_connect_without_endpoint_config(self, client, daemon):
        daemon.route('POST', f'/networks/{NETWORK_ID}/connect', Reply(status=200))

        client.networks.connect(NETWORK_ID, 'abc')

        assert daemon.last.json() == {'Container': 'abc'}

    def test_disconnect(self, client, daemon):
        daemon.route('POST', f'/networks/{NETWORK_ID}/disconnect', Reply(status=200))

        client.networks.disconnect(NETWORK_ID, 'abc', force=True)

        assert daemon.last.json() == {'Container': 'abc', 'Force': True}

    def test_disconnect_unknown_network(self, client, daemon):
        with pytest.raises(APIError, match='network disconnect failed: 404'):
            client.networks.disconnect('missing', 'abc')

    @pytest.mark.parametrize("network_id,container_id", [('', 'abc'), (NETWORK_ID, '  ')])
    def test_empty_identifiers(self, client, daemon, network_id, container_id):
        with pytest.raises(InvalidIdentifier):
            client.networks.connect(network_id, container_id)
        assert daemon.requests == []
