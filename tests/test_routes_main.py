"""Tests for the health check and the single-page application routes."""

import re

import mysql.connector


class TestHealthCheck:

    def test_health_check_db_healthy(self, client):
        response = client.get('/health')

        assert response.status_code == 200
        data = response.get_json()
        assert data['status'] == 'ok'
        assert data['db'] == 'healthy'
        assert data['mode'] == 'database'
        assert data['service'] == 'cnc-dashboard'

    def test_health_check_db_error(self, client, fake_db):
        fake_db.error = mysql.connector.errors.InterfaceError('Connection Failed')

        response = client.get('/health')

        assert response.status_code == 503
        data = response.get_json()
        assert data['status'] == 'degraded'
        assert data['db'].startswith('error:')

    def test_health_in_fallback_mode(self, fallback_client):
        response = fallback_client.get('/health')

        assert response.status_code == 503
        data = response.get_json()
        assert data['mode'] == 'fallback'
        assert data['db'] == 'fallback'

    def test_health_check_json_format(self, client):
        data = client.get('/health').get_json()

        for field in ['status', 'timestamp', 'service', 'db', 'mode', 'version']:
            assert field in data

    def test_timestamp_is_utc_with_milliseconds(self, client):
        timestamp = client.get('/health').get_json()['timestamp']

        assert re.fullmatch(r'\d{4}-\d{2}-\d{2}T\d{2}:\d{2}:\d{2}\.\d{3}Z', timestamp)


class TestSinglePageApp:

    def test_root_serves_index(self, client):
        response = client.get('/')

        assert response.status_code == 200
        assert b'dashboard' in response.data

    def test_client_side_route_serves_index(self, client):
        response = client.get('/maszyny/machine-1/historia')

        assert response.status_code == 200
        assert b'dashboard' in response.data

    def test_existing_asset_is_served(self, client):
        response = client.get('/app.js')

        assert response.status_code == 200
        assert b'console.log' in response.data

    def test_path_traversal_is_not_served(self, client):
        response = client.get('/../conftest.py')

        assert b'FakeDatabase' not in response.data
