"""
Global pytest configuration.

Provides PyZK doubles so no test ever opens a socket to a real terminal, and
auto-categorizes tests as unit or integration.
"""

from unittest.mock import MagicMock, patch

import pytest


class MockUser:
    """Mock user object from PyZK."""

    def __init__(self, uid, user_id, name, privilege=0, card=0):
        self.uid = uid
        self.user_id = user_id
        self.name = name
        self.privilege = privilege
        self.card = card


class MockAttendance:
    """Mock attendance object from PyZK."""

    def __init__(self, uid, user_id, timestamp, status=1, punch=0):
        self.uid = uid
        self.user_id = user_id
        self.timestamp = timestamp
        self.status = status
        self.punch = punch


@pytest.fixture
def make_zk_user():
    return MockUser


@pytest.fixture
def make_zk_attendance():
    return MockAttendance


@pytest.fixture
def device_endpoint():
    from apps.devices.zk import DeviceEndpoint

    return DeviceEndpoint(host="192.168.1.201", command_port=4370, response_timeout_ms=5000)


@pytest.fixture
def zk_connection():
    """
    Patch the PyZK ``ZK`` class used by device sessions.

    Yields the mock connection returned by ``ZK(...).connect()``. The patched
    class itself is available as ``zk_connection.zk_class``.

    Usage in tests:
        def test_something(zk_connection):
            zk_connection.get_users.return_value = [...]
    """
    with patch("apps.devices.zk.session.ZK") as zk_class:
        conn = MagicMock()
        conn.get_users.return_value = []
        conn.get_attendance.return_value = []
        zk_class.return_value.connect.return_value = conn
        conn.zk_class = zk_class
        yield conn


def pytest_collection_modifyitems(config: pytest.Config, items: list[pytest.Item]) -> None:
    """
    Auto-categorize tests as unit or integration based on patterns.

    Note: Tests can override these auto-markers by explicitly using decorators:
    @pytest.mark.integration, @pytest.mark.unit
    """
    for item in items:
        marker_names = {marker.name for marker in item.iter_markers()}

        has_test_type = "integration" in marker_names or "unit" in marker_names
        if not has_test_type:
            # Integration test patterns:
            # - API view tests (test request/response cycle)
            # - Tests with "API" in class name
            # - Management command tests
            is_integration = (
                "test_api" in item.nodeid
                or "/api/" in item.nodeid
                or "API" in str(item.cls)
                or "test_command" in item.nodeid
            )

            if is_integration:
                item.add_marker(pytest.mark.integration)
            else:
                item.add_marker(pytest.mark.unit)


@pytest.fixture
def api_client():
    """
    Fixture that provides a DRF APIClient.

    5xx responses are reported through ``got_request_exception``, which the
    Django test client would otherwise re-raise; here they stay responses.
    """
    from rest_framework.test import APIClient

    return APIClient(raise_request_exception=False)
