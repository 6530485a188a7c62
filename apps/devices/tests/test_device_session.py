"""Tests for the per-request device session."""

from datetime import datetime, timezone
from unittest.mock import patch

import pytest
from zk.exception import ZKErrorConnection, ZKErrorResponse, ZKNetworkError

from apps.devices.constants import DeviceSessionState
from apps.devices.exceptions import (
    DeviceCommandError,
    DeviceConnectionError,
    DeviceQueryError,
    DeviceStreamError,
    NotConnectedError,
    SessionStateError,
)
from apps.devices.zk import DeviceSession, RealtimeEvent

ORIGINAL_DISCONNECT = DeviceSession.disconnect


@pytest.fixture
def disconnect_spy():
    with patch.object(DeviceSession, "disconnect", autospec=True, side_effect=ORIGINAL_DISCONNECT) as spy:
        yield spy


class TestDeviceSessionConnect:
    def test_connect_success(self, zk_connection, device_endpoint):
        session = DeviceSession(device_endpoint)

        result = session.connect()

        assert result is session
        assert session.state == DeviceSessionState.CONNECTED
        assert session.is_connected
        zk_connection.zk_class.assert_called_once_with(
            "192.168.1.201",
            port=4370,
            timeout=5.0,
            password=0,
            force_udp=True,
            ommit_ping=True,
        )

    @pytest.mark.parametrize("error_class", [ZKErrorConnection, ZKNetworkError])
    def test_connect_network_error(self, zk_connection, device_endpoint, error_class):
        zk_connection.zk_class.return_value.connect.side_effect = error_class("Network unreachable")
        session = DeviceSession(device_endpoint)

        with pytest.raises(DeviceConnectionError) as exc_info:
            session.connect()

        assert "Network connection error" in str(exc_info.value)
        assert exc_info.value.endpoint == device_endpoint
        assert isinstance(exc_info.value.cause, error_class)
        assert session.state == DeviceSessionState.FAILED

    def test_connect_response_error(self, zk_connection, device_endpoint):
        zk_connection.zk_class.return_value.connect.side_effect = ZKErrorResponse("Invalid response")
        session = DeviceSession(device_endpoint)

        with pytest.raises(DeviceConnectionError) as exc_info:
            session.connect()

        assert "Device response error" in str(exc_info.value)
        assert session.state == DeviceSessionState.FAILED

    def test_connect_unexpected_error(self, zk_connection, device_endpoint):
        zk_connection.zk_class.return_value.connect.side_effect = OSError("boom")
        session = DeviceSession(device_endpoint)

        with pytest.raises(DeviceConnectionError) as exc_info:
            session.connect()

        assert "192.168.1.201:4370" in str(exc_info.value)
        assert "boom" in str(exc_info.value)

    def test_connect_returns_none(self, zk_connection, device_endpoint):
        zk_connection.zk_class.return_value.connect.return_value = None
        session = DeviceSession(device_endpoint)

        with pytest.raises(DeviceConnectionError) as exc_info:
            session.connect()

        assert "Failed to establish connection" in str(exc_info.value)
        assert session.state == DeviceSessionState.FAILED

    def test_connect_twice_is_rejected(self, zk_connection, device_endpoint):
        session = DeviceSession(device_endpoint).connect()

        with pytest.raises(SessionStateError):
            session.connect()

        assert zk_connection.zk_class.return_value.connect.call_count == 1

    def test_connect_after_disconnect_is_rejected(self, zk_connection, device_endpoint):
        session = DeviceSession(device_endpoint).connect()
        session.disconnect()

        with pytest.raises(SessionStateError):
            session.connect()


class TestDeviceSessionOperations:
    def test_operations_require_connection(self, zk_connection, device_endpoint):
        session = DeviceSession(device_endpoint)

        for operation in (
            session.list_users,
            session.list_attendance,
            session.get_info,
            session.clear_attendance_log,
        ):
            with pytest.raises(NotConnectedError):
                operation()

        with pytest.raises(NotConnectedError):
            session.set_enabled(True)

        zk_connection.get_users.assert_not_called()

    def test_operations_rejected_while_streaming(self, zk_connection, device_endpoint):
        session = DeviceSession(device_endpoint).connect()
        session.is_streaming = True

        with pytest.raises(SessionStateError):
            session.list_users()

    def test_list_users(self, zk_connection, device_endpoint, make_zk_user):
        zk_connection.get_users.return_value = [
            make_zk_user(uid=1, user_id="5", name="John Doe", privilege=14, card=123456),
            make_zk_user(uid=2, user_id="7", name="", privilege=0, card=0),
        ]

        with DeviceSession(device_endpoint) as session:
            users = session.list_users()

        assert [user.device_user_id for user in users] == ["5", "7"]
        assert users[0].internal_id == 1
        assert users[0].display_name == "John Doe"
        assert users[0].role_code == 14
        assert users[0].card_number == 123456
        assert users[1].display_name == ""

    def test_list_users_handles_none(self, zk_connection, device_endpoint):
        zk_connection.get_users.return_value = None

        with DeviceSession(device_endpoint) as session:
            assert session.list_users() == []

    def test_list_attendance_normalises_timestamps(self, zk_connection, device_endpoint, make_zk_attendance):
        zk_connection.get_attendance.return_value = [
            make_zk_attendance(uid=6550, user_id="5", timestamp=datetime(2025, 6, 7, 17, 30), status=1, punch=1),
            make_zk_attendance(uid=6551, user_id="5", timestamp=datetime(2025, 6, 7, 8, 30), status=15, punch=0),
        ]

        with DeviceSession(device_endpoint) as session:
            records = session.list_attendance()

        assert [record.user_serial for record in records] == [6550, 6551]
        assert records[0].record_timestamp == datetime(2025, 6, 7, 17, 30, tzinfo=timezone.utc)
        assert records[0].source_ip == "192.168.1.201"
        assert records[0].direction == 1
        assert records[1].verification_method == 15

    def test_list_attendance_uses_device_timezone(
        self, zk_connection, device_endpoint, make_zk_attendance, settings
    ):
        settings.ZK_DEVICE_TIMEZONE = "Asia/Ho_Chi_Minh"
        zk_connection.get_attendance.return_value = [
            make_zk_attendance(uid=1, user_id="5", timestamp=datetime(2025, 6, 7, 8, 30)),
        ]

        with DeviceSession(device_endpoint) as session:
            records = session.list_attendance()

        assert records[0].record_timestamp == datetime(2025, 6, 7, 1, 30, tzinfo=timezone.utc)

    def test_get_info(self, zk_connection, device_endpoint):
        zk_connection.users = 12
        zk_connection.records = 340
        zk_connection.rec_cap = 100000

        with DeviceSession(device_endpoint) as session:
            info = session.get_info()

        zk_connection.read_sizes.assert_called_once()
        assert info.user_count == 12
        assert info.log_count == 340
        assert info.log_capacity == 100000

    def test_set_enabled(self, zk_connection, device_endpoint):
        with DeviceSession(device_endpoint) as session:
            session.set_enabled(True)
            session.set_enabled(False)

        zk_connection.enable_device.assert_called_once()
        zk_connection.disable_device.assert_called_once()

    def test_set_enabled_failure(self, zk_connection, device_endpoint):
        zk_connection.disable_device.side_effect = ZKErrorResponse("Can't disable device")

        with pytest.raises(DeviceCommandError) as exc_info:
            with DeviceSession(device_endpoint) as session:
                session.set_enabled(False)

        assert "Failed to disable device" in str(exc_info.value)

    def test_clear_attendance_log(self, zk_connection, device_endpoint):
        with DeviceSession(device_endpoint) as session:
            session.clear_attendance_log()

        zk_connection.clear_attendance.assert_called_once()


class TestDeviceSessionTeardown:
    def test_disconnect_is_idempotent(self, zk_connection, device_endpoint):
        session = DeviceSession(device_endpoint).connect()

        session.disconnect()
        session.disconnect()

        zk_connection.disconnect.assert_called_once()
        assert session.state == DeviceSessionState.CLOSED

    def test_disconnect_swallows_errors(self, zk_connection, device_endpoint):
        zk_connection.disconnect.side_effect = ZKNetworkError("socket closed")
        session = DeviceSession(device_endpoint).connect()

        session.disconnect()

        assert session.state == DeviceSessionState.CLOSED

    def test_disconnect_without_connect(self, zk_connection, device_endpoint):
        session = DeviceSession(device_endpoint)

        session.disconnect()

        assert session.state == DeviceSessionState.CLOSED
        zk_connection.disconnect.assert_not_called()

    def test_connect_failure_disconnects_once(self, zk_connection, device_endpoint, disconnect_spy):
        zk_connection.zk_class.return_value.connect.side_effect = ZKErrorConnection("timed out")

        with pytest.raises(DeviceConnectionError):
            with DeviceSession(device_endpoint):
                pass

        assert disconnect_spy.call_count == 1

    @pytest.mark.parametrize(
        "transport_call, operation, expected_error",
        [
            ("get_users", lambda session: session.list_users(), DeviceQueryError),
            ("get_attendance", lambda session: session.list_attendance(), DeviceQueryError),
            ("clear_attendance", lambda session: session.clear_attendance_log(), DeviceCommandError),
            ("read_sizes", lambda session: session.get_info(), DeviceQueryError),
        ],
    )
    def test_operation_failure_disconnects_once(
        self, zk_connection, device_endpoint, disconnect_spy, transport_call, operation, expected_error
    ):
        getattr(zk_connection, transport_call).side_effect = ZKErrorResponse("device busy")

        with pytest.raises(expected_error) as exc_info:
            with DeviceSession(device_endpoint) as session:
                operation(session)

        assert "device busy" in str(exc_info.value)
        assert disconnect_spy.call_count == 1
        zk_connection.disconnect.assert_called_once()

    def test_success_disconnects_once(self, zk_connection, device_endpoint, disconnect_spy):
        with DeviceSession(device_endpoint) as session:
            session.list_users()

        assert disconnect_spy.call_count == 1
        assert session.state == DeviceSessionState.CLOSED


class TestDeviceSessionRealtime:
    def test_events_forwarded_in_arrival_order(self, zk_connection, device_endpoint, make_zk_attendance):
        punches = [
            make_zk_attendance(uid=1, user_id="5", timestamp=datetime(2025, 6, 7, 8, 30)),
            None,
            make_zk_attendance(uid=2, user_id="7", timestamp=datetime(2025, 6, 7, 8, 31)),
            make_zk_attendance(uid=3, user_id="5", timestamp=datetime(2025, 6, 7, 8, 29)),
        ]
        zk_connection.live_capture.return_value = iter(punches)
        received: list[RealtimeEvent] = []

        with DeviceSession(device_endpoint) as session:
            session.subscribe_realtime(received.append, lambda: False, poll_interval=0.5)
            assert not session.is_streaming

        zk_connection.live_capture.assert_called_once_with(new_timeout=0.5)
        assert [(event.device_user_id, event.event_timestamp.minute) for event in received] == [
            ("5", 30),
            ("7", 31),
            ("5", 29),
        ]

    def test_stop_request_ends_capture(self, zk_connection, device_endpoint):
        zk_connection.end_live_capture = False

        def live_capture(new_timeout):
            while not zk_connection.end_live_capture:
                yield None

        zk_connection.live_capture.side_effect = live_capture
        polls = []

        def should_stop():
            polls.append(True)
            return len(polls) >= 3

        with DeviceSession(device_endpoint) as session:
            session.subscribe_realtime(lambda event: None, should_stop)

        assert zk_connection.end_live_capture is True
        assert len(polls) == 3

    def test_capture_failure_raises_stream_error(self, zk_connection, device_endpoint, disconnect_spy):
        zk_connection.live_capture.side_effect = ZKNetworkError("connection reset")

        with pytest.raises(DeviceStreamError) as exc_info:
            with DeviceSession(device_endpoint) as session:
                session.subscribe_realtime(lambda event: None, lambda: False)

        assert "connection reset" in str(exc_info.value)
        assert not session.is_streaming
        assert disconnect_spy.call_count == 1
