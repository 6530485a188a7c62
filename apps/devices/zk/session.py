"""Per-request device session for ZK attendance terminals using PyZK.

A terminal accepts a single concurrent connection, so a session is created
fresh for every call that needs the device, owns its connection exclusively,
and is always torn down before the call returns. Sessions are never pooled or
shared between requests.
"""

import logging
from collections.abc import Callable

from django.utils.translation import gettext as _
from zk import ZK
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

from .records import DeviceEndpoint, DeviceInfo, RawAttendanceRecord, RawUser, RealtimeEvent

logger = logging.getLogger(__name__)


class DeviceSession:
    """Exclusive, short-lived ownership of one terminal connection.

    State machine:
        idle --connect()--> connected | failed
        connected --query/command--> connected
        connected --subscribe_realtime()--> connected (streaming) until stopped
        idle/connected/failed --disconnect()--> closed (repeat calls are no-ops)

    Use it as a context manager so that teardown happens on every path:

        with DeviceSession(endpoint) as session:
            users = session.list_users()

    Attributes:
        endpoint: Terminal address and transport options
        state: Current DeviceSessionState
        is_streaming: True while subscribe_realtime() is running
    """

    def __init__(self, endpoint: DeviceEndpoint):
        self.endpoint = endpoint
        self.state = DeviceSessionState.IDLE
        self.is_streaming = False
        self._zk_connection: ZK | None = None

    def __enter__(self):
        """Context manager entry - establish connection.

        A failed connect still tears the session down before the error propagates,
        since __exit__ is not invoked when __enter__ raises.
        """
        try:
            self.connect()
        except BaseException:
            self.disconnect()
            raise
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        """Context manager exit - close connection."""
        self.disconnect()
        return False

    def __repr__(self) -> str:
        return f"<DeviceSession {self.endpoint.address} state={self.state}>"

    @property
    def is_connected(self) -> bool:
        return self.state == DeviceSessionState.CONNECTED and self._zk_connection is not None

    def connect(self) -> "DeviceSession":
        """Establish the connection to the terminal.

        Returns:
            DeviceSession: this session, now connected

        Raises:
            SessionStateError: If the session is not idle
            DeviceConnectionError: If the transport cannot be established
        """
        if self.state != DeviceSessionState.IDLE:
            raise SessionStateError(
                _("Session for %(address)s cannot connect from state '%(state)s'")
                % {"address": self.endpoint.address, "state": self.state}
            )

        self.state = DeviceSessionState.CONNECTING
        logger.info(f"Attempting to connect to device at {self.endpoint.address}")

        try:
            zk = ZK(
                self.endpoint.host,
                port=self.endpoint.command_port,
                timeout=self.endpoint.timeout_seconds,
                password=self.endpoint.password,
                force_udp=self.endpoint.force_udp,
                ommit_ping=self.endpoint.omit_ping,
            )
            conn = zk.connect()

        except (ZKErrorConnection, ZKNetworkError) as e:
            self.state = DeviceSessionState.FAILED
            logger.error(f"Connection error for device at {self.endpoint.address}: {str(e)}")
            raise DeviceConnectionError(
                self.endpoint, e, _("Network connection error: %(error)s") % {"error": str(e)}
            ) from e

        except ZKErrorResponse as e:
            self.state = DeviceSessionState.FAILED
            logger.error(f"Response error from device at {self.endpoint.address}: {str(e)}")
            raise DeviceConnectionError(
                self.endpoint, e, _("Device response error: %(error)s") % {"error": str(e)}
            ) from e

        except Exception as e:
            self.state = DeviceSessionState.FAILED
            logger.error(f"Unexpected error connecting to device at {self.endpoint.address}: {str(e)}")
            raise DeviceConnectionError(self.endpoint, e) from e

        if not conn:
            self.state = DeviceSessionState.FAILED
            logger.error(f"Device at {self.endpoint.address} returned no connection")
            raise DeviceConnectionError(self.endpoint, message=_("Failed to establish connection to device"))

        self._zk_connection = conn
        self.state = DeviceSessionState.CONNECTED
        logger.info(f"Successfully connected to device at {self.endpoint.address}")
        return self

    def disconnect(self) -> None:
        """Close the connection. Idempotent and never raises."""
        if self.state in (DeviceSessionState.CLOSING, DeviceSessionState.CLOSED):
            return

        self.state = DeviceSessionState.CLOSING
        conn, self._zk_connection = self._zk_connection, None
        try:
            if conn is not None:
                if self.is_streaming:
                    conn.end_live_capture = True
                conn.disconnect()
                logger.info(f"Disconnected from device at {self.endpoint.address}")
        except Exception as e:
            logger.warning(f"Error disconnecting from device at {self.endpoint.address}: {str(e)}")
        finally:
            self.state = DeviceSessionState.CLOSED

    def _require_connection(self) -> ZK:
        if not self.is_connected:
            raise NotConnectedError(_("Device not connected. Call connect() first."))
        if self.is_streaming:
            raise SessionStateError(_("Device session is busy streaming realtime events."))
        return self._zk_connection

    def list_users(self) -> list[RawUser]:
        """Fetch every user enrolled on the terminal.

        Raises:
            NotConnectedError: If the session is not connected
            DeviceQueryError: If the device fails the request
        """
        conn = self._require_connection()
        try:
            users = [RawUser.from_zk(user) for user in conn.get_users() or []]
        except Exception as e:
            logger.error(f"Error fetching users from device at {self.endpoint.address}: {str(e)}")
            raise DeviceQueryError(_("Failed to get users: %(error)s") % {"error": str(e)}, cause=e) from e

        logger.info(f"Retrieved {len(users)} users from device at {self.endpoint.address}")
        return users

    def list_attendance(self) -> list[RawAttendanceRecord]:
        """Fetch the full attendance log in device order.

        Raises:
            NotConnectedError: If the session is not connected
            DeviceQueryError: If the device fails the request
        """
        conn = self._require_connection()
        try:
            records = [
                RawAttendanceRecord.from_zk(attendance, self.endpoint.host)
                for attendance in conn.get_attendance() or []
            ]
        except Exception as e:
            logger.error(f"Error fetching attendance logs from device at {self.endpoint.address}: {str(e)}")
            raise DeviceQueryError(
                _("Failed to get attendances: %(error)s") % {"error": str(e)}, cause=e
            ) from e

        logger.info(f"Retrieved {len(records)} attendance logs from device at {self.endpoint.address}")
        return records

    def get_info(self) -> DeviceInfo:
        """Read the terminal's user/log counters and log capacity."""
        conn = self._require_connection()
        try:
            conn.read_sizes()
            return DeviceInfo(
                user_count=int(conn.users or 0),
                log_count=int(conn.records or 0),
                log_capacity=int(conn.rec_cap or 0),
            )
        except Exception as e:
            logger.error(f"Error getting device info from {self.endpoint.address}: {str(e)}")
            raise DeviceQueryError(_("Failed to get device info: %(error)s") % {"error": str(e)}, cause=e) from e

    def clear_attendance_log(self) -> None:
        """Erase the terminal's attendance log. Irreversible.

        Raises:
            NotConnectedError: If the session is not connected
            DeviceCommandError: If the device fails the command
        """
        conn = self._require_connection()
        try:
            conn.clear_attendance()
        except Exception as e:
            logger.error(f"Error clearing attendance logs on device at {self.endpoint.address}: {str(e)}")
            raise DeviceCommandError(
                _("Failed to clear attendance logs: %(error)s") % {"error": str(e)}, cause=e
            ) from e
        logger.warning(f"Attendance log cleared on device at {self.endpoint.address}")

    def set_enabled(self, enabled: bool) -> None:
        """Enable or disable the terminal's local operation (keypad, sensor)."""
        conn = self._require_connection()
        try:
            if enabled:
                conn.enable_device()
            else:
                conn.disable_device()
        except Exception as e:
            action = "enable" if enabled else "disable"
            logger.error(f"Error trying to {action} device at {self.endpoint.address}: {str(e)}")
            raise DeviceCommandError(
                _("Failed to %(action)s device: %(error)s") % {"action": action, "error": str(e)}, cause=e
            ) from e
        logger.info(f"Device at {self.endpoint.address} {'enabled' if enabled else 'disabled'}")

    def subscribe_realtime(
        self,
        on_event: Callable[[RealtimeEvent], None],
        should_stop: Callable[[], bool],
        poll_interval: float = 1.0,
    ) -> None:
        """Forward device-pushed punches to ``on_event`` until ``should_stop()`` is true.

        Blocks the calling thread for the whole subscription. PyZK yields ``None``
        every ``poll_interval`` seconds when the device is idle, which is when the
        stop request is observed.

        Raises:
            NotConnectedError: If the session is not connected
            DeviceStreamError: If the capture fails
        """
        conn = self._require_connection()
        self.is_streaming = True
        logger.info(f"Starting live capture on device at {self.endpoint.address}")
        try:
            for attendance in conn.live_capture(new_timeout=poll_interval):
                if should_stop():
                    # PyZK leaves its loop and unregisters the event on the next iteration
                    conn.end_live_capture = True
                    continue
                if attendance is None:
                    continue
                on_event(RealtimeEvent.from_zk(attendance))
        except Exception as e:
            logger.error(f"Error in live capture for device at {self.endpoint.address}: {str(e)}")
            raise DeviceStreamError(
                _("Failed to get real-time logs: %(error)s") % {"error": str(e)}, cause=e
            ) from e
        finally:
            self.is_streaming = False
            logger.info(f"Live capture ended on device at {self.endpoint.address}")
