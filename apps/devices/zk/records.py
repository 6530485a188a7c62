"""Value objects exchanged with ZK attendance terminals.

All records are immutable snapshots of what the device reported; nothing here
touches the network.
"""

from dataclasses import dataclass
from datetime import datetime, timezone
from typing import Any

from django.conf import settings

from libs.datetimes import get_timezone, make_aware


@dataclass(frozen=True)
class DeviceEndpoint:
    """Address and transport options of one physical terminal."""

    host: str
    command_port: int = 4370
    response_timeout_ms: int = 5000
    push_port: int = 5200
    password: int = 0
    force_udp: bool = True
    omit_ping: bool = True

    @property
    def address(self) -> str:
        return f"{self.host}:{self.command_port}"

    @property
    def timeout_seconds(self) -> float:
        return self.response_timeout_ms / 1000

    @classmethod
    def from_settings(cls, host: str | None = None, port: int | None = None) -> "DeviceEndpoint":
        """Build an endpoint from configured defaults, overriding host/port when given."""
        return cls(
            host=host or settings.ZK_DEVICE_IP,
            command_port=port or settings.ZK_DEVICE_PORT,
            response_timeout_ms=settings.ZK_TIMEOUT,
            push_port=settings.ZK_INPORT,
            password=settings.ZK_DEVICE_PASSWORD,
            force_udp=settings.ZK_FORCE_UDP,
            omit_ping=settings.ZK_OMMIT_PING,
        )


@dataclass(frozen=True)
class RawUser:
    """A user enrolled on the terminal."""

    internal_id: int
    device_user_id: str
    display_name: str
    role_code: int
    card_number: int

    @classmethod
    def from_zk(cls, user: Any) -> "RawUser":
        return cls(
            internal_id=int(user.uid),
            device_user_id=str(user.user_id),
            display_name=user.name or "",
            role_code=int(user.privilege or 0),
            card_number=int(user.card or 0),
        )


@dataclass(frozen=True)
class RawAttendanceRecord:
    """One physical punch stored in the terminal's attendance log."""

    user_serial: int
    device_user_id: str
    record_timestamp: datetime
    source_ip: str
    verification_method: int = 0
    direction: int = 0

    @classmethod
    def from_zk(cls, attendance: Any, source_ip: str) -> "RawAttendanceRecord":
        return cls(
            user_serial=int(attendance.uid),
            device_user_id=str(attendance.user_id),
            record_timestamp=to_utc(attendance.timestamp),
            source_ip=source_ip,
            verification_method=int(attendance.status or 0),
            direction=int(attendance.punch or 0),
        )


@dataclass(frozen=True)
class RealtimeEvent:
    """A punch pushed by the terminal while a realtime subscription is open."""

    device_user_id: str
    event_timestamp: datetime
    verification_method: int
    direction: int

    @classmethod
    def from_zk(cls, attendance: Any) -> "RealtimeEvent":
        return cls(
            device_user_id=str(attendance.user_id),
            event_timestamp=to_utc(attendance.timestamp),
            verification_method=int(attendance.status or 0),
            direction=int(attendance.punch or 0),
        )

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary representation."""
        return {
            "device_user_id": self.device_user_id,
            "event_timestamp": self.event_timestamp,
            "verification_method": self.verification_method,
            "direction": self.direction,
        }


@dataclass(frozen=True)
class DeviceInfo:
    """Storage counters reported by the terminal."""

    user_count: int
    log_count: int
    log_capacity: int


def to_utc(value: datetime) -> datetime:
    """Normalise a device timestamp to an aware UTC datetime.

    Terminals report naive wall-clock time; it is interpreted in ZK_DEVICE_TIMEZONE.
    """
    return make_aware(value, get_timezone(settings.ZK_DEVICE_TIMEZONE)).astimezone(timezone.utc)
