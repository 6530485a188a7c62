from .bridge import RealtimeEventBridge
from .records import DeviceEndpoint, DeviceInfo, RawAttendanceRecord, RawUser, RealtimeEvent
from .session import DeviceSession

__all__ = [
    "DeviceEndpoint",
    "DeviceInfo",
    "DeviceSession",
    "RawAttendanceRecord",
    "RawUser",
    "RealtimeEvent",
    "RealtimeEventBridge",
]
