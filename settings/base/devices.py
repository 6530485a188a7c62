"""Attendance terminal connection defaults.

Requests may override ``ip`` and ``port``; every other value is process-wide,
read-only configuration.
"""

from .base import config

ZK_DEVICE_IP = config("ZK_DEVICE_IP", default="192.168.1.201")
ZK_DEVICE_PORT = config("ZK_DEVICE_PORT", default=4370, cast=int)
ZK_TIMEOUT = config("ZK_TIMEOUT", default=5000, cast=int)  # milliseconds
ZK_INPORT = config("ZK_INPORT", default=5200, cast=int)
ZK_DEVICE_PASSWORD = config("ZK_DEVICE_PASSWORD", default=0, cast=int)
ZK_FORCE_UDP = config("ZK_FORCE_UDP", default=True, cast=bool)
ZK_OMMIT_PING = config("ZK_OMMIT_PING", default=True, cast=bool)

# Terminals report wall-clock time without an offset
ZK_DEVICE_TIMEZONE = config("ZK_DEVICE_TIMEZONE", default="UTC")

# Realtime streaming
ZK_REALTIME_POLL_INTERVAL = config("ZK_REALTIME_POLL_INTERVAL", default=1.0, cast=float)
ZK_REALTIME_CHANNEL_SIZE = config("ZK_REALTIME_CHANNEL_SIZE", default=1000, cast=int)
