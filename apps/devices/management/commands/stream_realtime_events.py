"""Management command to stream realtime punches from a device to stdout.

Each event is printed as one JSON line. The stream runs until SIGINT/SIGTERM
or until the device connection fails.
"""

import json
import logging
import signal

from django.core.management.base import BaseCommand, CommandError

from apps.devices.api.serializers import DeviceConnectionSerializer, RealtimeEventSerializer
from apps.devices.exceptions import DeviceError
from apps.devices.zk import DeviceSession, RealtimeEvent, RealtimeEventBridge

logger = logging.getLogger(__name__)


class Command(BaseCommand):
    """Django management command to stream realtime attendance events."""

    help = "Stream realtime attendance events from a ZK device to stdout"

    def __init__(self, *args, **kwargs):
        super().__init__(*args, **kwargs)
        self.bridge: RealtimeEventBridge | None = None
        self.event_count = 0

    def add_arguments(self, parser):
        parser.add_argument("--ip", help="Device IP address (defaults to ZK_DEVICE_IP)")
        parser.add_argument("--port", type=int, help="Device port (defaults to ZK_DEVICE_PORT)")

    def handle(self, *args, **options):
        params = {key: options[key] for key in ("ip", "port") if options.get(key) is not None}
        serializer = DeviceConnectionSerializer(data=params)
        if not serializer.is_valid():
            raise CommandError(f"Invalid device address: {serializer.errors}")
        endpoint = serializer.get_endpoint()

        self.bridge = RealtimeEventBridge(DeviceSession(endpoint))

        def signal_handler(signum, frame):
            logger.warning("Shutdown signal received, stopping realtime stream...")
            self.bridge.stop()

        previous_handlers = {
            signum: signal.signal(signum, signal_handler) for signum in (signal.SIGINT, signal.SIGTERM)
        }

        logger.info(f"Starting realtime stream for device at {endpoint.address}")
        try:
            self.bridge.start(self.on_event)
        except DeviceError as e:
            logger.error(f"Realtime stream for device at {endpoint.address} failed: {str(e)}")
            raise CommandError(str(e)) from e
        finally:
            for signum, handler in previous_handlers.items():
                signal.signal(signum, handler)
            logger.info(f"Realtime stream stopped. Events received: {self.event_count}")

    def on_event(self, event: RealtimeEvent) -> None:
        self.event_count += 1
        self.stdout.write(json.dumps(RealtimeEventSerializer(event).data))
        self.stdout.flush()
