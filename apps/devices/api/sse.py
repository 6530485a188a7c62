"""Server-Sent Events framing for the realtime attendance stream."""

import json
import logging

from rest_framework.renderers import BaseRenderer

from apps.devices.constants import SSE_CONTENT_TYPE, SSE_KEEPALIVE_FRAME
from apps.devices.exceptions import DeviceError
from apps.devices.zk import RealtimeEventBridge

from .serializers import RealtimeEventSerializer

logger = logging.getLogger(__name__)


class EventStreamRenderer(BaseRenderer):
    """Lets ``Accept: text/event-stream`` clients pass content negotiation.

    Error responses raised before the stream opens are still rendered as JSON
    by the response envelope middleware.
    """

    media_type = SSE_CONTENT_TYPE
    format = "sse"
    charset = "utf-8"

    def render(self, data, accepted_media_type=None, renderer_context=None):
        if data is None:
            return b""
        return f"data: {json.dumps(data, default=str)}\n\n".encode(self.charset)


def format_event(payload: dict, event: str | None = None) -> str:
    frame = f"event: {event}\n" if event else ""
    return f"{frame}data: {json.dumps(payload, default=str)}\n\n"


class ServerSentEventStream:
    """Iterable body for ``StreamingHttpResponse`` backed by a realtime bridge.

    Django calls ``close()`` when the client goes away or the response is
    finished, which tears the device session down.
    """

    def __init__(self, bridge: RealtimeEventBridge):
        self.bridge = bridge

    def __iter__(self):
        try:
            for event in self.bridge.frames():
                if event is None:
                    yield SSE_KEEPALIVE_FRAME
                else:
                    yield format_event(RealtimeEventSerializer(event).data)
        except DeviceError as e:
            logger.error(f"Realtime stream for {self.bridge.session.endpoint.address} failed: {str(e)}")
            yield format_event({"detail": str(e)}, event="error")

    def close(self) -> None:
        self.bridge.close()
