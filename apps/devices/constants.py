"""Devices module constants and enums."""

from django.db import models
from django.utils.translation import gettext_lazy as _

class DeviceSessionState(models.TextChoices):
    """Lifecycle state of a single device session."""

    IDLE = "idle", _("Idle")
    CONNECTING = "connecting", _("Connecting")
    CONNECTED = "connected", _("Connected")
    CLOSING = "closing", _("Closing")
    CLOSED = "closed", _("Closed")
    FAILED = "failed", _("Failed")


# SSE framing for the realtime stream
SSE_CONTENT_TYPE = "text/event-stream"
SSE_KEEPALIVE_FRAME = ": keep-alive\n\n"
