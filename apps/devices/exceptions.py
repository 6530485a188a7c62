"""Exception classes for device operations.

Every failure raised by a device session derives from ``DeviceError``. Errors
raised during teardown are never part of this taxonomy: ``disconnect`` logs and
swallows them.
"""

from django.utils.translation import gettext as _


class DeviceError(Exception):
    """Base class for all device session failures."""

    pass


class DeviceConnectionError(DeviceError):
    """Exception raised when connection to a device cannot be established."""

    def __init__(self, endpoint, cause: BaseException | None = None, message: str | None = None):
        self.endpoint = endpoint
        self.cause = cause
        if message is None:
            message = _("Failed to connect to device at %(address)s: %(error)s") % {
                "address": endpoint.address if endpoint is not None else "?",
                "error": str(cause) if cause is not None else _("no connection returned"),
            }
        super().__init__(message)


class SessionStateError(DeviceError):
    """Exception raised when a session operation is invoked in the wrong state."""

    pass


class NotConnectedError(SessionStateError):
    """Exception raised when a device operation is attempted without a live connection."""

    pass


class DeviceOperationError(DeviceError):
    """Exception raised when the device rejects or fails an operation after connecting."""

    def __init__(self, message: str, cause: BaseException | None = None):
        self.cause = cause
        super().__init__(message)


class DeviceQueryError(DeviceOperationError):
    """A read operation (users, attendance, info) failed."""

    pass


class DeviceCommandError(DeviceOperationError):
    """A state-changing command (clear log, enable, disable) failed."""

    pass


class DeviceStreamError(DeviceOperationError):
    """The realtime event subscription failed."""

    pass
