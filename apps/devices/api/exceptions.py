from django.utils.translation import gettext_lazy as _
from rest_framework import status
from rest_framework.exceptions import APIException

from apps.devices.exceptions import DeviceConnectionError, DeviceError, DeviceOperationError, SessionStateError


class DeviceUnavailable(APIException):
    """The terminal could not be reached or refused the connection."""

    status_code = status.HTTP_503_SERVICE_UNAVAILABLE
    default_detail = _("Attendance device is unavailable.")
    default_code = "device_unavailable"


class DeviceGatewayError(APIException):
    """The terminal accepted the connection but failed the requested operation."""

    status_code = status.HTTP_502_BAD_GATEWAY
    default_detail = _("Attendance device failed to complete the operation.")
    default_code = "device_error"


class DeviceSessionError(APIException):
    status_code = status.HTTP_500_INTERNAL_SERVER_ERROR
    default_detail = _("Device session used in an invalid state.")
    default_code = "device_session_error"


def to_api_exception(exc: DeviceError) -> APIException:
    """Map a device failure onto the HTTP error it is reported as."""
    if isinstance(exc, DeviceConnectionError):
        return DeviceUnavailable(detail=str(exc))
    if isinstance(exc, DeviceOperationError):
        return DeviceGatewayError(detail=str(exc))
    if isinstance(exc, SessionStateError):
        return DeviceSessionError(detail=str(exc))
    return DeviceGatewayError(detail=str(exc))
