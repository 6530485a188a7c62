import sentry_sdk
from drf_standardized_errors.handler import exception_handler as drf_exception_handler

from apps.devices.api.exceptions import to_api_exception
from apps.devices.exceptions import DeviceError


def exception_handler(exc, context):
    # Device failures become APIExceptions carrying their HTTP status
    original_exc = exc
    if isinstance(exc, DeviceError):
        exc = to_api_exception(exc)

    # call drf_standardized_errors
    response = drf_exception_handler(exc, context)

    # If response is None --> raise the exception to let Sentry capture it
    if response is None:
        sentry_sdk.capture_exception(original_exc)
        raise original_exc

    # If status code is 5xx, capture the exception with Sentry
    if response.status_code >= 500:
        sentry_sdk.capture_exception(original_exc)

    return response
