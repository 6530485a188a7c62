import json

from django.http import JsonResponse, StreamingHttpResponse
from django.utils.deprecation import MiddlewareMixin
from rest_framework.response import Response

# Paths served as-is (OpenAPI schema and Swagger UI)
UNWRAPPED_PATH_PREFIXES = ("/docs/", "/schema/")


class ApiResponseWrapperMiddleware(MiddlewareMixin):
    """
    Middleware to wrap API responses in a consistent format:

        {"success": bool, "data": <payload or null>, "error": <error or null>}

    Streaming responses (the realtime event stream) and non-JSON responses
    are passed through untouched.
    """

    def process_response(self, request, response):
        if request.path.startswith(UNWRAPPED_PATH_PREFIXES) or isinstance(response, StreamingHttpResponse):
            return response

        if isinstance(response, Response):
            status = response.status_code
            data = response.data
        elif isinstance(response, JsonResponse):
            status = response.status_code
            data = json.loads(response.content)
        else:
            return response

        is_error = bool(getattr(response, "exception", False)) or status >= 400
        envelope = {
            "success": not is_error,
            "data": None if is_error else data,
            "error": data if is_error else None,
        }
        return JsonResponse(envelope, status=status)
