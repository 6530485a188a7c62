from drf_spectacular.utils import OpenApiParameter

from apps.devices.zk import DeviceEndpoint

from .serializers import DeviceConnectionSerializer

DEVICE_CONNECTION_PARAMETERS = [
    OpenApiParameter(
        name="ip",
        description="Device IP address, defaults to ZK_DEVICE_IP",
        required=False,
        type=str,
    ),
    OpenApiParameter(
        name="port",
        description="Device command port (1-65535), defaults to ZK_DEVICE_PORT",
        required=False,
        type=int,
    ),
]


class DeviceEndpointMixin:
    """Resolve the target terminal of a request from its ``ip``/``port`` parameters.

    Parameters are read from the query string and, for requests with a body,
    from the body as well (body values win).
    """

    connection_serializer_class = DeviceConnectionSerializer

    def get_connection_params(self, request) -> dict:
        params = request.query_params.dict()
        data = request.data
        if hasattr(data, "dict"):
            params.update(data.dict())
        elif isinstance(data, dict):
            params.update(data)
        return params

    def get_params_serializer(self, request):
        serializer = self.connection_serializer_class(data=self.get_connection_params(request))
        serializer.is_valid(raise_exception=True)
        return serializer

    def get_endpoint(self, request) -> DeviceEndpoint:
        return self.get_params_serializer(request).get_endpoint()
