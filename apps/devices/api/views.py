import logging

from django.http import StreamingHttpResponse
from django.utils.translation import gettext as _
from drf_spectacular.types import OpenApiTypes
from drf_spectacular.utils import OpenApiExample, OpenApiResponse, extend_schema
from rest_framework import status
from rest_framework.renderers import JSONRenderer
from rest_framework.response import Response
from rest_framework.views import APIView

from apps.devices.constants import SSE_CONTENT_TYPE
from apps.devices.exceptions import DeviceError
from apps.devices.zk import DeviceSession, RealtimeEventBridge

from .mixins import DEVICE_CONNECTION_PARAMETERS, DeviceEndpointMixin
from .serializers import (
    DeviceConnectionSerializer,
    DeviceInfoSerializer,
    DeviceStatusSerializer,
    DeviceUserListSerializer,
    DeviceUserSerializer,
)
from .sse import EventStreamRenderer, ServerSentEventStream

logger = logging.getLogger(__name__)

DEVICE_ERROR_RESPONSES = {
    400: OpenApiResponse(description="Invalid ip or port"),
    502: OpenApiResponse(description="Device failed the operation"),
    503: OpenApiResponse(description="Device unreachable"),
}


class DeviceConnectView(DeviceEndpointMixin, APIView):
    """Test that the terminal accepts a connection, then release it."""

    @extend_schema(
        summary="Test device connection",
        description="Open a session to the attendance device and close it immediately. "
        "Useful to verify network reachability and the comm key.",
        tags=["1: Device"],
        request=DeviceConnectionSerializer,
        responses={200: DeviceStatusSerializer, **DEVICE_ERROR_RESPONSES},
        examples=[
            OpenApiExample(
                "Success",
                value={
                    "success": True,
                    "data": {"message": "Connected to device successfully", "ip": "192.168.1.201", "port": 4370},
                    "error": None,
                },
                response_only=True,
            ),
        ],
    )
    def post(self, request):
        endpoint = self.get_endpoint(request)
        with DeviceSession(endpoint):
            pass
        data = {"message": _("Connected to device successfully"), "ip": endpoint.host, "port": endpoint.command_port}
        return Response(DeviceStatusSerializer(data).data, status=status.HTTP_200_OK)


class DeviceInfoView(DeviceEndpointMixin, APIView):
    @extend_schema(
        summary="Get device storage counters",
        description="Number of enrolled users, stored attendance logs and the log capacity of the device.",
        tags=["1: Device"],
        parameters=DEVICE_CONNECTION_PARAMETERS,
        responses={200: DeviceInfoSerializer, **DEVICE_ERROR_RESPONSES},
    )
    def get(self, request):
        with DeviceSession(self.get_endpoint(request)) as session:
            info = session.get_info()
        return Response(DeviceInfoSerializer(info).data, status=status.HTTP_200_OK)


class DeviceToggleView(DeviceEndpointMixin, APIView):
    """Enable or disable the terminal's keypad and sensors."""

    enabled = True

    @extend_schema(
        summary="Enable or disable the device",
        description="Enable (or disable) local operation of the attendance device.",
        tags=["1: Device"],
        request=DeviceConnectionSerializer,
        responses={200: DeviceStatusSerializer, **DEVICE_ERROR_RESPONSES},
    )
    def post(self, request):
        endpoint = self.get_endpoint(request)
        with DeviceSession(endpoint) as session:
            session.set_enabled(self.enabled)

        message = _("Device enabled successfully") if self.enabled else _("Device disabled successfully")
        data = {"message": message, "ip": endpoint.host, "port": endpoint.command_port}
        return Response(DeviceStatusSerializer(data).data, status=status.HTTP_200_OK)


class DeviceUsersView(DeviceEndpointMixin, APIView):
    @extend_schema(
        summary="List device users",
        description="Retrieve every user enrolled on the attendance device.",
        tags=["1: Device"],
        parameters=DEVICE_CONNECTION_PARAMETERS,
        responses={200: DeviceUserListSerializer, **DEVICE_ERROR_RESPONSES},
    )
    def get(self, request):
        with DeviceSession(self.get_endpoint(request)) as session:
            users = session.list_users()
        return Response(
            {"count": len(users), "results": DeviceUserSerializer(users, many=True).data},
            status=status.HTTP_200_OK,
        )


class RealtimeLogsView(DeviceEndpointMixin, APIView):
    """Server-Sent Events stream of punches pushed by the device.

    The session is connected before the response starts so that connection
    failures are still reported as regular JSON errors.
    """

    renderer_classes = [JSONRenderer, EventStreamRenderer]

    @extend_schema(
        summary="Stream realtime attendance events",
        description="Keep a connection open to the device and forward every punch as an SSE `data:` frame. "
        "Idle periods are marked with `: keep-alive` comments; a device failure ends the stream "
        "with an `event: error` frame.",
        tags=["1: Device"],
        parameters=DEVICE_CONNECTION_PARAMETERS,
        responses={
            (200, SSE_CONTENT_TYPE): OpenApiResponse(response=OpenApiTypes.STR, description="Event stream"),
            **DEVICE_ERROR_RESPONSES,
        },
    )
    def get(self, request):
        session = DeviceSession(self.get_endpoint(request))
        try:
            session.connect()
        except DeviceError:
            session.disconnect()
            raise
        logger.info(f"Opening realtime stream for device at {session.endpoint.address}")

        response = StreamingHttpResponse(
            ServerSentEventStream(RealtimeEventBridge(session)),
            content_type=SSE_CONTENT_TYPE,
        )
        response["Cache-Control"] = "no-cache"
        response["X-Accel-Buffering"] = "no"
        return response
