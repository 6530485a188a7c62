from django.utils.translation import gettext as _
from drf_spectacular.utils import OpenApiExample, OpenApiParameter, extend_schema
from rest_framework import status
from rest_framework.response import Response
from rest_framework.views import APIView

from apps.attendance import aggregator
from apps.devices.api.mixins import DEVICE_CONNECTION_PARAMETERS, DeviceEndpointMixin
from apps.devices.api.serializers import DeviceConnectionSerializer
from apps.devices.api.views import DEVICE_ERROR_RESPONSES
from apps.devices.zk import DeviceSession

from .serializers import (
    AttendanceCountsSerializer,
    AttendanceListResponseSerializer,
    AttendanceQuerySerializer,
    AttendanceRecordSerializer,
    ClearAttendanceResponseSerializer,
    DailyAttendanceListResponseSerializer,
    DailyAttendanceSummarySerializer,
)

ATTENDANCE_QUERY_PARAMETERS = [
    OpenApiParameter(
        name="from_date",
        description="Keep punches strictly after this instant (ISO 8601)",
        required=False,
        type=str,
    ),
    OpenApiParameter(
        name="to_date",
        description="Keep punches strictly before this instant (ISO 8601)",
        required=False,
        type=str,
    ),
    OpenApiParameter(
        name="timezone",
        description="IANA timezone (e.g. 'Asia/Ho_Chi_Minh' or 'UTC'). When given, times are rendered as HH:MM:SS "
        "in that zone and dates are taken in that zone",
        required=False,
        type=str,
    ),
    *DEVICE_CONNECTION_PARAMETERS,
]


class AttendanceQueryMixin(DeviceEndpointMixin):
    connection_serializer_class = AttendanceQuerySerializer

    def list_response(self, query, results, serializer_class) -> Response:
        timezone_name = query.validated_data.get("timezone")
        data = {
            "count": len(results),
            "results": serializer_class(results, many=True, context={"timezone": timezone_name}).data,
            **query.get_meta(),
        }
        return Response(data, status=status.HTTP_200_OK)


class AttendanceListView(AttendanceQueryMixin, APIView):
    """Raw punches from the device log, annotated with user names."""

    @extend_schema(
        summary="List attendance records",
        description="Fetch the attendance log from the device, keep records strictly inside the date range "
        "and annotate each with the enrolled user's name ('Unknown' when not enrolled).",
        tags=["2: Attendance"],
        parameters=ATTENDANCE_QUERY_PARAMETERS,
        responses={200: AttendanceListResponseSerializer, **DEVICE_ERROR_RESPONSES},
        examples=[
            OpenApiExample(
                "Success",
                value={
                    "success": True,
                    "data": {
                        "count": 1,
                        "results": [
                            {
                                "user_serial": 6550,
                                "device_user_id": "5",
                                "display_name": "John Doe",
                                "record_timestamp": "2025-06-07T10:21:02.000Z",
                                "source_ip": "192.168.1.201",
                                "verification_method": 1,
                                "direction": 0,
                                "attendance_time": "2025-06-07T10:21:02.000Z",
                            }
                        ],
                        "from_date": "2025-06-07T00:00:00.000Z",
                    },
                    "error": None,
                },
                response_only=True,
            ),
        ],
    )
    def get(self, request):
        query = self.get_params_serializer(request)
        with DeviceSession(query.get_endpoint()) as session:
            users = session.list_users()
            records = session.list_attendance()

        records = aggregator.filter_by_range(records, query.get_date_range())
        annotated = aggregator.annotate(records, aggregator.build_user_index(users))
        return self.list_response(query, annotated, AttendanceRecordSerializer)


class AttendanceSummaryView(AttendanceQueryMixin, APIView):
    @extend_schema(
        summary="Attendance statistics",
        description="Total punches, number of distinct users and punch counts per date inside the date range.",
        tags=["2: Attendance"],
        parameters=ATTENDANCE_QUERY_PARAMETERS,
        responses={200: AttendanceCountsSerializer, **DEVICE_ERROR_RESPONSES},
    )
    def get(self, request):
        query = self.get_params_serializer(request)
        with DeviceSession(query.get_endpoint()) as session:
            records = session.list_attendance()

        records = aggregator.filter_by_range(records, query.get_date_range())
        counts = aggregator.count_by_date(records, query.validated_data.get("timezone"))
        return Response(
            {**AttendanceCountsSerializer(counts).data, **query.get_meta()},
            status=status.HTTP_200_OK,
        )


class UniqueAttendanceListView(AttendanceQueryMixin, APIView):
    """One check-in/check-out pair per user and day."""

    @extend_schema(
        summary="Daily check-in and check-out",
        description="Group punches by user and calendar date. The earliest punch of the day is the check-in and "
        "the latest the check-out. Sorted by date, then device user id.",
        tags=["2: Attendance"],
        parameters=ATTENDANCE_QUERY_PARAMETERS,
        responses={200: DailyAttendanceListResponseSerializer, **DEVICE_ERROR_RESPONSES},
        examples=[
            OpenApiExample(
                "Success - with timezone",
                value={
                    "success": True,
                    "data": {
                        "count": 1,
                        "results": [
                            {
                                "user_serial": 6550,
                                "device_user_id": "5",
                                "display_name": "John Doe",
                                "date": "2025-06-07",
                                "check_in": "08:30:00",
                                "check_out": "17:30:00",
                            }
                        ],
                        "timezone": "UTC",
                    },
                    "error": None,
                },
                response_only=True,
            ),
        ],
    )
    def get(self, request):
        query = self.get_params_serializer(request)
        with DeviceSession(query.get_endpoint()) as session:
            users = session.list_users()
            records = session.list_attendance()

        summaries = aggregator.summarize(
            aggregator.filter_by_range(records, query.get_date_range()),
            aggregator.build_user_index(users),
            query.validated_data.get("timezone"),
        )
        return self.list_response(query, summaries, DailyAttendanceSummarySerializer)


class ClearAttendanceView(DeviceEndpointMixin, APIView):
    """Erase the device's attendance log. This cannot be undone."""

    @extend_schema(
        summary="Clear attendance log",
        description="Delete every attendance record stored on the device. Irreversible.",
        tags=["2: Attendance"],
        parameters=DEVICE_CONNECTION_PARAMETERS,
        request=DeviceConnectionSerializer,
        responses={200: ClearAttendanceResponseSerializer, **DEVICE_ERROR_RESPONSES},
    )
    def delete(self, request):
        with DeviceSession(self.get_endpoint(request)) as session:
            session.clear_attendance_log()
        return Response({"message": _("Attendance logs cleared successfully")}, status=status.HTTP_200_OK)
