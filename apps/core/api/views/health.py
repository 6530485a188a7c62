import time

from django.conf import settings
from django.utils import timezone
from drf_spectacular.utils import extend_schema
from rest_framework import status
from rest_framework.response import Response
from rest_framework.views import APIView

from apps.core.api.serializers import HealthSerializer
from libs.datetimes import to_iso_instant

PROCESS_STARTED_AT = time.monotonic()


class HealthView(APIView):
    """Liveness probe. Does not contact the attendance device."""

    @extend_schema(
        summary="Service health",
        description="Report service status, current server time, process uptime and deployment environment.",
        tags=["0: System"],
        responses={200: HealthSerializer},
    )
    def get(self, request):
        data = {
            "status": "OK",
            "timestamp": to_iso_instant(timezone.now()),
            "uptime": round(time.monotonic() - PROCESS_STARTED_AT, 3),
            "environment": settings.ENVIRONMENT,
        }
        return Response(HealthSerializer(data).data, status=status.HTTP_200_OK)
