from zoneinfo import ZoneInfoNotFoundError

from django.core.validators import RegexValidator
from django.utils.translation import gettext as _
from rest_framework import serializers

from apps.attendance.aggregator import DateRange, format_instant
from apps.attendance.constants import TIMEZONE_NAME_PATTERN
from apps.devices.api.serializers import DeviceConnectionSerializer
from libs.datetimes import get_timezone, to_iso_instant


class AttendanceQuerySerializer(DeviceConnectionSerializer):
    """Query parameters shared by the attendance read endpoints."""

    from_date = serializers.DateTimeField(required=False, help_text=_("Exclusive lower bound (ISO 8601)"))
    to_date = serializers.DateTimeField(required=False, help_text=_("Exclusive upper bound (ISO 8601)"))
    timezone = serializers.CharField(
        required=False,
        validators=[
            RegexValidator(
                TIMEZONE_NAME_PATTERN,
                message=_("Invalid timezone format. Use an IANA name like 'Asia/Ho_Chi_Minh' or 'UTC'."),
            )
        ],
        help_text=_("IANA timezone name used for dates and local check-in/check-out times"),
    )

    def validate_timezone(self, value):
        try:
            get_timezone(value)
        except (ZoneInfoNotFoundError, ValueError):
            raise serializers.ValidationError(_("Unknown timezone: %(name)s") % {"name": value})
        return value

    def validate(self, attrs):
        from_date = attrs.get("from_date")
        to_date = attrs.get("to_date")
        if from_date and to_date and from_date > to_date:
            raise serializers.ValidationError({"to_date": _("to_date must be later than or equal to from_date")})
        return attrs

    def get_date_range(self) -> DateRange:
        return DateRange(
            from_date=self.validated_data.get("from_date"),
            to_date=self.validated_data.get("to_date"),
        )

    def get_meta(self) -> dict:
        """Echo of the applied filters for list responses."""
        meta = {}
        if self.validated_data.get("from_date"):
            meta["from_date"] = to_iso_instant(self.validated_data["from_date"])
        if self.validated_data.get("to_date"):
            meta["to_date"] = to_iso_instant(self.validated_data["to_date"])
        if self.validated_data.get("timezone"):
            meta["timezone"] = self.validated_data["timezone"]
        return meta


class TimezoneAwareSerializerMixin:
    """Formats instants with the ``timezone`` passed in the serializer context."""

    def format_time(self, instant) -> str:
        return format_instant(instant, self.context.get("timezone"))


class AttendanceRecordSerializer(TimezoneAwareSerializerMixin, serializers.Serializer):
    user_serial = serializers.IntegerField(source="record.user_serial")
    device_user_id = serializers.CharField(source="record.device_user_id")
    display_name = serializers.CharField()
    record_timestamp = serializers.SerializerMethodField()
    source_ip = serializers.CharField(source="record.source_ip")
    verification_method = serializers.IntegerField(source="record.verification_method")
    direction = serializers.IntegerField(source="record.direction")
    attendance_time = serializers.SerializerMethodField()

    def get_record_timestamp(self, obj) -> str:
        return to_iso_instant(obj.record.record_timestamp)

    def get_attendance_time(self, obj) -> str:
        return self.format_time(obj.record.record_timestamp)


class DailyAttendanceSummarySerializer(TimezoneAwareSerializerMixin, serializers.Serializer):
    user_serial = serializers.IntegerField()
    device_user_id = serializers.CharField()
    display_name = serializers.CharField()
    date = serializers.DateField()
    check_in = serializers.SerializerMethodField()
    check_out = serializers.SerializerMethodField()

    def get_check_in(self, obj) -> str:
        return self.format_time(obj.check_in)

    def get_check_out(self, obj) -> str:
        return self.format_time(obj.check_out)


class DateCountSerializer(serializers.Serializer):
    date = serializers.DateField()
    count = serializers.IntegerField()


class AttendanceCountsSerializer(serializers.Serializer):
    total_attendances = serializers.IntegerField()
    unique_users = serializers.IntegerField()
    by_date = DateCountSerializer(many=True)


class AttendanceListResponseSerializer(serializers.Serializer):
    count = serializers.IntegerField()
    results = AttendanceRecordSerializer(many=True)
    from_date = serializers.CharField(required=False)
    to_date = serializers.CharField(required=False)
    timezone = serializers.CharField(required=False)


class DailyAttendanceListResponseSerializer(serializers.Serializer):
    count = serializers.IntegerField()
    results = DailyAttendanceSummarySerializer(many=True)
    from_date = serializers.CharField(required=False)
    to_date = serializers.CharField(required=False)
    timezone = serializers.CharField(required=False)


class ClearAttendanceResponseSerializer(serializers.Serializer):
    message = serializers.CharField()
