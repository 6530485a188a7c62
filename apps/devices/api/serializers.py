from django.utils.translation import gettext as _
from rest_framework import serializers

from apps.devices.zk import DeviceEndpoint


class DeviceConnectionSerializer(serializers.Serializer):
    """Optional terminal address overrides; missing values fall back to settings."""

    ip = serializers.IPAddressField(required=False, help_text=_("Device IP address"))
    port = serializers.IntegerField(required=False, min_value=1, max_value=65535, help_text=_("Device port"))

    def get_endpoint(self) -> DeviceEndpoint:
        return DeviceEndpoint.from_settings(
            host=self.validated_data.get("ip"),
            port=self.validated_data.get("port"),
        )


class DeviceStatusSerializer(serializers.Serializer):
    message = serializers.CharField()
    ip = serializers.CharField()
    port = serializers.IntegerField()


class DeviceUserSerializer(serializers.Serializer):
    internal_id = serializers.IntegerField()
    device_user_id = serializers.CharField()
    display_name = serializers.CharField()
    role_code = serializers.IntegerField()
    card_number = serializers.IntegerField()


class DeviceUserListSerializer(serializers.Serializer):
    count = serializers.IntegerField()
    results = DeviceUserSerializer(many=True)


class DeviceInfoSerializer(serializers.Serializer):
    user_count = serializers.IntegerField()
    log_count = serializers.IntegerField()
    log_capacity = serializers.IntegerField()


class RealtimeEventSerializer(serializers.Serializer):
    """Payload of one ``data:`` frame on the realtime stream."""

    device_user_id = serializers.CharField()
    event_timestamp = serializers.DateTimeField()
    verification_method = serializers.IntegerField()
    direction = serializers.IntegerField()
