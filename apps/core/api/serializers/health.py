from rest_framework import serializers


class HealthSerializer(serializers.Serializer):
    status = serializers.CharField()
    timestamp = serializers.CharField()
    uptime = serializers.FloatField(help_text="Seconds since the process started")
    environment = serializers.CharField()
