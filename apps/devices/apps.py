from django.apps import AppConfig


class DevicesConfig(AppConfig):
    """Configuration for the Devices app.

    This app owns the attendance terminal session lifecycle and realtime event capture.
    """

    default_auto_field = "django.db.models.BigAutoField"
    name = "apps.devices"
    verbose_name = "Devices"
