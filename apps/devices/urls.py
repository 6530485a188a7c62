from django.urls import path

from .api.views import DeviceConnectView, DeviceInfoView, DeviceToggleView, DeviceUsersView, RealtimeLogsView

app_name = "devices"

urlpatterns = [
    path("device/connect/", DeviceConnectView.as_view(), name="device-connect"),
    path("device/info/", DeviceInfoView.as_view(), name="device-info"),
    path("device/enable/", DeviceToggleView.as_view(enabled=True), name="device-enable"),
    path("device/disable/", DeviceToggleView.as_view(enabled=False), name="device-disable"),
    path("device/users/", DeviceUsersView.as_view(), name="device-users"),
    path("device/realtime-logs/", RealtimeLogsView.as_view(), name="device-realtime-logs"),
]
